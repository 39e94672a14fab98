"""Exception types raised by shapeindex."""


class ShapeIndexError(Exception):
    """Base class for all shapeindex errors."""


class ConfigurationError(ShapeIndexError):
    """Raised when a configuration cannot be used. Fatal at construction."""


class CatalogError(ConfigurationError):
    """Raised when a shape catalog is malformed or references missing files."""


class ShapeCompilationError(ShapeIndexError):
    """Raised when a ShExC schema cannot be compiled into triples."""

    def __init__(self, target_iri: str, message: str):
        """Initialize a compilation error for the shape at ``target_iri``."""
        super().__init__(f"Cannot compile shape {target_iri}: {message}")
        self.target_iri = target_iri
        self.message = message
