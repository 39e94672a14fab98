"""Dataset summaries: the shape index and its shapes."""

from .dependencies import ResolvedShape, resolve_dependencies, validate_dependency_graph
from .shape_index import OPEN_SHAPE, ShapeIndexBuilder

__all__ = [
    "ResolvedShape",
    "resolve_dependencies",
    "validate_dependency_graph",
    "OPEN_SHAPE",
    "ShapeIndexBuilder",
]
