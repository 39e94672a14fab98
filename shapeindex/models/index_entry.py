"""Shape index entry models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from shapeindex.models.quad import Quad


class ResourceFragmentation(Enum):
    """How the instances of a resource type are laid out in a pod."""

    # One file per instance, inside a container
    DISTRIBUTED = "distributed"
    # Every instance in one file
    SINGLE = "single"

    @classmethod
    def parse(cls, value: str) -> "ResourceFragmentation":
        """
        Parse a fragmentation kind from configuration text.

        Args:
            value: "distributed" or "single" (case-insensitive)

        Returns:
            ResourceFragmentation

        Raises:
            ValueError: If the value names no fragmentation kind
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown fragmentation kind: {value!r}")


@dataclass(frozen=True)
class UndescribedResource:
    """
    A resource whose fragmentation is not declared by the data itself.

    Examples from SolidBench: profile cards, noise files, settings.

    Attributes:
        name: Key of the shape catalog entry describing the resource
        fragmentation: Layout of the resource
    """

    name: str
    fragmentation: ResourceFragmentation


@dataclass
class ShapeIndexEntry:
    """
    One registered entry of a shape index.

    Attributes:
        shape: The chosen ShExC template text
        name: Name of the targeted shape in the schema
        directory: Directory targeted by the shape
        dependencies: Catalog keys of dependent shapes
        fragmentation: Layout of the targeted resources
        iri: Target IRI (container IRI or single resource IRI)
    """

    shape: str
    name: str
    directory: str
    fragmentation: ResourceFragmentation
    iri: str
    dependencies: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "shape": self.shape,
            "name": self.name,
            "directory": self.directory,
            "dependencies": list(self.dependencies),
            "fragmentation": self.fragmentation.value,
            "iri": self.iri,
        }


@dataclass
class SummaryOutput:
    """
    A generated document: its IRI and its quads.

    The IRI is the sink grouping key.
    """

    iri: str
    quads: List[Quad] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"SummaryOutput(iri={self.iri}, quads={len(self.quads)})"
