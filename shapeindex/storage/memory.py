"""In-memory quad sink."""

from typing import Dict, List, Optional

from shapeindex.models import Quad
from shapeindex.storage.base import QuadSink


class MemoryQuadSink(QuadSink):
    """Keep pushed quads in insertion order, grouped by document IRI."""

    def __init__(self):
        self.groups: Dict[str, List[Quad]] = {}
        self.push_count = 0

    def push(self, group_key: str, quad: Quad):
        self.groups.setdefault(group_key, []).append(quad)
        self.push_count += 1

    def get_group(self, group_key: str) -> List[Quad]:
        """Quads of a document (empty if unknown)."""
        return list(self.groups.get(group_key, []))

    def list_groups(self) -> List[str]:
        return list(self.groups)

    def count_quads(self, group_key: Optional[str] = None) -> int:
        if group_key is not None:
            return len(self.groups.get(group_key, []))
        return self.push_count

    def to_nquads(self, group_key: str) -> str:
        """Serialize a document as N-Quads text."""
        return "".join(f"{quad.to_nquad()}\n" for quad in self.groups.get(group_key, []))
