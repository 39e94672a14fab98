"""Quad sink interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Tuple

from shapeindex.models import Quad, SummaryOutput


class QuadSink(ABC):
    """
    Destination of generated quads, grouped by document IRI.

    Implementations must make a group pushed with ``push_group`` visible
    all at once.
    """

    @abstractmethod
    def push(self, group_key: str, quad: Quad):
        """
        Add a quad to the document ``group_key``.

        Args:
            group_key: Document IRI
            quad: Quad to store
        """
        pass

    def push_group(self, pushes: Iterable[Tuple[str, Quad]]) -> int:
        """
        Push a batch of (group key, quad) pairs together.

        Default implementation calls push() for each pair.
        Subclasses can override for atomic writes.

        Args:
            pushes: Pairs to push

        Returns:
            Number of quads pushed
        """
        count = 0
        for group_key, quad in pushes:
            self.push(group_key, quad)
            count += 1
        return count

    def push_outputs(self, outputs: Iterable[SummaryOutput]) -> int:
        """
        Push generated documents, one group per document.

        Args:
            outputs: SummaryOutputs to store

        Returns:
            Number of quads pushed
        """
        return sum(
            self.push_group((output.iri, quad) for quad in output.quads)
            for output in outputs
        )

    def close(self):
        """Release resources held by the sink."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
