"""Quad sinks."""

from .base import QuadSink
from .memory import MemoryQuadSink
from .nquads_directory import NQuadsDirectorySink, iri_to_path
from .duckdb_store import DuckDBQuadSink

__all__ = [
    "QuadSink",
    "MemoryQuadSink",
    "NQuadsDirectorySink",
    "iri_to_path",
    "DuckDBQuadSink",
]
