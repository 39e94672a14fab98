"""Data models for shape annotation and shape indexes."""

from .quad import Quad, term_to_nt
from .catalog import (
    ShapeCatalog,
    ShapeCatalogEntry,
    load_shape_catalog,
    load_shape_file_map,
    parse_shape_catalog,
    read_shape_file,
)
from .index_entry import (
    ResourceFragmentation,
    ShapeIndexEntry,
    SummaryOutput,
    UndescribedResource,
)
from .stable_id import (
    generate_blank_node_id,
    generate_quads_digest,
    normalize_iri,
)

__all__ = [
    "Quad",
    "term_to_nt",
    "ShapeCatalog",
    "ShapeCatalogEntry",
    "load_shape_catalog",
    "load_shape_file_map",
    "parse_shape_catalog",
    "read_shape_file",
    "ResourceFragmentation",
    "ShapeIndexEntry",
    "SummaryOutput",
    "UndescribedResource",
    "generate_blank_node_id",
    "generate_quads_digest",
    "normalize_iri",
]
