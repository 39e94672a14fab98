"""Fixed vocabulary terms.

These IRIs are read by shapetree- and shape-index-aware clients and must
stay byte-exact.
"""

from rdflib import Literal, Namespace, URIRef
from rdflib.namespace import RDF, XSD

SHAPETREES_NS = "http://www.w3.org/ns/shapetrees#"
SOLID_NS = "http://www.w3.org/ns/solid/terms#"
SHAPE_INDEX_NS = "https://shapeIndex.com#"
SHEX_NS = "http://www.w3.org/ns/shex#"

SHAPETREES = Namespace(SHAPETREES_NS)
SOLID = Namespace(SOLID_NS)
SHAPE_INDEX = Namespace(SHAPE_INDEX_NS)
SHEX = Namespace(SHEX_NS)

RDF_TYPE = RDF.type
XSD_BOOLEAN = XSD.boolean
XSD_STRING = XSD.string

# Shapetrees
SHAPE_TREE = URIRef(f"{SHAPETREES_NS}ShapeTree")
SHAPE_TREE_SHAPE = URIRef(f"{SHAPETREES_NS}shape")
SHAPE_TREE_LOCATOR = URIRef(f"{SHAPETREES_NS}ShapeTreeLocator")

# Solid
SOLID_INSTANCE = URIRef(f"{SOLID_NS}instance")
SOLID_INSTANCE_CONTAINER = URIRef(f"{SOLID_NS}instanceContainer")

# Shape index
SHAPE_INDEX_CLASS = URIRef(f"{SHAPE_INDEX_NS}ShapeIndex")
SHAPE_INDEX_LOCATION = URIRef(f"{SHAPE_INDEX_NS}shapeIndexLocation")
SHAPE_INDEX_ENTRY = URIRef(f"{SHAPE_INDEX_NS}entry")
SHAPE_INDEX_BIND_BY_SHAPE = URIRef(f"{SHAPE_INDEX_NS}bindByShape")
SHAPE_INDEX_DOMAIN = URIRef(f"{SHAPE_INDEX_NS}domain")
SHAPE_INDEX_IS_COMPLETE = URIRef(f"{SHAPE_INDEX_NS}isComplete")

RDF_TRUE = Literal("true", datatype=XSD_BOOLEAN)

__all__ = [
    "SHAPETREES",
    "SOLID",
    "SHAPE_INDEX",
    "SHEX",
    "RDF_TYPE",
    "XSD_BOOLEAN",
    "XSD_STRING",
    "SHAPE_TREE",
    "SHAPE_TREE_SHAPE",
    "SHAPE_TREE_LOCATOR",
    "SOLID_INSTANCE",
    "SOLID_INSTANCE_CONTAINER",
    "SHAPE_INDEX_CLASS",
    "SHAPE_INDEX_LOCATION",
    "SHAPE_INDEX_ENTRY",
    "SHAPE_INDEX_BIND_BY_SHAPE",
    "SHAPE_INDEX_DOMAIN",
    "SHAPE_INDEX_IS_COMPLETE",
    "RDF_TRUE",
]
