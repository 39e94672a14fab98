"""Shared fixtures."""

import pytest
from rdflib import Literal, URIRef
from rdflib.namespace import RDF

from shapeindex.errors import ShapeCompilationError
from shapeindex.models import Quad
from shapeindex.vocabulary import SHEX


class StubCompiler:
    """
    Stand-in for ShapeCompiler that records its calls.

    Each compiled shape yields two quads: its type and its text, so outputs
    differ whenever the compiled text differs. Texts containing ``INVALID``
    fail to compile.
    """

    def __init__(self):
        self.calls = []

    def compile(self, shape_text, target_iri):
        self.calls.append((shape_text, target_iri))
        if "INVALID" in shape_text:
            raise ShapeCompilationError(target_iri, "invalid ShExC")
        shape = URIRef(target_iri)
        return [
            Quad(shape, RDF.type, SHEX.Shape),
            Quad(shape, SHEX.semActs, Literal(shape_text)),
        ]


@pytest.fixture
def stub_compiler():
    """A recording stub compiler."""
    return StubCompiler()
