"""Test ShExC compilation into triples (uses PyShExC and rdflib)."""

import pytest
from rdflib import BNode, Graph, Literal, URIRef
from rdflib.compare import isomorphic
from rdflib.namespace import RDF

from shapeindex.errors import ShapeCompilationError
from shapeindex.pipeline import read_quads
from shapeindex.shex import ShapeCompiler, load_shex_context, render_shape_template
from shapeindex.storage import NQuadsDirectorySink, iri_to_path
from shapeindex.summary import OPEN_SHAPE
from shapeindex.vocabulary import SHEX


SHAPE_IRI = "http://localhost:3000/pods/00000000000000000042/posts_shape#Post"

POST_SHAPE = """
PREFIX ldbc: <http://localhost:3000/www.ldbc.eu/ldbc_socialnet/1.0/vocabulary/>
PREFIX xsd: <http://www.w3.org/2001/XMLSchema#>

<$> {
  a IRI ;
  ldbc:id xsd:long ;
  ldbc:content xsd:string ? ;
  ldbc:hasCreator IRI
}
"""


@pytest.fixture(scope="module")
def compiler():
    return ShapeCompiler()


def test_context_loaded():
    context = load_shex_context()

    assert context["@vocab"] == "http://www.w3.org/ns/shex#"
    assert "shapes" in context


def test_compile_shape(compiler):
    quads = compiler.compile(POST_SHAPE, SHAPE_IRI)

    subjects = {quad.subject for quad in quads}
    objects = {quad.object for quad in quads}

    assert quads, "Compilation should produce triples"
    assert URIRef(SHAPE_IRI) in subjects, "Focus placeholder should become the shape IRI"
    assert SHEX.Schema in objects
    assert URIRef("http://localhost:3000/www.ldbc.eu/ldbc_socialnet/1.0/vocabulary/hasCreator") in objects
    assert all(quad.graph is None for quad in quads)


def test_compile_is_deterministic(compiler):
    first = compiler.compile(POST_SHAPE, SHAPE_IRI)
    second = ShapeCompiler().compile(POST_SHAPE, SHAPE_IRI)

    assert [quad.to_nquad() for quad in first] == [quad.to_nquad() for quad in second], \
        "Same text and IRI should give byte-identical output"


def test_output_is_sorted(compiler):
    quads = compiler.compile(POST_SHAPE, SHAPE_IRI)
    keys = [tuple(term.n3() for term in quad.triple) for quad in quads]

    assert keys == sorted(keys)


def test_blank_nodes_relabelled(compiler):
    quads = compiler.compile(POST_SHAPE, SHAPE_IRI)
    blank_nodes = {term for quad in quads for term in quad.triple if isinstance(term, BNode)}

    assert blank_nodes, "Schema and expressions are blank nodes"
    again = compiler.compile(POST_SHAPE, SHAPE_IRI)
    assert blank_nodes == {term for quad in again for term in quad.triple if isinstance(term, BNode)}


def test_compile_open_shape(compiler):
    quads = compiler.compile(OPEN_SHAPE, SHAPE_IRI)
    objects = {quad.object for quad in quads}

    assert URIRef(SHAPE_IRI) in {quad.subject for quad in quads}
    assert RDF.type in objects, "Open shape constrains rdf:type"


def test_invalid_shape(compiler):
    with pytest.raises(ShapeCompilationError) as exc_info:
        compiler.compile("<$> { a IRI ", SHAPE_IRI)

    assert exc_info.value.target_iri == SHAPE_IRI


def test_only_first_placeholder_replaced():
    rendered = render_shape_template("<$> { ex:price [ '$' ] }", SHAPE_IRI)

    assert rendered == f"<{SHAPE_IRI}> {{ ex:price [ '$' ] }}"


def test_compile_file(compiler, tmp_path):
    shape_file = tmp_path / "posts.shexc"
    shape_file.write_text(POST_SHAPE, encoding="utf-8")

    assert compiler.compile_file(shape_file, SHAPE_IRI) == compiler.compile(POST_SHAPE, SHAPE_IRI)


def test_multiline_literal_survives_nquads(compiler, tmp_path):
    """Literals with line breaks are written on one escaped line."""
    quads = compiler.compile('<$> { <http://ex/p> ["line1\\nline2"] }', SHAPE_IRI)
    sink = NQuadsDirectorySink(tmp_path)
    sink.push_group((SHAPE_IRI, quad) for quad in quads)

    path = iri_to_path(tmp_path, SHAPE_IRI)
    assert len(path.read_text(encoding="utf-8").splitlines()) == len(quads), "One line per quad"

    parsed = list(read_quads([path]))
    assert Literal("line1\nline2") in {quad.object for quad in parsed}

    written, read_back = Graph(), Graph()
    for quad in quads:
        written.add(quad.triple)
    for quad in parsed:
        read_back.add(quad.triple)
    assert isomorphic(written, read_back), "Re-parsed output should equal the compiled shape"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
