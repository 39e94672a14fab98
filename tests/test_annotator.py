"""Test per-resource shape and shapetree annotation."""

import pytest
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF

from shapeindex.annotate import AnnotationState, ResourceAnnotator
from shapeindex.errors import CatalogError, ShapeCompilationError
from shapeindex.models import Quad
from shapeindex.storage import MemoryQuadSink
from shapeindex.vocabulary import (
    SHAPE_TREE,
    SHAPE_TREE_LOCATOR,
    SHAPE_TREE_SHAPE,
    SOLID_INSTANCE,
    SOLID_INSTANCE_CONTAINER,
)


POD = "http://localhost:3000/pods/00000000000000000042"
HAS_CREATOR = URIRef("http://localhost:3000/www.ldbc.eu/ldbc_socialnet/1.0/vocabulary/hasCreator")


@pytest.fixture
def shape_files(tmp_path):
    """Two ShExC files keyed by resource type."""
    posts = tmp_path / "posts.shexc"
    posts.write_text("<$> { a IRI ; }\n", encoding="utf-8")
    comments = tmp_path / "comments.shexc"
    comments.write_text("<$> { a IRI ? ; }\n", encoding="utf-8")
    return {"posts": posts, "comments": comments}


def make_quad(subject):
    return Quad(URIRef(subject), HAS_CREATOR, URIRef(f"{POD}/profile/card#me"))


def test_container_resource_annotated_once(shape_files, stub_compiler):
    """Two subjects of one container resource produce one annotation."""
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler)
    sink = MemoryQuadSink()

    first = annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#1"), sink)
    second = annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#2"), sink)

    assert first is True
    assert second is False, "Same resource must not be annotated twice"
    assert annotator.annotation_count == 1
    assert len(stub_compiler.calls) == 1, "Shape should be compiled once"
    assert stub_compiler.calls[0][1] == f"{POD}/shapetree_shapes/posts.nq"

    shapetree = sink.get_group(f"{POD}/shapetree.nq")
    assert len(shapetree) == 3, f"Expected 3 shapetree quads, got {len(shapetree)}"
    assert shapetree[0].predicate == RDF.type and shapetree[0].object == SHAPE_TREE
    assert shapetree[1].predicate == SHAPE_TREE_SHAPE
    assert shapetree[1].object == URIRef(f"{POD}/shapetree_shapes/posts.nq")
    assert shapetree[2].predicate == SOLID_INSTANCE_CONTAINER
    assert shapetree[2].object == URIRef(f"{POD}/posts/")
    assert len({quad.subject for quad in shapetree}) == 1, "Descriptor quads share one blank node"
    assert isinstance(shapetree[0].subject, BNode)

    assert sink.count_quads(f"{POD}/shapetree_shapes/posts.nq") == 2


def test_other_resource_of_same_container(shape_files, stub_compiler):
    """Each resource of a container is its own annotation."""
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler)
    sink = MemoryQuadSink()

    annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#1"), sink)
    annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-14#1"), sink)

    assert annotator.annotation_count == 2


def test_root_file_annotated_once(shape_files, stub_compiler):
    """All subjects stored in a root file produce one annotation."""
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler)
    sink = MemoryQuadSink()

    annotator.handle_quad(make_quad(f"{POD}/comments#1"), sink)
    annotator.handle_quad(make_quad(f"{POD}/comments#2"), sink)

    assert annotator.annotation_count == 1
    assert annotator.state.is_root_file_annotated(POD, "comments")

    shapetree = sink.get_group(f"{POD}/shapetree.nq")
    assert len(shapetree) == 3
    assert shapetree[2].predicate == SOLID_INSTANCE
    assert shapetree[2].object == URIRef(f"{POD}/comments")


def test_root_file_dedup_across_resource_iris(shape_files, stub_compiler):
    """Root files are deduplicated per pod and type, not per resource IRI."""
    annotator = ResourceAnnotator(
        shape_files,
        compiler=stub_compiler,
        resource_iri=lambda quad: str(quad.subject),
    )
    sink = MemoryQuadSink()

    annotator.handle_quad(make_quad(f"{POD}/comments#1"), sink)
    annotator.handle_quad(make_quad(f"{POD}/comments#2"), sink)

    assert annotator.annotation_count == 1, "Fragments of one root file share one annotation"


def test_shape_tree_locator(shape_files, stub_compiler):
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler, shape_tree_locator=True)
    sink = MemoryQuadSink()

    annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#1"), sink)

    locator = sink.get_group(f"{POD}/posts/2011-10-13")
    assert locator == [
        Quad(URIRef(POD), SHAPE_TREE_LOCATOR, URIRef(f"{POD}/shapetree.nq"))
    ], "Locator should be pushed into the resource's document"


def test_no_locator_by_default(shape_files, stub_compiler):
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler)
    sink = MemoryQuadSink()

    annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#1"), sink)

    assert f"{POD}/posts/2011-10-13" not in sink.list_groups()


def test_unmatched_and_blank_subjects_skipped(shape_files, stub_compiler):
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler)
    sink = MemoryQuadSink()

    assert annotator.handle_quad(make_quad(f"{POD}/likes/1"), sink) is False
    assert annotator.handle_quad(Quad(BNode("b0"), HAS_CREATOR, Literal("x")), sink) is False
    assert sink.count_quads() == 0


def test_compilation_failure_emits_nothing(tmp_path, stub_compiler):
    """A failing compile pushes nothing and leaves the resource unannotated."""
    broken = tmp_path / "posts.shexc"
    broken.write_text("INVALID <$> {", encoding="utf-8")
    annotator = ResourceAnnotator({"posts": broken}, compiler=stub_compiler)
    sink = MemoryQuadSink()
    quad = make_quad(f"{POD}/posts/2011-10-13#1")

    with pytest.raises(ShapeCompilationError) as exc_info:
        annotator.handle_quad(quad, sink)

    assert exc_info.value.target_iri == f"{POD}/shapetree_shapes/posts.nq"
    assert sink.count_quads() == 0, "No partial group may be visible"
    assert not annotator.state.is_resource_annotated(f"{POD}/posts/2011-10-13")

    annotator.shapes["posts"] = "<$> { a IRI ; }"
    assert annotator.handle_quad(quad, sink) is True, "Resource can be annotated after a failure"


def test_descriptor_blank_node_is_reproducible(shape_files, stub_compiler):
    sinks = []
    for _ in range(2):
        annotator = ResourceAnnotator(shape_files, compiler=stub_compiler)
        sink = MemoryQuadSink()
        annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#1"), sink)
        sinks.append(sink)

    first = sinks[0].to_nquads(f"{POD}/shapetree.nq")
    second = sinks[1].to_nquads(f"{POD}/shapetree.nq")
    assert first == second, "Shapetree documents should be byte-identical across runs"


def test_state_can_be_shared(shape_files, stub_compiler):
    """An annotator continues from an injected state."""
    state = AnnotationState()
    state.mark_resource(f"{POD}/posts/2011-10-13")
    annotator = ResourceAnnotator(shape_files, compiler=stub_compiler, state=state)

    assert annotator.handle_quad(make_quad(f"{POD}/posts/2011-10-13#1"), MemoryQuadSink()) is False


def test_missing_shape_file(tmp_path, stub_compiler):
    with pytest.raises(CatalogError):
        ResourceAnnotator({"posts": tmp_path / "missing.shexc"}, compiler=stub_compiler)


def test_from_catalog_file(tmp_path, shape_files, stub_compiler):
    catalog = tmp_path / "config.json"
    catalog.write_text('{"shapes": {"comments": "comments.shexc", "posts": "posts.shexc"}}')

    annotator = ResourceAnnotator.from_catalog_file(catalog, compiler=stub_compiler)

    assert list(annotator.shapes) == ["comments", "posts"], "Catalog order is kept"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
