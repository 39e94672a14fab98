"""Run the example configuration end to end with the real ShExC compiler."""

from pathlib import Path

import pytest
from rdflib import Literal, URIRef
from rdflib.namespace import RDF

from shapeindex.config import load_pipeline_config
from shapeindex.models import Quad, generate_quads_digest
from shapeindex.pipeline import ShapeAnnotationPipeline, read_quads
from shapeindex.shex import ShapeCompiler
from shapeindex.storage import MemoryQuadSink, NQuadsDirectorySink
from shapeindex.vocabulary import SHAPE_INDEX_IS_COMPLETE, SHEX


SHAPES_DIR = Path(__file__).parent.parent / "examples" / "shapes"
POD = "http://localhost:3000/pods/00000000000000000065"
LDBC = "http://localhost:3000/www.ldbc.eu/ldbc_socialnet/1.0/vocabulary/"
INTERNAL = "http://localhost:3000/internal/"

POST_SHAPE = f"{POD}/posts_shape#Post"
COMMENT_SHAPE = f"{POD}/comments_shape#Comment"
PROFILE_SHAPE = f"{POD}/profile_shape#Profile"


@pytest.fixture(scope="module")
def compiler():
    return ShapeCompiler()


@pytest.fixture
def pod_quads():
    """Posts in one file each, comments in a single file, a profile card."""
    post = URIRef(f"{POD}/posts/2011-10-13#1")
    return [
        Quad(URIRef(POD), URIRef(f"{INTERNAL}postsFragmentation"), URIRef(f"{INTERNAL}FragmentationPerResource")),
        Quad(URIRef(POD), URIRef(f"{INTERNAL}commentsFragmentation"), URIRef(f"{INTERNAL}FragmentationOneFile")),
        Quad(post, URIRef(f"{LDBC}hasCreator"), URIRef(f"{POD}/profile/card#me")),
        Quad(URIRef(f"{POD}/comments#1"), URIRef(f"{LDBC}replyOf"), post),
        Quad(URIRef(f"{POD}/profile/card#me"), URIRef("http://xmlns.com/foaf/0.1/name"), Literal("Zulma")),
    ]


def run(compiler, quads, **overrides):
    config = load_pipeline_config(SHAPES_DIR / "pipeline.json")
    for name, value in overrides.items():
        setattr(config.shape_index, name, value)
    sink = MemoryQuadSink()
    ShapeAnnotationPipeline.from_config(config, sink, compiler=compiler).run(quads)
    return sink


def schema_count(quads):
    return sum(1 for quad in quads if quad.predicate == RDF.type and quad.object == SHEX.Schema)


def test_references_resolved(compiler, pod_quads):
    sink = run(compiler, pod_quads, generation_probability=100)

    comment_objects = {quad.object for quad in sink.get_group(COMMENT_SHAPE)}
    assert URIRef(POST_SHAPE) in comment_objects, "{:Post} should point at the Post shape"
    assert URIRef(PROFILE_SHAPE) in comment_objects

    index = sink.get_group(f"{POD}/shapeIndex")
    assert index[-1].predicate == SHAPE_INDEX_IS_COMPLETE

    for iri in (POST_SHAPE, COMMENT_SHAPE, PROFILE_SHAPE):
        assert schema_count(sink.get_group(iri)) == 1, f"{iri} should hold exactly one schema"


def test_pod_and_index_schemas_are_separate_files(compiler, pod_quads, tmp_path):
    """With the dataset rooted at the pod, every schema gets its own file."""
    config = load_pipeline_config(SHAPES_DIR / "pipeline.json")
    config.shape_index.generation_probability = 100
    with NQuadsDirectorySink(tmp_path) as sink:
        ShapeAnnotationPipeline.from_config(config, sink, compiler=compiler).run(pod_quads)

    annotator_schema = sink.files_written[f"{POD}/shapetree_shapes/posts.nq"]
    index_schema = sink.files_written[POST_SHAPE]
    assert annotator_schema != index_schema

    for path in (annotator_schema, index_schema):
        parsed = list(read_quads([path]))
        assert schema_count(parsed) == 1, f"{path} should hold exactly one schema"


def test_open_shapes_when_downgraded(compiler, pod_quads):
    sink = run(compiler, pod_quads, generation_probability=0)

    index = sink.get_group(f"{POD}/shapeIndex")
    assert all(quad.predicate != SHAPE_INDEX_IS_COMPLETE for quad in index)

    post_quads = sink.get_group(POST_SHAPE)
    assert URIRef(POST_SHAPE) in {quad.subject for quad in post_quads}
    assert RDF.type in {quad.object for quad in post_quads}, "Open shape only constrains rdf:type"
    assert URIRef(f"{LDBC}hasCreator") not in {quad.object for quad in post_quads}


def test_reproducible_documents(compiler, pod_quads):
    digests = []
    for _ in range(2):
        sink = run(compiler, pod_quads)
        digests.append(generate_quads_digest(
            quad for group in sorted(sink.list_groups()) for quad in sink.get_group(group)
        ))

    assert digests[0] == digests[1], "Same seed and input should give byte-identical documents"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
