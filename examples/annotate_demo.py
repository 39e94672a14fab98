"""
Demo script annotating a tiny SolidBench-like pod.

This demonstrates:
1. Shape and shapetree annotation of container resources and root files
2. Shape index generation with per-entry downgrades
3. Reproducible output for a fixed seed
4. Storing the documents in DuckDB
"""

import tempfile
from pathlib import Path

from rdflib import Literal, URIRef

from shapeindex.config import load_pipeline_config
from shapeindex.models import Quad, generate_quads_digest
from shapeindex.pipeline import ShapeAnnotationPipeline
from shapeindex.storage import DuckDBQuadSink, MemoryQuadSink

SHAPES_DIR = Path(__file__).parent / "shapes"
POD = "http://localhost:3000/pods/00000000000000000065"
LDBC = "http://localhost:3000/www.ldbc.eu/ldbc_socialnet/1.0/vocabulary/"
INTERNAL = "http://localhost:3000/internal/"


def sample_quads():
    """A pod with two posts (one file each), a comments file and a profile."""
    quads = [
        Quad(URIRef(POD), URIRef(f"{INTERNAL}postsFragmentation"), URIRef(f"{INTERNAL}FragmentationPerResource")),
        Quad(URIRef(POD), URIRef(f"{INTERNAL}commentsFragmentation"), URIRef(f"{INTERNAL}FragmentationOneFile")),
    ]
    for day in ("2011-10-13", "2011-10-14"):
        post = URIRef(f"{POD}/posts/{day}#1")
        quads.append(Quad(post, URIRef(f"{LDBC}id"), Literal(day.replace("-", ""))))
        quads.append(Quad(post, URIRef(f"{LDBC}hasCreator"), URIRef(f"{POD}/profile/card#me")))
    for i in range(3):
        comment = URIRef(f"{POD}/comments#{i}")
        quads.append(Quad(comment, URIRef(f"{LDBC}replyOf"), URIRef(f"{POD}/posts/2011-10-13#1")))
    quads.append(Quad(URIRef(f"{POD}/profile/card#me"), URIRef("http://xmlns.com/foaf/0.1/name"), Literal("Zulma")))
    return quads


def main():
    print("=" * 60)
    print("shapeindex Demo")
    print("=" * 60)
    print()

    print("[1/4] Loading configuration...")
    config = load_pipeline_config(SHAPES_DIR / "pipeline.json")
    print(f"✓ Dataset {config.shape_index.dataset}\n")

    print("[2/4] Annotating the pod...")
    sink = MemoryQuadSink()
    pipeline = ShapeAnnotationPipeline.from_config(config, sink)
    stats = pipeline.run(sample_quads())
    print(f"✓ {stats['resources_annotated']} resources annotated, "
          f"{stats['index_entries']} index entries, complete={stats['index_complete']}\n")

    print("  Generated documents:")
    for group in sink.list_groups():
        print(f"  - {group} ({sink.count_quads(group)} quads)")
    print()

    print("  Shape index:")
    print(sink.to_nquads(f"{POD}/shapeIndex"))

    print("[3/4] Checking reproducibility...")
    digests = []
    for _ in range(2):
        run_sink = MemoryQuadSink()
        ShapeAnnotationPipeline.from_config(config, run_sink).run(sample_quads())
        digests.append(generate_quads_digest(
            quad for group in run_sink.list_groups() for quad in run_sink.get_group(group)
        ))
    print(f"✓ Identical output: {digests[0] == digests[1]} ({digests[0][:16]}...)\n")

    print("[4/4] Storing in DuckDB...")
    with tempfile.TemporaryDirectory() as tmpdir:
        with DuckDBQuadSink(str(Path(tmpdir) / "shapes.duckdb")) as db_sink:
            ShapeAnnotationPipeline.from_config(config, db_sink).run(sample_quads())
            print(f"✓ {db_sink.count_quads()} quads in {len(db_sink.list_groups())} documents\n")

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
