"""
Annotate a dataset with shapes, shapetrees and a shape index.

Reads N-Quads files in order, runs the resource annotator and the shape
index builder described by a JSON configuration, and writes the generated
documents either as N-Quads files or into a DuckDB database.

Usage:
    python scripts/annotate_dataset.py --config config.json --input pods.nq --output-dir out/
    python scripts/annotate_dataset.py --config config.json --input a.nq b.nq --db shapes.duckdb
"""

import argparse
import logging
from pathlib import Path

from shapeindex.config import load_pipeline_config
from shapeindex.errors import ShapeIndexError
from shapeindex.pipeline import ShapeAnnotationPipeline, read_quads
from shapeindex.storage import DuckDBQuadSink, NQuadsDirectorySink

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Generate shape, shapetree and shape index documents for an RDF dataset"
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the pipeline configuration (JSON)"
    )
    parser.add_argument(
        "--input",
        required=True,
        nargs="+",
        help="N-Quads files, processed in the given order"
    )
    output = parser.add_mutually_exclusive_group(required=True)
    output.add_argument(
        "--output-dir",
        help="Directory receiving one .nq file per generated document"
    )
    output.add_argument(
        "--db",
        help="DuckDB database receiving the generated quads"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar"
    )

    args = parser.parse_args()

    for input_path in args.input:
        if not Path(input_path).is_file():
            logger.error(f"Input file not found: {input_path}")
            return 1

    try:
        config = load_pipeline_config(args.config)
        if args.no_progress:
            config.show_progress = False

        sink = DuckDBQuadSink(args.db) if args.db else NQuadsDirectorySink(args.output_dir)
        with sink:
            pipeline = ShapeAnnotationPipeline.from_config(config, sink)
            stats = pipeline.run(read_quads(args.input))

        logger.info(
            f"Done: {stats['quads_processed']} quads, "
            f"{stats['resources_annotated']} resources annotated, "
            f"{stats['index_entries']} index entries, "
            f"{stats['summary_documents']} summary documents"
        )
        return 0

    except ShapeIndexError as e:
        logger.error(f"Annotation failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    exit(main())
