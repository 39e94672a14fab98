"""Annotation pipeline: quad stream in, shapes, shapetrees and shape index out."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from rdflib import Dataset
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.term import URIRef
from tqdm import tqdm

from shapeindex.annotate import ResourceAnnotator
from shapeindex.config import PipelineConfig
from shapeindex.errors import ShapeCompilationError
from shapeindex.iri import make_resource_iri_function
from shapeindex.models import Quad, SummaryOutput
from shapeindex.shex import ShapeCompiler
from shapeindex.storage import QuadSink
from shapeindex.summary import ShapeIndexBuilder

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Graph name given to quads without one while parsing
_DEFAULT_GRAPH_MARKER = "urn:x-shapeindex:default-graph"


def _graph_name(graph) -> Optional[URIRef]:
    identifier = getattr(graph, "identifier", graph)
    if identifier is None or identifier == DATASET_DEFAULT_GRAPH_ID:
        return None
    if identifier == URIRef(_DEFAULT_GRAPH_MARKER):
        return None
    return identifier


def read_quads(paths: Iterable[Union[str, Path]]) -> Iterator[Quad]:
    """
    Read quads from N-Quads (or N-Triples) files in file order.

    Lines are parsed one by one so the stream keeps the order of the files;
    blank node labels are shared within a file. One rdflib Dataset per file
    is reused and emptied after each line. Per-line parsing is slower than
    parsing a whole file at once, which would not keep the order.

    Args:
        paths: N-Quads files, read in the given order

    Yields:
        Quads; ``graph`` is None for the default graph
    """
    for path in paths:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Input file not found: {file_path}")

        bnode_context: Dict[str, Any] = {}
        dataset = Dataset()
        with open(file_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue

                dataset.parse(
                    data=line,
                    format="nquads",
                    publicID=_DEFAULT_GRAPH_MARKER,
                    bnode_context=bnode_context,
                )
                parsed = list(dataset.quads((None, None, None, None)))
                dataset.remove((None, None, None, None))
                for s, p, o, g in parsed:
                    yield Quad(s, p, o, _graph_name(g))


class ShapeAnnotationPipeline:
    """
    Drive the resource annotator and the shape index builder over one stream.

    Every quad is offered to the annotator (which pushes to the sink right
    away) and to the index builder (which only registers entries). ``finish``
    serializes the shape index and pushes its documents.
    """

    def __init__(
        self,
        sink: QuadSink,
        annotator: Optional[ResourceAnnotator] = None,
        index_builder: Optional[ShapeIndexBuilder] = None,
        show_progress: bool = True
    ):
        """
        Initialize the pipeline.

        Args:
            sink: Destination of every generated quad
            annotator: Resource annotator (None to skip annotation)
            index_builder: Shape index builder (None to skip the index)
            show_progress: Show a tqdm progress bar while processing
        """
        self.sink = sink
        self.annotator = annotator
        self.index_builder = index_builder
        self.show_progress = show_progress
        self.quads_processed = 0
        self.outputs: List[SummaryOutput] = []

        logger.info(
            f"ShapeAnnotationPipeline initialized "
            f"(annotator={'on' if annotator else 'off'}, shape index={'on' if index_builder else 'off'})"
        )

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        sink: QuadSink,
        compiler: Optional[ShapeCompiler] = None
    ) -> "ShapeAnnotationPipeline":
        """
        Build a pipeline from a PipelineConfig.

        Args:
            config: Pipeline configuration
            sink: Destination of every generated quad
            compiler: Shape compiler shared by both components

        Returns:
            ShapeAnnotationPipeline
        """
        compiler = compiler or ShapeCompiler()

        annotator = None
        if config.annotator is not None:
            annotator = ResourceAnnotator.from_catalog_file(
                config.annotator.shape_catalog,
                compiler=compiler,
                resource_iri=make_resource_iri_function(
                    config.annotator.relative_path,
                    config.annotator.resource_iri_regex,
                ),
                shape_tree_locator=config.annotator.shape_tree_locator,
            )

        index_builder = None
        if config.shape_index is not None:
            index_builder = ShapeIndexBuilder.from_config(config.shape_index, compiler=compiler)

        return cls(sink, annotator, index_builder, show_progress=config.show_progress)

    # ============================================================================
    # Stream processing
    # ============================================================================

    def handle_quad(self, quad: Quad):
        """
        Offer one quad to both components.

        Raises:
            ShapeCompilationError: If the annotator cannot compile a shape
        """
        if self.annotator is not None:
            try:
                self.annotator.handle_quad(quad, self.sink)
            except ShapeCompilationError as e:
                logger.error(f"Annotation failed on {quad.subject}: {e}")
                raise
        if self.index_builder is not None:
            self.index_builder.register(quad)
        self.quads_processed += 1

    def process(self, quads: Iterable[Quad], total: Optional[int] = None) -> int:
        """
        Process a quad stream in order.

        Args:
            quads: Input quads
            total: Expected number of quads (progress bar only)

        Returns:
            Number of quads processed by this call
        """
        before = self.quads_processed
        for quad in tqdm(quads, desc="Annotating quads", total=total, disable=not self.show_progress):
            self.handle_quad(quad)

        processed = self.quads_processed - before
        annotated = self.annotator.annotation_count if self.annotator else 0
        logger.info(f"Processed {processed} quads, annotated {annotated} resources")
        return processed

    def finish(self) -> List[SummaryOutput]:
        """
        Serialize the shape index and push its documents to the sink.

        Returns:
            The pushed documents

        Raises:
            ShapeCompilationError: If a shape of the index cannot be compiled
        """
        if self.index_builder is None:
            return []

        try:
            outputs = self.index_builder.serialize()
        except ShapeCompilationError as e:
            logger.error(f"Shape index serialization failed: {e}")
            raise

        pushed = self.sink.push_outputs(outputs)
        self.outputs.extend(outputs)
        logger.info(f"Pushed {len(outputs)} summary documents ({pushed} quads)")
        return outputs

    def run(self, quads: Iterable[Quad], total: Optional[int] = None) -> Dict[str, Any]:
        """
        Process a whole stream and finish it.

        Args:
            quads: Input quads
            total: Expected number of quads (progress bar only)

        Returns:
            Run statistics (see stats())
        """
        self.process(quads, total=total)
        self.finish()
        return self.stats()

    def stats(self) -> Dict[str, Any]:
        """
        Get run statistics.

        Returns:
            Dict with quads processed, resources annotated, index entries,
            summary documents and completeness of the index
        """
        return {
            "quads_processed": self.quads_processed,
            "resources_annotated": self.annotator.annotation_count if self.annotator else 0,
            "index_entries": len(self.index_builder.registered_entries) if self.index_builder else 0,
            "summary_documents": len(self.outputs),
            "index_complete": self.index_builder.is_complete if self.index_builder else None,
        }
