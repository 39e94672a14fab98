"""Compile ShExC schemas into RDF triples.

Two stages:

1. PyShExC parses the ShExC text into a ShExJ schema. The grammar does not
   emit a JSON-LD ``@context`` (ShExJ may omit it), so the canonical ShEx
   context bundled with this package is injected.
2. The JSON-LD document is materialized into triples by rdflib.

Blank nodes are relabelled canonically and triples are sorted, so compiling
the same text for the same IRI always yields the same quads.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pyshexc.parser_impl.generate_shexj import parse as parse_shexc
from rdflib import Graph
from rdflib.compare import to_canonical_graph

from shapeindex.errors import ShapeCompilationError
from shapeindex.models import Quad, read_shape_file
from shapeindex.shex.template import render_focus

logger = logging.getLogger(__name__)

SHEX_CONTEXT_PATH = Path(__file__).with_name("shex.jsonld")


def load_shex_context(path: Path = SHEX_CONTEXT_PATH) -> Dict[str, Any]:
    """Load the ShEx JSON-LD ``@context`` object."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)["@context"]


class ShapeCompiler:
    """
    Turn ShExC text into a flat, ordered list of quads.

    A compiler holds only the immutable JSON-LD context and can be shared
    between threads.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        """
        Initialize the compiler.

        Args:
            context: JSON-LD context for ShExJ (default: bundled shex.jsonld)
        """
        self.context = context if context is not None else load_shex_context()

    def to_shexj(self, shape_text: str, target_iri: str) -> Dict[str, Any]:
        """
        Parse ShExC into a ShExJ JSON-LD document.

        Args:
            shape_text: ShExC schema text
            target_iri: IRI substituted for the focus placeholder, also the
                base for relative IRIs

        Returns:
            ShExJ document with the ShEx ``@context``

        Raises:
            ShapeCompilationError: If the text is not valid ShExC
        """
        rendered = render_focus(shape_text, target_iri)
        try:
            schema = parse_shexc(rendered, default_base=target_iri)
        except Exception as e:
            raise ShapeCompilationError(target_iri, f"invalid ShExC ({e})") from e

        if schema is None:
            raise ShapeCompilationError(target_iri, "invalid ShExC")

        document = json.loads(schema._as_json_dumps())
        document["@context"] = self.context
        return document

    def compile(self, shape_text: str, target_iri: str) -> List[Quad]:
        """
        Compile ShExC text into quads in the default graph.

        Nothing is returned unless the whole compilation succeeds.

        Args:
            shape_text: ShExC schema text
            target_iri: IRI of the compiled shape

        Returns:
            List of quads sorted by their N-Quads rendering

        Raises:
            ShapeCompilationError: If parsing or materialization fails
        """
        document = self.to_shexj(shape_text, target_iri)

        graph = Graph()
        try:
            graph.parse(data=json.dumps(document), format="json-ld", base=target_iri)
        except Exception as e:
            raise ShapeCompilationError(target_iri, f"JSON-LD materialization failed ({e})") from e

        canonical = to_canonical_graph(graph)
        triples = sorted(
            canonical.triples((None, None, None)),
            key=lambda triple: tuple(term.n3() for term in triple)
        )
        quads = [Quad(s, p, o) for s, p, o in triples]

        logger.debug(f"Compiled {target_iri} into {len(quads)} quads")
        return quads

    def compile_file(self, shape_path: Union[str, Path], target_iri: str) -> List[Quad]:
        """
        Compile a ShExC file.

        Args:
            shape_path: Path to the ShExC file
            target_iri: IRI of the compiled shape

        Returns:
            List of quads
        """
        return self.compile(read_shape_file(shape_path), target_iri)

