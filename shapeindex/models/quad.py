"""Quad model shared by every component."""

from typing import NamedTuple, Optional, Tuple

from rdflib.plugins.serializers.nt import _quoteLiteral
from rdflib.term import Identifier, Literal, URIRef


def term_to_nt(term: Identifier) -> str:
    """Render a term the N-Triples way (literals on one escaped line)."""
    if isinstance(term, Literal):
        return _quoteLiteral(term)
    return term.n3()


class Quad(NamedTuple):
    """
    An RDF statement with an optional graph label.

    Attributes:
        subject: Subject term (URIRef or BNode)
        predicate: Predicate IRI
        object: Object term (URIRef, BNode or Literal)
        graph: Graph label, None for the default graph
    """

    subject: Identifier
    predicate: URIRef
    object: Identifier
    graph: Optional[Identifier] = None

    @property
    def triple(self) -> Tuple[Identifier, URIRef, Identifier]:
        """The statement without its graph label."""
        return (self.subject, self.predicate, self.object)

    def to_nquad(self) -> str:
        """Serialize as a single N-Quads line (without newline)."""
        terms = [term_to_nt(self.subject), term_to_nt(self.predicate), term_to_nt(self.object)]
        if self.graph is not None:
            terms.append(term_to_nt(self.graph))
        return " ".join(terms) + " ."

    def __repr__(self) -> str:
        return f"Quad({self.to_nquad()})"
