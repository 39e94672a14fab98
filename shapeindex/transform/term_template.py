"""Term templates that derive a term from a quad."""

from typing import Optional

from rdflib.term import Identifier

from shapeindex.models import Quad
from shapeindex.transform.value_modifier import ValueModifier

QUAD_COMPONENTS = ("subject", "predicate", "object", "graph")


class TermTemplateQuadComponent:
    """A term template returning one component of a quad, optionally modified."""

    def __init__(self, component: str, value_modifier: Optional[ValueModifier] = None):
        """
        Initialize the template.

        Args:
            component: One of subject, predicate, object, graph
            value_modifier: Optional modifier applied to the component

        Raises:
            ValueError: If the component is unknown
        """
        if component not in QUAD_COMPONENTS:
            raise ValueError(f"Unknown quad component: {component!r}")
        self.component = component
        self.value_modifier = value_modifier

    def get_term(self, quad: Quad) -> Optional[Identifier]:
        """Return the component of ``quad``, passed through the modifier."""
        term = getattr(quad, self.component)
        if term is not None and self.value_modifier is not None:
            return self.value_modifier.apply(term)
        return term
