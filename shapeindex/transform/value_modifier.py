"""Value modifiers that rewrite the value of an RDF term."""

import re
from abc import ABC, abstractmethod

from rdflib.term import BNode, Identifier, Literal, URIRef


class ValueModifier(ABC):
    """Rewrites a term into another term of the same kind."""

    @abstractmethod
    def apply(self, term: Identifier) -> Identifier:
        """
        Apply the modifier.

        Args:
            term: Input term

        Returns:
            The modified term (or the input term if untouched)
        """
        pass


def _with_value(term: Identifier, value: str) -> Identifier:
    if isinstance(term, Literal):
        if term.language:
            return Literal(value, lang=term.language)
        return Literal(value, datatype=term.datatype)
    if isinstance(term, BNode):
        return BNode(value)
    return URIRef(value)


class ValueModifierRegexReplace(ValueModifier):
    """
    Replace a term's value by the first group matched by a regex.

    If the regex has no group the whole match is used. Terms the regex does
    not match are returned unchanged.
    """

    def __init__(self, regex: str):
        """
        Initialize the modifier.

        Args:
            regex: Regular expression searched in the term value

        Raises:
            ValueError: If the regex does not compile
        """
        try:
            self.regex = re.compile(regex)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{regex}': {e}")

    def apply(self, term: Identifier) -> Identifier:
        match = self.regex.search(str(term))
        if not match:
            return term
        value = match.group(1) if self.regex.groups else match.group(0)
        return _with_value(term, value)

    def __repr__(self) -> str:
        return f"ValueModifierRegexReplace({self.regex.pattern!r})"
