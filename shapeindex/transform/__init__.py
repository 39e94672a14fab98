"""Quad term templates and value modifiers."""

from .term_template import QUAD_COMPONENTS, TermTemplateQuadComponent
from .value_modifier import ValueModifier, ValueModifierRegexReplace

__all__ = [
    "QUAD_COMPONENTS",
    "TermTemplateQuadComponent",
    "ValueModifier",
    "ValueModifierRegexReplace",
]
