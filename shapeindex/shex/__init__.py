"""ShExC compilation."""

from .compiler import ShapeCompiler, load_shex_context
from .template import (
    render_focus,
    render_references,
    render_shape_template,
    reference_placeholder,
)

__all__ = [
    "ShapeCompiler",
    "load_shex_context",
    "render_focus",
    "render_references",
    "render_shape_template",
    "reference_placeholder",
]
