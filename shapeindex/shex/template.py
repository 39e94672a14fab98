"""ShExC template rendering.

Catalog shapes are templates:

* ``$`` is the focus placeholder, replaced (first occurrence only) by the IRI
  the shape is published at, e.g. ``<$> { ... }``;
* ``{:Name}`` refers to another catalog shape by its name and is replaced by
  that shape's IRI, e.g. ``ex:hasCreator @<{:Profile}>``.
"""

from typing import Mapping, Optional

FOCUS_PLACEHOLDER = "$"


def reference_placeholder(name: str) -> str:
    """Placeholder text referring to the catalog shape called ``name``."""
    return f"{{:{name}}}"


def render_focus(shape_text: str, shape_iri: str) -> str:
    """Replace the first focus placeholder by ``shape_iri``."""
    return shape_text.replace(FOCUS_PLACEHOLDER, shape_iri, 1)


def render_references(shape_text: str, references: Mapping[str, str]) -> str:
    """
    Replace every ``{:name}`` placeholder by the IRI of the named shape.

    Args:
        shape_text: ShExC template
        references: Mapping {shape name: shape IRI}

    Returns:
        The template with references resolved
    """
    for name, iri in references.items():
        shape_text = shape_text.replace(reference_placeholder(name), iri)
    return shape_text


def render_shape_template(
    shape_text: str,
    shape_iri: str,
    references: Optional[Mapping[str, str]] = None
) -> str:
    """Render the focus placeholder and then the shape references."""
    rendered = render_focus(shape_text, shape_iri)
    if references:
        rendered = render_references(rendered, references)
    return rendered
