"""IRI helpers: resource IRIs of quads and IRIs of generated documents."""

from typing import Callable, Optional
from urllib.parse import urljoin

from rdflib.term import URIRef

from shapeindex.models import Quad
from shapeindex.transform import TermTemplateQuadComponent, ValueModifierRegexReplace

ResourceIriFunction = Callable[[Quad], Optional[str]]

SHAPE_INDEX_FILE_NAME = "shapeIndex"


def strip_fragment(iri: str) -> str:
    """Remove the ``#fragment`` part of an IRI."""
    position = iri.find("#")
    return iri[:position] if position >= 0 else iri


def subject_resource_iri(quad: Quad, relative_path: Optional[str] = None) -> Optional[str]:
    """
    Compute the IRI of the document a quad belongs to, from its subject.

    Args:
        quad: Input quad
        relative_path: Optional relative reference resolved against the subject

    Returns:
        The subject IRI without fragment, or None if the subject is not an IRI
    """
    if not isinstance(quad.subject, URIRef):
        return None
    iri = str(quad.subject)
    if relative_path:
        iri = urljoin(iri, relative_path)
    return strip_fragment(iri)


def make_resource_iri_function(
    relative_path: Optional[str] = None,
    regex: Optional[str] = None
) -> ResourceIriFunction:
    """
    Build a resource-IRI function.

    Args:
        relative_path: Optional relative reference resolved against the subject
        regex: Optional regex whose first group rewrites the subject first

    Returns:
        Callable mapping a quad to its resource IRI (or None)
    """
    if regex is None:
        return lambda quad: subject_resource_iri(quad, relative_path)

    template = TermTemplateQuadComponent("subject", ValueModifierRegexReplace(regex))

    def resource_iri(quad: Quad) -> Optional[str]:
        return subject_resource_iri(quad._replace(subject=template.get_term(quad)), relative_path)

    return resource_iri


def generate_shape_iri(dataset: str, directory: str, name: str) -> str:
    """IRI of a catalog shape published for a dataset."""
    return f"{dataset}/{directory}_shape#{name}"


def generate_shape_index_iri(dataset: str) -> str:
    """IRI of the shape index of a dataset."""
    return f"{dataset}/{SHAPE_INDEX_FILE_NAME}"
