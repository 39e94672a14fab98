"""Stable identifier generation for generated RDF nodes and documents."""

import hashlib
from typing import Iterable

from shapeindex.models.quad import Quad


def normalize_iri(iri: str) -> str:
    """
    Normalize an IRI for consistent hashing.

    Strips surrounding whitespace and angle brackets.

    Args:
        iri: Input IRI

    Returns:
        Normalized IRI
    """
    return iri.strip().lstrip("<").rstrip(">")


def generate_blank_node_id(*components: str) -> str:
    """
    Generate a deterministic blank node label.

    The label is a truncated SHA256 hash of the normalized components, so
    the same shapetree descriptor gets the same label on every run.

    Args:
        *components: IRIs identifying the node (e.g. shapetree IRI, content IRI)

    Returns:
        Blank node label usable in N-Quads (letters and digits only)

    Example:
        >>> generate_blank_node_id(
        ...     "http://localhost:3000/pods/42/shapetree.nq",
        ...     "http://localhost:3000/pods/42/posts/"
        ... )
        'st3f1c...'
    """
    joined = "|".join(normalize_iri(component) for component in components)
    hash_object = hashlib.sha256(joined.encode("utf-8"))
    return f"st{hash_object.hexdigest()[:24]}"


def generate_quads_digest(quads: Iterable[Quad]) -> str:
    """
    Digest a sequence of quads in their given order.

    Two runs that produce byte-identical N-Quads produce the same digest.

    Args:
        quads: Quads to digest

    Returns:
        SHA256 hash as hex string
    """
    hash_object = hashlib.sha256()
    for quad in quads:
        hash_object.update(quad.to_nquad().encode("utf-8"))
        hash_object.update(b"\n")
    return hash_object.hexdigest()
