"""Per-resource shape and shapetree annotation."""

from .annotator import ResourceAnnotator
from .classifier import (
    IriClassifier,
    LayoutKind,
    ResourceMatch,
    match_container,
    match_root_file,
)
from .state import AnnotationState

__all__ = [
    "ResourceAnnotator",
    "IriClassifier",
    "LayoutKind",
    "ResourceMatch",
    "match_container",
    "match_root_file",
    "AnnotationState",
]
