"""Classify resource IRIs into pod layouts.

Only the IRI text is used. For a catalog key ``posts``:

* ``http://host/pods/42/posts/2011-10-13`` is a **container** resource: the
  key is a path segment between two separators; the pod root is
  ``http://host/pods/42``.
* ``http://host/pods/42/posts`` is a **root file**: the key is the last path
  segment, a single file directly in the pod root.

Keys are tried in catalog order, container before root file for each key;
the first match wins.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

SHAPETREE_FILE_NAME = "shapetree.nq"
# Folder of the per-type schema documents, next to the shapetree
SHAPES_FOLDER_NAME = "shapetree_shapes"


class LayoutKind(Enum):
    """Physical layout of a matched resource."""

    CONTAINER = "container"
    ROOT_FILE = "root_file"


@dataclass(frozen=True)
class ResourceMatch:
    """
    A resource IRI matched to a catalog key.

    Attributes:
        resource_type: The matched catalog key
        kind: Container resource or root file
        pod_root: IRI of the pod owning the resource (no trailing slash)
    """

    resource_type: str
    kind: LayoutKind
    pod_root: str

    @property
    def shape_iri(self) -> str:
        """IRI of the shape document for this resource type in the pod."""
        return f"{self.pod_root}/{SHAPES_FOLDER_NAME}/{self.resource_type}.nq"

    @property
    def shapetree_iri(self) -> str:
        """IRI of the pod's shapetree document."""
        return f"{self.pod_root}/{SHAPETREE_FILE_NAME}"

    @property
    def content_iri(self) -> str:
        """IRI of the container or file holding the resources."""
        if self.kind is LayoutKind.CONTAINER:
            return f"{self.pod_root}/{self.resource_type}/"
        return f"{self.pod_root}/{self.resource_type}"


def _is_pod_root(candidate: str) -> bool:
    # Needs a scheme and an authority: "http:/" or "http://" alone are not pods
    scheme_end = candidate.find("://")
    return scheme_end > 0 and len(candidate) > scheme_end + 3 and not candidate.endswith("/")


def match_container(iri: str, resource_type: str) -> Optional[ResourceMatch]:
    """
    Match ``.../<pod>/<resource_type>/...``.

    Occurrences of ``/<resource_type>/`` are tried left to right; the first
    one preceded by a valid pod root wins.
    """
    segment = f"/{resource_type}/"
    position = iri.find(segment)
    while position != -1:
        pod_root = iri[:position]
        if _is_pod_root(pod_root):
            return ResourceMatch(resource_type, LayoutKind.CONTAINER, pod_root)
        position = iri.find(segment, position + 1)
    return None


def match_root_file(iri: str, resource_type: str) -> Optional[ResourceMatch]:
    """Match ``.../<pod>/<resource_type>`` (optionally with a fragment)."""
    path = iri.split("#", 1)[0]
    suffix = f"/{resource_type}"
    if not path.endswith(suffix):
        return None
    pod_root = path[:-len(suffix)]
    if not _is_pod_root(pod_root):
        return None
    return ResourceMatch(resource_type, LayoutKind.ROOT_FILE, pod_root)


class IriClassifier:
    """First-match classification of resource IRIs against catalog keys."""

    def __init__(self, resource_types: Iterable[str]):
        """
        Initialize the classifier.

        Args:
            resource_types: Catalog keys in priority order
        """
        self.resource_types: List[str] = list(resource_types)
        self._container_probes: List[Tuple[str, str]] = [
            (key, f"/{key}/") for key in self.resource_types
        ]
        logger.info(f"IriClassifier initialized with {len(self.resource_types)} resource types")

    def classify(self, iri: str) -> Optional[ResourceMatch]:
        """
        Classify a resource IRI.

        Args:
            iri: Resource IRI

        Returns:
            The first matching ResourceMatch, or None
        """
        for key, probe in self._container_probes:
            if probe in iri:
                match = match_container(iri, key)
                if match:
                    return match
            match = match_root_file(iri, key)
            if match:
                return match
        return None
