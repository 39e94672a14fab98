"""Annotation bookkeeping."""

from dataclasses import dataclass, field
from typing import Set, Tuple


@dataclass
class AnnotationState:
    """
    What a resource annotator has already emitted.

    Attributes:
        annotated_resources: Resource IRIs already annotated
        annotated_root_files: (pod root, resource type) pairs of root files
            already annotated, shared by every subject stored in that file
    """

    annotated_resources: Set[str] = field(default_factory=set)
    annotated_root_files: Set[Tuple[str, str]] = field(default_factory=set)

    def is_resource_annotated(self, iri: str) -> bool:
        return iri in self.annotated_resources

    def mark_resource(self, iri: str):
        self.annotated_resources.add(iri)

    def is_root_file_annotated(self, pod_root: str, resource_type: str) -> bool:
        return (pod_root, resource_type) in self.annotated_root_files

    def mark_root_file(self, pod_root: str, resource_type: str):
        self.annotated_root_files.add((pod_root, resource_type))
