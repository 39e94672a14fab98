"""Annotate pod resources with their shapes and shapetrees."""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

from rdflib.term import BNode, URIRef

from shapeindex.annotate.classifier import IriClassifier, LayoutKind, ResourceMatch
from shapeindex.annotate.state import AnnotationState
from shapeindex.iri import ResourceIriFunction, make_resource_iri_function
from shapeindex.models import Quad, generate_blank_node_id, load_shape_file_map, read_shape_file
from shapeindex.shex import ShapeCompiler
from shapeindex.storage import QuadSink
from shapeindex.vocabulary import (
    RDF_TYPE,
    SHAPE_TREE,
    SHAPE_TREE_LOCATOR,
    SHAPE_TREE_SHAPE,
    SOLID_INSTANCE,
    SOLID_INSTANCE_CONTAINER,
)

logger = logging.getLogger(__name__)


class ResourceAnnotator:
    """
    Emit shape, shapetree and locator quads for each physical resource.

    For every incoming quad the resource IRI is classified against the
    resource-type keys. The first time a container resource (or root file of
    a pod) is seen, the shape of its type is compiled into
    ``<pod>/shapetree_shapes/<type>.nq`` and a shapetree descriptor pointing
    at it is added to ``<pod>/shapetree.nq``.
    """

    def __init__(
        self,
        shape_files: Mapping[str, Union[str, Path]],
        compiler: Optional[ShapeCompiler] = None,
        resource_iri: Optional[ResourceIriFunction] = None,
        shape_tree_locator: bool = False,
        state: Optional[AnnotationState] = None
    ):
        """
        Initialize the annotator.

        Args:
            shape_files: Ordered mapping {resource type: ShExC file}; order is
                the classification priority
            compiler: Shape compiler (default: ShapeCompiler())
            resource_iri: Maps a quad to its resource IRI (default: subject
                without fragment)
            shape_tree_locator: Also emit ``<pod> st:ShapeTreeLocator
                <shapetree>`` into the resource's document
            state: Annotation state to continue from

        Raises:
            CatalogError: If a shape file does not exist
        """
        self.shapes = {key: read_shape_file(path) for key, path in shape_files.items()}
        self.classifier = IriClassifier(self.shapes.keys())
        self.compiler = compiler or ShapeCompiler()
        self.resource_iri = resource_iri or make_resource_iri_function()
        self.shape_tree_locator = shape_tree_locator
        self.state = state or AnnotationState()
        self.annotation_count = 0

        logger.info(
            f"ResourceAnnotator initialized with {len(self.shapes)} shapes "
            f"(locator={'on' if shape_tree_locator else 'off'})"
        )

    @classmethod
    def from_catalog_file(cls, config_path: Union[str, Path], **kwargs) -> "ResourceAnnotator":
        """
        Create an annotator from a ``{"shapes": {key: path}}`` catalog file.

        Args:
            config_path: Path to the JSON catalog
            **kwargs: Forwarded to the constructor

        Returns:
            ResourceAnnotator
        """
        return cls(load_shape_file_map(config_path), **kwargs)

    # ============================================================================
    # Quad builders
    # ============================================================================

    @staticmethod
    def build_shapetree_quads(match: ResourceMatch) -> List[Quad]:
        """
        Build the shapetree descriptor of a matched resource.

        Args:
            match: Classified resource

        Returns:
            Three quads: type, shape and instance (container) link
        """
        descriptor = BNode(generate_blank_node_id(match.shapetree_iri, match.content_iri))
        target_predicate = (
            SOLID_INSTANCE_CONTAINER if match.kind is LayoutKind.CONTAINER else SOLID_INSTANCE
        )
        return [
            Quad(descriptor, RDF_TYPE, SHAPE_TREE),
            Quad(descriptor, SHAPE_TREE_SHAPE, URIRef(match.shape_iri)),
            Quad(descriptor, target_predicate, URIRef(match.content_iri)),
        ]

    @staticmethod
    def build_locator_quad(match: ResourceMatch) -> Quad:
        """Link the pod root to its shapetree document."""
        return Quad(URIRef(match.pod_root), SHAPE_TREE_LOCATOR, URIRef(match.shapetree_iri))

    # ============================================================================
    # Stream handling
    # ============================================================================

    def annotate(
        self,
        resource_iri: str
    ) -> Optional[Tuple[ResourceMatch, List[Tuple[str, Quad]]]]:
        """
        Build the pushes annotating one resource, without writing them.

        Args:
            resource_iri: Resource IRI

        Returns:
            Tuple of (match, (group IRI, quad) pairs), or None if nothing is
            to be annotated

        Raises:
            ShapeCompilationError: If the shape of the resource type is invalid
        """
        if self.state.is_resource_annotated(resource_iri):
            return None

        match = self.classifier.classify(resource_iri)
        if match is None:
            return None

        if match.kind is LayoutKind.ROOT_FILE and self.state.is_root_file_annotated(
            match.pod_root, match.resource_type
        ):
            return None

        shape_quads = self.compiler.compile(self.shapes[match.resource_type], match.shape_iri)

        pushes: List[Tuple[str, Quad]] = []
        if self.shape_tree_locator:
            pushes.append((resource_iri, self.build_locator_quad(match)))
        pushes.extend((match.shape_iri, quad) for quad in shape_quads)
        pushes.extend((match.shapetree_iri, quad) for quad in self.build_shapetree_quads(match))
        return match, pushes

    def handle_quad(self, quad: Quad, sink: QuadSink) -> bool:
        """
        Annotate the resource of a quad if it was not annotated yet.

        Args:
            quad: Incoming quad
            sink: Destination of the annotation quads

        Returns:
            True if an annotation was emitted

        Raises:
            ShapeCompilationError: If the shape of the resource type is
                invalid; nothing is pushed and the resource stays unannotated
        """
        resource_iri = self.resource_iri(quad)
        if resource_iri is None:
            return False

        planned = self.annotate(resource_iri)
        if planned is None:
            return False

        match, pushes = planned
        sink.push_group(pushes)

        self.state.mark_resource(resource_iri)
        if match.kind is LayoutKind.ROOT_FILE:
            self.state.mark_root_file(match.pod_root, match.resource_type)
        self.annotation_count += 1

        logger.debug(f"Annotated {resource_iri} as {match.resource_type} ({match.kind.value})")
        return True
