"""Dataset-wide shape index generation.

The builder watches the same quad stream as the annotator. Quads declaring
how a resource type is fragmented (and quads of resources whose layout is
not declared, such as profile cards) register one index entry per resource
type. At the end of the stream ``serialize`` publishes:

* ``<dataset>/shapeIndex``: the index, one ``si:entry`` per resource type,
  binding a shape to the container or file holding its instances;
* ``<dataset>/<directory>_shape``: one schema document per entry and per
  transitive dependency.

Seeded randomization picks the shape variant of each entry and can make
the index deliberately incomplete (see ``shapeindex.sampling.strategies``).
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from rdflib.term import BNode, Literal, URIRef

from shapeindex.config import ShapeIndexConfig
from shapeindex.iri import generate_shape_index_iri, generate_shape_iri
from shapeindex.models import (
    Quad,
    ResourceFragmentation,
    ShapeCatalog,
    ShapeIndexEntry,
    SummaryOutput,
    UndescribedResource,
    load_shape_catalog,
)
from shapeindex.sampling import RandomState, SamplingStrategy, strategy_from_flag, uniform_choice
from shapeindex.shex import ShapeCompiler, render_references
from shapeindex.summary.dependencies import resolve_dependencies, validate_dependency_graph
from shapeindex.vocabulary import (
    RDF_TRUE,
    RDF_TYPE,
    SHAPE_INDEX_BIND_BY_SHAPE,
    SHAPE_INDEX_CLASS,
    SHAPE_INDEX_DOMAIN,
    SHAPE_INDEX_ENTRY,
    SHAPE_INDEX_IS_COMPLETE,
    SOLID_INSTANCE,
    SOLID_INSTANCE_CONTAINER,
    XSD_STRING,
)

logger = logging.getLogger(__name__)

# Accepts any resource; used for entries downgraded by the sampling strategy
OPEN_SHAPE = """
<$> {
  a IRI? ;
}
"""


def merge_shape_documents(
    compiled: Iterable[SummaryOutput],
    entry_shapes: Mapping[str, SummaryOutput]
) -> List[SummaryOutput]:
    """
    Keep one document per shape IRI.

    An entry's own shape wins over compilations of the same shape as a
    dependency, so each document matches what the index binds. Otherwise the
    last compilation wins. Documents are ordered by the compilations kept.

    Args:
        compiled: Shape documents in compilation order
        entry_shapes: Map {shape IRI: document compiled for the entry itself}

    Returns:
        Shape documents with distinct IRIs
    """
    kept: Dict[str, SummaryOutput] = {}
    for output in compiled:
        pinned = entry_shapes.get(output.iri)
        if pinned is not None and output is not pinned:
            continue
        kept.pop(output.iri, None)
        kept[output.iri] = output
    return list(kept.values())


class ShapeIndexBuilder:
    """
    Accumulate shape index entries over a quad stream and serialize them.

    One builder owns one random stream: the same seed and the same quads in
    the same order always give byte-identical documents.
    """

    def __init__(
        self,
        dataset: str,
        catalog: ShapeCatalog,
        fragmentation_predicates: Mapping[str, str],
        iri_fragmentation_one_file: Iterable[str] = (),
        iri_fragmentation_multiple_files: Iterable[str] = (),
        resource_types: Iterable[str] = (),
        random_seed: int = 0,
        generation_probability: float = 100,
        probabilistic_generation_on_entries: bool = False,
        undescribed_resources: Optional[Mapping[str, UndescribedResource]] = None,
        compiler: Optional[ShapeCompiler] = None
    ):
        """
        Initialize the builder.

        Args:
            dataset: Root IRI of the dataset (no trailing slash)
            catalog: Index-mode shape catalog
            fragmentation_predicates: Map {predicate IRI: catalog key} of the
                predicates declaring how a resource type is fragmented
            iri_fragmentation_one_file: Objects marking a single-file layout
            iri_fragmentation_multiple_files: Objects marking a one-file-per-
                resource layout
            resource_types: Every resource type of the dataset
            random_seed: Seed of the random stream
            generation_probability: Probability (0 - 100) of keeping index
                content
            probabilistic_generation_on_entries: Downgrade entries one by one
                instead of suppressing the whole index
            undescribed_resources: Map {path element: UndescribedResource} for
                resources whose layout no quad declares
            compiler: Shape compiler (default: ShapeCompiler())

        Raises:
            ConfigurationError: If the probability is outside [0, 100]
            CatalogError: If catalog dependencies are dangling or cyclic
        """
        validate_dependency_graph(catalog)

        self.dataset = dataset
        self.catalog = catalog
        self.fragmentation_predicates = dict(fragmentation_predicates)
        self.iri_fragmentation_one_file: Set[str] = set(iri_fragmentation_one_file)
        self.iri_fragmentation_multiple_files: Set[str] = set(iri_fragmentation_multiple_files)
        self.resource_types: Set[str] = set(resource_types)
        self.undescribed_resources = dict(undescribed_resources or {})
        self.compiler = compiler or ShapeCompiler()

        self.shape_index_iri = generate_shape_index_iri(dataset)
        self.references = {
            entry.name: generate_shape_iri(dataset, entry.directory, entry.name)
            for entry in catalog.values()
        }

        self.strategy: SamplingStrategy = strategy_from_flag(
            probabilistic_generation_on_entries, generation_probability
        )
        enabled, self.random_state = self.strategy.registration_enabled(
            RandomState.from_seed(random_seed)
        )
        self.do_not_register = not enabled

        self.registered_entries: Dict[str, ShapeIndexEntry] = {}
        self.handled_undescribed_resources: Set[str] = set()
        self.has_open_shapes = False

        uncatalogued = sorted(set(self.fragmentation_predicates.values()) - set(catalog))
        if uncatalogued:
            logger.warning(f"No catalog shape for {', '.join(uncatalogued)}; these types are skipped")

        logger.info(
            f"ShapeIndexBuilder initialized for {dataset} "
            f"({self.strategy.name}, p={generation_probability}, seed={random_seed}, "
            f"registration {'off' if self.do_not_register else 'on'})"
        )

    @classmethod
    def from_config(
        cls,
        config: ShapeIndexConfig,
        compiler: Optional[ShapeCompiler] = None
    ) -> "ShapeIndexBuilder":
        """
        Create a builder from a ShapeIndexConfig.

        Args:
            config: Shape index configuration
            compiler: Shape compiler (default: ShapeCompiler())

        Returns:
            ShapeIndexBuilder
        """
        return cls(
            dataset=config.dataset,
            catalog=load_shape_catalog(config.shape_catalog),
            fragmentation_predicates=config.fragmentation_predicates,
            iri_fragmentation_one_file=config.iri_fragmentation_one_file,
            iri_fragmentation_multiple_files=config.iri_fragmentation_multiple_files,
            resource_types=config.resource_types,
            random_seed=config.random_seed,
            generation_probability=config.generation_probability,
            probabilistic_generation_on_entries=config.probabilistic_generation_on_entries,
            undescribed_resources=config.undescribed_resources,
            compiler=compiler,
        )

    # ============================================================================
    # Registration
    # ============================================================================

    def register(self, quad: Quad):
        """
        Register the index entries a quad reveals.

        Args:
            quad: Incoming quad
        """
        if self.do_not_register:
            return

        subject = str(quad.subject)

        resource_type = self.fragmentation_predicates.get(str(quad.predicate))
        if resource_type is not None and self.dataset in subject:
            if str(quad.object) in self.iri_fragmentation_multiple_files:
                fragmentation = ResourceFragmentation.DISTRIBUTED
            else:
                fragmentation = ResourceFragmentation.SINGLE
            self.register_shape_index_entry(resource_type, fragmentation)

        for path_element, undescribed in self.undescribed_resources.items():
            if (
                path_element in subject
                and self.dataset in subject
                and undescribed.name not in self.handled_undescribed_resources
            ):
                self.register_shape_index_entry(undescribed.name, undescribed.fragmentation)
                self.handled_undescribed_resources.add(undescribed.name)
                return

    def register_shape_index_entry(self, resource_type: str, fragmentation: ResourceFragmentation):
        """
        Register (or replace) the entry of a resource type.

        Resource types absent from the catalog are ignored.

        Args:
            resource_type: Catalog key
            fragmentation: Layout of the resources
        """
        catalog_entry = self.catalog.get(resource_type)
        if catalog_entry is None:
            logger.debug(f"No shape for resource type '{resource_type}', skipping")
            return

        shape, self.random_state = uniform_choice(self.random_state, catalog_entry.shapes)

        if fragmentation is ResourceFragmentation.DISTRIBUTED:
            iri = f"{self.dataset}/{catalog_entry.directory}/"
        else:
            iri = f"{self.dataset}/{resource_type}"

        self.registered_entries[resource_type] = ShapeIndexEntry(
            shape=shape,
            name=catalog_entry.name,
            directory=catalog_entry.directory,
            fragmentation=fragmentation,
            iri=iri,
            dependencies=catalog_entry.dependencies,
        )
        logger.debug(f"Registered {fragmentation.value} entry for '{resource_type}' at {iri}")

    # ============================================================================
    # Serialization
    # ============================================================================

    def serialize(self) -> List[SummaryOutput]:
        """
        Produce the shape index and every shape it refers to.

        Returns:
            [] if no entry was registered, else the index document followed
            by the shape documents, one per shape IRI

        Raises:
            ShapeCompilationError: If a shape cannot be compiled
        """
        self.has_open_shapes = False
        index_entries, shapes = self.serialize_shape_index_entries()
        if not index_entries.quads:
            logger.info(f"No shape index entries for {self.dataset}")
            return []

        index = self.serialize_shape_index_instance()
        completeness = self.serialize_completeness()
        index.quads = index.quads + index_entries.quads + completeness.quads

        missing = self.missing_resource_types()
        if missing:
            logger.info(f"Resource types without index entry: {', '.join(sorted(missing))}")

        logger.info(
            f"Serialized shape index {self.shape_index_iri}: {len(self.registered_entries)} entries, "
            f"{len(shapes)} shapes, complete={self.is_complete}"
        )
        return [index, *shapes]

    def serialize_shape_index_entries(self) -> Tuple[SummaryOutput, List[SummaryOutput]]:
        """
        Serialize the entries and their shapes.

        Random draws are committed only once every shape compiled. A shape
        compiled more than once still draws every time; only one document per
        IRI is returned (see merge_shape_documents).

        Returns:
            Tuple of (index entry quads, shape documents)
        """
        output = SummaryOutput(self.shape_index_iri)
        compiled: List[SummaryOutput] = []
        entry_shapes: Dict[str, SummaryOutput] = {}
        index_node = URIRef(self.shape_index_iri)
        state = self.random_state
        has_open_shapes = False

        for entry in self.registered_entries.values():
            entry_node = BNode(entry.name)
            shape_iri = generate_shape_iri(self.dataset, entry.directory, entry.name)
            target_predicate = (
                SOLID_INSTANCE if entry.fragmentation is ResourceFragmentation.SINGLE
                else SOLID_INSTANCE_CONTAINER
            )

            shape = entry.shape
            keep, state = self.strategy.keep_entry_shape(state)
            if not keep:
                shape = OPEN_SHAPE
                has_open_shapes = True
                logger.debug(f"Entry '{entry.name}' downgraded to the open shape")

            entry_shape = self.serialize_shape(shape, shape_iri)
            entry_shapes[shape_iri] = entry_shape
            compiled.append(entry_shape)
            dependency_shapes, state = self.serialize_shape_dependencies(entry.dependencies, state)
            compiled.extend(dependency_shapes)

            output.quads.extend([
                Quad(index_node, SHAPE_INDEX_ENTRY, entry_node),
                Quad(entry_node, SHAPE_INDEX_BIND_BY_SHAPE, URIRef(shape_iri)),
                Quad(entry_node, target_predicate, URIRef(entry.iri)),
            ])

        self.random_state = state
        self.has_open_shapes = has_open_shapes
        return output, merge_shape_documents(compiled, entry_shapes)

    def serialize_shape_dependencies(
        self,
        dependencies: Iterable[str],
        state: RandomState
    ) -> Tuple[List[SummaryOutput], RandomState]:
        """
        Compile the transitive dependencies of a shape.

        Args:
            dependencies: Catalog keys of the direct dependencies
            state: Current generator state

        Returns:
            Tuple of (shape documents, next state)
        """
        resolved, state = resolve_dependencies(list(dependencies), self.catalog, state)
        outputs = [
            self.serialize_shape(
                dependency.shape,
                generate_shape_iri(self.dataset, dependency.directory, dependency.name)
            )
            for dependency in resolved
        ]
        return outputs, state

    def serialize_shape_index_instance(self) -> SummaryOutput:
        """Type and domain of the shape index."""
        index_node = URIRef(self.shape_index_iri)
        return SummaryOutput(self.shape_index_iri, [
            Quad(index_node, RDF_TYPE, SHAPE_INDEX_CLASS),
            Quad(index_node, SHAPE_INDEX_DOMAIN, Literal(f"{self.dataset}/.*", datatype=XSD_STRING)),
        ])

    def serialize_completeness(self) -> SummaryOutput:
        """``si:isComplete true`` unless an entry was downgraded."""
        if self.has_open_shapes:
            return SummaryOutput(self.shape_index_iri)
        return SummaryOutput(self.shape_index_iri, [
            Quad(URIRef(self.shape_index_iri), SHAPE_INDEX_IS_COMPLETE, RDF_TRUE),
        ])

    def serialize_shape(self, shape_text: str, shape_iri: str) -> SummaryOutput:
        """
        Compile a shape template published at ``shape_iri``.

        Args:
            shape_text: ShExC template
            shape_iri: IRI of the shape

        Returns:
            SummaryOutput of the compiled shape
        """
        rendered = render_references(shape_text, self.references)
        return SummaryOutput(shape_iri, self.compiler.compile(rendered, shape_iri))

    # ============================================================================
    # Introspection
    # ============================================================================

    @property
    def is_complete(self) -> bool:
        return not self.has_open_shapes

    def missing_resource_types(self) -> Set[str]:
        """Resource types of the dataset that have no registered entry."""
        return self.resource_types - set(self.registered_entries)
