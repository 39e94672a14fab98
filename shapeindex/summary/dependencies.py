"""Resolution of shape dependencies in a shape catalog."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from shapeindex.errors import CatalogError
from shapeindex.models import ShapeCatalog, ShapeCatalogEntry
from shapeindex.sampling import RandomState, uniform_choice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedShape:
    """
    A dependency with its drawn shape variant.

    Attributes:
        key: Catalog key of the dependency
        name: Name of the targeted shape
        directory: Directory targeted by the shape
        shape: Drawn ShExC template text
    """

    key: str
    name: str
    directory: str
    shape: str


def _lookup(catalog: ShapeCatalog, key: str) -> ShapeCatalogEntry:
    entry = catalog.get(key)
    if entry is None:
        raise CatalogError(f"Unknown shape dependency: {key}")
    return entry


def resolve_dependencies(
    keys: Sequence[str],
    catalog: ShapeCatalog,
    state: RandomState
) -> Tuple[List[ResolvedShape], RandomState]:
    """
    Resolve the transitive dependencies of a shape, drawing one variant each.

    Draws happen depth-first: a dependency draws its variant, then its own
    dependencies draw, then the next sibling. The returned list is ordered
    level-first: the direct dependencies in declaration order, followed by
    the resolved dependencies of each of them in turn.

    A dependency reached through several paths is resolved once per path.

    Args:
        keys: Catalog keys of the direct dependencies
        catalog: Shape catalog
        state: Current generator state

    Returns:
        Tuple of (resolved shapes, next state)

    Raises:
        CatalogError: If a key is not in the catalog
    """
    level: List[ResolvedShape] = []
    nested: List[ResolvedShape] = []

    for key in keys:
        entry = _lookup(catalog, key)
        shape, state = uniform_choice(state, entry.shapes)
        level.append(ResolvedShape(key, entry.name, entry.directory, shape))

        children, state = resolve_dependencies(entry.dependencies, catalog, state)
        nested.extend(children)

    return level + nested, state


def validate_dependency_graph(catalog: ShapeCatalog):
    """
    Check that every dependency exists and that dependencies form no cycle.

    Draws nothing.

    Args:
        catalog: Shape catalog

    Raises:
        CatalogError: On a dangling or cyclic dependency
    """
    # 0 = unvisited, 1 = on the current path, 2 = done
    marks: Dict[str, int] = {}

    def visit(key: str, path: List[str]):
        mark = marks.get(key, 0)
        if mark == 2:
            return
        if mark == 1:
            cycle = " -> ".join(path[path.index(key):] + [key])
            raise CatalogError(f"Cyclic shape dependencies: {cycle}")

        marks[key] = 1
        for dependency in catalog[key].dependencies:
            if dependency not in catalog:
                raise CatalogError(f"Shape '{key}' depends on unknown shape '{dependency}'")
            visit(dependency, path + [key])
        marks[key] = 2

    for key in catalog:
        visit(key, [])

    logger.debug(f"Dependency graph of {len(catalog)} shapes is acyclic")

