"""Shape catalog model and loaders.

Two catalog formats exist:

* simple mode, used by the resource annotator: ``{"shapes": {key: path}}``
  mapping a resource-type key to one ShExC file;
* index mode, used by the shape index builder: ``{key: {"shapes": [...],
  "directory": ..., "name": ..., "dependencies": [...]}}`` where each shape
  is an inline ShExC template or a path to a ``.shexc`` file.

Paths are resolved relative to the catalog file.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from shapeindex.errors import CatalogError

logger = logging.getLogger(__name__)

SHAPE_FILE_SUFFIXES = (".shexc", ".shex")


@dataclass(frozen=True)
class ShapeCatalogEntry:
    """
    Candidate shapes for one resource type.

    Attributes:
        key: Resource-type key in the catalog
        shapes: Candidate ShExC template texts (one is drawn per use)
        directory: Directory targeted by the shape
        name: Name of the targeted shape in the schema
        dependencies: Catalog keys of the shapes this one refers to
    """

    key: str
    shapes: Tuple[str, ...]
    directory: str
    name: str
    dependencies: Tuple[str, ...] = ()


ShapeCatalog = Dict[str, ShapeCatalogEntry]


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise CatalogError(f"Shape catalog not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Shape catalog {path} is not valid JSON: {e}") from e


def read_shape_file(path: Union[str, Path]) -> str:
    """
    Read a ShExC file.

    Args:
        path: Path to the file

    Returns:
        File content

    Raises:
        CatalogError: If the file does not exist
    """
    shape_path = Path(path)
    if not shape_path.is_file():
        raise CatalogError(f"Shape file not found: {shape_path}")
    return shape_path.read_text(encoding="utf-8")


def _looks_like_shape_path(value: str) -> bool:
    return "\n" not in value and value.strip().lower().endswith(SHAPE_FILE_SUFFIXES)


def load_shape_file_map(config_path: Union[str, Path]) -> Dict[str, Path]:
    """
    Load a simple-mode catalog mapping resource-type keys to ShExC files.

    Key order in the file is preserved; it is the classification priority.

    Args:
        config_path: Path to the JSON catalog

    Returns:
        Ordered dict {key: absolute shape path}

    Raises:
        CatalogError: If the catalog is malformed or a shape file is missing
    """
    path = Path(config_path)
    data = _read_json(path)

    if not isinstance(data, dict) or not isinstance(data.get("shapes"), dict):
        raise CatalogError(f"Shape catalog {path} must contain a 'shapes' object")

    shape_files: Dict[str, Path] = {}
    for key, shape_path in data["shapes"].items():
        if not isinstance(shape_path, str) or not shape_path.strip():
            raise CatalogError(f"Shape path for '{key}' must be a non-empty string")
        resolved = (path.parent / shape_path).resolve()
        if not resolved.is_file():
            raise CatalogError(f"Shape file for '{key}' not found: {resolved}")
        shape_files[key] = resolved

    logger.info(f"Loaded {len(shape_files)} shape files from {path}")
    return shape_files


def parse_shape_catalog(
    data: Mapping[str, Any],
    base_dir: Optional[Path] = None
) -> ShapeCatalog:
    """
    Build an index-mode catalog from decoded JSON.

    Args:
        data: Mapping {key: {"shapes", "directory", "name", "dependencies"?}}
        base_dir: Directory used to resolve shape file paths

    Returns:
        Ordered dict {key: ShapeCatalogEntry}

    Raises:
        CatalogError: If an entry is malformed or a shape file is missing
    """
    if not isinstance(data, Mapping):
        raise CatalogError("Shape catalog must be a JSON object")

    catalog: ShapeCatalog = {}
    for key, raw in data.items():
        if not isinstance(raw, Mapping):
            raise CatalogError(f"Catalog entry '{key}' must be an object")

        for required in ("shapes", "directory", "name"):
            if required not in raw:
                raise CatalogError(f"Catalog entry '{key}' is missing '{required}'")

        raw_shapes = raw["shapes"]
        if isinstance(raw_shapes, str):
            raw_shapes = [raw_shapes]
        if not isinstance(raw_shapes, list) or not raw_shapes:
            raise CatalogError(f"Catalog entry '{key}' needs at least one shape")

        shapes = []
        for shape in raw_shapes:
            if not isinstance(shape, str):
                raise CatalogError(f"Shapes of '{key}' must be strings")
            if _looks_like_shape_path(shape):
                shape_path = Path(shape)
                if base_dir is not None and not shape_path.is_absolute():
                    shape_path = base_dir / shape_path
                shapes.append(read_shape_file(shape_path))
            else:
                shapes.append(shape)

        dependencies = raw.get("dependencies") or []
        if not isinstance(dependencies, list) or not all(isinstance(d, str) for d in dependencies):
            raise CatalogError(f"Dependencies of '{key}' must be a list of keys")

        catalog[key] = ShapeCatalogEntry(
            key=key,
            shapes=tuple(shapes),
            directory=str(raw["directory"]),
            name=str(raw["name"]),
            dependencies=tuple(dependencies),
        )

    return catalog


def load_shape_catalog(config_path: Union[str, Path]) -> ShapeCatalog:
    """
    Load an index-mode shape catalog from a JSON file.

    Args:
        config_path: Path to the JSON catalog

    Returns:
        Ordered dict {key: ShapeCatalogEntry}
    """
    path = Path(config_path)
    catalog = parse_shape_catalog(_read_json(path), base_dir=path.parent)
    logger.info(f"Loaded {len(catalog)} catalog entries from {path}")
    return catalog
