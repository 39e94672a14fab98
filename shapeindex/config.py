"""Pipeline configuration.

A configuration file is a JSON object with an ``annotator`` section, a
``shapeIndex`` section or both::

    {
      "annotator": {
        "shapeCatalog": "shapes/config.json",
        "relativePath": null,
        "resourceIriRegex": null,
        "shapeTreeLocator": true
      },
      "shapeIndex": {
        "dataset": "http://localhost:3000/pods/00000000000000000065",
        "shapeCatalog": "shapes/index.json",
        "iriFragmentationOneFile": ["http://localhost:3000/internal/FragmentationOneFile"],
        "iriFragmentationMultipleFiles": ["http://localhost:3000/internal/FragmentationPerResource"],
        "fragmentationPredicates": {"http://localhost:3000/internal/postsFragmentation": "posts"},
        "resourceTypes": ["posts", "comments", "card"],
        "randomSeed": 1,
        "generationProbability": 100,
        "probabilisticGenerationOnEntries": false,
        "undescribedResources": {"profile/card": {"name": "card", "fragmentation": "single"}}
      }
    }

Relative catalog paths are resolved against the configuration file.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from shapeindex.errors import ConfigurationError
from shapeindex.models import ResourceFragmentation, UndescribedResource

logger = logging.getLogger(__name__)


@dataclass
class AnnotatorConfig:
    """
    Settings of the resource annotator.

    Attributes:
        shape_catalog: Path to a ``{"shapes": {key: path}}`` catalog
        relative_path: Relative reference resolved against each subject
        resource_iri_regex: Regex whose first group rewrites each subject
        shape_tree_locator: Emit ``st:ShapeTreeLocator`` quads
    """

    shape_catalog: str
    relative_path: Optional[str] = None
    resource_iri_regex: Optional[str] = None
    shape_tree_locator: bool = False


@dataclass
class ShapeIndexConfig:
    """Settings of the shape index builder (see ShapeIndexBuilder)."""

    dataset: str
    shape_catalog: str
    fragmentation_predicates: Dict[str, str] = field(default_factory=dict)
    iri_fragmentation_one_file: List[str] = field(default_factory=list)
    iri_fragmentation_multiple_files: List[str] = field(default_factory=list)
    resource_types: List[str] = field(default_factory=list)
    random_seed: int = 0
    generation_probability: float = 100
    probabilistic_generation_on_entries: bool = False
    undescribed_resources: Dict[str, UndescribedResource] = field(default_factory=dict)

    def __post_init__(self):
        if not 0 <= self.generation_probability <= 100:
            raise ConfigurationError(
                f"generationProbability must be between 0 and 100, got {self.generation_probability}"
            )
        if self.random_seed < 0:
            raise ConfigurationError(f"randomSeed must be non-negative, got {self.random_seed}")
        if self.dataset.endswith("/"):
            self.dataset = self.dataset.rstrip("/")


@dataclass
class PipelineConfig:
    """Settings of a full annotation run."""

    annotator: Optional[AnnotatorConfig] = None
    shape_index: Optional[ShapeIndexConfig] = None
    show_progress: bool = True

    def __post_init__(self):
        if self.annotator is None and self.shape_index is None:
            raise ConfigurationError("Configuration needs an 'annotator' or a 'shapeIndex' section")


def _require(section: Mapping[str, Any], key: str, section_name: str) -> Any:
    if key not in section:
        raise ConfigurationError(f"'{section_name}' section is missing '{key}'")
    return section[key]


def _resolve_path(value: str, base_dir: Optional[Path]) -> str:
    path = Path(value)
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return str(path)


def parse_undescribed_resources(raw: Mapping[str, Any]) -> Dict[str, UndescribedResource]:
    """
    Parse ``{path element: {"name", "fragmentation"}}``.

    Raises:
        ConfigurationError: If an entry is malformed
    """
    undescribed = {}
    for path_element, value in raw.items():
        if not isinstance(value, Mapping) or "name" not in value or "fragmentation" not in value:
            raise ConfigurationError(
                f"Undescribed resource '{path_element}' needs 'name' and 'fragmentation'"
            )
        try:
            fragmentation = ResourceFragmentation.parse(str(value["fragmentation"]))
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        undescribed[path_element] = UndescribedResource(str(value["name"]), fragmentation)
    return undescribed


def parse_annotator_config(
    section: Mapping[str, Any],
    base_dir: Optional[Path] = None
) -> AnnotatorConfig:
    """Build an AnnotatorConfig from its JSON section."""
    return AnnotatorConfig(
        shape_catalog=_resolve_path(_require(section, "shapeCatalog", "annotator"), base_dir),
        relative_path=section.get("relativePath"),
        resource_iri_regex=section.get("resourceIriRegex"),
        shape_tree_locator=bool(section.get("shapeTreeLocator", False)),
    )


def parse_shape_index_config(
    section: Mapping[str, Any],
    base_dir: Optional[Path] = None
) -> ShapeIndexConfig:
    """Build a ShapeIndexConfig from its JSON section."""
    try:
        return ShapeIndexConfig(
            dataset=str(_require(section, "dataset", "shapeIndex")),
            shape_catalog=_resolve_path(_require(section, "shapeCatalog", "shapeIndex"), base_dir),
            fragmentation_predicates=dict(section.get("fragmentationPredicates", {})),
            iri_fragmentation_one_file=list(section.get("iriFragmentationOneFile", [])),
            iri_fragmentation_multiple_files=list(section.get("iriFragmentationMultipleFiles", [])),
            resource_types=list(section.get("resourceTypes", [])),
            random_seed=int(section.get("randomSeed", 0)),
            generation_probability=float(section.get("generationProbability", 100)),
            probabilistic_generation_on_entries=bool(
                section.get("probabilisticGenerationOnEntries", False)
            ),
            undescribed_resources=parse_undescribed_resources(
                section.get("undescribedResources", {})
            ),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid 'shapeIndex' section: {e}") from e


def parse_pipeline_config(
    data: Mapping[str, Any],
    base_dir: Optional[Path] = None
) -> PipelineConfig:
    """
    Build a PipelineConfig from decoded JSON.

    Args:
        data: Decoded configuration object
        base_dir: Directory relative paths are resolved against

    Returns:
        PipelineConfig

    Raises:
        ConfigurationError: If the configuration is malformed
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("Configuration must be a JSON object")

    annotator = None
    if data.get("annotator") is not None:
        annotator = parse_annotator_config(data["annotator"], base_dir)

    shape_index = None
    if data.get("shapeIndex") is not None:
        shape_index = parse_shape_index_config(data["shapeIndex"], base_dir)

    return PipelineConfig(
        annotator=annotator,
        shape_index=shape_index,
        show_progress=bool(data.get("showProgress", True)),
    )


def load_pipeline_config(config_path: Union[str, Path]) -> PipelineConfig:
    """
    Load a PipelineConfig from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        PipelineConfig

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration {path} is not valid JSON: {e}") from e

    config = parse_pipeline_config(data, base_dir=path.parent)
    logger.info(
        f"Loaded configuration from {path} "
        f"(annotator={'yes' if config.annotator else 'no'}, "
        f"shapeIndex={'yes' if config.shape_index else 'no'})"
    )
    return config
