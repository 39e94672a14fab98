"""Test shape catalogs and pipeline configuration loading."""

import json

import pytest

from shapeindex.config import load_pipeline_config, parse_pipeline_config
from shapeindex.errors import CatalogError, ConfigurationError
from shapeindex.models import (
    ResourceFragmentation,
    load_shape_catalog,
    load_shape_file_map,
    parse_shape_catalog,
)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_shape_file_map(tmp_path):
    (tmp_path / "posts.shexc").write_text("<$> {}")
    (tmp_path / "comments.shexc").write_text("<$> {}")
    config = write_json(tmp_path / "config.json", {
        "shapes": {"posts": "posts.shexc", "comments": "comments.shexc"},
    })

    shape_files = load_shape_file_map(config)

    assert list(shape_files) == ["posts", "comments"], "Key order is the classification priority"
    assert shape_files["posts"] == (tmp_path / "posts.shexc").resolve()


def test_shape_file_map_missing_file(tmp_path):
    config = write_json(tmp_path / "config.json", {"shapes": {"posts": "posts.shexc"}})

    with pytest.raises(CatalogError, match="not found"):
        load_shape_file_map(config)


def test_shape_file_map_malformed(tmp_path):
    config = tmp_path / "config.json"
    config.write_text("{not json")

    with pytest.raises(CatalogError):
        load_shape_file_map(config)

    with pytest.raises(CatalogError):
        load_shape_file_map(write_json(tmp_path / "other.json", {"posts": "posts.shexc"}))


def test_catalog_inline_and_file_shapes(tmp_path):
    (tmp_path / "post_v2.shexc").write_text("<$> { a IRI ? ; }", encoding="utf-8")
    catalog_path = write_json(tmp_path / "index.json", {
        "posts": {
            "shapes": ["<$> { a IRI ; }", "post_v2.shexc"],
            "directory": "posts",
            "name": "Post",
            "dependencies": ["comments"],
        },
        "comments": {"shapes": "<$> { }", "directory": "comments", "name": "Comment"},
    })

    catalog = load_shape_catalog(catalog_path)

    assert catalog["posts"].shapes == ("<$> { a IRI ; }", "<$> { a IRI ? ; }")
    assert catalog["posts"].dependencies == ("comments",)
    assert catalog["comments"].shapes == ("<$> { }",), "A single shape string is accepted"
    assert catalog["comments"].dependencies == ()


@pytest.mark.parametrize("raw", [
    {"posts": {"directory": "posts", "name": "Post"}},
    {"posts": {"shapes": [], "directory": "posts", "name": "Post"}},
    {"posts": {"shapes": ["<$> {}"], "name": "Post"}},
    {"posts": {"shapes": ["<$> {}"], "directory": "posts", "name": "Post", "dependencies": "x"}},
    {"posts": "posts.shexc"},
])
def test_catalog_malformed(raw):
    with pytest.raises(CatalogError):
        parse_shape_catalog(raw)


def test_pipeline_config(tmp_path):
    config_path = write_json(tmp_path / "pipeline.json", {
        "annotator": {"shapeCatalog": "shapes/config.json", "shapeTreeLocator": True},
        "shapeIndex": {
            "dataset": "http://localhost:3000/pods/00000000000000000065/",
            "shapeCatalog": "shapes/index.json",
            "fragmentationPredicates": {"http://localhost:3000/internal/postsFragmentation": "posts"},
            "randomSeed": 7,
            "generationProbability": 60,
            "probabilisticGenerationOnEntries": True,
            "undescribedResources": {"profile/card": {"name": "profile", "fragmentation": "single"}},
        },
    })

    config = load_pipeline_config(config_path)

    assert config.annotator.shape_catalog == str(tmp_path / "shapes/config.json")
    assert config.annotator.shape_tree_locator is True
    assert config.shape_index.dataset == "http://localhost:3000/pods/00000000000000000065", \
        "Trailing slash of the dataset is dropped"
    assert config.shape_index.random_seed == 7
    assert config.shape_index.generation_probability == 60
    assert config.shape_index.probabilistic_generation_on_entries is True
    undescribed = config.shape_index.undescribed_resources["profile/card"]
    assert undescribed.fragmentation is ResourceFragmentation.SINGLE
    assert config.show_progress is True


@pytest.mark.parametrize("data", [
    {},
    {"shapeIndex": {"shapeCatalog": "index.json"}},
    {"shapeIndex": {"dataset": "http://d", "shapeCatalog": "i.json", "generationProbability": 120}},
    {"shapeIndex": {"dataset": "http://d", "shapeCatalog": "i.json", "randomSeed": "seven"}},
    {"shapeIndex": {
        "dataset": "http://d",
        "shapeCatalog": "i.json",
        "undescribedResources": {"noise": {"name": "noise", "fragmentation": "scattered"}},
    }},
    {"annotator": {"shapeTreeLocator": True}},
])
def test_invalid_pipeline_config(data):
    with pytest.raises(ConfigurationError):
        parse_pipeline_config(data)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_pipeline_config(tmp_path / "missing.json")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
