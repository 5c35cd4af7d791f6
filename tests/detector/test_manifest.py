"""Unit tests for the composer.json reader."""

import json
from pathlib import Path

from larascope.detector.manifest import ManifestReader


def _write_manifest(root: Path, data) -> None:
    (root / "composer.json").write_text(json.dumps(data))


class TestManifestReader:
    def test_reads_all_fields(self, tmp_path):
        _write_manifest(tmp_path, {
            "name": "acme/shop",
            "description": "Storefront",
            "require": {"laravel/framework": "^10.0"},
            "require-dev": {"phpunit/phpunit": "^10.0"},
        })
        manifest, ok = ManifestReader(tmp_path).load()

        assert ok is True
        assert manifest.name == "acme/shop"
        assert manifest.description == "Storefront"
        assert manifest.dependencies == {"laravel/framework": "^10.0"}
        assert manifest.dev_dependencies == {"phpunit/phpunit": "^10.0"}

    def test_all_dependency_names_is_union(self, tmp_path):
        _write_manifest(tmp_path, {
            "require": {"a/a": "1"},
            "require-dev": {"b/b": "1"},
        })
        manifest, _ = ManifestReader(tmp_path).load()
        assert manifest.all_dependency_names == {"a/a", "b/b"}

    def test_missing_file_fails(self, tmp_path):
        manifest, ok = ManifestReader(tmp_path).load()
        assert ok is False
        assert manifest.dependencies == {}

    def test_invalid_json_fails(self, tmp_path):
        (tmp_path / "composer.json").write_text("{not json")
        _, ok = ManifestReader(tmp_path).load()
        assert ok is False

    def test_non_object_top_level_fails(self, tmp_path):
        _write_manifest(tmp_path, ["laravel/framework"])
        _, ok = ManifestReader(tmp_path).load()
        assert ok is False

    def test_empty_object_loads(self, tmp_path):
        _write_manifest(tmp_path, {})
        manifest, ok = ManifestReader(tmp_path).load()
        assert ok is True
        assert manifest.name == ""
        assert manifest.all_dependency_names == set()

    def test_list_shaped_require_treated_as_empty(self, tmp_path):
        _write_manifest(tmp_path, {"require": [], "require-dev": None})
        manifest, ok = ManifestReader(tmp_path).load()
        assert ok is True
        assert manifest.dependencies == {}
        assert manifest.dev_dependencies == {}

    def test_non_string_name_becomes_empty(self, tmp_path):
        _write_manifest(tmp_path, {"name": 42})
        manifest, _ = ManifestReader(tmp_path).load()
        assert manifest.name == ""

    def test_custom_manifest_file_name(self, tmp_path):
        (tmp_path / "deps.json").write_text(json.dumps({"require": {"x/y": "1"}}))
        manifest, ok = ManifestReader(tmp_path, "deps.json").load()
        assert ok is True
        assert "x/y" in manifest.dependencies
