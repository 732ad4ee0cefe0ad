"""Tests for loading registries from YAML and JSON documents."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pubgrub.core.version import Version
from pubgrub.exceptions import ConstraintParseError, RegistryFormatError
from pubgrub.registry import load_registry, registry_from_text


class TestRegistryFromText:
    """Parsing and coercion of registry documents."""

    def test_yaml_document(self) -> None:
        registry = registry_from_text(
            "root:\n"
            '  "1.0.0":\n'
            "    foo: ^1.0.0\n"
            "foo:\n"
            '  "1.0.0": {}\n'
        )
        assert registry.packages == ["foo", "root"]
        assert registry.dependencies_of("root", Version(1, 0, 0)) == {"foo": "^1.0.0"}

    def test_json_document(self) -> None:
        text = json.dumps({"root": {"1.0.0": {"foo": ">=1.0.0, <2.0.0"}}})
        registry = registry_from_text(text)
        assert registry.dependencies_of("root", Version(1)) == {"foo": ">=1.0.0, <2.0.0"}

    def test_empty_entries_allowed(self) -> None:
        registry = registry_from_text(
            "root:\n"
            '  "1.0.0":\n'
            "    foo:\n"
            "foo:\n"
            '  "1.0.0":\n'
        )
        assert registry.dependencies_of("root", Version(1)) == {"foo": "*"}
        assert registry.dependencies_of("foo", Version(1)) == {}

    def test_numeric_keys_coerced(self) -> None:
        registry = registry_from_text("foo:\n  2: {}\n  1.5: {}\n")
        assert registry.versions_of("foo") == [Version(1, 5), Version(2)]

    def test_empty_document(self) -> None:
        assert len(registry_from_text("")) == 0

    def test_invalid_yaml(self) -> None:
        with pytest.raises(RegistryFormatError, match="Invalid YAML"):
            registry_from_text("root: [unclosed", source="bad.yaml")

    @pytest.mark.parametrize(
        "text",
        [
            "- root\n- foo\n",
            "root: 1.0.0\n",
            'root:\n  "1.0.0": [foo]\n',
        ],
    )
    def test_wrong_shape(self, text: str) -> None:
        with pytest.raises(RegistryFormatError):
            registry_from_text(text)

    def test_bad_version_key(self) -> None:
        with pytest.raises(ConstraintParseError):
            registry_from_text("foo:\n  latest: {}\n")


class TestLoadRegistry:
    """Reading registry files from disk."""

    def test_load_yaml_file(self, registry_file: Path) -> None:
        registry = load_registry(registry_file)
        assert registry.versions_of("bar") == [
            Version(1, 0, 0), Version(1, 1, 0), Version(2, 0, 0),
        ]

    def test_load_accepts_str_path(self, registry_file: Path) -> None:
        assert len(load_registry(str(registry_file))) == 6

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryFormatError, match="Cannot read"):
            load_registry(tmp_path / "nope.yaml")

    def test_binary_file(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.yaml"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(RegistryFormatError):
            load_registry(path)
