"""Tests for the Registry contract and InMemoryRegistry.

Validates the abstract base class helpers (``candidates``, ``best_version``)
through a minimal concrete registry, and the in-memory fixture's lookups and
error reporting.
"""

from __future__ import annotations

from typing import Mapping

import pytest

from pubgrub.core.version import Version, VersionSet, parse_constraint
from pubgrub.exceptions import (
    ConstraintParseError,
    PackageNotFound,
    RegistryLookupError,
    VersionNotFound,
)
from pubgrub.registry import InMemoryRegistry, Registry


# ---------------------------------------------------------------------------
# Concrete test registry (for testing the ABC's helpers)
# ---------------------------------------------------------------------------


class _ListRegistry(Registry):
    """Knows one package, returned in deliberately unsorted order."""

    def versions_of(self, package: str) -> list[Version]:
        if package != "foo":
            raise PackageNotFound(package)
        return [Version(1, 1), Version(2, 0), Version(1, 0)]

    def dependencies_of(self, package: str, version: Version) -> Mapping[str, str]:
        return {}


class TestRegistryBase:
    """Tests for the Registry ABC."""

    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            Registry()  # type: ignore[abstract]

    def test_candidates_newest_first(self) -> None:
        registry = _ListRegistry()
        assert registry.candidates("foo", VersionSet.any()) == [
            Version(2, 0), Version(1, 1), Version(1, 0),
        ]

    def test_candidates_filtered(self) -> None:
        registry = _ListRegistry()
        assert registry.candidates("foo", parse_constraint("^1.0")) == [
            Version(1, 1), Version(1, 0),
        ]

    def test_best_version(self) -> None:
        registry = _ListRegistry()
        assert registry.best_version("foo", parse_constraint("<2.0")) == Version(1, 1)

    def test_best_version_none(self) -> None:
        registry = _ListRegistry()
        assert registry.best_version("foo", parse_constraint(">=3.0")) is None

    def test_best_version_unknown_package(self) -> None:
        with pytest.raises(PackageNotFound):
            _ListRegistry().best_version("bar", VersionSet.any())


# ---------------------------------------------------------------------------
# InMemoryRegistry
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> InMemoryRegistry:
    return InMemoryRegistry({
        "foo": {"2.0.0": {"bar": "^1.0.0"}, "1.0.0": {}},
        "bar": {"1.0.0": {}},
    })


class TestInMemoryRegistry:
    """Lookups and errors of the dict-backed registry."""

    def test_versions_sorted(self, registry: InMemoryRegistry) -> None:
        assert registry.versions_of("foo") == [Version(1, 0, 0), Version(2, 0, 0)]

    def test_dependencies(self, registry: InMemoryRegistry) -> None:
        assert registry.dependencies_of("foo", Version(2, 0, 0)) == {"bar": "^1.0.0"}
        assert registry.dependencies_of("foo", Version(1)) == {}

    def test_dependencies_are_copies(self, registry: InMemoryRegistry) -> None:
        deps = registry.dependencies_of("foo", Version(2, 0, 0))
        deps["baz"] = "*"
        assert "baz" not in registry.dependencies_of("foo", Version(2, 0, 0))

    def test_unknown_package(self, registry: InMemoryRegistry) -> None:
        with pytest.raises(PackageNotFound) as exc_info:
            registry.versions_of("missing")
        assert exc_info.value.package == "missing"
        with pytest.raises(PackageNotFound):
            registry.dependencies_of("missing", Version(1))

    def test_unknown_version(self, registry: InMemoryRegistry) -> None:
        with pytest.raises(VersionNotFound) as exc_info:
            registry.dependencies_of("foo", Version(3))
        assert isinstance(exc_info.value, RegistryLookupError)
        assert exc_info.value.version == Version(3)

    def test_add_replaces(self, registry: InMemoryRegistry) -> None:
        registry.add("foo", "1.0.0", {"bar": "*"})
        assert registry.dependencies_of("foo", Version(1, 0, 0)) == {"bar": "*"}
        assert len(registry) == 3

    def test_add_new_package(self, registry: InMemoryRegistry) -> None:
        registry.add("baz", Version(0, 1))
        assert registry.packages == ["bar", "baz", "foo"]
        assert registry.dependencies_of("baz", Version(0, 1)) == {}

    def test_bad_version_key_rejected(self) -> None:
        with pytest.raises(ConstraintParseError):
            InMemoryRegistry({"foo": {"latest": {}}})

    def test_empty(self) -> None:
        assert len(InMemoryRegistry()) == 0
        assert InMemoryRegistry().packages == []
