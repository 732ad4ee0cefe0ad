"""Shared fixtures for pubgrub tests.

The registry fixtures are the classic scenarios from the PubGrub write-up:
each one exercises a different path through the solver loop.
"""

from __future__ import annotations

import pathlib

import pytest

from pubgrub.registry import InMemoryRegistry


@pytest.fixture
def no_conflict_registry() -> InMemoryRegistry:
    """root -> foo ^1.0.0 -> bar ^1.0.0; straight propagation, no backtracking."""
    return InMemoryRegistry({
        "root": {"1.0.0": {"foo": "^1.0.0"}},
        "foo": {"1.0.0": {"bar": "^1.0.0"}},
        "bar": {"1.0.0": {}, "2.0.0": {}},
    })


@pytest.fixture
def avoiding_conflict_registry() -> InMemoryRegistry:
    """foo 1.1.0 needs bar ^2.0.0, which clashes with root's bar ^1.0.0."""
    return InMemoryRegistry({
        "root": {"1.0.0": {"foo": "^1.0.0", "bar": "^1.0.0"}},
        "foo": {"1.0.0": {}, "1.1.0": {"bar": "^2.0.0"}},
        "bar": {"1.0.0": {}, "1.1.0": {}, "2.0.0": {}},
    })


@pytest.fixture
def unsatisfiable_registry() -> InMemoryRegistry:
    """Every foo is incompatible with root; resolution must fail."""
    return InMemoryRegistry({
        "root": {"1.0.0": {"foo": "^1.0.0"}},
        "foo": {"2.0.0": {}},
    })


@pytest.fixture
def missing_major_registry() -> InMemoryRegistry:
    """root needs foo ^2.0.0 but only foo 1.0.0 exists."""
    return InMemoryRegistry({
        "root": {"1.0.0": {"foo": "^2.0.0"}},
        "foo": {"1.0.0": {}},
    })


@pytest.fixture
def partial_satisfier_registry() -> InMemoryRegistry:
    """Conflict resolution must resolve through a partially satisfying derivation."""
    return InMemoryRegistry({
        "root": {"1.0.0": {"foo": "^1.0.0", "target": "^2.0.0"}},
        "foo": {
            "1.0.0": {},
            "1.1.0": {"left": "^1.0.0", "right": "^1.0.0"},
        },
        "left": {"1.0.0": {"shared": ">=1.0.0"}},
        "right": {"1.0.0": {"shared": "<2.0.0"}},
        "shared": {
            "1.0.0": {"target": "^1.0.0"},
            "2.0.0": {},
        },
        "target": {"1.0.0": {}, "2.0.0": {}},
    })


@pytest.fixture
def registry_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the avoiding-conflict scenario as a YAML registry file."""
    path = tmp_path / "registry.yaml"
    path.write_text(
        "root:\n"
        '  "1.0.0":\n'
        "    foo: ^1.0.0\n"
        "    bar: ^1.0.0\n"
        "foo:\n"
        '  "1.0.0": {}\n'
        '  "1.1.0":\n'
        "    bar: ^2.0.0\n"
        "bar:\n"
        '  "1.0.0": {}\n'
        '  "1.1.0": {}\n'
        '  "2.0.0": {}\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def unsatisfiable_registry_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """YAML registry in which root's only dependency has no matching version."""
    path = tmp_path / "broken.yaml"
    path.write_text(
        "root:\n"
        '  "1.0.0":\n'
        "    foo: ^1.0.0\n"
        "foo:\n"
        '  "2.0.0":\n',
        encoding="utf-8",
    )
    return path
