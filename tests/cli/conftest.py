"""Shared fixtures for CLI tests.

Registry files for the happy path live in the top-level conftest; these add
the runner and a few malformed inputs.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invalid_yaml_file(tmp_path: Path) -> Path:
    """A registry file that is not valid YAML."""
    path = tmp_path / "invalid.yaml"
    path.write_text("root: [unclosed\n", encoding="utf-8")
    return path


@pytest.fixture
def bad_constraint_file(tmp_path: Path) -> Path:
    """A well-formed registry whose root depends on an unparsable constraint."""
    path = tmp_path / "bad_constraint.yaml"
    path.write_text(
        "root:\n"
        '  "1.0.0":\n'
        "    foo: latest\n"
        "foo:\n"
        '  "1.0.0": {}\n',
        encoding="utf-8",
    )
    return path
