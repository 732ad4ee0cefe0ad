"""Load an in-memory registry from a YAML or JSON document.

Document shape (JSON is accepted too, being a subset of YAML)::

    root:
      "1.0.0":
        foo: ^1.0.0
    foo:
      "1.0.0": {}
      "1.1.0":
        bar: ">=2.0.0, <3.0.0"

Quote version keys that YAML would otherwise read as numbers (``1.10``
becomes the float ``1.1``). A version with no dependencies may be written
as ``{}`` or left empty.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from pubgrub.exceptions import RegistryFormatError
from pubgrub.registry.memory import InMemoryRegistry

logger = logging.getLogger(__name__)


def load_registry(path: str | Path) -> InMemoryRegistry:
    """Read *path* and build an ``InMemoryRegistry`` from it.

    Raises:
        RegistryFormatError: If the file cannot be read or has the wrong shape.
        ConstraintParseError: If a version key is malformed.
    """
    path = Path(path)
    logger.debug("Loading registry from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RegistryFormatError(f"Cannot read registry file {path}: {exc}") from exc
    return registry_from_text(raw, source=str(path))


def registry_from_text(text: str, source: str = "<string>") -> InMemoryRegistry:
    """Build an ``InMemoryRegistry`` from YAML/JSON *text*."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RegistryFormatError(f"Invalid YAML in {source}: {exc}") from exc
    return InMemoryRegistry(_coerce(data, source))


def _coerce(data: Any, source: str) -> dict[str, dict[str, dict[str, str]]]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RegistryFormatError(f"{source}: top level must be a mapping of packages")

    registry: dict[str, dict[str, dict[str, str]]] = {}
    for package, versions in data.items():
        if versions is None:
            versions = {}
        if not isinstance(versions, dict):
            raise RegistryFormatError(
                f"{source}: versions of {package!r} must be a mapping"
            )
        entries: dict[str, dict[str, str]] = {}
        for version, dependencies in versions.items():
            if dependencies is None:
                dependencies = {}
            if not isinstance(dependencies, dict):
                raise RegistryFormatError(
                    f"{source}: dependencies of {package} {version} must be a mapping"
                )
            entries[str(version)] = {
                str(name): "*" if constraint is None else str(constraint)
                for name, constraint in dependencies.items()
            }
        registry[str(package)] = entries
    return registry
