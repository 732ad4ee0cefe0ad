"""In-memory registry built from a nested mapping.

The fixture format mirrors how test scenarios are usually written down::

    InMemoryRegistry({
        "root": {"1.0.0": {"foo": "^1.0.0"}},
        "foo": {"1.0.0": {}},
    })

Version keys are parsed eagerly, so a malformed version is reported when the
registry is built. Constraint strings are stored verbatim and only parsed by
the solver.
"""

from __future__ import annotations

from typing import Mapping

from pubgrub.core.version import Version
from pubgrub.exceptions import PackageNotFound, VersionNotFound
from pubgrub.registry.base import Registry


class InMemoryRegistry(Registry):
    """Registry backed by a ``{package: {version: {dependency: constraint}}}`` mapping.

    Raises:
        ConstraintParseError: If a version key is not a valid version.
    """

    def __init__(
        self, data: Mapping[str, Mapping[str, Mapping[str, str]]] | None = None
    ) -> None:
        self._packages: dict[str, dict[Version, dict[str, str]]] = {}
        for package, versions in (data or {}).items():
            for version, dependencies in versions.items():
                self.add(package, version, dependencies)

    def add(
        self,
        package: str,
        version: Version | str,
        dependencies: Mapping[str, str] | None = None,
    ) -> None:
        """Register *package* at *version*, replacing any existing entry."""
        if isinstance(version, str):
            version = Version.parse(version)
        self._packages.setdefault(package, {})[version] = dict(dependencies or {})

    @property
    def packages(self) -> list[str]:
        return sorted(self._packages)

    def versions_of(self, package: str) -> list[Version]:
        try:
            return sorted(self._packages[package])
        except KeyError:
            raise PackageNotFound(package) from None

    def dependencies_of(self, package: str, version: Version) -> dict[str, str]:
        versions = self._packages.get(package)
        if versions is None:
            raise PackageNotFound(package)
        try:
            return dict(versions[version])
        except KeyError:
            raise VersionNotFound(package, version) from None

    def __len__(self) -> int:
        return sum(len(versions) for versions in self._packages.values())
