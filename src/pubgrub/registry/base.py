"""The registry contract consumed by the solver.

A registry answers two questions: which versions of a package exist, and
what a given package version depends on. Backends (the in-memory fixture, a
file-backed registry, a network service) are interchangeable implementations
of ``Registry``; the solver never depends on a concrete one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Mapping

from pubgrub.core.version import Version, VersionSet

logger = logging.getLogger(__name__)


class Registry(ABC):
    """Abstract base class for package registries.

    Implementations must be deterministic for the duration of a solve:
    repeated calls with the same arguments return the same answer. A
    registry may be shared read-only between concurrent solves.
    """

    @abstractmethod
    def versions_of(self, package: str) -> list[Version]:
        """Return every known version of *package*, in any order.

        Raises:
            PackageNotFound: If the registry does not know *package*.
        """

    @abstractmethod
    def dependencies_of(self, package: str, version: Version) -> Mapping[str, str]:
        """Return *package* at *version*'s dependencies.

        Args:
            package: Package name.
            version: A version previously returned by ``versions_of``.

        Returns:
            Mapping of dependency name -> constraint string (e.g. ``"^1.0.0"``).

        Raises:
            PackageNotFound: If the registry does not know *package*.
            VersionNotFound: If *package* has no such *version*.
        """

    def candidates(self, package: str, allowed: VersionSet) -> list[Version]:
        """Versions of *package* inside *allowed*, newest first.

        Raises:
            PackageNotFound: If the registry does not know *package*.
        """
        return sorted(allowed.select(self.versions_of(package)), reverse=True)

    def best_version(self, package: str, allowed: VersionSet) -> Version | None:
        """The newest version of *package* inside *allowed*, or None."""
        candidates = self.candidates(package, allowed)
        if not candidates:
            logger.debug("No version of %s matches %s", package, allowed)
            return None
        return candidates[0]
