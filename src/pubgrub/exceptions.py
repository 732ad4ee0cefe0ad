"""pubgrub exception hierarchy.

All public exceptions inherit from PubGrubError, giving callers a single
base class to catch when they want to handle any resolver-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pubgrub.core.solver.incompatibility import Incompatibility


class PubGrubError(Exception):
    """Base exception for all pubgrub errors."""


class ConstraintParseError(PubGrubError):
    """Raised when a version, constraint or term string cannot be parsed.

    Malformed text is rejected at this boundary so that the version set
    algebra only ever sees well-formed values.
    """


class RegistryError(PubGrubError):
    """Base class for registry failures."""


class RegistryLookupError(RegistryError):
    """Raised when a registry cannot answer a lookup.

    The solver folds these into incompatibilities instead of aborting, so
    they never escape a solve.
    """

    def __init__(self, package: str, message: str) -> None:
        super().__init__(message)
        self.package = package


class PackageNotFound(RegistryLookupError):
    """Raised when the registry does not know a package at all."""

    def __init__(self, package: str) -> None:
        super().__init__(package, f"Package {package!r} not found")


class VersionNotFound(RegistryLookupError):
    """Raised when the registry knows a package but not the requested version."""

    def __init__(self, package: str, version: object) -> None:
        super().__init__(package, f"Version {version} of {package!r} not found")
        self.version = version


class RegistryFormatError(RegistryError):
    """Raised when a registry document does not have the expected shape."""


class SolverError(PubGrubError):
    """Base class for failures raised by the solver loop."""


class Unsatisfiable(SolverError):
    """Raised when a failure incompatibility has been derived.

    Covers ordinary version conflicts and registry gaps. ``solve()`` turns
    this into a ``Failed`` result carrying the same incompatibility.
    """

    def __init__(self, incompatibility: Incompatibility) -> None:
        super().__init__(f"Version solving failed: {incompatibility}")
        self.incompatibility = incompatibility


class InternalInvariantViolation(SolverError):
    """Raised when the solver detects a bug in its own bookkeeping.

    This never describes a dependency problem and must not be caught by the
    solver itself.
    """


class SolverAborted(SolverError):
    """Raised when the caller's abort signal or step bound stops a solve."""
