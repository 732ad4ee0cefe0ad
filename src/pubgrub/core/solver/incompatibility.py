"""Incompatibilities and their causes.

An incompatibility is a set of terms that cannot all be true at once. Each
one records *why* it holds: a dependency declared in the registry, a gap in
the registry, or a conflict learned by resolving two earlier
incompatibilities. Learned incompatibilities refer to their parents by id,
so the derivation graph is an arena with no object cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from pubgrub.core.solver.term import Term
from pubgrub.core.version import Version


# ---------------------------------------------------------------------------
# Causes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RootDependency:
    """The root package version depends on another package."""

    package: str
    version: Version

    def __str__(self) -> str:
        return f"root {self.package} {self.version} dependency"


@dataclass(frozen=True)
class Dependency:
    """A (non-root) package version depends on another package."""

    package: str
    version: Version

    def __str__(self) -> str:
        return f"{self.package} {self.version} dependency"


@dataclass(frozen=True)
class NoVersionsAvailable:
    """The registry has no version of the package in the required set."""

    package: str

    def __str__(self) -> str:
        return f"no versions of {self.package}"


@dataclass(frozen=True)
class PackageUnavailable:
    """The registry does not know the package, or the chosen version."""

    package: str

    def __str__(self) -> str:
        return f"{self.package} unavailable"


@dataclass(frozen=True)
class ConflictDerived:
    """Learned by resolving incompatibility ``left`` with ``right``."""

    left: int
    right: int

    def __str__(self) -> str:
        return f"derived from #{self.left} and #{self.right}"


Cause = Union[RootDependency, Dependency, NoVersionsAvailable, PackageUnavailable, ConflictDerived]


# ---------------------------------------------------------------------------
# Incompatibility
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Incompatibility:
    """An immutable set of terms that cannot all hold.

    Build instances through ``DerivationGraph.add`` so that ids are unique
    and terms are normalised.

    Attributes:
        id: Stable arena index, unique within one solve.
        terms: Terms on distinct packages, in first-seen order.
        cause: Why this incompatibility holds.
    """

    id: int
    terms: tuple[Term, ...]
    cause: Cause

    @property
    def packages(self) -> list[str]:
        return [term.package for term in self.terms]

    @property
    def is_derived(self) -> bool:
        return isinstance(self.cause, ConflictDerived)

    def term_for(self, package: str) -> Term | None:
        for term in self.terms:
            if term.package == package:
                return term
        return None

    def is_failure(self, root: str) -> bool:
        """Whether this incompatibility proves the root cannot be solved.

        True for no terms at all, or a single term on the root package.
        """
        return not self.terms or (
            len(self.terms) == 1 and self.terms[0].package == root
        )

    def __str__(self) -> str:
        body = ", ".join(str(term) for term in self.terms)
        return f"#{self.id} {{{body}}} ({self.cause})"


def normalize_terms(
    terms: Iterable[Term], root: str | None = None, derived: bool = False
) -> tuple[Term, ...]:
    """Merge terms on the same package and drop redundant root terms.

    Terms on one package are combined with ``Term.intersect``. For learned
    incompatibilities with more than one term, positive root terms are
    dropped: the root is always selected, so they add nothing.
    """
    merged: dict[str, Term] = {}
    for term in terms:
        existing = merged.get(term.package)
        merged[term.package] = term if existing is None else existing.intersect(term)

    result = tuple(merged.values())
    if derived and root is not None and len(result) != 1:
        result = tuple(t for t in result if not (t.positive and t.package == root))
    return result
