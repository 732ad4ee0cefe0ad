"""PubGrub version solving.

This package implements the conflict-driven PubGrub algorithm over the
version set algebra in ``pubgrub.core.version``. All public names are
re-exported here, so ``from pubgrub.core.solver import solve`` works.

The package is split into focused submodules:

- ``term``: ``Term`` and the three-valued ``TermRelation``.
- ``incompatibility``: ``Incompatibility`` and its cause variants.
- ``derivation``: ``DerivationGraph``, the arena of incompatibilities.
- ``partial_solution``: ``PartialSolution`` and ``Assignment``.
- ``solver``: ``VersionSolver``, ``SolverOptions`` and ``solve``.
- ``result``: ``Solved`` and ``Failed`` outcomes.
"""

from pubgrub.core.solver.derivation import DerivationGraph
from pubgrub.core.solver.incompatibility import (
    Cause,
    ConflictDerived,
    Dependency,
    Incompatibility,
    NoVersionsAvailable,
    PackageUnavailable,
    RootDependency,
)
from pubgrub.core.solver.partial_solution import (
    Assignment,
    IncompatibilityRelation,
    PartialSolution,
)
from pubgrub.core.solver.result import Failed, Solved, SolverResult
from pubgrub.core.solver.solver import SolverOptions, VersionSolver, solve
from pubgrub.core.solver.term import Term, TermRelation

__all__ = [
    "Assignment",
    "Cause",
    "ConflictDerived",
    "Dependency",
    "DerivationGraph",
    "Failed",
    "Incompatibility",
    "IncompatibilityRelation",
    "NoVersionsAvailable",
    "PackageUnavailable",
    "PartialSolution",
    "RootDependency",
    "Solved",
    "SolverOptions",
    "SolverResult",
    "Term",
    "TermRelation",
    "VersionSolver",
    "solve",
]
