"""Outcomes of a solve.

A solve either produces a ``Solved`` mapping of package to version, or a
``Failed`` result holding the failure incompatibility together with the
derivation graph it was learned in, enough for a caller to render a proof of
why no solution exists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pubgrub.core.solver.derivation import DerivationGraph
from pubgrub.core.solver.incompatibility import Incompatibility
from pubgrub.core.version import Version


@dataclass(frozen=True)
class Solved:
    """A successful resolution.

    Attributes:
        solution: package name -> selected version, root included.
        attempted_solutions: Number of distinct partial solutions tried.
        incompatibility_count: Size of the derivation graph at the end.
    """

    solution: dict[str, Version] = field(default_factory=dict)
    attempted_solutions: int = 1
    incompatibility_count: int = 0

    @property
    def success(self) -> bool:
        return True

    def as_strings(self) -> dict[str, str]:
        """The solution with versions rendered as strings, sorted by name."""
        return {name: str(self.solution[name]) for name in sorted(self.solution)}


@dataclass(frozen=True)
class Failed:
    """A proof that the root cannot be resolved.

    Attributes:
        incompatibility: The terminal failure incompatibility.
        graph: The derivation graph it belongs to.
        attempted_solutions: Number of distinct partial solutions tried.
    """

    incompatibility: Incompatibility
    graph: DerivationGraph
    attempted_solutions: int = 1

    @property
    def success(self) -> bool:
        return False

    def root_causes(self) -> list[Incompatibility]:
        """External facts (dependencies, registry gaps) behind the failure."""
        return self.graph.external_causes(self.incompatibility)

    def derivation(self) -> list[Incompatibility]:
        """Every incompatibility in the proof, parents before children."""
        return self.graph.derivation(self.incompatibility)

    def __str__(self) -> str:
        return f"Version solving failed: {self.incompatibility}"


SolverResult = Union[Solved, Failed]
