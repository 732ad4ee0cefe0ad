"""The partial solution: the solver's current best guess.

An ordered log of assignments. Decisions pick a concrete version and open a
new decision level; derivations are terms forced by unit propagation and
remember the incompatibility that forced them. Backjumping truncates the
log to an earlier level; nothing is ever edited in place.

For every package the log is also folded into one accumulated term (the
intersection of all its assignments), which is what relation queries use.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pubgrub.core.solver.incompatibility import Incompatibility
from pubgrub.core.solver.term import Term, TermRelation
from pubgrub.core.version import Version, VersionSet
from pubgrub.exceptions import InternalInvariantViolation


class IncompatibilityRelation(enum.Enum):
    """How an incompatibility relates to the partial solution."""

    SATISFIED = "satisfied"
    ALMOST_SATISFIED = "almost_satisfied"
    CONTRADICTED = "contradicted"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class Assignment:
    """A term in the partial solution plus its bookkeeping.

    Attributes:
        term: The asserted term.
        decision_level: Level the assignment was made at.
        index: Position in the assignment log.
        cause: The incompatibility that forced a derivation; None for decisions.
    """

    term: Term
    decision_level: int
    index: int
    cause: Incompatibility | None = None

    @classmethod
    def decision(
        cls, package: str, version: Version, decision_level: int, index: int
    ) -> Assignment:
        return cls(Term(package, VersionSet.exact(version)), decision_level, index)

    @classmethod
    def derivation(
        cls, term: Term, cause: Incompatibility, decision_level: int, index: int
    ) -> Assignment:
        return cls(term, decision_level, index, cause=cause)

    @property
    def package(self) -> str:
        return self.term.package

    @property
    def is_decision(self) -> bool:
        return self.cause is None

    def __str__(self) -> str:
        kind = "decision" if self.is_decision else f"derived from #{self.cause.id}"
        return f"[{self.index}] {self.term} @{self.decision_level} ({kind})"


class PartialSolution:
    """Assignment log for one solve, seeded with the root decision at level 0.

    Args:
        root: Root package name.
        root_version: Root package version.
    """

    def __init__(self, root: str, root_version: Version) -> None:
        self._assignments: list[Assignment] = []
        self._decisions: dict[str, Version] = {}
        # Intersection of every assignment's term, per package.
        self._terms: dict[str, Term] = {}
        self._decision_level = 0
        # Distinct solutions attempted so far; bumped on the first decision
        # after a backjump.
        self._attempted_solutions = 1
        self._backtracking = False

        self._decisions[root] = root_version
        self._assign(Assignment.decision(root, root_version, 0, 0))

    @property
    def decision_level(self) -> int:
        return self._decision_level

    @property
    def attempted_solutions(self) -> int:
        return self._attempted_solutions

    @property
    def assignments(self) -> tuple[Assignment, ...]:
        return tuple(self._assignments)

    @property
    def decisions(self) -> dict[str, Version]:
        return dict(self._decisions)

    def term_for(self, package: str) -> Term | None:
        """The accumulated term for *package*, or None if nothing is known."""
        return self._terms.get(package)

    def unsatisfied(self) -> list[Term]:
        """Positive accumulated terms whose package has no decision yet, by name."""
        return [
            self._terms[name]
            for name in sorted(self._terms)
            if self._terms[name].positive and name not in self._decisions
        ]

    # -- mutation -----------------------------------------------------------

    def decide(self, package: str, version: Version) -> None:
        """Record a decision for *package* at a new decision level."""
        if package in self._decisions:
            raise InternalInvariantViolation(f"{package} is already decided")
        if self._backtracking:
            self._attempted_solutions += 1
        self._backtracking = False
        self._decision_level += 1
        self._decisions[package] = version
        self._assign(
            Assignment.decision(package, version, self._decision_level, len(self._assignments))
        )

    def derive(self, term: Term, cause: Incompatibility) -> None:
        """Record a term forced by *cause* at the current decision level."""
        self._assign(
            Assignment.derivation(term, cause, self._decision_level, len(self._assignments))
        )

    def backtrack(self, decision_level: int) -> None:
        """Drop every assignment made above *decision_level*."""
        if not 0 <= decision_level <= self._decision_level:
            raise InternalInvariantViolation(
                f"Cannot backtrack to level {decision_level} from {self._decision_level}"
            )
        self._backtracking = True

        packages: set[str] = set()
        while self._assignments[-1].decision_level > decision_level:
            removed = self._assignments.pop()
            packages.add(removed.package)
            if removed.is_decision:
                del self._decisions[removed.package]
        self._decision_level = decision_level

        for package in packages:
            self._terms.pop(package, None)
        for assignment in self._assignments:
            if assignment.package in packages:
                self._register(assignment)

    def _assign(self, assignment: Assignment) -> None:
        self._assignments.append(assignment)
        self._register(assignment)

    def _register(self, assignment: Assignment) -> None:
        existing = self._terms.get(assignment.package)
        self._terms[assignment.package] = (
            assignment.term if existing is None else existing.intersect(assignment.term)
        )

    # -- queries ------------------------------------------------------------

    def relation(self, term: Term) -> TermRelation:
        """How the accumulated knowledge about *term*'s package relates to it."""
        known = self._terms.get(term.package)
        if known is None:
            return TermRelation.INCONCLUSIVE
        return known.relation(term)

    def satisfies(self, term: Term) -> bool:
        return self.relation(term) is TermRelation.SATISFIES

    def check(
        self, incompatibility: Incompatibility
    ) -> tuple[IncompatibilityRelation, Term | None]:
        """Relate *incompatibility* to the current solution.

        Returns:
            The relation, plus the one unsatisfied term when the relation is
            ALMOST_SATISFIED (None otherwise).
        """
        unsatisfied: Term | None = None
        for term in incompatibility.terms:
            relation = self.relation(term)
            if relation is TermRelation.CONTRADICTS:
                return IncompatibilityRelation.CONTRADICTED, None
            if relation is TermRelation.INCONCLUSIVE:
                if unsatisfied is not None:
                    return IncompatibilityRelation.INCONCLUSIVE, None
                unsatisfied = term
        if unsatisfied is None:
            return IncompatibilityRelation.SATISFIED, None
        return IncompatibilityRelation.ALMOST_SATISFIED, unsatisfied

    def satisfier(self, term: Term) -> Assignment:
        """The earliest assignment after which the log satisfies *term*.

        Raises:
            InternalInvariantViolation: If the whole log does not satisfy *term*.
        """
        accumulated: Term | None = None
        for assignment in self._assignments:
            if assignment.package != term.package:
                continue
            accumulated = (
                assignment.term
                if accumulated is None
                else accumulated.intersect(assignment.term)
            )
            if accumulated.satisfies(term):
                return assignment
        raise InternalInvariantViolation(f"{term} is not satisfied by the partial solution")

    def __str__(self) -> str:
        return "\n".join(str(a) for a in self._assignments)
