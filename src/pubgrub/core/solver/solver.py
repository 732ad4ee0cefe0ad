"""PubGrub version solver.

The solver alternates between two phases until it either selects a version
for every required package or derives an incompatibility that rules out the
root:

1. **Unit propagation** derives every term forced by the known
   incompatibilities. An incompatibility whose terms are all satisfied is a
   conflict; conflict resolution learns a new incompatibility from it and
   backjumps to the earliest decision level it implicates.
2. **Decision making** picks an undecided package (fewest candidate versions
   first, then by name), selects its newest allowed version and registers
   that version's dependencies as incompatibilities.

Registry gaps are turned into incompatibilities, so an unsolvable graph
always ends in a ``Failed`` result with a full derivation rather than an
exception.

References
----------
.. [PubGrub] Weizenbaum, N. (2018). "PubGrub: Next-Generation Version
   Solving." https://github.com/dart-lang/pub/blob/master/doc/solver.md
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass

from pubgrub.core.solver.derivation import DerivationGraph
from pubgrub.core.solver.incompatibility import (
    ConflictDerived,
    Dependency,
    Incompatibility,
    NoVersionsAvailable,
    PackageUnavailable,
    RootDependency,
    normalize_terms,
)
from pubgrub.core.solver.partial_solution import (
    IncompatibilityRelation,
    PartialSolution,
)
from pubgrub.core.solver.result import Failed, Solved, SolverResult
from pubgrub.core.solver.term import Term
from pubgrub.core.version import Version, VersionSet, parse_constraint
from pubgrub.exceptions import (
    InternalInvariantViolation,
    RegistryLookupError,
    SolverAborted,
    Unsatisfiable,
)
from pubgrub.registry.base import Registry

logger = logging.getLogger(__name__)


@dataclass
class SolverOptions:
    """Caller-supplied limits for one solve.

    Attributes:
        max_steps: Stop with ``SolverAborted`` after this many loop
            iterations. None means unbounded.
        abort: Event checked between loop iterations; once set, the solve
            stops with ``SolverAborted``.
    """

    max_steps: int | None = None
    abort: threading.Event | None = None


class VersionSolver:
    """Conflict-driven version solver for a single root package.

    One instance solves once; independent solves need independent
    instances. Only the registry may be shared between them.

    Args:
        registry: Source of versions and dependencies.
        root: Root package name.
        root_version: Root package version (a ``Version`` or a string).
        options: Optional step bound and abort signal.
    """

    def __init__(
        self,
        registry: Registry,
        root: str,
        root_version: Version | str,
        options: SolverOptions | None = None,
    ) -> None:
        if isinstance(root_version, str):
            root_version = Version.parse(root_version)
        self._registry = registry
        self._root = root
        self._root_version = root_version
        self._options = options or SolverOptions()
        self._graph = DerivationGraph(root)
        self._solution = PartialSolution(root, root_version)
        # Active incompatibilities, indexed by every package they mention.
        self._incompatibilities: dict[str, list[Incompatibility]] = {}
        # Term sets of every incompatibility learned by conflict resolution.
        self._learned: set[frozenset[Term]] = set()
        self._dependencies: dict[tuple[str, Version], list[Incompatibility]] = {}
        self._steps = 0
        self._solved = False

    @property
    def graph(self) -> DerivationGraph:
        return self._graph

    @property
    def solution(self) -> PartialSolution:
        return self._solution

    def solve(self) -> SolverResult:
        """Run the solver to completion.

        Returns:
            ``Solved`` with the package -> version mapping, or ``Failed``
            with the failure incompatibility and its derivation graph.

        Raises:
            ConstraintParseError: If the registry returns a malformed constraint.
            InternalInvariantViolation: On a solver bug.
            SolverAborted: If the abort signal or step bound fires.
        """
        if self._solved:
            raise InternalInvariantViolation("VersionSolver.solve() may only run once")
        self._solved = True

        start = time.time()
        logger.debug("Solving %s %s", self._root, self._root_version)
        self._dependency_incompatibilities(self._root, self._root_version)

        next_package: str | None = self._root
        try:
            while next_package is not None:
                self._check_abort()
                self._propagate(next_package)
                next_package = self._choose_package_version()
        except Unsatisfiable as exc:
            logger.info(
                "Version solving failed for %s %s after %d attempts (%.3fs)",
                self._root, self._root_version,
                self._solution.attempted_solutions, time.time() - start,
            )
            return Failed(
                incompatibility=exc.incompatibility,
                graph=self._graph,
                attempted_solutions=self._solution.attempted_solutions,
            )

        decisions = self._solution.decisions
        logger.info(
            "Solved %s %s with %d packages after %d attempts (%.3fs)",
            self._root, self._root_version, len(decisions),
            self._solution.attempted_solutions, time.time() - start,
        )
        return Solved(
            solution=decisions,
            attempted_solutions=self._solution.attempted_solutions,
            incompatibility_count=len(self._graph),
        )

    # -- unit propagation ---------------------------------------------------

    def _propagate(self, package: str) -> None:
        """Derive every term forced by the active incompatibilities.

        Starts from *package* and follows each package whose accumulated
        term changes, until no incompatibility forces anything new.
        """
        changed: deque[str] = deque([package])
        queued = {package}
        while changed:
            package = changed.popleft()
            queued.discard(package)

            # Newest first: learned incompatibilities tend to be the most general.
            for incompatibility in reversed(list(self._incompatibilities.get(package, ()))):
                relation, unsatisfied = self._solution.check(incompatibility)
                if relation is IncompatibilityRelation.SATISFIED:
                    learned = self._resolve_conflict(incompatibility)
                    derived = self._derive_from(learned)
                    changed.clear()
                    queued.clear()
                    changed.append(derived)
                    queued.add(derived)
                    break
                if relation is IncompatibilityRelation.ALMOST_SATISFIED:
                    if unsatisfied is None:
                        raise InternalInvariantViolation(f"{incompatibility} has no unsatisfied term")
                    self._derive(unsatisfied.negate(), incompatibility)
                    if unsatisfied.package not in queued:
                        changed.append(unsatisfied.package)
                        queued.add(unsatisfied.package)

    def _derive(self, term: Term, cause: Incompatibility) -> None:
        logger.debug("Derived %s (level %d, from #%d)", term, self._solution.decision_level, cause.id)
        self._solution.derive(term, cause)

    def _derive_from(self, learned: Incompatibility) -> str:
        relation, unsatisfied = self._solution.check(learned)
        if relation is not IncompatibilityRelation.ALMOST_SATISFIED or unsatisfied is None:
            raise InternalInvariantViolation(
                f"Learned incompatibility {learned} is {relation.value} after backjump"
            )
        self._derive(unsatisfied.negate(), learned)
        return unsatisfied.package

    # -- conflict resolution ------------------------------------------------

    def _resolve_conflict(self, incompatibility: Incompatibility) -> Incompatibility:
        """Learn from a satisfied incompatibility and backjump.

        Repeatedly resolves *incompatibility* against the cause of its most
        recent satisfier until it is unit at an earlier decision level, then
        backtracks to that level.

        Returns:
            The incompatibility to propagate after backjumping.

        Raises:
            Unsatisfiable: If the root itself is ruled out.
        """
        logger.debug("Conflict: %s", incompatibility)
        learned_new = False
        while not incompatibility.is_failure(self._root):
            most_recent_term: Term | None = None
            most_recent_satisfier = None
            difference: Term | None = None
            previous_satisfier_level = 0

            for term in incompatibility.terms:
                satisfier = self._solution.satisfier(term)
                if most_recent_satisfier is None:
                    most_recent_term, most_recent_satisfier = term, satisfier
                elif most_recent_satisfier.index < satisfier.index:
                    previous_satisfier_level = max(
                        previous_satisfier_level, most_recent_satisfier.decision_level
                    )
                    most_recent_term, most_recent_satisfier = term, satisfier
                    difference = None
                else:
                    previous_satisfier_level = max(
                        previous_satisfier_level, satisfier.decision_level
                    )

                if most_recent_term == term:
                    # The satisfier may only cover part of the term; whatever
                    # covers the rest bounds how far we can jump back.
                    difference = most_recent_satisfier.term.difference(most_recent_term)
                    if difference is not None:
                        previous_satisfier_level = max(
                            previous_satisfier_level,
                            self._solution.satisfier(difference.negate()).decision_level,
                        )

            if most_recent_satisfier is None or most_recent_term is None:
                raise InternalInvariantViolation(f"Conflict {incompatibility} has no terms to resolve")
            if (
                previous_satisfier_level < most_recent_satisfier.decision_level
                or most_recent_satisfier.is_decision
            ):
                logger.debug(
                    "Backjumping from level %d to %d",
                    self._solution.decision_level, previous_satisfier_level,
                )
                self._solution.backtrack(previous_satisfier_level)
                if learned_new:
                    self._learn(incompatibility)
                return incompatibility

            cause = most_recent_satisfier.cause
            if cause is None:
                raise InternalInvariantViolation(
                    f"Decision {most_recent_satisfier} cannot be resolved against"
                )
            new_terms = [t for t in incompatibility.terms if t != most_recent_term]
            new_terms.extend(t for t in cause.terms if t.package != most_recent_satisfier.package)
            if difference is not None:
                new_terms.append(difference.negate())

            incompatibility = self._graph.add(
                new_terms, ConflictDerived(incompatibility.id, cause.id)
            )
            learned_new = True
            logger.debug("Learned %s", incompatibility)

        raise Unsatisfiable(incompatibility)

    def _learn(self, incompatibility: Incompatibility) -> None:
        key = frozenset(incompatibility.terms)
        if key in self._learned:
            raise InternalInvariantViolation(
                f"Incompatibility #{incompatibility.id} {incompatibility} was already learned"
            )
        self._learned.add(key)
        self._add_incompatibility(incompatibility)

    def _add_incompatibility(self, incompatibility: Incompatibility) -> None:
        for package in incompatibility.packages:
            self._incompatibilities.setdefault(package, []).append(incompatibility)

    # -- decision making ----------------------------------------------------

    def _choose_package_version(self) -> str | None:
        """Decide on one undecided package.

        Returns:
            The package to propagate from next, or None when every required
            package has a decision (the solve is complete).
        """
        unsatisfied = self._solution.unsatisfied()
        if not unsatisfied:
            return None

        term = min(unsatisfied, key=lambda t: (self._candidate_count(t), t.package))
        package = term.package

        try:
            version = self._registry.best_version(package, term.versions)
        except RegistryLookupError as exc:
            logger.debug("Registry lookup failed: %s", exc)
            self._add_incompatibility(
                self._graph.add([Term(package, VersionSet.any())], PackageUnavailable(package))
            )
            return package

        if version is None:
            self._add_incompatibility(
                self._graph.add([term], NoVersionsAvailable(package))
            )
            return package

        # If selecting this version would immediately conflict with one of
        # its own dependencies, leave it undecided; propagation will rule it
        # out and steer the next decision elsewhere.
        conflict = False
        for incompatibility in self._dependency_incompatibilities(package, version):
            conflict = conflict or all(
                t.package == package or self._solution.satisfies(t)
                for t in incompatibility.terms
            )

        if not conflict:
            self._solution.decide(package, version)
            logger.debug("Selecting %s %s (level %d)", package, version, self._solution.decision_level)
        return package

    def _candidate_count(self, term: Term) -> int:
        try:
            return len(self._registry.candidates(term.package, term.versions))
        except RegistryLookupError:
            return 0

    def _dependency_incompatibilities(
        self, package: str, version: Version
    ) -> list[Incompatibility]:
        """Incompatibilities for *package* at *version*'s dependencies.

        Built and activated the first time a version is considered; later
        calls return the same objects.
        """
        key = (package, version)
        cached = self._dependencies.get(key)
        if cached is not None:
            return cached

        depender = Term(package, VersionSet.exact(version))
        try:
            dependencies = self._registry.dependencies_of(package, version)
        except RegistryLookupError as exc:
            logger.debug("Registry lookup failed: %s", exc)
            built = [self._graph.add([depender], PackageUnavailable(package))]
        else:
            cause = (
                RootDependency(package, version)
                if package == self._root
                else Dependency(package, version)
            )
            built = []
            for name in sorted(dependencies):
                terms = normalize_terms(
                    [depender, Term(name, parse_constraint(dependencies[name]), positive=False)]
                )
                # A package depending on itself with a constraint it meets
                # collapses to an empty positive term that can never hold.
                if any(t.positive and t.versions.is_empty() for t in terms):
                    continue
                built.append(self._graph.add(terms, cause))

        for incompatibility in built:
            self._add_incompatibility(incompatibility)
        self._dependencies[key] = built
        return built

    def _check_abort(self) -> None:
        self._steps += 1
        abort = self._options.abort
        if abort is not None and abort.is_set():
            raise SolverAborted(f"Solve of {self._root} aborted by caller")
        max_steps = self._options.max_steps
        if max_steps is not None and self._steps > max_steps:
            raise SolverAborted(f"Solve of {self._root} exceeded {max_steps} steps")


def solve(
    registry: Registry,
    root: str,
    root_version: Version | str,
    options: SolverOptions | None = None,
) -> SolverResult:
    """Resolve *root* at *root_version* against *registry*.

    Convenience wrapper around ``VersionSolver(...).solve()``.
    """
    return VersionSolver(registry, root, root_version, options).solve()
