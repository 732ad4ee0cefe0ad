"""Terms: statements about the selected version of one package.

A positive term ``foo ^1.0.0`` asserts that foo is selected and its version
lies in the set. A negative term ``not foo ^1.0.0`` asserts the opposite,
which includes foo not being selected at all. That asymmetry is why the
relation table below is not a plain set comparison.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from pubgrub.core.version import VersionSet, parse_constraint
from pubgrub.exceptions import ConstraintParseError

_TERM_RE = re.compile(r"^\s*(?P<neg>not\s+)?(?P<package>[^\s]+)(?:\s+(?P<constraint>.+?))?\s*$")


class TermRelation(enum.Enum):
    """How an accumulated term relates to another term on the same package."""

    SATISFIES = "satisfies"
    CONTRADICTS = "contradicts"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class Term:
    """A (package, version set, polarity) triple.

    Attributes:
        package: Package name.
        versions: The version set the term talks about.
        positive: True for "version is in versions", False for "is not".
    """

    package: str
    versions: VersionSet
    positive: bool = True

    @classmethod
    def parse(cls, text: str) -> Term:
        """Parse ``"foo ^1.0.0"`` or ``"not foo 1.0.0"``.

        A missing constraint means any version.

        Raises:
            ConstraintParseError: If the text or its constraint is malformed.
        """
        m = _TERM_RE.match(text)
        if not m:
            raise ConstraintParseError(f"Invalid term: {text!r}")
        constraint = m.group("constraint")
        versions = parse_constraint(constraint) if constraint else VersionSet.any()
        return cls(m.group("package"), versions, positive=m.group("neg") is None)

    def negate(self) -> Term:
        return Term(self.package, self.versions, not self.positive)

    def intersect(self, other: Term) -> Term:
        """Combine two terms on the same package into one.

        The result is positive unless both inputs are negative.
        """
        self._check_package(other)
        if self.positive and other.positive:
            return Term(self.package, self.versions.intersect(other.versions))
        if self.positive:
            return Term(self.package, self.versions.difference(other.versions))
        if other.positive:
            return Term(self.package, other.versions.difference(self.versions))
        return Term(self.package, self.versions.union(other.versions), positive=False)

    def difference(self, other: Term) -> Term | None:
        """Everything self allows that *other* does not; None if nothing."""
        result = self.intersect(other.negate())
        if result.positive and result.versions.is_empty():
            return None
        return result

    def relation(self, other: Term) -> TermRelation:
        """Classify *other* against self, treating self as what is known.

        Exactly one relation is returned; SATISFIES is checked first.
        """
        self._check_package(other)
        mine, theirs = self.versions, other.versions
        if self.positive:
            if other.positive:
                if mine.subset_of(theirs):
                    return TermRelation.SATISFIES
                if mine.is_disjoint(theirs):
                    return TermRelation.CONTRADICTS
            else:
                if mine.is_disjoint(theirs):
                    return TermRelation.SATISFIES
                if mine.subset_of(theirs):
                    return TermRelation.CONTRADICTS
            return TermRelation.INCONCLUSIVE

        # A negative term still allows "not selected", which a positive term
        # never does, so it can never satisfy one.
        if other.positive:
            if theirs.subset_of(mine):
                return TermRelation.CONTRADICTS
        elif theirs.subset_of(mine):
            return TermRelation.SATISFIES
        return TermRelation.INCONCLUSIVE

    def satisfies(self, other: Term) -> bool:
        return self.relation(other) is TermRelation.SATISFIES

    def _check_package(self, other: Term) -> None:
        if other.package != self.package:
            raise ValueError(
                f"Cannot combine terms for {self.package!r} and {other.package!r}"
            )

    def __str__(self) -> str:
        prefix = "" if self.positive else "not "
        return f"{prefix}{self.package} {self.versions}"
