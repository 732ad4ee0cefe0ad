"""Version set algebra.

A ``VersionSet`` is a finite union of disjoint intervals over versions, kept
in a normal form: ranges sorted by lower bound, each non-empty, none
overlapping or touching another. Every operation returns a set in normal
form, so equality and hashing are plain structural comparisons.

Bound conventions
-----------------
``None`` as a lower or upper bound means unbounded on that side. An
unbounded edge is never inclusive, and an inclusive lower bound at the zero
version is rewritten to "no lower bound" (nothing sorts below zero), so the
same set always has the same representation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from pubgrub.core.version.version import Version


# ---------------------------------------------------------------------------
# VersionRange: a single interval
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VersionRange:
    """A single interval of versions.

    Attributes:
        min: Lower bound, or None for unbounded.
        max: Upper bound, or None for unbounded.
        include_min: Whether ``min`` itself is in the range.
        include_max: Whether ``max`` itself is in the range.
    """

    min: Version | None = None
    max: Version | None = None
    include_min: bool = False
    include_max: bool = False

    def __post_init__(self) -> None:
        if self.min is not None and self.include_min and self.min.is_zero:
            object.__setattr__(self, "min", None)
        if self.min is None:
            object.__setattr__(self, "include_min", False)
        if self.max is None:
            object.__setattr__(self, "include_max", False)

    @property
    def is_empty(self) -> bool:
        if self.max is not None and self.max.is_zero and not self.include_max:
            return True
        if self.min is None or self.max is None:
            return False
        if self.min > self.max:
            return True
        return self.min == self.max and not (self.include_min and self.include_max)

    @property
    def is_universal(self) -> bool:
        return self.min is None and self.max is None

    def contains(self, version: Version) -> bool:
        if self.min is not None:
            if version < self.min or (version == self.min and not self.include_min):
                return False
        if self.max is not None:
            if version > self.max or (version == self.max and not self.include_max):
                return False
        return True

    def intersect(self, other: VersionRange) -> VersionRange:
        lower = max(self, other, key=_lower_key)
        upper = min(self, other, key=_upper_key)
        return VersionRange(lower.min, upper.max, lower.include_min, upper.include_max)

    def touches(self, other: VersionRange) -> bool:
        """Whether *other*, starting at or after self, overlaps or abuts self."""
        if self.max is None or other.min is None:
            return True
        if other.min < self.max:
            return True
        return other.min == self.max and (self.include_max or other.include_min)

    def __str__(self) -> str:
        if self.is_universal:
            return "*"
        if (
            self.min is not None
            and self.min == self.max
            and self.include_min
            and self.include_max
        ):
            return str(self.min)
        if self.min is None and self.max is not None and self.max.is_zero and self.include_max:
            return str(self.max)
        parts = []
        if self.min is not None:
            parts.append(f"{'>=' if self.include_min else '>'}{self.min}")
        if self.max is not None:
            parts.append(f"{'<=' if self.include_max else '<'}{self.max}")
        return ", ".join(parts)


def _lower_key(r: VersionRange) -> tuple:
    # Unbounded sorts first; at the same version an inclusive edge starts earlier.
    if r.min is None:
        return (0,)
    return (1, r.min, 0 if r.include_min else 1)


def _upper_key(r: VersionRange) -> tuple:
    # Unbounded sorts last; at the same version an inclusive edge ends later.
    if r.max is None:
        return (1,)
    return (0, r.max, 1 if r.include_max else 0)


def _normalize(ranges: Iterable[VersionRange]) -> tuple[VersionRange, ...]:
    pending = sorted((r for r in ranges if not r.is_empty), key=_lower_key)
    merged: list[VersionRange] = []
    for current in pending:
        if merged and merged[-1].touches(current):
            last = merged[-1]
            upper = max(last, current, key=_upper_key)
            merged[-1] = VersionRange(
                last.min, upper.max, last.include_min, upper.include_max
            )
        else:
            merged.append(current)
    return tuple(merged)


# ---------------------------------------------------------------------------
# VersionSet: a union of disjoint ranges
# ---------------------------------------------------------------------------


class VersionSet:
    """An immutable set of versions in normal form.

    Build sets with the class-method constructors rather than by passing
    ranges directly; the constructor normalises whatever it is given.
    """

    __slots__ = ("_ranges",)

    def __init__(self, ranges: Iterable[VersionRange] = ()) -> None:
        self._ranges: tuple[VersionRange, ...] = _normalize(ranges)

    # -- constructors -------------------------------------------------------

    @classmethod
    def empty(cls) -> VersionSet:
        return cls()

    @classmethod
    def any(cls) -> VersionSet:
        return cls((VersionRange(),))

    @classmethod
    def exact(cls, version: Version) -> VersionSet:
        return cls((VersionRange(version, version, True, True),))

    @classmethod
    def range(
        cls,
        min: Version | None = None,
        max: Version | None = None,
        include_min: bool = True,
        include_max: bool = False,
    ) -> VersionSet:
        """A single interval; defaults to ``[min, max)``."""
        return cls((VersionRange(min, max, include_min, include_max),))

    @classmethod
    def caret(cls, version: Version) -> VersionSet:
        """``^version``: same leading non-zero component, at least *version*."""
        return cls.range(version, version.next_caret())

    @classmethod
    def tilde(cls, version: Version) -> VersionSet:
        """``~version``: same major and minor, at least *version*."""
        return cls.range(version, version.next_tilde())

    @classmethod
    def union_of(cls, sets: Iterable[VersionSet]) -> VersionSet:
        return cls(r for s in sets for r in s._ranges)

    # -- queries ------------------------------------------------------------

    @property
    def ranges(self) -> tuple[VersionRange, ...]:
        return self._ranges

    def is_empty(self) -> bool:
        return not self._ranges

    def is_universal(self) -> bool:
        return len(self._ranges) == 1 and self._ranges[0].is_universal

    def contains(self, version: Version) -> bool:
        return any(r.contains(version) for r in self._ranges)

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.contains(version)

    def select(self, versions: Iterable[Version]) -> list[Version]:
        """Return the members of *versions* that lie in this set, in order."""
        return [v for v in versions if self.contains(v)]

    def subset_of(self, other: VersionSet) -> bool:
        return self.difference(other).is_empty()

    def is_disjoint(self, other: VersionSet) -> bool:
        return self.intersect(other).is_empty()

    # -- algebra ------------------------------------------------------------

    def intersect(self, other: VersionSet) -> VersionSet:
        return VersionSet(
            a.intersect(b) for a in self._ranges for b in other._ranges
        )

    def union(self, other: VersionSet) -> VersionSet:
        return VersionSet(self._ranges + other._ranges)

    def complement(self) -> VersionSet:
        gaps: list[VersionRange] = []
        lower: Version | None = None
        include_lower = False
        for r in self._ranges:
            if r.min is not None or lower is not None:
                gaps.append(VersionRange(lower, r.min, include_lower, not r.include_min))
            if r.max is None:
                return VersionSet(gaps)
            lower, include_lower = r.max, not r.include_max
        gaps.append(VersionRange(lower, None, include_lower, False))
        return VersionSet(gaps)

    def difference(self, other: VersionSet) -> VersionSet:
        return self.intersect(other.complement())

    # -- dunder -------------------------------------------------------------

    def __iter__(self) -> Iterator[VersionRange]:
        return iter(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionSet):
            return NotImplemented
        return self._ranges == other._ranges

    def __hash__(self) -> int:
        return hash(self._ranges)

    def __str__(self) -> str:
        if not self._ranges:
            return "<empty>"
        return " || ".join(str(r) for r in self._ranges)

    def __repr__(self) -> str:
        return f"VersionSet({str(self)!r})"
