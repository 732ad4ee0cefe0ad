"""Version values: dot-separated sequences of non-negative integers.

Versions may have any number of components. Ordering is lexicographic,
component by component, with missing trailing components treated as zero,
so ``1.2`` and ``1.2.0`` are the same version. Pre-release and build
metadata are not supported.
"""

from __future__ import annotations

import re
from functools import total_ordering

from pubgrub.exceptions import ConstraintParseError

_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*$")


def _strip_zeros(parts: tuple[int, ...]) -> tuple[int, ...]:
    end = len(parts)
    while end and parts[end - 1] == 0:
        end -= 1
    return parts[:end]


@total_ordering
class Version:
    """An immutable version number.

    The components are kept as written for display; comparison and hashing
    use the components with trailing zeros removed.
    """

    __slots__ = ("_parts", "_key")

    def __init__(self, *parts: int) -> None:
        if not parts:
            parts = (0,)
        for part in parts:
            if not isinstance(part, int) or isinstance(part, bool) or part < 0:
                raise ValueError(f"Invalid version component: {part!r}")
        self._parts: tuple[int, ...] = tuple(parts)
        self._key: tuple[int, ...] = _strip_zeros(self._parts)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``"1.2.3"`` style text.

        Raises:
            ConstraintParseError: If *text* is not dot-separated integers.
        """
        stripped = text.strip()
        if not _VERSION_RE.match(stripped):
            raise ConstraintParseError(f"Invalid version: {text!r}")
        return cls(*(int(part) for part in stripped.split(".")))

    @classmethod
    def zero(cls) -> Version:
        """The smallest version."""
        return cls(0)

    @property
    def parts(self) -> tuple[int, ...]:
        return self._parts

    @property
    def is_zero(self) -> bool:
        return not self._key

    def bump(self, index: int) -> Version:
        """Increment component *index* and zero the components after it.

        ``Version(1, 2, 3).bump(0)`` is ``2.0.0`` and ``.bump(1)`` is ``1.3.0``.
        """
        parts = list(self._parts) + [0] * (index + 1 - len(self._parts))
        parts[index] += 1
        return Version(*parts[: index + 1], *[0] * (len(parts) - index - 1))

    def next_caret(self) -> Version:
        """Exclusive upper bound of ``^self``.

        Bumps the leading non-zero component; an all-zero version bumps its
        last written component.
        """
        for index, part in enumerate(self._parts):
            if part != 0:
                return self.bump(index)
        return self.bump(len(self._parts) - 1)

    def next_tilde(self) -> Version:
        """Exclusive upper bound of ``~self``: bump the minor component."""
        if len(self._parts) < 2:
            return self.bump(0)
        return self.bump(1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return ".".join(str(part) for part in self._parts)

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"
