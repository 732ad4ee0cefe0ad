"""Constraint string parsing.

Turns registry constraint strings into ``VersionSet`` values. Supported
syntax:

- Exact match: ``1.2.3`` or ``==1.2.3``
- Caret (compatible with the leading non-zero component): ``^1.2.3``
- Tilde (compatible with the leading two components): ``~1.2.3``
- Inequalities: ``>=1.0.0``, ``>1.0.0``, ``<=2.0.0``, ``<2.0.0``
- Wildcard (any version): ``*``
- Compound (comma-separated, all must hold): ``>=1.0.0, <2.0.0``

Anything else raises ``ConstraintParseError``; malformed text never reaches
the version set algebra.
"""

from __future__ import annotations

import re

from pubgrub.core.version.ranges import VersionSet
from pubgrub.core.version.version import Version
from pubgrub.exceptions import ConstraintParseError

_CONSTRAINT_ATOM_RE = re.compile(
    r"^\s*(?P<op>==|>=|<=|>|<|\^|~)?\s*(?P<ver>\d+(?:\.\d+)*)\s*$"
)


def parse_version(text: str) -> Version:
    """Parse a version string such as ``"1.2.3"``."""
    return Version.parse(text)


def parse_constraint(text: str) -> VersionSet:
    """Parse a constraint string into the set of versions it allows.

    Args:
        text: Constraint as written in a registry (e.g. ``"^1.0.0"``).

    Returns:
        The allowed ``VersionSet``.

    Raises:
        ConstraintParseError: If *text* or any comma-separated atom is malformed.
    """
    if not isinstance(text, str) or not text.strip():
        raise ConstraintParseError(f"Empty constraint: {text!r}")

    result = VersionSet.any()
    for atom in text.split(","):
        result = result.intersect(_parse_atom(atom, text))
    return result


def _parse_atom(atom: str, constraint: str) -> VersionSet:
    if atom.strip() == "*":
        return VersionSet.any()

    m = _CONSTRAINT_ATOM_RE.match(atom)
    if not m:
        raise ConstraintParseError(
            f"Invalid constraint atom {atom.strip()!r} in {constraint!r}"
        )

    op = m.group("op")
    version = Version.parse(m.group("ver"))

    if op is None or op == "==":
        return VersionSet.exact(version)
    elif op == "^":
        return VersionSet.caret(version)
    elif op == "~":
        return VersionSet.tilde(version)
    elif op == ">=":
        return VersionSet.range(min=version, include_min=True)
    elif op == ">":
        return VersionSet.range(min=version, include_min=False)
    elif op == "<=":
        return VersionSet.range(max=version, include_max=True)
    elif op == "<":
        return VersionSet.range(max=version, include_max=False)
    else:  # pragma: no cover
        raise ConstraintParseError(f"Unknown operator: {op!r}")
