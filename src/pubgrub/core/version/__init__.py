"""Versions, version sets and constraint parsing.

All public names are re-exported here so callers can write
``from pubgrub.core.version import VersionSet``.
"""

from pubgrub.core.version.constraints import parse_constraint, parse_version
from pubgrub.core.version.ranges import VersionRange, VersionSet
from pubgrub.core.version.version import Version

__all__ = [
    "Version",
    "VersionRange",
    "VersionSet",
    "parse_constraint",
    "parse_version",
]
