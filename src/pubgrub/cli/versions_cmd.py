"""``pubgrub versions <registry> <package>``: List a package's versions.

Optionally filters by a constraint, which is handy for checking what a
caret or tilde requirement actually allows.

Exit Codes:
    0: Versions listed (possibly none matching).
    2: Unknown package, or the registry file or constraint is invalid.
"""

from __future__ import annotations

import sys

import click

from pubgrub.cli.output import print_json, print_versions
from pubgrub.core.version import VersionSet, parse_constraint
from pubgrub.exceptions import ConstraintParseError, RegistryError
from pubgrub.registry import load_registry


@click.command("versions")
@click.argument("registry_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("package")
@click.option(
    "--constraint", "-c",
    default=None,
    help='Only list versions matching this constraint (e.g. "^1.0.0").',
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def versions_command(
    registry_file: str,
    package: str,
    constraint: str | None,
    output_format: str,
) -> None:
    """List the versions of PACKAGE in REGISTRY_FILE, newest first."""
    try:
        allowed = parse_constraint(constraint) if constraint else VersionSet.any()
        registry = load_registry(registry_file)
        versions = registry.candidates(package, allowed)
    except (RegistryError, ConstraintParseError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if output_format == "json":
        print_json({
            "package": package,
            "constraint": str(allowed),
            "versions": [str(v) for v in versions],
        })
    else:
        print_versions(package, versions)
