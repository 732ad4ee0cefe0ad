"""``pubgrub solve <registry> <root> <version>``: Resolve a root package.

Loads a YAML/JSON registry file, runs the PubGrub solver for the root
package and prints the selected versions, or the derivation of why no
solution exists.

Exit Codes:
    0: A solution was found.
    1: The dependency graph is unsatisfiable.
    2: The registry file or a constraint in it could not be parsed, or the
        solve was aborted.
"""

from __future__ import annotations

import sys

import click

from pubgrub.cli.output import print_failure, print_json, print_solution, result_to_json
from pubgrub.core.solver import Solved, SolverOptions, solve
from pubgrub.exceptions import ConstraintParseError, RegistryError, SolverAborted
from pubgrub.registry import load_registry


@click.command("solve")
@click.argument("registry_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("root")
@click.argument("version")
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Abort after this many solver iterations (default: unbounded).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def solve_command(
    registry_file: str,
    root: str,
    version: str,
    max_steps: int | None,
    output_format: str,
) -> None:
    """Resolve ROOT at VERSION against the packages in REGISTRY_FILE.

    Exit code 0 on success, 1 if unsatisfiable, 2 on invalid input.
    """
    try:
        registry = load_registry(registry_file)
        result = solve(registry, root, version, SolverOptions(max_steps=max_steps))
    except (RegistryError, ConstraintParseError, SolverAborted) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if output_format == "json":
        print_json(result_to_json(result))
    elif isinstance(result, Solved):
        print_solution(result)
    else:
        print_failure(result)

    sys.exit(0 if result.success else 1)
