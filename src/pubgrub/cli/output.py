"""Rich output formatting helpers for the pubgrub CLI.

Solutions render as a table; failures render as a tree of the derivation
graph, from the failure incompatibility down to the external facts
(dependencies, registry gaps) it was learned from.
"""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from pubgrub.core.solver import DerivationGraph, Failed, Incompatibility, Solved
from pubgrub.core.version import Version

console = Console()


def print_solution(result: Solved) -> None:
    """Print a successful resolution as a package/version table."""
    console.print(
        Panel("[bold green]Version solving succeeded[/bold green]",
              title="Dependency Resolution")
    )
    table = Table(show_header=True)
    table.add_column("Package", style="bold")
    table.add_column("Version")
    for name, version in result.as_strings().items():
        table.add_row(name, version)
    console.print(table)
    console.print(f"[dim]{result.attempted_solutions} attempted solution(s)[/dim]")


def print_failure(result: Failed) -> None:
    """Print a failed resolution with its derivation tree and root causes."""
    console.print(
        Panel("[bold red]Version solving failed[/bold red]",
              title="Dependency Resolution")
    )
    console.print(derivation_tree(result.incompatibility, result.graph))
    causes = result.root_causes()
    if causes:
        console.print("[bold]Root causes:[/bold]")
        for cause in causes:
            console.print(f"  [red]- {cause}[/red]")


def derivation_tree(incompatibility: Incompatibility, graph: DerivationGraph) -> Tree:
    """Build a rich ``Tree`` of *incompatibility* and its ancestors.

    Incompatibilities reachable along several paths are expanded once and
    referenced by id afterwards.
    """
    tree = Tree(_label(incompatibility))
    seen = {incompatibility.id}
    stack = [(tree, incompatibility)]
    while stack:
        node, current = stack.pop()
        for parent in graph.parents(current):
            if parent.id in seen:
                node.add(f"[dim]see #{parent.id}[/dim]")
                continue
            seen.add(parent.id)
            stack.append((node.add(_label(parent)), parent))
    return tree


def _label(incompatibility: Incompatibility) -> str:
    style = "yellow" if incompatibility.is_derived else "cyan"
    return f"[{style}]{incompatibility}[/{style}]"


def print_versions(package: str, versions: list[Version]) -> None:
    """Print the versions of *package*, newest first."""
    if not versions:
        console.print(f"[dim]No matching versions of {package}.[/dim]")
        return
    table = Table(title=package, show_header=True)
    table.add_column("Version")
    for version in versions:
        table.add_row(str(version))
    console.print(table)


def result_to_json(result: Solved | Failed) -> dict[str, Any]:
    """Convert a solve result to a JSON-serializable dict."""
    if isinstance(result, Solved):
        return {
            "success": True,
            "solution": result.as_strings(),
            "attempted_solutions": result.attempted_solutions,
        }
    return {
        "success": False,
        "failure": _incompatibility_to_json(result.incompatibility),
        "derivation": [_incompatibility_to_json(i) for i in result.derivation()],
        "root_causes": [i.id for i in result.root_causes()],
        "attempted_solutions": result.attempted_solutions,
    }


def _incompatibility_to_json(incompatibility: Incompatibility) -> dict[str, Any]:
    cause = incompatibility.cause
    return {
        "id": incompatibility.id,
        "terms": [str(term) for term in incompatibility.terms],
        "cause": type(cause).__name__,
        "detail": str(cause),
    }


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))
