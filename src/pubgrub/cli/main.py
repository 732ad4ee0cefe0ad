"""pubgrub CLI: Conflict-driven dependency version solving.

Entry point for the ``pubgrub`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    solve     Resolve a root package against a registry file.
    versions  List (and filter) a package's versions.

Usage::

    pubgrub solve registry.yaml root 1.0.0
    pubgrub solve registry.yaml root 1.0.0 --format json
    pubgrub -v solve registry.yaml root 1.0.0      # log solver steps
    pubgrub versions registry.yaml foo --constraint "^1.0.0"
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from pubgrub import __version__
from pubgrub.cli.solve_cmd import solve_command
from pubgrub.cli.versions_cmd import versions_command


def _configure_logging(verbose: bool) -> None:
    """Send pubgrub's log records to stderr through rich."""
    logger = logging.getLogger("pubgrub")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log every solver step to stderr.")
def cli(verbose: bool) -> None:
    """pubgrub: Conflict-driven dependency version solving.

    Resolve a root package against a registry of package versions and
    their dependency constraints, explaining any conflict that makes the
    graph unsatisfiable.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(solve_command)
cli.add_command(versions_command)
