"""Command-line interface for krantor.

This module provides the main CLI entry point and assembles all commands.

Commands:
- watch: Forward existing and new files from the watch folder
- sweep: Forward the files already in the watch folder and exit
"""

from __future__ import annotations

import click

from krantor.client.cli.config import load_watch_config, setup_logging
from krantor.client.cli.watch import sweep, watch


@click.group()
@click.version_option(package_name="krantor")
def cli() -> None:
    """Krantor - forward torrent and magnet files to put.io."""


cli.add_command(watch)
cli.add_command(sweep)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "load_watch_config",
    "main",
    "setup_logging",
]
