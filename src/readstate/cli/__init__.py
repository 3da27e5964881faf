# ABOUTME: CLI package for readstate, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from readstate.cli.commands import info_cmd, mark_cmd, show_cmd


def _configure_logging(verbose: bool) -> None:
    """Route library log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="readstate")
@click.option("-v", "--verbose", is_flag=True, help="Log sidecar reads and writes.")
def cli(verbose: bool) -> None:
    """readstate - reading progress from KOReader sidecar files."""
    _configure_logging(verbose)


cli.add_command(show_cmd.show)
cli.add_command(info_cmd.info)
cli.add_command(mark_cmd.mark)
