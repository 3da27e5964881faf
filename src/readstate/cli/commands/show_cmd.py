# ABOUTME: The `readstate show` command for printing book labels.
# ABOUTME: Renders the format template for each given book file, one per line.

from pathlib import Path

import click
from rich.console import Console

from readstate.cli.options import format_option
from readstate.metadata import BookMetadata


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@format_option
def show(paths: tuple[Path, ...], format_template: str) -> None:
    """Print a label for each book, e.g. "Orwell: 1984 (42%)"."""
    console = Console()
    for path in paths:
        book = BookMetadata(path)
        book.format_template = format_template
        console.print(str(book), markup=False, emoji=False, highlight=False, soft_wrap=True)
