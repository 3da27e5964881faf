# ABOUTME: The `readstate mark` command for changing a book's completion status.
# ABOUTME: Writes "complete" or "reading" into the sidecar's summary section.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from readstate.cli.options import book_argument
from readstate.metadata import BookMetadata


@click.command()
@book_argument
@click.option(
    "--finished/--reading",
    default=True,
    help="Mark the book finished (default) or as being read.",
)
def mark(path: Path, finished: bool) -> None:
    """Mark a book finished or as being read in its KOReader sidecar."""
    console = Console()
    book = BookMetadata(path)
    state = "finished" if finished else "reading"

    current = book.finished
    if book.document is None:
        console.print(f"[red]Error:[/red] no readable sidecar at {escape(str(book.sidecar_path))}")
        raise SystemExit(1)
    if current == finished:
        console.print(f"[yellow]{escape(path.name)} is already {state}.[/yellow]")
        return

    if not book.set_finished(finished):
        console.print(f"[red]Error:[/red] could not update {escape(str(book.sidecar_path))}")
        raise SystemExit(1)

    console.print(f"[green]Marked {escape(path.name)} as {state}.[/green]")
