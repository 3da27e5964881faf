# ABOUTME: The `readstate info` command for displaying sidecar metadata.
# ABOUTME: Shows every field read from a book's KOReader sidecar in a Rich table.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from readstate.cli.options import book_argument
from readstate.metadata import BookMetadata


def _or_unknown(value: object | None) -> str:
    return escape(str(value)) if value is not None else "[dim]unknown[/dim]"


def _join(values: list[str] | None) -> str:
    return escape(", ".join(values)) if values else "[dim]none[/dim]"


@click.command()
@book_argument
def info(path: Path) -> None:
    """Show reading state and metadata stored in a book's sidecar."""
    console = Console()
    book = BookMetadata(path)

    # Reading a field loads the sidecar when one exists.
    finished = book.finished
    if book.document is None:
        console.print(f"[red]Error:[/red] no readable sidecar at {escape(str(book.sidecar_path))}")
        raise SystemExit(1)

    percent = book.percent_finished
    table = Table(title=escape(path.name), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", _or_unknown(book.title))
    table.add_row("Authors", _join(book.authors))
    table.add_row("Series", _or_unknown(book.series))
    table.add_row("Language", _or_unknown(book.language))
    table.add_row("Keywords", _join(book.keywords))
    table.add_row("Pages", _or_unknown(book.pages))
    table.add_row(
        "Progress",
        f"{round(percent * 100, 1):g}%" if percent is not None else "[dim]none[/dim]",
    )
    table.add_row("Status", "finished" if finished else "reading")
    table.add_row("Sidecar", escape(str(book.sidecar_path)))

    console.print(table)
