# ABOUTME: Shared Click options for readstate CLI commands.
# ABOUTME: Provides reusable decorators for common flags like --format.

from pathlib import Path

import click

from readstate.core.template import DEFAULT_FORMAT_TEMPLATE

format_option = click.option(
    "--format",
    "format_template",
    default=DEFAULT_FORMAT_TEMPLATE,
    show_default=True,
    help="Label template: %t title, %a author, %p percent, %s series, %l language. "
    "[...] marks a segment dropped when its field is missing.",
)

book_argument = click.argument(
    "path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
