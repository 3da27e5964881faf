# ABOUTME: Renders a book label from a format template with optional bracket segments.
# ABOUTME: Placeholders %t %a %p %s %l; a [segment] disappears when its placeholder has no value.

import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

DEFAULT_FORMAT_TEMPLATE = "[%a: ]%t[ (%p%)]"

_PLACEHOLDER_RE = re.compile(r"%[tapsl]")


class FieldSource(Protocol):
    """The book fields a template can refer to.

    Reading an attribute may refresh the underlying sidecar, so the renderer
    reads each one at most once per render.
    """

    @property
    def title(self) -> str | None: ...

    @property
    def authors(self) -> list[str] | None: ...

    @property
    def percent_finished(self) -> float | None: ...

    @property
    def series(self) -> str | None: ...

    @property
    def language(self) -> str | None: ...


def format_percent(fraction: float) -> str:
    """Render a [0, 1] fraction as a whole percentage, rounding halves up."""
    return str(math.floor(fraction * 100 + 0.5))


def _first_author(fields: FieldSource) -> str | None:
    authors = fields.authors
    if not authors:
        return None
    return authors[0]


def _percent(fields: FieldSource) -> str | None:
    fraction = fields.percent_finished
    return format_percent(fraction) if fraction is not None else None


@dataclass(frozen=True)
class Placeholder:
    """A two-character template token bound to one book field."""

    token: str
    resolve: Callable[[FieldSource], str | None]
    fallback: str


# Substitution order matters: a value containing a later token is itself substituted.
PLACEHOLDERS: tuple[Placeholder, ...] = (
    Placeholder("%t", lambda fields: fields.title, "(no title)"),
    Placeholder("%a", _first_author, "(no author)"),
    Placeholder("%p", _percent, "(no progress)"),
    Placeholder("%s", lambda fields: fields.series, "(no series)"),
    Placeholder("%l", lambda fields: fields.language, "(no language)"),
)


def substitute_placeholders(template: str, fields: FieldSource) -> str:
    """Replace every placeholder whose field has a value.

    A field is only read if its token is present in the text at that point.
    Tokens of fields without a value are left in place.
    """
    output = template
    for placeholder in PLACEHOLDERS:
        if placeholder.token not in output:
            continue
        value = placeholder.resolve(fields)
        if value is not None:
            output = output.replace(placeholder.token, value)
    return output


def collapse_segments(text: str) -> str:
    """Resolve ``[...]`` segments, innermost first.

    A segment whose resolved content still contains a placeholder is dropped
    together with its brackets; any other segment keeps its content and loses
    its brackets. Content is checked after its inner segments are resolved,
    so text on either side of a dropped or unwrapped inner segment can join
    into a placeholder. Brackets without a partner are kept as literal text.
    """
    # stack[0] is the top level; each open bracket pushes a new frame.
    stack: list[list[str]] = [[]]
    for char in text:
        if char == "[":
            stack.append([])
        elif char == "]" and len(stack) > 1:
            content = "".join(stack.pop())
            if not _PLACEHOLDER_RE.search(content):
                stack[-1].append(content)
        else:
            stack[-1].append(char)

    pieces = stack[0]
    for unclosed in stack[1:]:
        pieces.append("[")
        pieces.extend(unclosed)
    return "".join(pieces)


def apply_fallbacks(text: str) -> str:
    """Replace placeholders that survived with their fixed fallback text."""
    for placeholder in PLACEHOLDERS:
        text = text.replace(placeholder.token, placeholder.fallback)
    return text


def render_template(template: str, fields: FieldSource) -> str:
    """Render a format template against a book's fields.

    Placeholders are ``%t`` title, ``%a`` first author, ``%p`` progress in
    percent, ``%s`` series and ``%l`` language. Square brackets mark an
    optional segment that is dropped whole when a placeholder inside it has
    no value, e.g. ``"[%a: ]%t[ (%p%)]"`` gives ``"Orwell: 1984 (42%)"`` or
    just ``"1984"``. Placeholders outside any segment fall back to text like
    ``"(no title)"``.

    Args:
        template: The format template.
        fields: Source of field values, typically a BookMetadata.

    Returns:
        The rendered label. Never raises for missing values.
    """
    output = substitute_placeholders(template, fields)
    output = collapse_segments(output)
    return apply_fallbacks(output)
