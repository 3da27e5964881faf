# ABOUTME: Total accessors over a decoded sidecar document (nested dicts and lists).
# ABOUTME: Every helper returns None instead of raising when a path is missing or mistyped.

from typing import Any

Document = dict[str, Any]


def get_path(document: Document | None, path: str) -> Any | None:
    """Look up a dotted path such as ``"stats.title"`` in a document.

    Returns None when the document is None, a segment is missing, or an
    intermediate value is not a table.
    """
    node: Any = document
    for segment in path.split("."):
        if not isinstance(node, dict) or segment not in node:
            return None
        node = node[segment]
    return node


def get_str(document: Document | None, path: str) -> str | None:
    value = get_path(document, path)
    return value if isinstance(value, str) else None


def get_int(document: Document | None, path: str) -> int | None:
    """Integer at path. Integral floats are accepted, booleans are not."""
    value = get_path(document, path)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def get_float(document: Document | None, path: str) -> float | None:
    value = get_path(document, path)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def split_joined(value: str, separator: str) -> list[str]:
    """Split a separator-joined string, dropping trailing empty entries.

    An empty string yields ``[""]``; a string made only of separators
    yields ``[]``.
    """
    parts = value.split(separator)
    if value:
        while parts and not parts[-1]:
            parts.pop()
    return parts


def get_joined_list(
    document: Document | None, path: str, separator: str
) -> list[str] | None:
    value = get_str(document, path)
    if value is None:
        return None
    return split_joined(value, separator)
