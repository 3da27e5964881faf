# ABOUTME: Pure extractors mapping a sidecar document to individual book fields.
# ABOUTME: Each extractor is total: a missing or mistyped entry yields None.

from readstate.sidecar.document import (
    Document,
    get_float,
    get_int,
    get_joined_list,
    get_str,
)

# KOReader joins multi-valued stats (authors, keywords) with this separator.
AUTHOR_SEPARATOR = ";;;;"

STATUS_COMPLETE = "complete"
STATUS_READING = "reading"


def extract_title(document: Document | None) -> str | None:
    return get_str(document, "stats.title")


def extract_authors(document: Document | None) -> list[str] | None:
    return get_joined_list(document, "stats.authors", AUTHOR_SEPARATOR)


def extract_keywords(document: Document | None) -> list[str] | None:
    return get_joined_list(document, "stats.keywords", AUTHOR_SEPARATOR)


def extract_pages(document: Document | None) -> int | None:
    return get_int(document, "stats.pages")


def extract_language(document: Document | None) -> str | None:
    return get_str(document, "stats.language")


def extract_series(document: Document | None) -> str | None:
    return get_str(document, "stats.series")


def extract_percent_finished(document: Document | None) -> float | None:
    return get_float(document, "percent_finished")


def extract_finished(document: Document | None) -> bool | None:
    """True for a ``"complete"`` summary status, False for any other status."""
    status = get_str(document, "summary.status")
    if status is None:
        return None
    return status == STATUS_COMPLETE
