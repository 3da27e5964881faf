# ABOUTME: BookMetadata, a book file plus the reading state in its KOReader sidecar.
# ABOUTME: Fields are lazily projected from the sidecar and refreshed when it changes on disk.

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from readstate.core.template import DEFAULT_FORMAT_TEMPLATE, render_template
from readstate.metadata import fields
from readstate.sidecar.cache import SidecarCache
from readstate.sidecar.codec import SidecarCodec
from readstate.sidecar.document import Document
from readstate.sidecar.paths import MISSING_MTIME, file_mtime, sidecar_path_for

logger = logging.getLogger(__name__)


class BookMetadata:
    """Metadata for one book, backed by its KOReader sidecar file.

    Two instances are equal when they refer to the same book file. Field
    properties read the sidecar lazily: a cached value is returned without
    I/O until the sidecar's mtime advances, after which the next access
    reloads the file once and each field re-derives itself on its own next
    access. A field with no value is re-derived on every access.

    Not thread-safe; guard shared instances with an external lock.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        codec: SidecarCodec | None = None,
        mtime: Callable[[Path], int] = file_mtime,
        last_read: int = 0,
    ) -> None:
        self.path = Path(path)
        self.last_read = last_read
        self.format_template = DEFAULT_FORMAT_TEMPLATE
        self._sidecar = SidecarCache(sidecar_path_for(self.path), codec=codec, mtime=mtime)
        # field name -> (value, loaded_at of the document it was derived from)
        self._values: dict[str, tuple[Any, int]] = {"finished": (False, MISSING_MTIME)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookMetadata):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"BookMetadata({str(self.path)!r})"

    def __str__(self) -> str:
        return self.render()

    @property
    def sidecar_path(self) -> Path:
        return self._sidecar.path

    @property
    def document(self) -> Document | None:
        """The sidecar document as last loaded, or None."""
        return self._sidecar.document

    def _refreshed(self, name: str, extract: Callable[[Document | None], Any]) -> Any:
        """Return the cached value of a field, re-deriving it when needed.

        A value derived from an older load counts as absent, so after a reload
        every field re-derives itself on its next access. An extractor that
        finds nothing keeps the previous value.
        """
        value, derived_at = self._values.get(name, (None, MISSING_MTIME))
        current = value if derived_at == self._sidecar.loaded_at else None
        if self._sidecar.needs_refresh(current):
            fresh = extract(self._sidecar.document)
            if fresh is not None:
                self._values[name] = (fresh, self._sidecar.loaded_at)
                value = fresh
        return value

    @property
    def finished(self) -> bool:
        """Whether the sidecar marks the book complete. False without a sidecar."""
        return self._refreshed("finished", fields.extract_finished)

    @property
    def percent_finished(self) -> float | None:
        """Reading progress in the range [0, 1]."""
        return self._refreshed("percent_finished", fields.extract_percent_finished)

    @property
    def pages(self) -> int | None:
        return self._refreshed("pages", fields.extract_pages)

    @property
    def title(self) -> str | None:
        return self._refreshed("title", fields.extract_title)

    @property
    def authors(self) -> list[str] | None:
        return self._refreshed("authors", fields.extract_authors)

    @property
    def keywords(self) -> list[str] | None:
        return self._refreshed("keywords", fields.extract_keywords)

    @property
    def language(self) -> str | None:
        return self._refreshed("language", fields.extract_language)

    @property
    def series(self) -> str | None:
        return self._refreshed("series", fields.extract_series)

    def set_finished(self, finished: bool = True) -> bool:
        """Mark the book complete, or with ``finished=False`` as being read.

        Edits the currently loaded document and writes it back; the sidecar
        is not reloaded first.

        Returns:
            True if the state changed and was written, otherwise False.
        """
        if not finished:
            return self.set_reading()
        return self._set_status(fields.STATUS_COMPLETE, finished=True)

    def set_reading(self) -> bool:
        """Mark a finished book as being read again.

        Returns:
            True if the state changed and was written, otherwise False.
        """
        return self._set_status(fields.STATUS_READING, finished=False)

    def _current_finished(self) -> bool:
        """Completion state of the loaded document, without reloading.

        A cached flag from an older load is superseded by the loaded
        document's status when it has one.
        """
        value, derived_at = self._values["finished"]
        if derived_at != self._sidecar.loaded_at:
            fresh = fields.extract_finished(self._sidecar.document)
            if fresh is not None:
                self._values["finished"] = (fresh, self._sidecar.loaded_at)
                value = fresh
        return value

    def _set_status(self, status: str, *, finished: bool) -> bool:
        document = self._sidecar.document
        if self._current_finished() == finished:
            logger.debug("%s already has finished=%s", self.path, finished)
            return False
        if document is None:
            logger.debug("No sidecar loaded for %s, not setting %s", self.path, status)
            return False

        summary = document.get("summary")
        created = summary is None
        if created:
            summary = document["summary"] = {}
        elif not isinstance(summary, dict):
            logger.warning("Sidecar %s has a malformed summary", self.sidecar_path)
            return False

        previous = summary.get("status")
        summary["status"] = status
        if not self._sidecar.persist():
            # Keep the document in step with the file that failed to change.
            if created:
                del document["summary"]
            elif previous is None:
                del summary["status"]
            else:
                summary["status"] = previous
            return False

        self._values["finished"] = (finished, self._sidecar.loaded_at)
        return True

    def render(self, template: str | None = None) -> str:
        """Render the format template, or an explicit template, for this book."""
        return render_template(
            template if template is not None else self.format_template, self
        )
