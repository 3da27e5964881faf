# ABOUTME: Staleness-aware holder of the sidecar document shared by all field getters.
# ABOUTME: Reloads only when the file's mtime moves past the mtime of the last load.

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from readstate.sidecar.codec import LuaSidecarCodec, SidecarCodec
from readstate.sidecar.document import Document
from readstate.sidecar.paths import MISSING_MTIME, file_mtime

logger = logging.getLogger(__name__)


class SidecarCache:
    """Owns the decoded sidecar document and decides when to re-read it.

    ``loaded_at`` is the sidecar's mtime as observed at the last reload (not
    wall-clock time), so the staleness check compares against the exact file
    state that was read. MISSING_MTIME means the sidecar was never loaded.
    """

    def __init__(
        self,
        path: Path,
        *,
        codec: SidecarCodec | None = None,
        mtime: Callable[[Path], int] = file_mtime,
    ) -> None:
        self.path = path
        self._codec = codec or LuaSidecarCodec()
        self._mtime = mtime
        self.document: Document | None = None
        self.loaded_at: int = MISSING_MTIME

    @property
    def is_loaded(self) -> bool:
        return self.document is not None

    def is_stale(self) -> bool:
        """Whether the sidecar on disk is newer than the loaded document."""
        return self._mtime(self.path) > self.loaded_at

    def needs_refresh(self, current: Any) -> bool:
        """Decide whether a cached field value must be re-derived.

        Returns False when ``current`` is not None and the sidecar has not
        changed since the last load. Otherwise returns True, reloading first
        if the sidecar changed. A None field against an unchanged file is
        re-derived from the already loaded document without any I/O.

        Args:
            current: The field's cached value, None if it has none.

        Returns:
            True if the caller should re-run its extractor on ``document``.
        """
        stale = self.is_stale()
        if current is not None and not stale:
            return False
        if stale:
            self.reload()
        return True

    def reload(self) -> bool:
        """Read the sidecar through the codec, replacing the document.

        ``loaded_at`` is updated even when the read fails, so a broken
        sidecar is not re-parsed until it changes on disk again.

        Returns:
            True if a document was loaded, otherwise False.
        """
        observed = self._mtime(self.path)
        logger.debug("Loading sidecar %s (mtime %d)", self.path, observed)
        self.document = self._codec.read(self.path)
        self.loaded_at = observed
        return self.document is not None

    def persist(self) -> bool:
        """Write the loaded document back through the codec.

        On success ``loaded_at`` moves to the post-write mtime: the document in
        memory is what was written, so the write must not look like an
        external change.

        Returns:
            True if the document was written, False if nothing is loaded or
            the write failed.
        """
        if self.document is None:
            return False
        if not self._codec.write(self.path, self.document):
            return False
        self.loaded_at = self._mtime(self.path)
        return True
