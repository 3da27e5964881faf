# ABOUTME: SidecarCodec protocol and the Lua-backed implementation KOReader files need.
# ABOUTME: Converts codec exceptions into None/False results so callers never see them.

import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from readstate.formats.lua import LuaDecodeError, LuaEncodeError, dumps, loads
from readstate.sidecar.document import Document

logger = logging.getLogger(__name__)


@runtime_checkable
class SidecarCodec(Protocol):
    """Protocol for reading and writing sidecar documents.

    Implementations report failure through their return values: ``read``
    returns None and ``write`` returns False.
    """

    def read(self, path: Path) -> Document | None: ...

    def write(self, path: Path, document: Document) -> bool: ...


class LuaSidecarCodec:
    """Reads and writes KOReader ``metadata.<ext>.lua`` files."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def read(self, path: Path) -> Document | None:
        """Parse the sidecar at path.

        Args:
            path: Path to the sidecar file.

        Returns:
            The decoded document, or None if the file is missing, unreadable,
            malformed, or does not hold a table.
        """
        try:
            text = path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            logger.debug("No sidecar at %s", path)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read sidecar %s: %s", path, exc)
            return None

        try:
            document = loads(text)
        except LuaDecodeError as exc:
            logger.warning("Malformed sidecar %s: %s", path, exc)
            return None

        if not isinstance(document, dict):
            logger.warning("Sidecar %s does not contain a table", path)
            return None
        return document

    def write(self, path: Path, document: Document) -> bool:
        """Serialize document to path, replacing the file atomically.

        The text is written to a temporary sibling first and moved into place,
        so a failed write leaves the previous sidecar untouched.

        Args:
            path: Path to the sidecar file.
            document: The document to store.

        Returns:
            True if the file was written, otherwise False.
        """
        try:
            text = dumps(document, header=str(path))
        except LuaEncodeError as exc:
            logger.warning("Cannot encode sidecar %s: %s", path, exc)
            return False

        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding=self._encoding)
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.warning("Failed to write sidecar %s: %s", path, exc)
            _cleanup_tmp(tmp_path)
            return False
        return True


def _cleanup_tmp(tmp_path: Path) -> None:
    """Remove a leftover temporary file if one was created."""
    try:
        tmp_path.unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("Could not remove %s: %s", tmp_path, exc)
