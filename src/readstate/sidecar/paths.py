# ABOUTME: Filesystem conventions for KOReader sidecar files.
# ABOUTME: Derives the sidecar path for a book file and reads modification times.

from pathlib import Path

SIDECAR_DIR_SUFFIX = ".sdr"
SIDECAR_PREFIX = "metadata"
SIDECAR_SUFFIX = ".lua"

# Modification time reported for a sidecar that does not exist.
MISSING_MTIME = 0


def sidecar_path_for(book_path: Path) -> Path:
    """Return the sidecar path KOReader uses for a book file.

    ``/books/Dune.epub`` maps to ``/books/Dune.sdr/metadata.epub.lua``: the
    sidecar lives in a sibling ``<stem>.sdr`` directory and its filename
    embeds the book's original extension.
    """
    directory = book_path.parent / f"{book_path.stem}{SIDECAR_DIR_SUFFIX}"
    return directory / f"{SIDECAR_PREFIX}{book_path.suffix}{SIDECAR_SUFFIX}"


def file_mtime(path: Path) -> int:
    """Modification time of path in nanoseconds, or MISSING_MTIME if unreadable."""
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return MISSING_MTIME
