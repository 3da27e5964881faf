# ABOUTME: Shared pytest fixtures for readstate tests.
# ABOUTME: Provides book files with and without KOReader sidecars on disk.

from pathlib import Path

import pytest

from readstate.sidecar.paths import sidecar_path_for
from tests.fixtures.sidecars import FINISHED_SIDECAR, SAMPLE_SIDECAR


def _make_book(directory: Path, name: str, sidecar_text: str | None) -> Path:
    book = directory / name
    book.write_bytes(b"fake ebook content")
    if sidecar_text is not None:
        sidecar = sidecar_path_for(book)
        sidecar.parent.mkdir(parents=True, exist_ok=True)
        sidecar.write_text(sidecar_text, encoding="utf-8")
    return book


@pytest.fixture
def reading_book(tmp_path: Path) -> Path:
    """An EPUB whose sidecar says 42% read, status "reading"."""
    return _make_book(tmp_path, "1984.epub", SAMPLE_SIDECAR)


@pytest.fixture
def finished_book(tmp_path: Path) -> Path:
    """A PDF whose sidecar marks it complete, with two authors and a series."""
    return _make_book(tmp_path, "The Dispossessed.pdf", FINISHED_SIDECAR)


@pytest.fixture
def untracked_book(tmp_path: Path) -> Path:
    """A book file that KOReader has never opened (no sidecar)."""
    return _make_book(tmp_path, "untracked.epub", None)


@pytest.fixture
def corrupt_sidecar_book(tmp_path: Path) -> Path:
    """A book whose sidecar is not valid Lua."""
    return _make_book(tmp_path, "broken.epub", "return { [\"stats\"] = {")
