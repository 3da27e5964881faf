# ABOUTME: Canned KOReader sidecar text and an in-memory sidecar fake for tests.
# ABOUTME: FakeSidecar implements SidecarCodec and an mtime function with call counters.

import copy
from pathlib import Path
from typing import Any

SAMPLE_SIDECAR = """\
-- /mnt/onboard/Books/1984.sdr/metadata.epub.lua
return {
    ["bookmarks"] = {},
    ["cre_dom_version"] = 20240114,
    ["doc_pages"] = 328,
    ["last_xpointer"] = "/body/DocFragment[12]/body/p[3]/text().0",
    ["percent_finished"] = 0.42,
    ["stats"] = {
        ["authors"] = "George Orwell",
        ["highlights"] = 2,
        ["keywords"] = "dystopia;;;;classic",
        ["language"] = "en",
        ["notes"] = 0,
        ["pages"] = 328,
        ["title"] = "1984",
    },
    ["summary"] = {
        ["modified"] = "2024-03-02",
        ["status"] = "reading",
    },
}
"""

FINISHED_SIDECAR = """\
return {
    ["percent_finished"] = 1,
    ["stats"] = {
        ["authors"] = "Ursula K. Le Guin;;;;Brian Attebery",
        ["language"] = "en",
        ["pages"] = 246,
        ["series"] = "Hainish Cycle",
        ["title"] = "The Dispossessed",
    },
    ["summary"] = {
        ["status"] = "complete",
    },
}
"""


def sample_document() -> dict[str, Any]:
    """The decoded form of SAMPLE_SIDECAR, restricted to fields readstate uses."""
    return {
        "percent_finished": 0.42,
        "stats": {
            "authors": "George Orwell",
            "keywords": "dystopia;;;;classic",
            "language": "en",
            "pages": 328,
            "title": "1984",
        },
        "summary": {"status": "reading"},
    }


class FakeSidecar:
    """In-memory sidecar: a codec plus an mtime source, with counters.

    Pass ``codec=fake`` and ``mtime=fake.mtime``. A successful write bumps the
    mtime, as writing a real file would.
    """

    def __init__(
        self,
        document: dict[str, Any] | None = None,
        *,
        mtime: int = 1_000,
        write_ok: bool = True,
    ) -> None:
        self.stored = document
        self.current_mtime = mtime if document is not None else 0
        self.write_ok = write_ok
        self.reads = 0
        self.writes: list[dict[str, Any]] = []

    def read(self, path: Path) -> dict[str, Any] | None:
        self.reads += 1
        return copy.deepcopy(self.stored)

    def write(self, path: Path, document: dict[str, Any]) -> bool:
        self.writes.append(copy.deepcopy(document))
        if not self.write_ok:
            return False
        self.stored = copy.deepcopy(document)
        self.current_mtime += 1
        return True

    def mtime(self, path: Path) -> int:
        return self.current_mtime

    def touch(self, document: dict[str, Any] | None = None) -> None:
        """Simulate another program rewriting the sidecar."""
        if document is not None:
            self.stored = document
        self.current_mtime += 1
