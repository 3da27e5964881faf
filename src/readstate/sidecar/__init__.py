# ABOUTME: Sidecar package: locating, decoding and caching KOReader metadata files.
# ABOUTME: Exports the codec protocol, the Lua codec and the staleness cache.

from readstate.sidecar.cache import SidecarCache
from readstate.sidecar.codec import LuaSidecarCodec, SidecarCodec
from readstate.sidecar.paths import file_mtime, sidecar_path_for

__all__ = [
    "LuaSidecarCodec",
    "SidecarCache",
    "SidecarCodec",
    "file_mtime",
    "sidecar_path_for",
]
