# ABOUTME: Metadata package: the BookMetadata entity and its sidecar field extractors.
# ABOUTME: Exports BookMetadata, the object the CLI and embedding applications work with.

from readstate.metadata.types import BookMetadata

__all__ = ["BookMetadata"]
