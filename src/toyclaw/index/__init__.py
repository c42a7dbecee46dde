"""Compliance index persistence and building."""

from toyclaw.index.builder import BuildResult, IndexBuilder, SkippedDocument, SourceDocument
from toyclaw.index.storage import (
    CHUNKS_META_FILE,
    EMBEDDINGS_FILE,
    LEGACY_FILE,
    MANIFEST_FILE,
    IndexFormat,
    LoadedIndex,
    detect_format,
    read_index,
    write_index,
)

__all__ = [
    "BuildResult",
    "CHUNKS_META_FILE",
    "EMBEDDINGS_FILE",
    "IndexBuilder",
    "IndexFormat",
    "LEGACY_FILE",
    "LoadedIndex",
    "MANIFEST_FILE",
    "SkippedDocument",
    "SourceDocument",
    "detect_format",
    "read_index",
    "write_index",
]
