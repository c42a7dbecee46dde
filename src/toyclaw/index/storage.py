# src/toyclaw/index/storage.py
"""On-disk layout of the compliance index.

Split format (current):
- chunks_meta.json: JSON array of {id, text, market, source, section}
- embeddings.bin: little-endian float32 buffer, chunk_count x dim, chunk order
- meta.json: {version, createdAt, docCount, chunkCount}

Legacy format: chunks.json, one array of chunk objects with an inline
"embedding" list. The format is chosen by which files exist.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np
from pydantic import ValidationError

from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.models import Chunk, IndexManifest

logger = logging.getLogger(__name__)

CHUNKS_META_FILE = "chunks_meta.json"
EMBEDDINGS_FILE = "embeddings.bin"
MANIFEST_FILE = "meta.json"
LEGACY_FILE = "chunks.json"
CHUNK_FIELDS = {"id", "text", "market", "source", "section"}

INDEX_VERSION = "1.0.0"
EMBEDDING_DTYPE = np.dtype("<f4")

INDEX_MISSING_MESSAGE = "Compliance index not found. Run the index build first: toyclaw build-index"


class IndexFormat(str, Enum):
    SPLIT = "split"
    LEGACY = "legacy"


@dataclass
class LoadedIndex:
    """Chunk metadata and the embedding matrix, aligned by row.

    embeddings has shape (len(chunks), dim); row i belongs to chunks[i].
    """

    chunks: list[Chunk]
    embeddings: np.ndarray
    dim: int
    format: IndexFormat
    manifest: IndexManifest | None = None


def detect_format(index_dir: str | Path) -> IndexFormat | None:
    """Return the index format present in index_dir, or None."""
    index_path = Path(index_dir)
    if (index_path / CHUNKS_META_FILE).is_file() and (index_path / EMBEDDINGS_FILE).is_file():
        return IndexFormat.SPLIT
    if (index_path / LEGACY_FILE).is_file():
        return IndexFormat.LEGACY
    return None


def _corrupt(message: str, **details: Any) -> ComplianceError:
    return ComplianceError(message, ErrorCode.INDEX_CORRUPT, details=details or None)


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise _corrupt(f"Cannot read index file {path.name}: {exc}", file=path.name) from exc


def _parse_chunks(records: Any, file_name: str) -> list[Chunk]:
    if not isinstance(records, list):
        raise _corrupt(f"{file_name} must contain a JSON array", file=file_name)
    try:
        return [Chunk.model_validate(record) for record in records]
    except ValidationError as exc:
        raise _corrupt(f"{file_name} contains an invalid chunk record", file=file_name) from exc


def _read_manifest(index_path: Path) -> IndexManifest | None:
    manifest_path = index_path / MANIFEST_FILE
    if not manifest_path.is_file():
        return None
    try:
        return IndexManifest.model_validate(_read_json(manifest_path))
    except ValidationError as exc:
        raise _corrupt(f"{MANIFEST_FILE} is invalid", file=MANIFEST_FILE) from exc


def _read_split(index_path: Path) -> tuple[list[Chunk], np.ndarray, int]:
    chunks = _parse_chunks(_read_json(index_path / CHUNKS_META_FILE), CHUNKS_META_FILE)
    flat = np.fromfile(index_path / EMBEDDINGS_FILE, dtype=EMBEDDING_DTYPE)
    count = len(chunks)
    if count == 0:
        return chunks, np.zeros((0, 0), dtype=np.float32), 0

    if flat.size == 0 or flat.size % count != 0:
        raise _corrupt(
            f"Embedding buffer of {flat.size} floats does not divide into {count} chunks",
            floats=int(flat.size),
            chunks=count,
        )
    dim = flat.size // count
    return chunks, flat.reshape(count, dim).astype(np.float32, copy=False), dim


def _read_legacy(index_path: Path) -> tuple[list[Chunk], np.ndarray, int]:
    records = _read_json(index_path / LEGACY_FILE)
    if not isinstance(records, list):
        raise _corrupt(f"{LEGACY_FILE} must contain a JSON array", file=LEGACY_FILE)

    vectors = []
    for position, record in enumerate(records):
        embedding = record.get("embedding") if isinstance(record, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise _corrupt(f"Chunk {position} in {LEGACY_FILE} has no embedding", position=position)
        vectors.append(embedding)
    chunks = _parse_chunks(records, LEGACY_FILE)

    if not chunks:
        return chunks, np.zeros((0, 0), dtype=np.float32), 0

    dim = len(vectors[0])
    if any(len(vector) != dim for vector in vectors):
        raise _corrupt(f"{LEGACY_FILE} has embeddings of differing lengths", file=LEGACY_FILE)
    try:
        matrix = np.asarray(vectors, dtype=np.float32)
    except (TypeError, ValueError) as exc:
        raise _corrupt(f"{LEGACY_FILE} has non-numeric embeddings", file=LEGACY_FILE) from exc
    return chunks, matrix, dim


def read_index(index_dir: str | Path) -> LoadedIndex:
    """Load an index from disk.

    Raises:
        ComplianceError: INDEX_MISSING when no supported format is present,
            INDEX_CORRUPT when the artifacts are unreadable or misaligned.
    """
    index_path = Path(index_dir)
    index_format = detect_format(index_path)
    if index_format is None:
        raise ComplianceError(
            INDEX_MISSING_MESSAGE,
            ErrorCode.INDEX_MISSING,
            details={"indexDir": str(index_path)},
        )

    if index_format is IndexFormat.SPLIT:
        chunks, embeddings, dim = _read_split(index_path)
    else:
        chunks, embeddings, dim = _read_legacy(index_path)

    manifest = _read_manifest(index_path)
    if manifest is not None and manifest.chunk_count != len(chunks):
        raise _corrupt(
            f"Manifest lists {manifest.chunk_count} chunks but metadata has {len(chunks)}",
            manifest=manifest.chunk_count,
            chunks=len(chunks),
        )

    return LoadedIndex(
        chunks=chunks,
        embeddings=embeddings,
        dim=dim,
        format=index_format,
        manifest=manifest,
    )


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _write_temp(directory: Path, suffix: str, data: bytes) -> str:
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
    except BaseException:
        Path(temp_path).unlink(missing_ok=True)
        raise
    return temp_path


def write_index(
    output_dir: str | Path,
    chunks: list[Chunk],
    embeddings: np.ndarray | list[list[float]],
    created_at: str | None = None,
) -> IndexManifest:
    """Persist chunks and their embeddings in the split format.

    All three artifacts are written to temporary files first and then moved
    into place, so an existing index is never left half-overwritten.

    Args:
        output_dir: Index directory (created if missing).
        chunks: Chunk metadata in index order.
        embeddings: One vector per chunk, all of the same length.
        created_at: Optional ISO timestamp for the manifest.

    Returns:
        The manifest that was written.
    """
    matrix = np.asarray(embeddings, dtype=EMBEDDING_DTYPE)
    if len(chunks) == 0:
        matrix = np.zeros((0, 0), dtype=EMBEDDING_DTYPE)
    elif matrix.ndim != 2 or matrix.shape[0] != len(chunks):
        raise ValueError(
            f"Expected {len(chunks)} embeddings of equal length, got array of shape {matrix.shape}"
        )

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    manifest = IndexManifest(
        version=INDEX_VERSION,
        created_at=created_at or _utc_timestamp(),
        doc_count=len({(chunk.market, chunk.source) for chunk in chunks}),
        chunk_count=len(chunks),
    )
    chunks_meta = [chunk.model_dump(include=CHUNK_FIELDS) for chunk in chunks]
    artifacts = [
        (CHUNKS_META_FILE, ".json", json.dumps(chunks_meta, ensure_ascii=False).encode("utf-8")),
        (EMBEDDINGS_FILE, ".bin", matrix.tobytes(order="C")),
        (
            MANIFEST_FILE,
            ".json",
            json.dumps(manifest.model_dump(by_alias=True), indent=2).encode("utf-8"),
        ),
    ]

    pending: list[tuple[str, str]] = []
    try:
        for final_name, suffix, data in artifacts:
            pending.append((_write_temp(output_path, suffix, data), final_name))
    except OSError:
        for temp_path, _ in pending:
            Path(temp_path).unlink(missing_ok=True)
        raise

    for temp_path, final_name in pending:
        os.replace(temp_path, output_path / final_name)

    logger.debug("Wrote index to %s (%d chunks)", output_path, manifest.chunk_count)
    return manifest
