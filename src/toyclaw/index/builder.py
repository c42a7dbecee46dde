# src/toyclaw/index/builder.py
"""Offline compliance index builder."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from toyclaw.chunker import Chunker
from toyclaw.embedder import Embedder
from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.index.storage import write_index
from toyclaw.loaders import LoaderRegistry
from toyclaw.markets import GLOBAL_MARKET, MARKET_DIRS, market_for_folder
from toyclaw.models import Chunk, IndexManifest

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int, str], None]
"""Callback for build progress updates.

Args:
    stage: "discovering", "chunking", "embedding" or "writing"
    current: Current progress count (0 to total)
    total: Total items to process
    message: Human-readable status message
"""


@dataclass(frozen=True)
class SourceDocument:
    """A document file and the market its folder assigns it to."""

    path: Path
    market: str

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class SkippedDocument:
    filename: str
    market: str
    reason: str


@dataclass
class BuildResult:
    """Outcome of one index build."""

    manifest: IndexManifest
    chunk_counts: dict[str, int] = field(default_factory=dict)
    skipped: list[SkippedDocument] = field(default_factory=list)
    missing_folders: list[str] = field(default_factory=list)
    embedding_dim: int = 0

    @property
    def total_chunks(self) -> int:
        return self.manifest.chunk_count


class IndexBuilder:
    """Turns a tree of regulatory documents into a persisted vector index.

    Files at the root of the documents directory are tagged "Global"; files
    inside a market folder (for example "Europe欧洲标准" or "EUROPE") are
    tagged with that market. A market reads one folder only; when both the
    localized and the bare folder exist, the localized one wins.

    Pipeline:
    1. Discover documents and assign markets
    2. Extract text and chunk each document (failures skip the document)
    3. Embed all chunks in fixed-size batches (failures abort the build)
    4. Write chunks_meta.json, embeddings.bin and meta.json

    Example:
        builder = IndexBuilder(embedder=ClientEmbedder(LiteLLMEmbeddingClient()))
        result = builder.build("compliance-docs", "storage/compliance-index")
    """

    def __init__(
        self,
        embedder: Embedder,
        loader_registry: LoaderRegistry | None = None,
        chunker: Chunker | None = None,
        batch_size: int = 20,
        batch_delay: float = 0.5,
        market_dirs: dict[str, str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the builder.

        Args:
            embedder: Embedder used for every chunk.
            loader_registry: Text extraction per file type. Default: pypdf + text.
            chunker: Chunk splitter. Default: 2000 chars with 200 overlap.
            batch_size: Chunks per embedding request.
            batch_delay: Seconds to wait between embedding requests.
            market_dirs: Folder name -> market tag. Default: MARKET_DIRS.
            sleep: Sleep function used between batches.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.embedder = embedder
        self.loader_registry = loader_registry or LoaderRegistry.default()
        self.chunker = chunker or Chunker()
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.market_dirs = MARKET_DIRS if market_dirs is None else market_dirs
        self._sleep = sleep

    def _supported_files(self, directory: Path) -> list[Path]:
        return sorted(
            p for p in directory.iterdir() if p.is_file() and self.loader_registry.supports(str(p))
        )

    def discover(self, docs_dir: str | Path) -> tuple[list[SourceDocument], list[str]]:
        """Find documents and assign each a market.

        Returns:
            Tuple of (documents, missing_market_folders)

        Raises:
            FileNotFoundError: If docs_dir does not exist.
        """
        docs_path = Path(docs_dir)
        if not docs_path.is_dir():
            raise FileNotFoundError(f"Documents directory not found: {docs_path}")

        documents = [
            SourceDocument(path=p, market=GLOBAL_MARKET) for p in self._supported_files(docs_path)
        ]

        folders_by_market: dict[str, list[Path]] = {}
        for child in sorted(p for p in docs_path.iterdir() if p.is_dir()):
            market = market_for_folder(child.name, self.market_dirs)
            if market is not None:
                folders_by_market.setdefault(market, []).append(child)

        # Chunk ids are market/filename#n, so each market reads exactly one folder
        missing = []
        seen: set[str] = set()
        for folder_name, market in self.market_dirs.items():
            if market in seen:
                continue
            folders = folders_by_market.get(market, [])
            if not folders:
                logger.warning("Skipping missing directory: %s", folder_name)
                missing.append(folder_name)
                continue
            seen.add(market)
            folder = next((f for f in folders if f.name == folder_name), folders[0])
            for ignored in folders:
                if ignored != folder:
                    logger.warning(
                        "Ignoring %s: %s already supplies %s documents",
                        ignored.name,
                        folder.name,
                        market,
                    )
            documents.extend(
                SourceDocument(path=p, market=market) for p in self._supported_files(folder)
            )
        return documents, missing

    def extract_and_chunk(self, document: SourceDocument) -> list[Chunk]:
        """Extract one document's text and split it into chunks.

        Returns an empty list (with a warning) when no text could be extracted.
        """
        text = self.loader_registry.extract_text(str(document.path))
        if not text or not text.strip():
            logger.warning("No text extracted from %s", document.filename)
            return []
        chunks = self.chunker.chunk(text, market=document.market, filename=document.filename)
        logger.info("[%s] %s -> %d chunks", document.market, document.filename, len(chunks))
        return chunks

    def embed_all(
        self,
        chunks: list[Chunk],
        on_progress: ProgressCallback | None = None,
    ) -> np.ndarray:
        """Embed chunk texts in batches.

        Any batch failure propagates; nothing is returned for a partial run.

        Returns:
            Float32 matrix of shape (len(chunks), dim).
        """
        if not chunks:
            return np.zeros((0, 0), dtype=np.float32)

        total_batches = math.ceil(len(chunks) / self.batch_size)
        vectors: list[list[float]] = []
        for batch_index, start in enumerate(range(0, len(chunks), self.batch_size), start=1):
            batch = chunks[start : start + self.batch_size]
            message = f"Embedding batch {batch_index}/{total_batches} ({len(batch)} chunks)"
            logger.info(message)
            if on_progress:
                on_progress("embedding", batch_index - 1, total_batches, message)

            embeddings = self.embedder.embed_texts([chunk.text for chunk in batch])
            if len(embeddings) != len(batch):
                raise ComplianceError(
                    f"Embedding count mismatch: {len(batch)} chunks, {len(embeddings)} embeddings",
                    ErrorCode.EMBEDDING_PROVIDER_ERROR,
                )
            vectors.extend(embeddings)

            if start + self.batch_size < len(chunks) and self.batch_delay > 0:
                self._sleep(self.batch_delay)

        if on_progress:
            on_progress("embedding", total_batches, total_batches, "Embedding complete")

        dim = len(vectors[0])
        if any(len(vector) != dim for vector in vectors):
            raise ComplianceError(
                "Embedding provider returned vectors of differing dimensions",
                ErrorCode.EMBEDDING_PROVIDER_ERROR,
            )
        return np.asarray(vectors, dtype=np.float32)

    def build(
        self,
        docs_dir: str | Path,
        output_dir: str | Path,
        on_progress: ProgressCallback | None = None,
    ) -> BuildResult:
        """Run the full build and write the index.

        Args:
            docs_dir: Root of the documents tree.
            output_dir: Index directory to (re)write.
            on_progress: Optional callback(stage, current, total, message)

        Returns:
            BuildResult with per-document chunk counts and skipped documents.

        Raises:
            FileNotFoundError: If docs_dir does not exist.
            ComplianceError: If any embedding batch fails. No artifacts are written.
        """

        def progress(stage: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(stage, current, total, message)

        progress("discovering", 0, 1, f"Scanning {docs_dir}...")
        documents, missing = self.discover(docs_dir)
        progress("discovering", 1, 1, f"Found {len(documents)} documents")

        all_chunks: list[Chunk] = []
        chunk_counts: dict[str, int] = {}
        skipped: list[SkippedDocument] = []
        for i, document in enumerate(documents):
            progress("chunking", i, len(documents), f"[{document.market}] {document.filename}")
            try:
                chunks = self.extract_and_chunk(document)
            except Exception as exc:
                # One unreadable document must not stop the others
                logger.warning("Skipping %s: %s", document.filename, exc)
                skipped.append(SkippedDocument(document.filename, document.market, str(exc)))
                continue
            if not chunks:
                skipped.append(SkippedDocument(document.filename, document.market, "no text"))
                continue
            chunk_counts[f"{document.market}/{document.filename}"] = len(chunks)
            all_chunks.extend(chunks)
        progress("chunking", len(documents), len(documents), f"{len(all_chunks)} chunks")

        logger.info("Total chunks to embed: %d", len(all_chunks))
        embeddings = self.embed_all(all_chunks, on_progress=on_progress)

        progress("writing", 0, 1, f"Writing index to {output_dir}...")
        manifest = write_index(output_dir, all_chunks, embeddings)
        progress("writing", 1, 1, "Index written")

        logger.info(
            "%d documents -> %d chunks indexed", manifest.doc_count, manifest.chunk_count
        )
        return BuildResult(
            manifest=manifest,
            chunk_counts=chunk_counts,
            skipped=skipped,
            missing_folders=missing,
            embedding_dim=int(embeddings.shape[1]) if embeddings.size else 0,
        )
