# src/toyclaw/retriever.py
"""Market-scoped nearest-neighbour retrieval over the compliance index."""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np

from toyclaw.embedder import Embedder
from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.index.storage import LoadedIndex, read_index
from toyclaw.markets import TargetMarket, find_alias_drift, market_key, resolve_market_filter
from toyclaw.models import RetrievedChunk

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 10


class RetrieverState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


def cosine_scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of one query vector against every row of matrix.

    A zero-norm row (or a zero-norm query) scores 0.
    """
    query = query.astype(np.float64, copy=False)
    rows = matrix.astype(np.float64, copy=False)
    dots = rows @ query
    norms = np.linalg.norm(rows, axis=1) * np.linalg.norm(query)
    scores = np.zeros_like(dots)
    np.divide(dots, norms, out=scores, where=norms > 0)
    return scores


class ComplianceRetriever:
    """Loads the index once and serves cosine top-k lookups per market.

    The loaded index is read-only and shared by all concurrent retrievals.
    Retrieval scans every in-market chunk; there is no approximate index.

    Example:
        retriever = ComplianceRetriever("storage/compliance-index", embedder)
        retriever.load()
        hits = await retriever.retrieve("lead limits for plush toys", "EUROPE", top_k=5)
    """

    def __init__(
        self,
        index_dir: str | Path,
        embedder: Embedder,
        default_top_k: int = DEFAULT_TOP_K,
    ) -> None:
        """Initialize the retriever.

        Args:
            index_dir: Directory holding the index artifacts.
            embedder: Embedder producing query vectors (must match the index's model).
            default_top_k: Results returned when top_k is not given.
        """
        self.index_dir = Path(index_dir)
        self.embedder = embedder
        self.default_top_k = default_top_k
        self.state = RetrieverState.UNLOADED
        self._index: LoadedIndex | None = None
        self._markets: np.ndarray | None = None

    @property
    def is_loaded(self) -> bool:
        return self.state is RetrieverState.LOADED

    @property
    def embedding_dim(self) -> int:
        return self._require_index().dim

    @property
    def chunk_count(self) -> int:
        return len(self._require_index().chunks)

    def _require_index(self) -> LoadedIndex:
        if self._index is None:
            raise RuntimeError("Index is not loaded; call load() first")
        return self._index

    def load(self) -> None:
        """Load the index into memory. A no-op once loaded.

        Raises:
            ComplianceError: INDEX_MISSING or INDEX_CORRUPT. The retriever
                returns to UNLOADED so a later call can try again.
        """
        if self.state is RetrieverState.LOADED:
            return

        self.state = RetrieverState.LOADING
        try:
            index = read_index(self.index_dir)
        except Exception:
            self.state = RetrieverState.UNLOADED
            raise

        self._index = index
        self._markets = np.array([chunk.market for chunk in index.chunks], dtype=str)
        self.state = RetrieverState.LOADED

        version = index.manifest.version if index.manifest else "unknown"
        doc_count = len({chunk.source for chunk in index.chunks})
        logger.info(
            "Compliance index loaded: %d chunks, %d docs, dim=%d, version=%s (%s format)",
            len(index.chunks),
            doc_count,
            index.dim,
            version,
            index.format.value,
        )
        for problem in find_alias_drift():
            logger.warning("Market alias drift: %s", problem)

    async def retrieve(
        self,
        query: str,
        target_market: TargetMarket | str,
        top_k: int | None = None,
    ) -> list[RetrievedChunk]:
        """Return the top_k chunks for query allowed in target_market.

        Only chunks whose market tag is in the market's alias set are scored,
        so chunks of other markets never appear regardless of similarity.

        Raises:
            ComplianceError: INDEX_MISSING / INDEX_CORRUPT from the lazy load,
                EMBEDDING_PROVIDER_* from the query embedding, or
                EMBEDDING_DIMENSION_MISMATCH when the query vector does not
                match the index.
        """
        self.load()
        index = self._require_index()
        k = self.default_top_k if top_k is None else top_k
        if k <= 0:
            return []

        query_vector = np.asarray(await self.embedder.aembed_text(query), dtype=np.float32)
        allowed = resolve_market_filter(target_market)

        if query_vector.shape[0] != index.dim:
            raise ComplianceError(
                f"Embedding dimension mismatch: query has {query_vector.shape[0]}, "
                f"index has {index.dim}",
                ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
                details={"queryDim": int(query_vector.shape[0]), "indexDim": index.dim},
            )

        candidates = np.flatnonzero(np.isin(self._markets, allowed))
        if candidates.size == 0:
            logger.debug("No chunks for market %s", market_key(target_market))
            return []

        scores = cosine_scores(query_vector, index.embeddings[candidates])
        order = np.argsort(-scores, kind="stable")[:k]

        results = []
        for position in order:
            chunk = index.chunks[int(candidates[position])]
            results.append(
                RetrievedChunk(
                    id=chunk.id,
                    text=chunk.text,
                    market=chunk.market,
                    source=chunk.source,
                    section=chunk.section,
                    score=float(scores[position]),
                )
            )
        return results

    def status(self) -> dict[str, Any]:
        """Summarize the loaded index for operators. Loads it if needed."""
        self.load()
        index = self._require_index()
        manifest = index.manifest.model_dump(by_alias=True) if index.manifest else None
        return {
            "indexDir": str(self.index_dir),
            "format": index.format.value,
            "chunkCount": len(index.chunks),
            "docCount": len({chunk.source for chunk in index.chunks}),
            "embeddingDim": index.dim,
            "chunksByMarket": dict(sorted(Counter(c.market for c in index.chunks).items())),
            "manifest": manifest,
        }
