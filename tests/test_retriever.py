# tests/test_retriever.py
"""Tests for the ComplianceRetriever."""

import json
import os
from unittest.mock import patch

import numpy as np
import pytest

from toyclaw.embedder import Embedder
from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.index import LEGACY_FILE, read_index, write_index
from toyclaw.models import Chunk
from toyclaw.retriever import ComplianceRetriever, RetrieverState, cosine_scores


class QueryEmbedder(Embedder):
    """Returns the same query vector for every text."""

    def __init__(self, vector: list[float]) -> None:
        self.vector = vector
        self.calls = 0

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls += 1
        return [list(self.vector) for _ in texts]

    async def aembed_texts(self, texts: list[str]) -> list[list[float]]:
        return self.embed_texts(texts)


def chunk(chunk_id: str, market: str) -> Chunk:
    return Chunk(
        id=chunk_id,
        text=f"Regulatory text of {chunk_id}",
        market=market,
        source=chunk_id.split("#")[0].split("/")[-1],
        section="full-document",
    )


INDEX = [
    (chunk("EUROPE/en71-3.pdf#0", "EUROPE"), [1.0, 0.0, 0.0]),
    (chunk("Europe欧洲标准/reach.pdf#0", "Europe欧洲标准"), [0.9, 0.1, 0.0]),
    (chunk("US/astm.pdf#0", "US"), [1.0, 0.0, 0.0]),
    (chunk("Global/iso8124.pdf#0", "Global"), [0.5, 0.5, 0.0]),
    (chunk("MIDDLE_EAST/gso.pdf#0", "MIDDLE_EAST"), [1.0, 0.0, 0.0]),
    (chunk("EUROPE/en71-1.pdf#0", "EUROPE"), [0.0, 0.0, 1.0]),
]


@pytest.fixture
def index_dir(temp_dir):
    write_index(temp_dir, [c for c, _ in INDEX], [v for _, v in INDEX])
    return temp_dir


@pytest.fixture
def retriever(index_dir):
    return ComplianceRetriever(index_dir, QueryEmbedder([1.0, 0.0, 0.0]))


class TestCosineScores:
    def test_matches_definition(self):
        matrix = np.array([[1.0, 0.0], [1.0, 1.0], [-1.0, 0.0]], dtype=np.float32)
        scores = cosine_scores(np.array([2.0, 0.0]), matrix)
        assert scores.tolist() == pytest.approx([1.0, 1 / np.sqrt(2), -1.0])

    def test_zero_norm_scores_zero(self):
        matrix = np.array([[0.0, 0.0], [1.0, 0.0]], dtype=np.float32)
        scores = cosine_scores(np.array([1.0, 0.0]), matrix)
        assert scores.tolist() == [0.0, 1.0]
        assert not np.isnan(cosine_scores(np.zeros(2), matrix)).any()


class TestLoad:
    def test_load(self, retriever):
        assert retriever.state is RetrieverState.UNLOADED
        retriever.load()
        assert retriever.is_loaded
        assert retriever.chunk_count == 6
        assert retriever.embedding_dim == 3

    def test_load_is_idempotent(self, retriever):
        with patch("toyclaw.retriever.read_index", wraps=read_index) as mock_read:
            retriever.load()
            retriever.load()
        assert mock_read.call_count == 1

    def test_missing_index_can_retry(self, temp_dir):
        index_dir = os.path.join(temp_dir, "index")
        retriever = ComplianceRetriever(index_dir, QueryEmbedder([1.0, 0.0, 0.0]))

        with pytest.raises(ComplianceError) as exc_info:
            retriever.load()
        assert exc_info.value.code is ErrorCode.INDEX_MISSING
        assert retriever.state is RetrieverState.UNLOADED

        write_index(index_dir, [c for c, _ in INDEX], [v for _, v in INDEX])
        retriever.load()
        assert retriever.is_loaded

    def test_logs_summary(self, retriever, caplog):
        with caplog.at_level("INFO", logger="toyclaw.retriever"):
            retriever.load()
        assert "Compliance index loaded: 6 chunks" in caplog.text

    def test_status(self, retriever):
        status = retriever.status()
        assert status["chunkCount"] == 6
        assert status["embeddingDim"] == 3
        assert status["chunksByMarket"]["EUROPE"] == 2
        assert status["manifest"]["chunkCount"] == 6


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_market_isolation(self, retriever):
        results = await retriever.retrieve("lead limits", "EUROPE", top_k=10)

        markets = {r.market for r in results}
        assert markets <= {"EUROPE", "Europe欧洲标准", "Global"}
        assert [r.id for r in results][:3] == [
            "EUROPE/en71-3.pdf#0",
            "Europe欧洲标准/reach.pdf#0",
            "Global/iso8124.pdf#0",
        ]

    @pytest.mark.asyncio
    async def test_other_market_never_leaks(self, retriever):
        results = await retriever.retrieve("lead limits", "US", top_k=10)
        assert [r.id for r in results] == ["US/astm.pdf#0", "Global/iso8124.pdf#0"]

    @pytest.mark.asyncio
    async def test_scores_descending(self, retriever):
        results = await retriever.retrieve("lead limits", "EUROPE", top_k=10)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert scores[0] == pytest.approx(1.0)
        assert scores[-1] == pytest.approx(0.0)

    @pytest.mark.asyncio
    async def test_top_k(self, retriever):
        results = await retriever.retrieve("lead limits", "EUROPE", top_k=2)
        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_default_top_k(self, index_dir):
        retriever = ComplianceRetriever(index_dir, QueryEmbedder([1.0, 0.0, 0.0]), default_top_k=1)
        results = await retriever.retrieve("lead limits", "EUROPE")
        assert [r.id for r in results] == ["EUROPE/en71-3.pdf#0"]

    @pytest.mark.asyncio
    async def test_zero_top_k(self, retriever):
        assert await retriever.retrieve("lead limits", "EUROPE", top_k=0) == []

    @pytest.mark.asyncio
    async def test_lazy_load(self, retriever):
        await retriever.retrieve("lead limits", "EUROPE")
        assert retriever.is_loaded

    @pytest.mark.asyncio
    async def test_dimension_mismatch(self, index_dir):
        retriever = ComplianceRetriever(index_dir, QueryEmbedder([1.0, 0.0, 0.0, 0.0]))

        with patch("toyclaw.retriever.cosine_scores") as mock_scores:
            with pytest.raises(ComplianceError) as exc_info:
                await retriever.retrieve("lead limits", "EUROPE")
        mock_scores.assert_not_called()
        assert exc_info.value.code is ErrorCode.EMBEDDING_DIMENSION_MISMATCH
        assert exc_info.value.details == {"queryDim": 4, "indexDim": 3}

    @pytest.mark.asyncio
    async def test_market_without_chunks(self, temp_dir):
        write_index(temp_dir, [INDEX[0][0]], [INDEX[0][1]])
        retriever = ComplianceRetriever(temp_dir, QueryEmbedder([1.0, 0.0, 0.0]))
        assert await retriever.retrieve("lead limits", "JAPAN_KOREA") == []

    @pytest.mark.asyncio
    async def test_ties_keep_index_order(self, temp_dir):
        chunks = [chunk(f"EUROPE/doc.pdf#{n}", "EUROPE") for n in range(3)]
        write_index(temp_dir, chunks, [[1.0, 0.0]] * 3)
        retriever = ComplianceRetriever(temp_dir, QueryEmbedder([1.0, 0.0]))

        results = await retriever.retrieve("q", "EUROPE", top_k=3)
        assert [r.id for r in results] == [c.id for c in chunks]

    @pytest.mark.asyncio
    async def test_legacy_index(self, temp_dir):
        records = [{**c.model_dump(), "embedding": v} for c, v in INDEX]
        with open(os.path.join(temp_dir, LEGACY_FILE), "w", encoding="utf-8") as f:
            json.dump(records, f)
        retriever = ComplianceRetriever(temp_dir, QueryEmbedder([1.0, 0.0, 0.0]))

        results = await retriever.retrieve("lead limits", "US")
        assert [r.id for r in results] == ["US/astm.pdf#0", "Global/iso8124.pdf#0"]

    @pytest.mark.asyncio
    async def test_corrupt_index(self, index_dir):
        np.arange(5, dtype="<f4").tofile(os.path.join(index_dir, "embeddings.bin"))
        retriever = ComplianceRetriever(index_dir, QueryEmbedder([1.0, 0.0, 0.0]))

        with pytest.raises(ComplianceError) as exc_info:
            await retriever.retrieve("lead limits", "EUROPE")
        assert exc_info.value.code is ErrorCode.INDEX_CORRUPT

    @pytest.mark.asyncio
    async def test_embedding_failure_propagates(self, retriever):
        async def fail(texts):
            raise ComplianceError("timed out", ErrorCode.EMBEDDING_PROVIDER_TIMEOUT)

        retriever.embedder.aembed_texts = fail
        with pytest.raises(ComplianceError) as exc_info:
            await retriever.retrieve("lead limits", "EUROPE")
        assert exc_info.value.code is ErrorCode.EMBEDDING_PROVIDER_TIMEOUT
