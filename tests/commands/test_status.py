# tests/commands/test_status.py
"""Tests for the status command."""

from toyclaw.commands import status
from toyclaw.index import write_index
from toyclaw.models import Chunk


def chunk(n: int, market: str, source: str) -> Chunk:
    return Chunk(
        id=f"{market}/{source}#{n}",
        text=f"Clause {n} of {source}",
        market=market,
        source=source,
        section="full-document",
    )


class TestStatusCommand:
    def test_describes_index(self, clean_env):
        index_dir = clean_env / "index"
        write_index(
            index_dir,
            [
                chunk(0, "EUROPE", "en71.pdf"),
                chunk(1, "EUROPE", "en71.pdf"),
                chunk(0, "US", "a.pdf"),
            ],
            [[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]],
            created_at="2025-01-01T00:00:00.000Z",
        )

        result = status.status(index_dir=str(index_dir))

        assert result.success is True
        assert result.format == "split"
        assert result.version == "1.0.0"
        assert result.created_at == "2025-01-01T00:00:00.000Z"
        assert result.doc_count == 2
        assert result.chunk_count == 3
        assert result.embedding_dim == 2
        assert result.chunks_by_market == {"EUROPE": 2, "US": 1}

    def test_missing_index(self, clean_env):
        result = status.status(index_dir=str(clean_env / "none"))

        assert result.success is False
        assert "Compliance index not found" in result.error
