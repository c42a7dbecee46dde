# tests/commands/test_build_index.py
"""Tests for the build-index command."""

from unittest.mock import MagicMock, patch

import pytest

from toyclaw.commands import CommandStage, build_index
from toyclaw.index import read_index

EN71 = "EN 71-3 specifies migration limits for lead and seventeen other elements in toys."
ISO = "ISO 8124-1 covers mechanical hazards such as sharp edges and small detachable parts."


def fake_embedding(**kwargs):
    response = MagicMock()
    response.data = [
        {"index": i, "embedding": [1.0, float(i), 0.5]} for i, _ in enumerate(kwargs["input"])
    ]
    return response


@pytest.fixture
def docs_dir(clean_env, monkeypatch):
    monkeypatch.setenv("TOYCLAW_EMBEDDING_API_KEY", "test-key")
    root = clean_env / "compliance-docs"
    (root / "Europe欧洲标准").mkdir(parents=True)
    (root / "Europe欧洲标准" / "en71-3.txt").write_text(EN71, encoding="utf-8")
    (root / "iso8124.md").write_text(ISO, encoding="utf-8")
    return root


class TestBuildIndexCommand:
    @patch("toyclaw.providers.litellm.client.litellm.embedding", side_effect=fake_embedding)
    def test_builds_default_location(self, mock_embedding, docs_dir, clean_env):
        updates = []

        result = build_index.build_index(on_progress=updates.append)

        assert result.success is True
        assert result.total_chunks == 2
        assert result.doc_count == 2
        assert result.embedding_dim == 3
        assert {(d.market, d.filename, d.chunks) for d in result.documents} == {
            ("Global", "iso8124.md", 1),
            ("EUROPE", "en71-3.txt", 1),
        }
        assert "US美国标准" in result.missing_folders
        assert updates[-1].stage is CommandStage.COMPLETE
        assert CommandStage.EMBEDDING in {u.stage for u in updates}
        assert len(read_index(clean_env / "storage" / "compliance-index").chunks) == 2
        assert mock_embedding.call_args.kwargs["api_key"] == "test-key"

    @patch("toyclaw.providers.litellm.client.litellm.embedding", side_effect=fake_embedding)
    def test_explicit_paths(self, mock_embedding, docs_dir, clean_env):
        output = clean_env / "custom-index"

        result = build_index.build_index(docs_dir=docs_dir, output_dir=output)

        assert result.success is True
        assert result.index_dir == str(output)
        assert len(read_index(output).chunks) == 2

    def test_missing_docs_dir(self, clean_env):
        result = build_index.build_index(docs_dir=clean_env / "nowhere")

        assert result.success is False
        assert "Documents directory not found" in result.error

    @patch("toyclaw.config.litellm.validate_environment")
    def test_missing_credentials(self, mock_validate, docs_dir, monkeypatch):
        monkeypatch.delenv("TOYCLAW_EMBEDDING_API_KEY")
        mock_validate.return_value = {
            "keys_in_environment": False,
            "missing_keys": ["GEMINI_API_KEY"],
        }

        result = build_index.build_index()

        assert result.success is False
        assert "No API key found" in result.error
        assert "GEMINI_API_KEY" in result.error

    @patch("toyclaw.providers.litellm.client.litellm.embedding")
    def test_embedding_failure_aborts(self, mock_embedding, docs_dir, clean_env):
        mock_embedding.side_effect = RuntimeError("quota exhausted")

        result = build_index.build_index()

        assert result.success is False
        assert result.error.startswith("Index build aborted:")
        assert not (clean_env / "storage" / "compliance-index" / "embeddings.bin").exists()

    @patch("toyclaw.index.builder.write_index", side_effect=ValueError("Expected 2 embeddings"))
    @patch("toyclaw.providers.litellm.client.litellm.embedding", side_effect=fake_embedding)
    def test_write_error_is_reported(self, mock_embedding, mock_write, docs_dir):
        result = build_index.build_index()

        assert result.success is False
        assert result.error == "Expected 2 embeddings"
