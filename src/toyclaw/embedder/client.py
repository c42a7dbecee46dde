# src/toyclaw/embedder/client.py
"""Client-based embedder implementation."""

from toyclaw.embedder.base import Embedder
from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.providers.base import EmbeddingClient


class ClientEmbedder(Embedder):
    """Embedder that uses an EmbeddingClient for generating embeddings.

    Example:
        from toyclaw.providers.litellm import LiteLLMEmbeddingClient
        from toyclaw.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="gemini/gemini-embedding-001")
        embedder = ClientEmbedder(embedding_client=client)
    """

    def __init__(self, embedding_client: EmbeddingClient) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
        """
        self._client = embedding_client

    @staticmethod
    def _check_count(texts: list[str], vectors: list[list[float]]) -> list[list[float]]:
        if len(vectors) != len(texts):
            raise ComplianceError(
                f"Embedding count mismatch: sent {len(texts)} texts, got {len(vectors)} vectors",
                ErrorCode.EMBEDDING_PROVIDER_ERROR,
            )
        return vectors

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        if not texts:
            return []
        return self._check_count(texts, self._client.embed(texts))

    async def aembed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async)."""
        if not texts:
            return []
        return self._check_count(texts, await self._client.aembed(texts))
