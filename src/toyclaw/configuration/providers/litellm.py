# src/toyclaw/configuration/providers/litellm.py
"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toyclaw.embedder import Embedder
    from toyclaw.providers import LLMClient
    from toyclaw.settings import Settings


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for generation and embedding calls.

    Args:
        llm: LiteLLM model identifier for report generation.
             Examples: "gemini/gemini-3-flash-preview", "openai/gpt-5-mini"
        embedding: LiteLLM model identifier for embeddings. Must be the model
                   the index was built with.
        llm_api_key: Optional API key for the LLM. None = LiteLLM reads its env var.
        embedding_api_key: Optional API key for embeddings.

    Example:
        provider = LiteLLMProvider(
            llm="gemini/gemini-3-flash-preview",
            embedding="gemini/gemini-embedding-001",
        )
    """

    llm: str
    embedding: str
    llm_api_key: str | None = None
    embedding_api_key: str | None = None

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client.

        Args:
            settings: Settings containing num_retries and provider_timeout.
        """
        from toyclaw.embedder import ClientEmbedder
        from toyclaw.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            api_key=self.embedding_api_key,
            num_retries=settings.num_retries,
            timeout=settings.provider_timeout,
        )
        return ClientEmbedder(embedding_client=embedding_client)

    def build_llm_client(self, settings: Settings) -> LLMClient:
        """Build a LiteLLMClient for report generation.

        Args:
            settings: Settings containing num_retries and provider_timeout.
        """
        from toyclaw.providers.litellm import LiteLLMClient

        return LiteLLMClient(
            model=self.llm,
            api_key=self.llm_api_key,
            num_retries=settings.num_retries,
            timeout=settings.provider_timeout,
        )
