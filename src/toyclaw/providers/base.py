# src/toyclaw/providers/base.py
"""Abstract base classes for text-generation and embedding providers."""

from abc import ABC, abstractmethod
from typing import Any


class LLMClient(ABC):
    """Abstract base class for text-generation providers.

    Implementations return the provider's raw response envelope in
    chat-completion shape (``{"choices": [{"message": {"content": ...}}]}``).
    Interpreting the envelope is left to the caller, so a malformed envelope
    can be reported as invalid model output rather than a transport failure.

    Example:
        class MyLLMClient(LLMClient):
            async def acomplete(self, messages, temperature=None, response_format=None,
                                timeout=None):
                return await my_api.chat(messages, temp=temperature)
    """

    model: str = "unknown"

    @abstractmethod
    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        response_format: dict | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Request a completion for the given messages.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            temperature: Optional sampling temperature. None = provider default.
            response_format: Optional structured-output request,
                             e.g. {"type": "json_object"}.
            timeout: Optional request timeout in seconds.

        Returns:
            The raw response envelope as a plain dict.

        Raises:
            ComplianceError: PROVIDER_TIMEOUT or PROVIDER_ERROR on transport failure.
        """
        ...


class EmbeddingClient(ABC):
    """Abstract base class for embedding providers.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts):
                return my_api.embed_batch(texts)
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of embedding vectors, one per input text.
            Order is preserved (result[i] corresponds to texts[i]).
        """
        ...

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors (async).

        Default implementation calls sync embed(). Override in subclasses
        for true async behavior.
        """
        return self.embed(texts)
