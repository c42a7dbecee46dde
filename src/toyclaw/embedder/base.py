# src/toyclaw/embedder/base.py
"""Embedder abstract base class."""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """Abstract base class for embedding generation.

    Subclasses must implement embed_texts and aembed_texts.
    """

    @abstractmethod
    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        ...

    @abstractmethod
    async def aembed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async)."""
        ...

    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        return self.embed_texts([text])[0]

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        result = await self.aembed_texts([text])
        return result[0]
