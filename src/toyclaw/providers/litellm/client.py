# src/toyclaw/providers/litellm/client.py
"""LiteLLM client implementations for text-generation and embedding APIs."""

from __future__ import annotations

import logging
from typing import Any

import litellm

from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.providers.base import EmbeddingClient, LLMClient
from toyclaw.providers.litellm.models import ChatModels, EmbeddingModels

logger = logging.getLogger(__name__)

_TIMEOUT_ERRORS = (litellm.Timeout, TimeoutError)


def _provider_details(exc: Exception, model: str) -> dict[str, Any]:
    details: dict[str, Any] = {"model": model}
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        details["status"] = status_code
    return details


def _to_plain_dict(response: Any) -> dict[str, Any]:
    if isinstance(response, dict):
        return response
    if hasattr(response, "model_dump"):
        return response.model_dump()
    if hasattr(response, "to_dict"):
        return response.to_dict()
    return dict(response)


class LiteLLMClient(LLMClient):
    """LiteLLM-based client for report generation.

    Supports any model available through LiteLLM (Gemini, OpenAI, Anthropic,
    Ollama, etc.).

    Example:
        from toyclaw.providers.litellm import LiteLLMClient, ChatModels

        client = LiteLLMClient(model=ChatModels.GEMINI_3_FLASH)
        envelope = await client.acomplete([{"role": "user", "content": "Hello"}])
    """

    def __init__(
        self,
        model: str = ChatModels.GEMINI_3_FLASH,
        api_key: str | None = None,
        num_retries: int = 0,
        timeout: float | None = None,
    ) -> None:
        """Initialize the LiteLLM client.

        Args:
            model: LiteLLM model identifier.
            api_key: Optional API key. None = let LiteLLM read the provider's env var.
            num_retries: Transport-level retries handled by LiteLLM. Default: 0.
            timeout: Default request timeout in seconds.
        """
        self.model = model
        self.api_key = api_key
        self.num_retries = num_retries
        self.timeout = timeout

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        response_format: dict | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Request a completion using LiteLLM and return the raw envelope."""
        completion_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "drop_params": True,
            "num_retries": self.num_retries,
        }
        if temperature is not None:
            completion_kwargs["temperature"] = temperature
        if response_format is not None:
            completion_kwargs["response_format"] = response_format
        effective_timeout = timeout if timeout is not None else self.timeout
        if effective_timeout is not None:
            completion_kwargs["timeout"] = effective_timeout
        if self.api_key:
            completion_kwargs["api_key"] = self.api_key

        try:
            response = await litellm.acompletion(**completion_kwargs)
        except _TIMEOUT_ERRORS as exc:
            raise ComplianceError(
                f"Text generation timed out for model {self.model}",
                ErrorCode.PROVIDER_TIMEOUT,
                details={"model": self.model},
            ) from exc
        except Exception as exc:
            raise ComplianceError(
                f"Text generation failed for model {self.model}: {exc}",
                ErrorCode.PROVIDER_ERROR,
                details=_provider_details(exc, self.model),
            ) from exc

        return _to_plain_dict(response)


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Example:
        from toyclaw.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.GEMINI_EMBEDDING_001)
        embeddings = client.embed(["lead content limits", "small parts"])
    """

    def __init__(
        self,
        model: str = EmbeddingModels.GEMINI_EMBEDDING_001,
        api_key: str | None = None,
        num_retries: int = 0,
        timeout: float | None = None,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
            api_key: Optional API key. None = let LiteLLM read the provider's env var.
            num_retries: Transport-level retries handled by LiteLLM. Default: 0.
            timeout: Request timeout in seconds.
        """
        self.model = model
        self.api_key = api_key
        self.num_retries = num_retries
        self.timeout = timeout

    def _kwargs(self, texts: list[str]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "input": texts,
            "num_retries": self.num_retries,
        }
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self.api_key:
            kwargs["api_key"] = self.api_key
        return kwargs

    def _wrap_failure(self, exc: Exception) -> ComplianceError:
        if isinstance(exc, _TIMEOUT_ERRORS):
            return ComplianceError(
                f"Embedding request timed out for model {self.model}",
                ErrorCode.EMBEDDING_PROVIDER_TIMEOUT,
                details={"model": self.model},
            )
        return ComplianceError(
            f"Embedding request failed for model {self.model}: {exc}",
            ErrorCode.EMBEDDING_PROVIDER_ERROR,
            details=_provider_details(exc, self.model),
        )

    def _extract(self, response: Any, expected: int) -> list[list[float]]:
        data = getattr(response, "data", None)
        if data is None and isinstance(response, dict):
            data = response.get("data")
        if not isinstance(data, list) or len(data) != expected:
            raise ComplianceError(
                f"Embedding response for model {self.model} is malformed",
                ErrorCode.EMBEDDING_PROVIDER_ERROR,
                details={"model": self.model, "expected": expected},
            )
        try:
            # Sort by index to maintain order
            sorted_data = sorted(data, key=lambda x: x["index"])
            vectors = [[float(v) for v in item["embedding"]] for item in sorted_data]
        except (KeyError, TypeError, ValueError) as exc:
            raise ComplianceError(
                f"Embedding response for model {self.model} is malformed",
                ErrorCode.EMBEDDING_PROVIDER_ERROR,
                details={"model": self.model},
            ) from exc
        if any(not vector for vector in vectors):
            raise ComplianceError(
                f"Embedding response for model {self.model} contains an empty vector",
                ErrorCode.EMBEDDING_PROVIDER_ERROR,
                details={"model": self.model},
            )
        return vectors

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []
        try:
            response = litellm.embedding(**self._kwargs(texts))
        except Exception as exc:
            raise self._wrap_failure(exc) from exc
        return self._extract(response, len(texts))

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []
        try:
            response = await litellm.aembedding(**self._kwargs(texts))
        except Exception as exc:
            raise self._wrap_failure(exc) from exc
        return self._extract(response, len(texts))
