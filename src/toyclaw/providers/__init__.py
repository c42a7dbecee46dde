# src/toyclaw/providers/__init__.py
"""Provider abstractions and implementations.

Usage:
    from toyclaw.providers import LLMClient, EmbeddingClient
    from toyclaw.providers.litellm import LiteLLMClient, ChatModels
"""

from toyclaw.providers.base import EmbeddingClient, LLMClient
from toyclaw.providers.litellm import (
    ChatModels,
    EmbeddingModels,
    LiteLLMClient,
    LiteLLMEmbeddingClient,
)

__all__ = [
    # ABCs
    "LLMClient",
    "EmbeddingClient",
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # LiteLLM clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
