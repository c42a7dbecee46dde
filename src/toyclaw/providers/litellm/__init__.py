# src/toyclaw/providers/litellm/__init__.py
"""LiteLLM provider clients for toyclaw.

- LiteLLMClient: report generation using LiteLLM
- LiteLLMEmbeddingClient: embeddings using LiteLLM
- ChatModels / EmbeddingModels: curated model constants
"""

from toyclaw.providers.litellm.client import LiteLLMClient, LiteLLMEmbeddingClient
from toyclaw.providers.litellm.models import ChatModels, EmbeddingModels

__all__ = [
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # Clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
