# src/toyclaw/providers/litellm/models.py
"""Curated model constants for the LiteLLM provider.

Any valid LiteLLM model string works; these exist for autocomplete.
"""


class ChatModels:
    """Chat/completion models usable for report generation."""

    # Google Gemini
    GEMINI_3_PRO = "gemini/gemini-3-pro-preview"
    GEMINI_3_FLASH = "gemini/gemini-3-flash-preview"
    GEMINI_25_FLASH = "gemini/gemini-2.5-flash"

    # OpenAI
    GPT_5_MINI = "openai/gpt-5-mini"
    GPT_41_MINI = "openai/gpt-4.1-mini"

    # Anthropic
    CLAUDE_SONNET_45 = "anthropic/claude-sonnet-4-5-20250929"
    CLAUDE_HAIKU_45 = "anthropic/claude-haiku-4-5-20251001"

    # Local
    OLLAMA_LLAMA_32 = "ollama/llama3.2"


class EmbeddingModels:
    """Embedding models usable for the compliance index."""

    GEMINI_EMBEDDING_001 = "gemini/gemini-embedding-001"
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"
    OLLAMA_NOMIC = "ollama/nomic-embed-text"
