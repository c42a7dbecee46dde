"""Configuration objects for toyclaw.

Provider configurations (build model-backed components):
- LiteLLMProvider: Uses LiteLLM for generation and embedding calls

Storage configurations (build data stores):
- LocalStorage: SQLite files in a local directory

Example:
    from toyclaw import Toyclaw, LiteLLMProvider, LocalStorage

    app = Toyclaw(
        provider=LiteLLMProvider(
            llm="gemini/gemini-3-flash-preview",
            embedding="gemini/gemini-embedding-001",
        ),
        storage=LocalStorage("./storage"),
        index_dir="./storage/compliance-index",
    )
"""

from toyclaw.configuration.base import ProviderConfig, StorageConfig
from toyclaw.configuration.providers import LiteLLMProvider
from toyclaw.configuration.storage import LocalStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
]
