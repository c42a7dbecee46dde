# src/toyclaw/configuration/base.py
"""Protocol definitions for configuration objects.

Provider and storage configurations are frozen dataclasses that satisfy
these protocols structurally; stores, by contrast, are ABCs in stores/base.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from toyclaw.embedder import Embedder
    from toyclaw.providers import LLMClient
    from toyclaw.settings import Settings
    from toyclaw.stores import AnalysisStore, AssessmentStore


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Provider configurations build the model-backed components:
    - Embedder: vectors for index chunks and retrieval queries
    - LLMClient: the text-generation backend for compliance reports
    """

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build an embedder for chunks and queries."""
        ...

    def build_llm_client(self, settings: Settings) -> LLMClient:
        """Build the text-generation client used for reports."""
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations.

    Storage configurations build the analysis and assessment stores.
    """

    def build_stores(self) -> tuple[AnalysisStore, AssessmentStore]:
        """Build both stores.

        Returns:
            Tuple of (analysis_store, assessment_store)
        """
        ...
