# src/toyclaw/toyclaw.py
"""Central configuration class for toyclaw."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from toyclaw.settings import Settings

if TYPE_CHECKING:
    from toyclaw.configuration import ProviderConfig, StorageConfig
    from toyclaw.embedder import Embedder
    from toyclaw.generator import ComplianceReportGenerator
    from toyclaw.index import IndexBuilder
    from toyclaw.index.builder import BuildResult, ProgressCallback
    from toyclaw.loaders import LoaderRegistry
    from toyclaw.markets import TargetMarket
    from toyclaw.models import ComplianceAssessment
    from toyclaw.providers import LLMClient
    from toyclaw.retriever import ComplianceRetriever
    from toyclaw.service import ComplianceService
    from toyclaw.stores import AnalysisStore, AssessmentStore


class Toyclaw:
    """Bundles provider, storage, settings and the index location.

    Configure once, then build the index builder, retriever, report
    generator and service from it. The retriever is created once and shared,
    so the index is loaded a single time per instance.

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
        app.build_index("./compliance-docs")
        assessment = await app.service().assess("req-123", "EUROPE")
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig,
        storage: StorageConfig | None = None,
        analysis_store: AnalysisStore | None = None,
        assessment_store: AssessmentStore | None = None,
        index_dir: str | Path,
        settings: Settings | None = None,
        loader_registry: LoaderRegistry | None = None,
    ) -> None:
        """Create a Toyclaw instance.

        Args:
            provider: Provider configuration (builds embedder and LLM client).
            storage: Storage bundle. Mutually exclusive with explicit stores.
            analysis_store: Explicit analysis store. Use with assessment_store.
            assessment_store: Explicit assessment store.
            index_dir: Directory holding (or receiving) the compliance index.
            settings: Behavioral settings.
            loader_registry: Optional loader registry for the index builder.

        Raises:
            ValueError: If neither a storage bundle nor both explicit stores are
                       provided, or if both are provided.
        """
        self._settings = settings if settings is not None else Settings()

        if storage is not None:
            if analysis_store is not None or assessment_store is not None:
                raise ValueError("Cannot mix 'storage' bundle with explicit stores")
            self.analysis_store, self.assessment_store = storage.build_stores()
        elif analysis_store is not None and assessment_store is not None:
            self.analysis_store = analysis_store
            self.assessment_store = assessment_store
        else:
            raise ValueError(
                "Must provide either 'storage' bundle or both explicit stores "
                "(analysis_store, assessment_store)"
            )

        self.index_dir = Path(index_dir)
        self.embedder: Embedder = provider.build_embedder(self._settings)
        self._llm_client: LLMClient = provider.build_llm_client(self._settings)
        self._loader_registry = loader_registry
        self._retriever: ComplianceRetriever | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def index_builder(self) -> IndexBuilder:
        """Create an IndexBuilder using this instance's embedder and settings."""
        from toyclaw.chunker import Chunker
        from toyclaw.index import IndexBuilder
        from toyclaw.loaders import LoaderRegistry

        settings = self._settings
        return IndexBuilder(
            embedder=self.embedder,
            loader_registry=self._loader_registry
            or LoaderRegistry.default(pdf_backend=settings.pdf_backend),
            chunker=Chunker(
                max_chars=settings.chunk_max_chars,
                overlap_chars=settings.chunk_overlap_chars,
                min_chars=settings.min_chunk_chars,
            ),
            batch_size=settings.embedding_batch_size,
            batch_delay=settings.embedding_batch_delay,
        )

    def build_index(
        self,
        docs_dir: str | Path,
        output_dir: str | Path | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> BuildResult:
        """Build the index from docs_dir into output_dir (default: index_dir).

        A rebuilt index is picked up by the next retriever() call.
        """
        result = self.index_builder().build(
            docs_dir, output_dir or self.index_dir, on_progress=on_progress
        )
        if output_dir is None or Path(output_dir) == self.index_dir:
            self._retriever = None
        return result

    def retriever(self) -> ComplianceRetriever:
        """Return the shared retriever (created on first call, loaded lazily)."""
        from toyclaw.retriever import ComplianceRetriever

        if self._retriever is None:
            self._retriever = ComplianceRetriever(
                index_dir=self.index_dir,
                embedder=self.embedder,
                default_top_k=self._settings.default_top_k,
            )
        return self._retriever

    def report_generator(self) -> ComplianceReportGenerator:
        """Create a report generator using this instance's LLM client."""
        from toyclaw.generator import ComplianceReportGenerator

        return ComplianceReportGenerator(
            llm_client=self._llm_client,
            temperature=self._settings.generation_temperature,
            timeout=self._settings.provider_timeout,
            max_attempts=self._settings.max_generation_attempts,
        )

    def service(self) -> ComplianceService:
        """Create the compliance service wired to the shared retriever."""
        from toyclaw.service import ComplianceService

        return ComplianceService(
            retriever=self.retriever(),
            generator=self.report_generator(),
            analysis_store=self.analysis_store,
            assessment_store=self.assessment_store,
            top_k=self._settings.default_top_k,
        )

    async def assess(
        self,
        request_id: str,
        target_market: TargetMarket | str,
    ) -> ComplianceAssessment:
        """Shortcut for service().assess()."""
        return await self.service().assess(request_id, target_market)

    async def get_assessment(self, assessment_id: str) -> ComplianceAssessment:
        """Shortcut for service().get_assessment()."""
        return await self.service().get_assessment(assessment_id)
