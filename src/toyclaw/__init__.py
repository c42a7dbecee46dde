"""toyclaw - toy safety compliance RAG.

Builds a market-tagged vector index over regulatory documents, retrieves
the excerpts relevant to a product and target market, and turns them into
a validated compliance report.

Quick Start (LiteLLM + Local Storage):
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
    assessment = await app.assess("req-123", "EUROPE")
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("toyclaw-compliance")
except PackageNotFoundError:
    # Source-tree fallback (e.g. running tests without installing the wheel).
    import tomllib
    from pathlib import Path

    def _read_version_from_pyproject() -> str | None:
        for parent in Path(__file__).resolve().parents:
            pyproject = parent / "pyproject.toml"
            if pyproject.exists():
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                version = data.get("project", {}).get("version")
                return str(version) if version is not None else None
        return None

    __version__ = _read_version_from_pyproject() or "unknown"

from toyclaw.configuration import LiteLLMProvider, LocalStorage, ProviderConfig, StorageConfig
from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.generator import ComplianceReportGenerator
from toyclaw.index import IndexBuilder
from toyclaw.markets import GLOBAL_MARKET, TargetMarket
from toyclaw.models import (
    AnalysisRecord,
    AnalysisStatus,
    Chunk,
    ComplianceAssessment,
    ComplianceReport,
    ExtractedFeatures,
    RetrievedChunk,
)
from toyclaw.retriever import ComplianceRetriever
from toyclaw.service import ComplianceService
from toyclaw.settings import Settings
from toyclaw.toyclaw import Toyclaw

__all__ = [
    # Central class
    "Toyclaw",
    "Settings",
    # Configuration
    "LiteLLMProvider",
    "LocalStorage",
    "ProviderConfig",
    "StorageConfig",
    # Pipeline
    "ComplianceReportGenerator",
    "ComplianceRetriever",
    "ComplianceService",
    "IndexBuilder",
    # Models
    "AnalysisRecord",
    "AnalysisStatus",
    "Chunk",
    "ComplianceAssessment",
    "ComplianceReport",
    "ExtractedFeatures",
    "RetrievedChunk",
    # Markets and errors
    "GLOBAL_MARKET",
    "TargetMarket",
    "ComplianceError",
    "ErrorCode",
]
