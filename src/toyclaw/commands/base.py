# src/toyclaw/commands/base.py
"""Base types for the commands layer.

Commands never raise for expected failures; they return result objects
that the CLI renders.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CommandStage(Enum):
    """Stages reported while a command runs."""

    # Index build stages
    DISCOVERING = "Discovering"
    CHUNKING = "Chunking"
    EMBEDDING = "Embedding"
    WRITING = "Writing"

    # General stages
    LOADING = "Loading"
    COMPLETE = "Complete"


@dataclass
class ProgressUpdate:
    """One tick of an index build, forwarded to the CLI progress bar.

    A total of 0 means the stage has no known length (a spinner).
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None

    @property
    def is_indeterminate(self) -> bool:
        return self.total == 0


ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class DocumentResult:
    """Outcome for one source document in an index build."""

    filename: str
    market: str
    chunks: int = 0
    skipped: bool = False
    reason: str | None = None


@dataclass
class BuildIndexResult(CommandResult):
    """Result of the build-index command.

    Attributes:
        docs_dir: Documents directory that was scanned
        index_dir: Directory the index was written to
        documents: Per-document chunk counts, skipped documents included
        missing_folders: Market folders that were not found
        doc_count: Documents that contributed chunks
        total_chunks: Chunks written to the index
        embedding_dim: Dimension of the stored vectors
    """

    docs_dir: str = ""
    index_dir: str = ""
    documents: list[DocumentResult] = field(default_factory=list)
    missing_folders: list[str] = field(default_factory=list)
    doc_count: int = 0
    total_chunks: int = 0
    embedding_dim: int = 0


@dataclass
class SearchResult:
    """A single retrieval hit."""

    chunk_id: str
    source: str
    market: str
    section: str
    content: str
    score: float


@dataclass
class QueryResult(CommandResult):
    """Result of the query command.

    Attributes:
        query: The original query
        market: Target market the results are scoped to
        results: Hits, most similar first
        load_seconds: Time spent loading the index
        retrieval_seconds: Time spent embedding the query and scoring
    """

    query: str = ""
    market: str = ""
    results: list[SearchResult] = field(default_factory=list)
    load_seconds: float = 0.0
    retrieval_seconds: float = 0.0


@dataclass
class AssessResult(CommandResult):
    """Result of the assess and show commands.

    Attributes:
        assessment: The assessment as camelCase JSON (on success)
        error_detail: Structured error {code, message, details?} (on failure)
    """

    assessment: dict[str, Any] | None = None
    error_detail: dict[str, Any] | None = None


@dataclass
class StatusResult(CommandResult):
    """Result of the status command."""

    index_dir: str = ""
    format: str | None = None
    version: str | None = None
    created_at: str | None = None
    doc_count: int = 0
    chunk_count: int = 0
    embedding_dim: int = 0
    chunks_by_market: dict[str, int] = field(default_factory=dict)
