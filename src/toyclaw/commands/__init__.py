"""UI-agnostic command layer for toyclaw.

Commands return data structures; the CLI decides how to render them.

Usage:
    from toyclaw.commands import build_index, query, status

    result = build_index.build_index("./compliance-docs")
    result = query.query("phthalates in PVC", market="EUROPE")
    result = status.status()
"""

from toyclaw.commands import assess, build_index, query, status
from toyclaw.commands.base import (
    AssessResult,
    BuildIndexResult,
    CommandResult,
    CommandStage,
    DocumentResult,
    ProgressCallback,
    ProgressUpdate,
    QueryResult,
    SearchResult,
    StatusResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "CommandResult",
    # Result types
    "AssessResult",
    "BuildIndexResult",
    "DocumentResult",
    "QueryResult",
    "SearchResult",
    "StatusResult",
    # Command modules
    "assess",
    "build_index",
    "query",
    "status",
]
