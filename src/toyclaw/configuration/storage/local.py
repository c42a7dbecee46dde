# src/toyclaw/configuration/storage/local.py
"""Local filesystem storage configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toyclaw.stores import AnalysisStore, AssessmentStore


@dataclass(frozen=True)
class LocalStorage:
    """Local SQLite storage.

    All data is persisted to the specified directory:
    - analyses.db: Upstream product-analysis records
    - assessments.db: Compliance assessments

    Args:
        data_dir: Base directory for all storage files.
                  Created if it doesn't exist.

    Example:
        storage = LocalStorage("./storage")
    """

    data_dir: str

    def build_stores(self) -> tuple[AnalysisStore, AssessmentStore]:
        """Build both stores, creating the data directory if needed.

        Returns:
            Tuple of (analysis_store, assessment_store)
        """
        from toyclaw.stores import SQLiteAnalysisStore, SQLiteAssessmentStore

        Path(self.data_dir).mkdir(parents=True, exist_ok=True)

        analysis_store = SQLiteAnalysisStore(os.path.join(self.data_dir, "analyses.db"))
        assessment_store = SQLiteAssessmentStore(os.path.join(self.data_dir, "assessments.db"))
        return analysis_store, assessment_store
