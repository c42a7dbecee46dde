"""Persistence for analyses and compliance assessments."""

from toyclaw.stores.base import AnalysisStore, AssessmentStore
from toyclaw.stores.sqlite_analysis import SQLiteAnalysisStore
from toyclaw.stores.sqlite_assessment import SQLiteAssessmentStore

__all__ = [
    "AnalysisStore",
    "AssessmentStore",
    "SQLiteAnalysisStore",
    "SQLiteAssessmentStore",
]
