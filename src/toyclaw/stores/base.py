# src/toyclaw/stores/base.py
"""Abstract base classes for the persistence collaborators."""

from abc import ABC, abstractmethod

from toyclaw.models import AnalysisRecord, AssessmentRecord


class AnalysisStore(ABC):
    """Read access to upstream product-analysis records."""

    @abstractmethod
    async def find_by_request_id(self, request_id: str) -> AnalysisRecord | None:
        """Return the analysis for request_id, or None if unknown."""
        ...


class AssessmentStore(ABC):
    """Persistence for compliance assessments. Records are never mutated."""

    @abstractmethod
    async def create(self, record: AssessmentRecord) -> AssessmentRecord:
        """Persist a new assessment and return it as stored."""
        ...

    @abstractmethod
    async def find_by_id(self, assessment_id: str) -> AssessmentRecord | None:
        """Return the assessment with assessment_id, or None."""
        ...
