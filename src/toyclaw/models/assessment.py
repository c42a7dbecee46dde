# src/toyclaw/models/assessment.py
"""Upstream analysis records and persisted compliance assessments."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from toyclaw.models.features import ExtractedFeatures
from toyclaw.models.report import ComplianceReport


class AnalysisStatus(str, Enum):
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def _missing_(cls, value: object) -> "AnalysisStatus | None":
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class AnalysisRecord(BaseModel):
    """A product-analysis request as seen by the compliance pipeline."""

    request_id: str
    status: AnalysisStatus
    features: ExtractedFeatures | None = None


class AssessmentRecord(BaseModel):
    """Persisted form of an assessment. The report is kept as raw JSON."""

    assessment_id: str
    request_id: str
    target_market: str
    report: Any
    summary: str
    retrieved_chunk_ids: list[str] = Field(default_factory=list)
    provider: str | None = None
    model_name: str | None = None
    created_at: datetime


class ComplianceAssessment(BaseModel):
    """Assessment returned to callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    assessment_id: str
    request_id: str
    target_market: str
    report: ComplianceReport
    summary: str
    retrieved_chunk_ids: list[str] = Field(default_factory=list)
    created_at: str

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
