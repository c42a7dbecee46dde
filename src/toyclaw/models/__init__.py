"""Data models for toyclaw."""

from toyclaw.models.assessment import (
    AnalysisRecord,
    AnalysisStatus,
    AssessmentRecord,
    ComplianceAssessment,
)
from toyclaw.models.chunk import Chunk, IndexManifest, RetrievedChunk
from toyclaw.models.features import ColorFeature, ExtractedFeatures, NamedFeature, ShapeFeature
from toyclaw.models.report import (
    AgeGrading,
    ApplicableStandard,
    CertificationStep,
    ComplianceReport,
    LabelRequirement,
    MaterialFinding,
)

__all__ = [
    "AgeGrading",
    "AnalysisRecord",
    "AnalysisStatus",
    "ApplicableStandard",
    "AssessmentRecord",
    "CertificationStep",
    "Chunk",
    "ColorFeature",
    "ComplianceAssessment",
    "ComplianceReport",
    "ExtractedFeatures",
    "IndexManifest",
    "LabelRequirement",
    "MaterialFinding",
    "NamedFeature",
    "RetrievedChunk",
    "ShapeFeature",
]
