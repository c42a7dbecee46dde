# src/toyclaw/models/report.py
"""Compliance report schema.

Model output is untrusted: every field is validated here before use.
Wire names are camelCase (applicableStandards, ageGrading, ...).
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StringConstraints
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ApplicableStandard(_ReportModel):
    standard_id: NonEmptyStr
    standard_name: NonEmptyStr
    mandatory: StrictBool
    relevance: NonEmptyStr


class MaterialFinding(_ReportModel):
    material: NonEmptyStr
    concern: NonEmptyStr
    requirement: NonEmptyStr
    source_standard: NonEmptyStr


class AgeGrading(_ReportModel):
    recommended_age: NonEmptyStr
    reason: NonEmptyStr
    required_warnings: list[NonEmptyStr]


class LabelRequirement(_ReportModel):
    item: NonEmptyStr
    detail: NonEmptyStr
    mandatory: StrictBool


class CertificationStep(_ReportModel):
    step: NonEmptyStr
    description: NonEmptyStr


class ComplianceReport(_ReportModel):
    """Validated structured compliance report."""

    applicable_standards: list[ApplicableStandard] = Field(min_length=1)
    material_findings: list[MaterialFinding]
    age_grading: AgeGrading
    label_requirements: list[LabelRequirement]
    certification_path: list[CertificationStep] = Field(min_length=1)
    summary: NonEmptyStr

    def to_json_dict(self) -> dict:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")
