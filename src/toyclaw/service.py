# src/toyclaw/service.py
"""Compliance assessment orchestration."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError

from toyclaw.errors import ComplianceError, ErrorCode, to_app_error
from toyclaw.generator import ComplianceReportGenerator
from toyclaw.markets import TargetMarket
from toyclaw.models import (
    AnalysisStatus,
    AssessmentRecord,
    ComplianceAssessment,
    ComplianceReport,
    ExtractedFeatures,
)
from toyclaw.retriever import ComplianceRetriever
from toyclaw.stores import AnalysisStore, AssessmentStore

logger = logging.getLogger(__name__)

PROVIDER_NAME = "litellm"


def build_retrieval_query(features: ExtractedFeatures, target_market: str) -> str:
    """Compose the retrieval query from the market and the product's features."""
    parts = [
        f"toy safety compliance requirements for {target_market}",
        f"shape: {features.shape.category}",
    ]
    if features.material:
        parts.append(f"materials: {', '.join(m.name for m in features.material)}")
    if features.colors:
        parts.append(f"colors: {', '.join(c.name for c in features.colors)}")
    if features.style:
        parts.append(f"style: {', '.join(s.name for s in features.style)}")
    return "; ".join(parts)


def _parse_market(target_market: TargetMarket | str) -> TargetMarket:
    try:
        return TargetMarket(target_market)
    except ValueError:
        raise ComplianceError(
            f"Unsupported target market: {target_market}",
            ErrorCode.VALIDATION_ERROR,
            details={"allowed": [m.value for m in TargetMarket]},
        ) from None


class ComplianceService:
    """Runs retrieval, generation and persistence for one assessment.

    Every public method raises only ComplianceError.

    Example:
        service = ComplianceService(retriever, generator, analysis_store, assessment_store)
        assessment = await service.assess("req-123", "EUROPE")
    """

    def __init__(
        self,
        retriever: ComplianceRetriever,
        generator: ComplianceReportGenerator,
        analysis_store: AnalysisStore,
        assessment_store: AssessmentStore,
        top_k: int = 10,
        provider_name: str = PROVIDER_NAME,
    ) -> None:
        self.retriever = retriever
        self.generator = generator
        self.analysis_store = analysis_store
        self.assessment_store = assessment_store
        self.top_k = top_k
        self.provider_name = provider_name

    async def _load_features(self, request_id: str) -> ExtractedFeatures:
        analysis = await self.analysis_store.find_by_request_id(request_id)
        if analysis is None:
            raise ComplianceError(
                f"Analysis request not found: {request_id}",
                ErrorCode.ANALYSIS_REQUEST_NOT_FOUND,
            )
        if analysis.status is not AnalysisStatus.SUCCEEDED or analysis.features is None:
            raise ComplianceError(
                f"Analysis {request_id} is not ready for compliance assessment",
                ErrorCode.ANALYSIS_NOT_READY,
                details={"status": analysis.status.value},
            )
        return analysis.features

    @staticmethod
    def _to_response(record: AssessmentRecord, report: ComplianceReport) -> ComplianceAssessment:
        return ComplianceAssessment(
            assessment_id=record.assessment_id,
            request_id=record.request_id,
            target_market=record.target_market,
            report=report,
            summary=record.summary,
            retrieved_chunk_ids=record.retrieved_chunk_ids,
            created_at=record.created_at.isoformat(),
        )

    async def _assess(
        self,
        request_id: str,
        target_market: TargetMarket | str,
    ) -> ComplianceAssessment:
        market = _parse_market(target_market).value
        features = await self._load_features(request_id)

        query = build_retrieval_query(features, market)
        chunks = await self.retriever.retrieve(query, market, top_k=self.top_k)
        logger.debug("Retrieved %d chunks for %s (%s)", len(chunks), request_id, market)

        report = await self.generator.generate(features, market, [c.text for c in chunks])

        record = AssessmentRecord(
            assessment_id=str(uuid.uuid4()),
            request_id=request_id,
            target_market=market,
            report=report.to_json_dict(),
            summary=report.summary,
            retrieved_chunk_ids=[c.id for c in chunks],
            provider=self.provider_name,
            model_name=self.generator.model_name,
            created_at=datetime.now(timezone.utc),
        )
        stored = await self.assessment_store.create(record)
        logger.info("Created assessment %s for %s (%s)", stored.assessment_id, request_id, market)
        return self._to_response(stored, report)

    async def assess(
        self,
        request_id: str,
        target_market: TargetMarket | str,
    ) -> ComplianceAssessment:
        """Assess a product analysis against a target market.

        Args:
            request_id: Upstream product-analysis request id.
            target_market: One of the TargetMarket keys.

        Returns:
            The persisted assessment.

        Raises:
            ComplianceError: VALIDATION_ERROR, ANALYSIS_REQUEST_NOT_FOUND,
                ANALYSIS_NOT_READY, or any retrieval/generation error.
        """
        try:
            return await self._assess(request_id, target_market)
        except ComplianceError:
            raise
        except Exception as exc:
            raise to_app_error(exc) from exc

    async def _get(self, assessment_id: str) -> ComplianceAssessment:
        record = await self.assessment_store.find_by_id(assessment_id)
        if record is None:
            raise ComplianceError(
                f"Compliance assessment not found: {assessment_id}",
                ErrorCode.COMPLIANCE_NOT_FOUND,
            )
        try:
            report = ComplianceReport.model_validate(record.report)
        except ValidationError as exc:
            raise ComplianceError(
                f"Stored report for assessment {assessment_id} is invalid",
                ErrorCode.INTERNAL_ERROR,
            ) from exc
        return self._to_response(record, report)

    async def get_assessment(self, assessment_id: str) -> ComplianceAssessment:
        """Look up a stored assessment, re-validating its report.

        Raises:
            ComplianceError: COMPLIANCE_NOT_FOUND, or INTERNAL_ERROR when the
                stored report no longer validates.
        """
        try:
            return await self._get(assessment_id)
        except ComplianceError:
            raise
        except Exception as exc:
            raise to_app_error(exc) from exc
