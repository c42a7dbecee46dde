# src/toyclaw/generator/report_generator.py
"""Grounded compliance report generation with validation and one retry."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.generator.parsing import extract_response_text, parse_json_output
from toyclaw.generator.prompts import build_prompt
from toyclaw.models import ComplianceReport, ExtractedFeatures
from toyclaw.providers.base import LLMClient

logger = logging.getLogger(__name__)

JSON_RESPONSE_FORMAT = {"type": "json_object"}


class ComplianceReportGenerator:
    """Turns features plus retrieved excerpts into a validated ComplianceReport.

    Model output is untrusted. Each attempt extracts the text payload, repairs
    the JSON (fences, surrounding prose) and validates it against
    ComplianceReport. Only MODEL_OUTPUT_INVALID is retried; provider errors
    and timeouts propagate on the first occurrence.

    Example:
        generator = ComplianceReportGenerator(LiteLLMClient(model=ChatModels.GEMINI_3_FLASH))
        report = await generator.generate(features, "EUROPE", [chunk.text for chunk in hits])
    """

    def __init__(
        self,
        llm_client: LLMClient,
        temperature: float = 0.2,
        timeout: float | None = 30.0,
        max_attempts: int = 2,
    ) -> None:
        """Initialize the generator.

        Args:
            llm_client: Text-generation backend.
            temperature: Sampling temperature. Low values favour determinism.
            timeout: Per-call timeout in seconds.
            max_attempts: Total attempts on invalid model output.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.llm_client = llm_client
        self.temperature = temperature
        self.timeout = timeout
        self.max_attempts = max_attempts

    @property
    def model_name(self) -> str:
        return getattr(self.llm_client, "model", "unknown")

    async def _attempt(self, messages: list[dict]) -> ComplianceReport:
        envelope = await self.llm_client.acomplete(
            messages,
            temperature=self.temperature,
            response_format=JSON_RESPONSE_FORMAT,
            timeout=self.timeout,
        )
        text = extract_response_text(envelope)
        payload = parse_json_output(text)
        try:
            return ComplianceReport.model_validate(payload)
        except ValidationError as exc:
            raise ComplianceError(
                "Model output failed report schema validation",
                ErrorCode.MODEL_OUTPUT_INVALID,
                details=exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

    async def generate(
        self,
        features: ExtractedFeatures,
        target_market: str,
        retrieved_chunks: list[str],
    ) -> ComplianceReport:
        """Generate a validated compliance report.

        Args:
            features: Product features from the upstream analysis.
            target_market: Market key, e.g. "EUROPE".
            retrieved_chunks: Excerpt texts, most relevant first.

        Returns:
            The validated report.

        Raises:
            ComplianceError: MODEL_OUTPUT_INVALID after the last attempt, or
                PROVIDER_ERROR / PROVIDER_TIMEOUT immediately.
        """
        system_prompt, user_prompt = build_prompt(features, target_market, retrieved_chunks)
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        last_error: ComplianceError | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(messages)
            except ComplianceError as exc:
                if exc.code is not ErrorCode.MODEL_OUTPUT_INVALID:
                    raise
                last_error = exc
                if attempt < self.max_attempts:
                    logger.warning(
                        "Invalid model output (attempt %d/%d): %s. Retrying.",
                        attempt,
                        self.max_attempts,
                        exc.message,
                    )

        assert last_error is not None
        raise last_error
