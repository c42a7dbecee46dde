"""Compliance report generation."""

from toyclaw.generator.parsing import extract_response_text, parse_json_output
from toyclaw.generator.prompts import COMPLIANCE_SYSTEM_PROMPT, build_prompt, build_user_prompt
from toyclaw.generator.report_generator import ComplianceReportGenerator

__all__ = [
    "COMPLIANCE_SYSTEM_PROMPT",
    "ComplianceReportGenerator",
    "build_prompt",
    "build_user_prompt",
    "extract_response_text",
    "parse_json_output",
]
