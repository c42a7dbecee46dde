# src/toyclaw/commands/assess.py
"""Assess and show commands - run or fetch a compliance assessment."""

from __future__ import annotations

import asyncio
from pathlib import Path

from toyclaw.commands.base import AssessResult
from toyclaw.config import ConfigError, get_toyclaw
from toyclaw.errors import ComplianceError


def assess(
    request_id: str,
    market: str,
    index_dir: str | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> AssessResult:
    """Run a compliance assessment for an analysed product.

    Args:
        request_id: Upstream product-analysis request id
        market: Target market key (e.g. "EUROPE")
        index_dir: Override index directory
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        AssessResult with the assessment JSON or the structured error
    """
    app = get_toyclaw(index_dir=index_dir, data_dir=data_dir, config_path=config_path)
    if isinstance(app, ConfigError):
        return AssessResult(success=False, error=app.message)

    try:
        assessment = asyncio.run(app.assess(request_id, market.upper()))
    except ComplianceError as e:
        return AssessResult(success=False, error=e.message, error_detail=e.to_dict())

    return AssessResult(success=True, assessment=assessment.to_json_dict())


def show(
    assessment_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> AssessResult:
    """Fetch a stored assessment by id.

    Returns:
        AssessResult with the assessment JSON or the structured error
    """
    app = get_toyclaw(data_dir=data_dir, config_path=config_path)
    if isinstance(app, ConfigError):
        return AssessResult(success=False, error=app.message)

    try:
        assessment = asyncio.run(app.get_assessment(assessment_id))
    except ComplianceError as e:
        return AssessResult(success=False, error=e.message, error_detail=e.to_dict())

    return AssessResult(success=True, assessment=assessment.to_json_dict())
