# src/toyclaw/errors.py
"""Error taxonomy for the compliance pipeline.

Every failure that crosses the service boundary is a ComplianceError carrying
a machine-readable code, a human-readable message and an HTTP-equivalent
status. Callers render it with to_dict().
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ValidationError


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INDEX_MISSING = "COMPLIANCE_INDEX_MISSING"
    INDEX_CORRUPT = "COMPLIANCE_INDEX_CORRUPT"
    EMBEDDING_DIMENSION_MISMATCH = "EMBEDDING_DIMENSION_MISMATCH"
    EMBEDDING_PROVIDER_ERROR = "EMBEDDING_PROVIDER_ERROR"
    EMBEDDING_PROVIDER_TIMEOUT = "EMBEDDING_PROVIDER_TIMEOUT"
    MODEL_OUTPUT_INVALID = "MODEL_OUTPUT_INVALID"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    ANALYSIS_REQUEST_NOT_FOUND = "ANALYSIS_REQUEST_NOT_FOUND"
    ANALYSIS_NOT_READY = "ANALYSIS_NOT_READY"
    COMPLIANCE_NOT_FOUND = "COMPLIANCE_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


DEFAULT_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INDEX_MISSING: 503,
    ErrorCode.INDEX_CORRUPT: 503,
    ErrorCode.EMBEDDING_DIMENSION_MISMATCH: 500,
    ErrorCode.EMBEDDING_PROVIDER_ERROR: 502,
    ErrorCode.EMBEDDING_PROVIDER_TIMEOUT: 504,
    ErrorCode.MODEL_OUTPUT_INVALID: 502,
    ErrorCode.PROVIDER_ERROR: 502,
    ErrorCode.PROVIDER_TIMEOUT: 504,
    ErrorCode.ANALYSIS_REQUEST_NOT_FOUND: 404,
    ErrorCode.ANALYSIS_NOT_READY: 409,
    ErrorCode.COMPLIANCE_NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}


class ComplianceError(Exception):
    """Tagged error raised by every layer of the compliance pipeline.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
        status_code: HTTP-equivalent status (defaults from the code).
        details: Optional structured context (provider status, validation errors).
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code if status_code is not None else DEFAULT_STATUS[code]
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Render as the structured error object returned to callers."""
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"ComplianceError(code={self.code.value!r}, message={self.message!r})"


def to_app_error(error: BaseException) -> ComplianceError:
    """Normalize any exception into a ComplianceError."""
    if isinstance(error, ComplianceError):
        return error
    if isinstance(error, ValidationError):
        return ComplianceError(
            "Invalid payload",
            ErrorCode.VALIDATION_ERROR,
            details=error.errors(include_url=False, include_context=False),
        )
    message = str(error) or "Unexpected error"
    return ComplianceError(message, ErrorCode.INTERNAL_ERROR)
