# src/toyclaw/generator/parsing.py
"""Extraction and repair of JSON from untrusted model output."""

from __future__ import annotations

import json
import re
from typing import Any

from toyclaw.errors import ComplianceError, ErrorCode

JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
BARE_FENCE = re.compile(r"```\s*([\s\S]*?)```")


def _invalid(message: str, **details: Any) -> ComplianceError:
    return ComplianceError(message, ErrorCode.MODEL_OUTPUT_INVALID, details=details or None)


def extract_response_text(envelope: Any) -> str:
    """Pull the text payload out of a chat-completion response envelope.

    Expects {"choices": [{"message": {"content": ...}}]} where content is a
    string or a list of text parts.

    Raises:
        ComplianceError: MODEL_OUTPUT_INVALID if the structure is missing or
            the text is empty.
    """
    choices = envelope.get("choices") if isinstance(envelope, dict) else None
    if not isinstance(choices, list) or not choices:
        raise _invalid("Model response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise _invalid("Model response has no message")

    content = message.get("content")
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        text = "".join(parts)
    elif isinstance(content, str):
        text = content
    else:
        raise _invalid("Model response has no text content")

    if not text.strip():
        raise _invalid("Model response text is empty")
    return text


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None


def parse_json_output(text: str) -> Any:
    """Parse model text as JSON with bounded repair.

    Tried in order: the whole text, the contents of a ```json fence, the
    contents of a bare ``` fence, the span from the first "{" to the last "}".

    Raises:
        ComplianceError: MODEL_OUTPUT_INVALID if nothing parses.
    """
    parsed = _loads(text.strip())
    if parsed is not None:
        return parsed

    for fence in (JSON_FENCE, BARE_FENCE):
        match = fence.search(text)
        if match:
            parsed = _loads(match.group(1).strip())
            if parsed is not None:
                return parsed

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        parsed = _loads(text[start : end + 1])
        if parsed is not None:
            return parsed

    raise _invalid("Model returned non-JSON output", preview=text[:200])
