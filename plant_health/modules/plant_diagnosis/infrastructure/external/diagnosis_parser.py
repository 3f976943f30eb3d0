"""
Parsing of diagnosis oracle replies.

Vision models often wrap their JSON in prose or Markdown code fences. The
first fenced block is used when present; otherwise the whole reply is the
payload. The payload is then validated against ``DiagnosisResult``.
"""

import json
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult
from plant_health.shared.core.exceptions import DiagnosisParseError

# ```json ... ```, ``` ... ```, or any other language tag
_FENCED_BLOCK = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)


def extract_structured_payload(content: str) -> str:
    """
    Return the text of the first fenced block, or the whole content stripped.

    Args:
        content: Raw model reply

    Returns:
        Candidate JSON text
    """
    match = _FENCED_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def parse_diagnosis_content(content: Optional[str], provider: str) -> DiagnosisResult:
    """
    Extract and validate a diagnosis from a model's text reply.

    Raises:
        DiagnosisParseError: If the reply is empty, not JSON, not an object or
            does not match the diagnosis schema
    """
    if not content or not content.strip():
        raise DiagnosisParseError("Diagnosis reply was empty", provider=provider)

    payload_text = extract_structured_payload(content)

    try:
        payload = json.loads(payload_text)
    except json.JSONDecodeError as e:
        raise DiagnosisParseError(
            f"Diagnosis reply is not valid JSON: {e.msg}",
            provider=provider,
            raw_content=content,
        ) from e

    return validate_diagnosis_payload(payload, provider, raw_content=content)


def validate_diagnosis_payload(
    payload: Any,
    provider: str,
    raw_content: Optional[str] = None,
) -> DiagnosisResult:
    """
    Validate an already decoded payload against the diagnosis schema.

    Raises:
        DiagnosisParseError: If the payload is not an object or fails validation
    """
    if not isinstance(payload, dict):
        raise DiagnosisParseError(
            f"Diagnosis payload must be a JSON object, got {type(payload).__name__}",
            provider=provider,
            raw_content=raw_content,
        )

    try:
        return DiagnosisResult.model_validate(payload)
    except PydanticValidationError as e:
        raise DiagnosisParseError(
            f"Diagnosis payload failed validation: {e.error_count()} error(s)",
            provider=provider,
            raw_content=raw_content,
            details={"errors": _summarize_errors(e)},
        ) from e


def _summarize_errors(error: PydanticValidationError) -> Dict[str, str]:
    return {
        ".".join(str(part) for part in item["loc"]) or "payload": item["msg"]
        for item in error.errors()
    }
