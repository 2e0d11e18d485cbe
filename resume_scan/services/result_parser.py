"""Validation of raw model output into an AnalysisResult."""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from resume_scan.core.errors import MalformedResultError
from resume_scan.schemas.analysis import AnalysisResult

_OPENING_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around the payload, if any.

    ``"```json\\n{...}\\n```"`` and ``"{...}"`` both come back as ``"{...}"``.
    """
    text = text.strip()
    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_analysis_result(raw_text: str) -> AnalysisResult:
    """Parse model output into a validated AnalysisResult.

    Args:
        raw_text: Text returned by the model.

    Returns:
        AnalysisResult with score in [0, 100] and a list of keywords.

    Raises:
        MalformedResultError: Output is not JSON, not an object, or does not
            match the result shape.
    """
    payload = strip_code_fences(raw_text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedResultError(
            code="llm_invalid_json",
            message="Model returned invalid JSON",
            details={"context": {"error": str(exc), "response_chars": len(raw_text)}},
        ) from exc

    if not isinstance(data, dict):
        raise MalformedResultError(
            code="llm_invalid_shape",
            message="Model returned JSON that is not an object",
            details={"context": {"json_type": type(data).__name__}},
        )

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as exc:
        raise MalformedResultError(
            code="llm_invalid_shape",
            message="Model output does not match the analysis schema",
            details={
                "context": {
                    "errors": [
                        {"loc": list(err["loc"]), "type": err["type"]}
                        for err in exc.errors()
                    ]
                }
            },
        ) from exc
