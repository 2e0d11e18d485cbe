"""Application-level exception types.

This module defines the domain errors raised along the analysis pipeline so
the HTTP layer can map each failure class to a status code and a sanitized
message without inspecting upstream error text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    http_status: int
    attempts: int
    max_attempts: int
    file_type: str
    field: str
    model: str
    provider: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when caller input or configuration is invalid."""


class ExtractionAppError(AppError):
    """Raised when a document cannot be read or holds no text."""


class LLMAppError(AppError):
    """Base for failures talking to the generative model."""


class RetryableUpstreamError(LLMAppError):
    """Upstream reported a transient overload; the call may be repeated."""


class FatalUpstreamError(LLMAppError):
    """Upstream failed in a way repetition will not fix."""


class CapacityExhaustedError(LLMAppError):
    """Every allowed attempt hit an overloaded upstream."""


class MalformedResultError(LLMAppError):
    """Model output is not valid JSON or does not match the result shape."""


class StorageAppError(AppError):
    """Raised when persisting an analysis fails."""
