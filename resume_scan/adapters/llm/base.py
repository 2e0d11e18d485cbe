"""Model client interface and upstream failure classification."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from resume_scan.core.errors import FatalUpstreamError, LLMAppError, RetryableUpstreamError

# HTTP statuses providers use to signal a temporarily overloaded model
OVERLOAD_STATUS_CODES = frozenset({503})


def classify_status(
    status_code: int | None,
    *,
    provider: str,
    model: str,
    upstream_message: str | None = None,
) -> LLMAppError:
    """Map a provider HTTP status to a typed upstream error.

    Args:
        status_code: HTTP status reported by the provider SDK, if any.
        provider: Provider name for logs (e.g. "gemini").
        model: Model name for logs.
        upstream_message: Raw provider message; kept in details only.

    Returns:
        RetryableUpstreamError for overload statuses, FatalUpstreamError otherwise.
    """
    details: dict[str, Any] = {"provider": provider, "model": model}
    if status_code is not None:
        details["http_status"] = status_code
    if upstream_message:
        details["context"] = {"upstream_message": upstream_message}

    if status_code in OVERLOAD_STATUS_CODES:
        return RetryableUpstreamError(
            code="llm_overloaded",
            message=f"{provider} model {model} is overloaded",
            details=details,  # type: ignore[arg-type]
        )
    return FatalUpstreamError(
        code="llm_upstream_error",
        message=f"{provider} API call failed" + (f" (HTTP {status_code})" if status_code else ""),
        details=details,  # type: ignore[arg-type]
    )


class AbstractLLMClient(ABC):
    """Interface for model clients that turn a prompt into raw text."""

    provider: str
    model: str

    @abstractmethod
    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        """Run one generation round-trip.

        Args:
            prompt: Full instruction to send to the model.
            **kwargs: Provider-specific options (e.g., temperature).

        Returns:
            The raw response text (may be empty).

        Raises:
            RetryableUpstreamError: The provider reported overload.
            FatalUpstreamError: Any other provider or transport failure.
        """
        ...
