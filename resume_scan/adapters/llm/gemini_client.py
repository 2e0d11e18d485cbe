"""Google Gemini client adapter."""

from __future__ import annotations

from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from resume_scan.adapters.llm.base import AbstractLLMClient, classify_status
from resume_scan.core.errors import FatalUpstreamError


class GeminiClient(AbstractLLMClient):
    """Client for Gemini text generation through the ``google-genai`` async API."""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_seconds: float | None = None,
        temperature: float = 0.2,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key.
            model: Model name (e.g., "gemini-2.5-flash").
            timeout_seconds: Optional per-call HTTP timeout.
            temperature: Default sampling temperature.
        """
        http_options = None
        if timeout_seconds is not None:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))

        self.client = genai.Client(api_key=api_key, http_options=http_options)
        self.model = model
        self.temperature = temperature

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        config = types.GenerateContentConfig(
            temperature=kwargs.pop("temperature", self.temperature),
            max_output_tokens=kwargs.pop("max_output_tokens", None),
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as exc:
            raise classify_status(
                exc.code,
                provider=self.provider,
                model=self.model,
                upstream_message=exc.message or str(exc),
            ) from exc
        except Exception as exc:
            raise FatalUpstreamError(
                code="llm_transport_error",
                message="Gemini API call failed",
                details={
                    "provider": self.provider,
                    "model": self.model,
                    "context": {"upstream_message": str(exc), "error_type": type(exc).__name__},
                },
            ) from exc

        return (response.text or "").strip()
