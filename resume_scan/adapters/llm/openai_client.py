"""OpenAI client adapter."""

from __future__ import annotations

from typing import Any

import openai
from openai import AsyncOpenAI

from resume_scan.adapters.llm.base import AbstractLLMClient, classify_status
from resume_scan.core.errors import FatalUpstreamError


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI (or OpenAI-compatible) chat completions.

    Uses the official OpenAI Python SDK with async support. SDK-level retries
    are disabled so the pipeline's own backoff policy is the only one applied.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        temperature: float = 0.2,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o-mini").
            base_url: Optional custom base URL for the API.
            timeout_seconds: Optional request timeout in seconds.
            temperature: Default sampling temperature.
        """
        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "base_url": base_url,
            "max_retries": 0,
        }
        if timeout_seconds is not None:
            client_kwargs["timeout"] = timeout_seconds

        self.client = AsyncOpenAI(**client_kwargs)
        self.model = model
        self.temperature = temperature

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        messages = [
            {
                "role": "system",
                "content": "Output JSON only. No extra text or markdown formatting.",
            },
            {"role": "user", "content": prompt},
        ]

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", self.temperature),
        }

        # Pass through additional parameters if provided
        for param in ("max_tokens", "top_p", "seed"):
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except openai.APIStatusError as exc:
            raise classify_status(
                exc.status_code,
                provider=self.provider,
                model=self.model,
                upstream_message=exc.message,
            ) from exc
        except Exception as exc:
            raise FatalUpstreamError(
                code="llm_transport_error",
                message="OpenAI API call failed",
                details={
                    "provider": self.provider,
                    "model": self.model,
                    "context": {"upstream_message": str(exc), "error_type": type(exc).__name__},
                },
            ) from exc

        content = response.choices[0].message.content
        return (content or "").strip()
