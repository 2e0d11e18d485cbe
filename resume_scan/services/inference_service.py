"""Model invocation with exponential backoff on upstream overload.

Only ``RetryableUpstreamError`` triggers another attempt. Every other failure
propagates on the attempt that produced it. When the attempt budget is spent
the caller gets ``CapacityExhaustedError`` with a fixed, actionable message
instead of the last provider error.

The delay grows by ``backoff_multiplier`` after every retry with no upper
bound, so sustained overload keeps backing off further.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal

from resume_scan.adapters.llm.base import AbstractLLMClient
from resume_scan.core.config import RetrySettings
from resume_scan.core.errors import CapacityExhaustedError, FatalUpstreamError, RetryableUpstreamError

logger = logging.getLogger(__name__)

CAPACITY_EXHAUSTED_MESSAGE = "The AI model is at max capacity. Please try again in 1 minute."

AttemptOutcome = Literal["success", "retryable", "fatal"]


@dataclass(frozen=True)
class InferenceAttempt:
    """One round-trip to the model.

    Attributes:
        index: Zero-based attempt number.
        delay_ms: Backoff waited immediately before this attempt (0 for the first).
        outcome: How the attempt ended.
        duration_ms: Time spent waiting on the provider.
    """

    index: int
    delay_ms: float
    outcome: AttemptOutcome
    duration_ms: float


@dataclass(frozen=True)
class InferenceResult:
    """Raw model text plus the attempts it took to get it."""

    text: str
    attempts: tuple[InferenceAttempt, ...]


class ResilientInferenceClient:
    """Wraps a model client with the overload retry policy.

    Attributes:
        llm: Provider adapter doing the actual call.
        max_attempts: Upper bound on round-trips per ``generate`` call.
        initial_delay_ms: Wait before the second attempt.
        backoff_multiplier: Growth factor applied after each wait.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        *,
        max_attempts: int = 5,
        initial_delay_ms: float = 3000.0,
        backoff_multiplier: float = 1.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")

        self.llm = llm
        self.max_attempts = max_attempts
        self.initial_delay_ms = initial_delay_ms
        self.backoff_multiplier = backoff_multiplier
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        llm: AbstractLLMClient,
        retry_settings: RetrySettings,
    ) -> "ResilientInferenceClient":
        return cls(
            llm,
            max_attempts=retry_settings.max_attempts,
            initial_delay_ms=retry_settings.initial_delay_ms,
            backoff_multiplier=retry_settings.backoff_multiplier,
        )

    async def generate(self, prompt: str) -> InferenceResult:
        """Call the model until it answers, fails fatally, or the budget runs out.

        Args:
            prompt: Instruction to send.

        Returns:
            InferenceResult with the raw response text.

        Raises:
            CapacityExhaustedError: ``max_attempts`` consecutive overloads.
            FatalUpstreamError: Any non-overload provider failure (not retried).
        """
        attempts: list[InferenceAttempt] = []
        delay_ms = self.initial_delay_ms
        waited_ms = 0.0

        for index in range(self.max_attempts):
            started = time.perf_counter()
            try:
                text = await self.llm.generate_text(prompt)
            except RetryableUpstreamError as exc:
                attempts.append(
                    InferenceAttempt(index, waited_ms, "retryable", _elapsed_ms(started))
                )
                if index == self.max_attempts - 1:
                    break

                logger.warning(
                    "inference.retry",
                    extra={
                        "attempt": index + 1,
                        "max_attempts": self.max_attempts,
                        "delay_ms": delay_ms,
                        "provider": self.llm.provider,
                        "error_code": exc.code,
                    },
                )
                await self._sleep(delay_ms / 1000)
                waited_ms = delay_ms
                delay_ms *= self.backoff_multiplier
                continue
            except FatalUpstreamError as exc:
                attempts.append(
                    InferenceAttempt(index, waited_ms, "fatal", _elapsed_ms(started))
                )
                logger.error(
                    "inference.fatal",
                    extra={
                        "attempt": index + 1,
                        "provider": self.llm.provider,
                        "error_code": exc.code,
                        "details": exc.details,
                    },
                )
                raise

            attempts.append(
                InferenceAttempt(index, waited_ms, "success", _elapsed_ms(started))
            )
            logger.info(
                "inference.success",
                extra={
                    "attempt": index + 1,
                    "provider": self.llm.provider,
                    "model": self.llm.model,
                    "duration_ms": attempts[-1].duration_ms,
                    "response_chars": len(text),
                },
            )
            return InferenceResult(text=text, attempts=tuple(attempts))

        logger.error(
            "inference.capacity_exhausted",
            extra={"attempts": len(attempts), "provider": self.llm.provider},
        )
        raise CapacityExhaustedError(
            code="llm_capacity_exhausted",
            message=CAPACITY_EXHAUSTED_MESSAGE,
            details={"attempts": len(attempts), "max_attempts": self.max_attempts},
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
