"""Unit tests for the overload retry policy."""

from unittest.mock import AsyncMock

import pytest

from conftest import VALID_MODEL_JSON, fatal_error, overloaded_error
from resume_scan.core.config import RetrySettings
from resume_scan.core.errors import CapacityExhaustedError, FatalUpstreamError
from resume_scan.services.inference_service import (
    CAPACITY_EXHAUSTED_MESSAGE,
    ResilientInferenceClient,
)


def _client(llm, **kwargs):
    sleep = AsyncMock()
    return ResilientInferenceClient(llm, sleep=sleep, **kwargs), sleep


class TestSuccessPaths:
    @pytest.mark.asyncio
    async def test_first_attempt_success_does_not_sleep(self, make_llm) -> None:
        llm = make_llm(VALID_MODEL_JSON)
        client, sleep = _client(llm)

        result = await client.generate("prompt")

        assert result.text == VALID_MODEL_JSON
        assert llm.calls == 1
        sleep.assert_not_awaited()
        assert [a.outcome for a in result.attempts] == ["success"]
        assert result.attempts[0].delay_ms == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failures", [1, 2, 3, 4])
    async def test_succeeds_after_overloads(self, make_llm, failures: int) -> None:
        llm = make_llm(*([overloaded_error()] * failures), VALID_MODEL_JSON)
        client, sleep = _client(llm, max_attempts=5)

        result = await client.generate("prompt")

        assert result.text == VALID_MODEL_JSON
        assert llm.calls == failures + 1
        assert sleep.await_count == failures
        assert [a.outcome for a in result.attempts] == ["retryable"] * failures + ["success"]

    @pytest.mark.asyncio
    async def test_same_prompt_sent_on_every_attempt(self, make_llm) -> None:
        llm = make_llm(overloaded_error(), overloaded_error(), VALID_MODEL_JSON)
        client, _ = _client(llm)

        await client.generate("the prompt")

        assert llm.prompts == ["the prompt"] * 3


class TestBackoff:
    @pytest.mark.asyncio
    async def test_delays_grow_by_multiplier(self, make_llm) -> None:
        llm = make_llm(*([overloaded_error()] * 4), VALID_MODEL_JSON)
        client, sleep = _client(llm, initial_delay_ms=3000, backoff_multiplier=1.5)

        await client.generate("prompt")

        waits = [call.args[0] for call in sleep.await_args_list]
        assert waits == pytest.approx([3.0, 4.5, 6.75, 10.125])

    @pytest.mark.asyncio
    async def test_attempt_delays_are_non_decreasing(self, make_llm) -> None:
        llm = make_llm(*([overloaded_error()] * 4), VALID_MODEL_JSON)
        client, _ = _client(llm)

        result = await client.generate("prompt")

        delays = [a.delay_ms for a in result.attempts]
        assert delays == pytest.approx([0, 3000, 4500, 6750, 10125])
        assert all(b >= a for a, b in zip(delays, delays[1:]))

    @pytest.mark.asyncio
    async def test_delay_is_not_capped(self, make_llm) -> None:
        llm = make_llm(overloaded_error())
        client, sleep = _client(llm, max_attempts=12, initial_delay_ms=1000, backoff_multiplier=2.0)

        with pytest.raises(CapacityExhaustedError):
            await client.generate("prompt")

        waits = [call.args[0] for call in sleep.await_args_list]
        assert waits[-1] == pytest.approx(1024.0)


class TestExhaustion:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_attempts", [1, 3, 5])
    async def test_always_overloaded_makes_exactly_max_attempts_calls(
        self, make_llm, max_attempts: int
    ) -> None:
        llm = make_llm(overloaded_error())
        client, sleep = _client(llm, max_attempts=max_attempts)

        with pytest.raises(CapacityExhaustedError) as exc_info:
            await client.generate("prompt")

        assert llm.calls == max_attempts
        # No wait after the final attempt
        assert sleep.await_count == max_attempts - 1
        assert exc_info.value.details["attempts"] == max_attempts

    @pytest.mark.asyncio
    async def test_terminal_error_hides_upstream_message(self, make_llm) -> None:
        llm = make_llm(overloaded_error())
        client, _ = _client(llm)

        with pytest.raises(CapacityExhaustedError) as exc_info:
            await client.generate("prompt")

        assert exc_info.value.message == CAPACITY_EXHAUSTED_MESSAGE
        assert "503" not in str(exc_info.value)
        assert "overloaded" not in str(exc_info.value).lower()
        assert "try again" in str(exc_info.value).lower()


class TestFatalErrors:
    @pytest.mark.asyncio
    async def test_fatal_error_on_first_attempt_is_not_retried(self, make_llm) -> None:
        error = fatal_error()
        llm = make_llm(error, VALID_MODEL_JSON)
        client, sleep = _client(llm)

        with pytest.raises(FatalUpstreamError) as exc_info:
            await client.generate("prompt")

        assert exc_info.value is error
        assert llm.calls == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fatal_error_after_overload_stops_immediately(self, make_llm) -> None:
        llm = make_llm(overloaded_error(), fatal_error(500), VALID_MODEL_JSON)
        client, sleep = _client(llm)

        with pytest.raises(FatalUpstreamError):
            await client.generate("prompt")

        assert llm.calls == 2
        assert sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_propagates_unretried(self, make_llm) -> None:
        llm = make_llm(KeyError("boom"), VALID_MODEL_JSON)
        client, sleep = _client(llm)

        with pytest.raises(KeyError):
            await client.generate("prompt")

        assert llm.calls == 1
        sleep.assert_not_awaited()


class TestConstruction:
    def test_defaults(self, make_llm) -> None:
        client = ResilientInferenceClient(make_llm())

        assert client.max_attempts == 5
        assert client.initial_delay_ms == 3000
        assert client.backoff_multiplier == 1.5

    def test_from_settings(self, make_llm) -> None:
        settings = RetrySettings(max_attempts=2, initial_delay_ms=100, backoff_multiplier=2.0)

        client = ResilientInferenceClient.from_settings(make_llm(), settings)

        assert client.max_attempts == 2
        assert client.initial_delay_ms == 100
        assert client.backoff_multiplier == 2.0

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_attempts": 0}, {"initial_delay_ms": -1}],
    )
    def test_invalid_args(self, make_llm, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            ResilientInferenceClient(make_llm(), **kwargs)
