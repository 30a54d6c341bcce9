"""Unit tests — RetryPolicy and RetryingBrain (tenacity, tiny waits)."""

from unittest.mock import AsyncMock

import pytest

from pr_review_engine.core.application.exceptions import ProviderError
from pr_review_engine.infrastructure.common.retry.retry_policy import RetryPolicy
from pr_review_engine.infrastructure.common.retry.retrying_brain import RetryingBrain

FAST = {"initial_wait": 0.0, "max_wait": 0.0}


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_retries_retryable_errors(self) -> None:
        fn = AsyncMock(side_effect=[ProviderError("llm", "overloaded", retryable=True), "ok"])

        assert await RetryPolicy(max_attempts=3, **FAST).run(fn) == "ok"
        assert fn.await_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_errors_fail_fast(self) -> None:
        error = ProviderError("llm", "bad request")
        fn = AsyncMock(side_effect=error)

        with pytest.raises(ProviderError) as exc_info:
            await RetryPolicy(max_attempts=3, **FAST).run(fn)

        assert exc_info.value is error
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_last_error_is_raised_when_attempts_run_out(self) -> None:
        fn = AsyncMock(side_effect=ProviderError("llm", "overloaded", retryable=True))

        with pytest.raises(ProviderError, match="overloaded"):
            await RetryPolicy(max_attempts=2, **FAST).run(fn)

        assert fn.await_count == 2

    @pytest.mark.asyncio
    async def test_default_is_single_attempt(self) -> None:
        fn = AsyncMock(side_effect=ProviderError("llm", "overloaded", retryable=True))

        with pytest.raises(ProviderError):
            await RetryPolicy(**FAST).run(fn)

        assert fn.await_count == 1


class TestRetryingBrain:
    @pytest.mark.asyncio
    async def test_delegates_with_retry(self) -> None:
        inner = AsyncMock()
        inner.generate_with_tools.side_effect = [
            ProviderError("llm", "timeout", retryable=True),
            {"content": "done"},
        ]
        brain = RetryingBrain(inner, RetryPolicy(max_attempts=2, **FAST))

        result = await brain.generate_with_tools([{"role": "user", "content": "hi"}], [], ["m"])

        assert result == {"content": "done"}
        inner.generate_with_tools.assert_awaited_with([{"role": "user", "content": "hi"}], [], ["m"])
