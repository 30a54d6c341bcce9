from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pr_review_engine.core.application.exceptions import ProviderError

logger = structlog.get_logger()

_T = TypeVar("_T")


def _retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.retryable


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "Retrying model call",
        attempt=state.attempt_number,
        wait_seconds=state.next_action.sleep if state.next_action else None,
        error_type=type(exc).__name__,
        error_details=str(exc),
        error_retryable=True,
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Retries transient provider failures around model calls.

    Only ``ProviderError`` with ``retryable=True`` is retried; the last error
    is re-raised unchanged once attempts run out.
    """

    max_attempts: int = 1  # 1 attempt, 0 retries
    initial_wait: float = 0.25
    max_wait: float = 5.0

    async def run(self, fn: Callable[[], Awaitable[_T]]) -> _T:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_retryable),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(initial=self.initial_wait, max=self.max_wait),
            before_sleep=_log_retry,
            reraise=True,
        )
        return await retrying(fn)
