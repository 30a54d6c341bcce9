"""Primary/secondary rate-limit handling for GitHub calls.

Each attempt either succeeds or fails with a ``PlatformApiError`` that is
classified as:

- secondary (abuse detection): 422 carrying "abuse", or 403/429 mentioning a
  secondary limit. Waits ``base * 2**(n-1)`` for the n-th consecutive hit; the
  counter lives on the handler and resets only on success. Exceeding the bound
  raises ``RateLimitExceededError``.
- primary (quota): 429, or 403 with rate-limit evidence. Waits ``retry-after``,
  else until ``x-ratelimit-reset`` plus a buffer when the quota is exhausted,
  else a default. One retry per hit.
- anything else propagates untouched.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

import structlog

from pr_review_engine.core.application.exceptions import RateLimitExceededError
from pr_review_engine.core.application.ports import ClockPort
from pr_review_engine.infrastructure.observability.metrics_service import (
    RATE_LIMIT_WAIT_SECONDS,
    RATE_LIMIT_WAITS_TOTAL,
)
from pr_review_engine.infrastructure.tools.vcs.github.config import RateLimitSettings
from pr_review_engine.infrastructure.tools.vcs.github.platform_api_error import PlatformApiError

logger = structlog.get_logger()

_T = TypeVar("_T")


class RateLimitKind(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    NONE = "none"


def classify(error: PlatformApiError) -> RateLimitKind:
    status = error.status_code
    message = (error.message or "").lower()
    if status == 422 and "abuse" in message:
        return RateLimitKind.SECONDARY
    if status in (403, 429) and ("secondary rate limit" in message or "abuse" in message):
        return RateLimitKind.SECONDARY
    if status == 429:
        return RateLimitKind.PRIMARY
    if status == 403 and (
        "retry-after" in error.headers
        or error.header_int("x-ratelimit-remaining") == 0
        or "rate limit" in message
    ):
        return RateLimitKind.PRIMARY
    return RateLimitKind.NONE


@dataclass
class RateLimitState:
    """Transient per-run counters."""

    secondary_hits: int = 0


class RateLimitHandler:
    """Runs platform calls through the rate-limit state machine."""

    def __init__(self, clock: ClockPort, settings: RateLimitSettings | None = None) -> None:
        self._clock = clock
        self._settings = settings or RateLimitSettings()
        self._state = RateLimitState()

    @property
    def state(self) -> RateLimitState:
        return self._state

    async def run(self, call: Callable[[], Awaitable[_T]], *, operation: str = "call") -> _T:
        primary_retried = False
        while True:
            try:
                result = await call()
            except PlatformApiError as error:
                kind = classify(error)
                if kind == RateLimitKind.SECONDARY:
                    await self._wait_secondary(operation, error)
                elif kind == RateLimitKind.PRIMARY:
                    if primary_retried:
                        raise RateLimitExceededError(
                            f"Primary rate limit still exhausted after retry for {operation}",
                            context={"operation": operation, "status_code": error.status_code},
                        ) from error
                    primary_retried = True
                    await self._wait_primary(operation, error)
                else:
                    raise
            else:
                self._state.secondary_hits = 0
                return result

    async def _wait_secondary(self, operation: str, error: PlatformApiError) -> None:
        max_retries = self._settings.max_secondary_retries
        if self._state.secondary_hits >= max_retries:
            raise RateLimitExceededError(
                f"Secondary rate limit exceeded after {max_retries} retries",
                context={"operation": operation, "status_code": error.status_code},
            ) from error
        self._state.secondary_hits += 1
        attempt = self._state.secondary_hits
        wait = self._settings.secondary_base_wait_seconds * 2 ** (attempt - 1)
        logger.warning(
            "Secondary rate limit hit",
            operation=operation,
            attempt=attempt,
            max_retries=max_retries,
            wait_seconds=wait,
            source_system="GitHub",
        )
        await self._sleep(RateLimitKind.SECONDARY, wait)

    async def _wait_primary(self, operation: str, error: PlatformApiError) -> None:
        retry_after = error.header_int("retry-after")
        remaining = error.header_int("x-ratelimit-remaining")
        reset_at = error.header_int("x-ratelimit-reset")
        if retry_after is not None and retry_after > 0:
            wait = float(retry_after)
            reason = "retry-after"
        elif remaining == 0 and reset_at:
            wait = max(0.0, reset_at - self._clock.now() + self._settings.reset_buffer_seconds)
            reason = "reset"
        else:
            wait = self._settings.primary_default_wait_seconds
            reason = "default"
        logger.warning(
            "Primary rate limit hit",
            operation=operation,
            wait_seconds=wait,
            wait_reason=reason,
            source_system="GitHub",
        )
        await self._sleep(RateLimitKind.PRIMARY, wait)

    async def _sleep(self, kind: RateLimitKind, seconds: float) -> None:
        RATE_LIMIT_WAITS_TOTAL.labels(kind=kind.value).inc()
        RATE_LIMIT_WAIT_SECONDS.labels(kind=kind.value).observe(seconds)
        await self._clock.sleep(seconds)
