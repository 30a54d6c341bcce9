import asyncio
import time

from pr_review_engine.core.application.ports import ClockPort


class SystemClock(ClockPort):
    """Real wall clock backed by ``time.time`` and ``asyncio.sleep``."""

    def now(self) -> float:
        return time.time()

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
