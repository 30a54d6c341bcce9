from typing import Any

from pr_review_engine.core.application.ports import BrainPort
from pr_review_engine.infrastructure.common.retry.retry_policy import RetryPolicy


class RetryingBrain(BrainPort):
    """Decorates a ``BrainPort`` so transient provider failures are retried."""

    def __init__(self, inner: BrainPort, policy: RetryPolicy) -> None:
        self._inner = inner
        self._policy = policy

    async def generate_with_tools(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        priority_models: list[str],
    ) -> dict[str, Any]:
        return await self._policy.run(
            lambda: self._inner.generate_with_tools(messages, tools, priority_models)
        )
