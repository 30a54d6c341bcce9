from abc import ABC, abstractmethod
from typing import Any


class BrainPort(ABC):
    """Port for the language-model collaborator.

    The review engine treats the model as opaque: it sends messages and tool
    schemas and receives either text or tool calls back.

    Implementations MUST raise ``ProviderError`` on provider-level failures
    (rate limits, auth, timeouts), with ``retryable`` set for transient ones.
    """

    @abstractmethod
    async def generate_with_tools(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        priority_models: list[str],
    ) -> dict[str, Any]:
        """[AGENTIC] Send messages and tool definitions; return the raw LLM response.

        The caller is responsible for executing tool calls and managing the ReAct loop.

        Args:
            messages: OpenAI-compatible message list.
            tools: OpenAI-compatible tool/function definitions.
            priority_models: Ordered list of ``provider:model`` identifiers to try.

        Returns:
            Raw response dict containing ``content`` and optionally ``tool_calls``.

        Raises:
            ProviderError: When every provider in *priority_models* fails.
        """
