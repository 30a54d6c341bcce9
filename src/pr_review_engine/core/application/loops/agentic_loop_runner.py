import json
from collections.abc import Sequence
from typing import Any

import structlog

from pr_review_engine.core.application.ports import BrainPort
from pr_review_engine.core.domain.shared.base_tool import BaseTool

logger = structlog.get_logger()


class AgenticLoopRunner:
    """Pure-Python ReAct loop engine.

    Drives a Think -> Act -> Observe cycle using ``BrainPort.generate_with_tools``.
    Tool failures are returned to the model as ``Error: ...`` observations so it
    can recover within the same turn.
    """

    def __init__(self, brain: BrainPort) -> None:
        self._brain = brain

    async def run_loop(
        self,
        system_prompt: str,
        user_message: str,
        tools: Sequence[BaseTool],
        priority_models: list[str],
        max_iterations: int = 5,
    ) -> str:
        """Execute a ReAct loop until the LLM stops calling tools or the limit is reached.

        Returns:
            The final textual response from the LLM.
        """
        schemas, name_to_tool = await self._gather_tools(tools)
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ]

        for iteration in range(1, max_iterations + 1):
            logger.debug("Agentic loop iteration", iteration=iteration, max_iterations=max_iterations)
            response = await self._brain.generate_with_tools(
                messages=messages,
                tools=schemas,
                priority_models=priority_models,
            )

            tool_calls: list[dict[str, Any]] = response.get("tool_calls") or []
            if not tool_calls:
                return str(response.get("content") or "")

            messages.append(
                {
                    "role": "assistant",
                    "content": response.get("content", ""),
                    "tool_calls": tool_calls,
                },
            )
            for tool_call in tool_calls:
                fn = tool_call.get("function", {})
                result = await self._execute_tool_safely(
                    name_to_tool, fn.get("name", ""), fn.get("arguments", {})
                )
                messages.append(
                    {"role": "tool", "tool_call_id": tool_call.get("id", ""), "content": result},
                )

        logger.warning("Agentic loop hit max iterations", max_iterations=max_iterations)
        # Tool observations are never a review answer; fall back to the model's last words.
        last_assistant = next(
            (m for m in reversed(messages) if m["role"] == "assistant" and m.get("content")), None
        )
        return str(last_assistant["content"]) if last_assistant else ""

    @staticmethod
    async def _gather_tools(
        tools: Sequence[BaseTool],
    ) -> tuple[list[dict[str, Any]], dict[str, BaseTool]]:
        """Collect schemas from every tool and build a name-to-tool routing map."""
        all_schemas: list[dict[str, Any]] = []
        name_to_tool: dict[str, BaseTool] = {}
        for tool in tools:
            schemas = await tool.get_tool_schemas()
            for schema in schemas:
                fn_name = schema.get("function", {}).get("name", "")
                if fn_name:
                    name_to_tool[fn_name] = tool
            all_schemas.extend(schemas)
        return all_schemas, name_to_tool

    @staticmethod
    async def _execute_tool_safely(
        name_to_tool: dict[str, BaseTool],
        tool_name: str,
        raw_args: dict[str, Any] | str,
    ) -> str:
        """Route the call to the correct tool adapter, catching errors."""
        tool = name_to_tool.get(tool_name)
        if tool is None:
            logger.warning("Unknown tool requested", tool=tool_name, available=list(name_to_tool))
            return f"Error: unknown tool '{tool_name}'"
        if isinstance(raw_args, str):
            try:
                raw_args = json.loads(raw_args or "{}")
            except json.JSONDecodeError as exc:
                return f"Error: tool arguments are not valid JSON ({exc.msg})"
        if not isinstance(raw_args, dict):
            return "Error: tool arguments must be a JSON object"
        try:
            return str(await tool.execute_tool(tool_name, raw_args))
        except Exception as exc:
            logger.exception("Tool execution failed", tool=tool_name)
            return f"Error: Tool execution failed: {type(exc).__name__}: {exc}"
