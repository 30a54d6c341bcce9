"""Unit tests — AgenticLoopRunner (zero I/O, Brain and tools mocked)."""

from typing import cast
from unittest.mock import AsyncMock

import pytest

from pr_review_engine.core.application.loops.agentic_loop_runner import AgenticLoopRunner
from pr_review_engine.core.domain.shared.base_tool import BaseTool

# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture()
def mock_brain() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def runner(mock_brain: AsyncMock) -> AgenticLoopRunner:
    return AgenticLoopRunner(brain=mock_brain)


@pytest.fixture()
def search_tool() -> AsyncMock:
    tool = AsyncMock()
    tool.get_tool_schemas.return_value = [
        {"type": "function", "function": {"name": "read_files", "parameters": {}}},
        {"type": "function", "function": {"name": "search_window", "parameters": {}}},
    ]
    tool.execute_tool.return_value = "=== a.ts ===\nconst a = 1;"
    return tool


def _tool_call(name: str, arguments: object, call_id: str = "call_1") -> dict:
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}


# ══════════════════════════════════════════════════════════════════════
# _gather_tools / _execute_tool_safely
# ══════════════════════════════════════════════════════════════════════


class TestGatherTools:
    @pytest.mark.asyncio
    async def test_maps_every_function_to_its_tool(self, search_tool: AsyncMock) -> None:
        schemas, name_map = await AgenticLoopRunner._gather_tools([search_tool])

        assert len(schemas) == 2
        assert name_map["read_files"] is search_tool
        assert name_map["search_window"] is search_tool

    @pytest.mark.asyncio
    async def test_empty_tool_list(self) -> None:
        assert await AgenticLoopRunner._gather_tools([]) == ([], {})


class TestExecuteToolSafely:
    @pytest.mark.asyncio
    async def test_json_string_arguments_are_decoded(self, search_tool: AsyncMock) -> None:
        name_map = {"read_files": cast(BaseTool, search_tool)}

        await AgenticLoopRunner._execute_tool_safely(name_map, "read_files", '{"paths": ["a.ts"]}')

        search_tool.execute_tool.assert_awaited_once_with("read_files", {"paths": ["a.ts"]})

    @pytest.mark.asyncio
    async def test_invalid_json_is_reported(self, search_tool: AsyncMock) -> None:
        name_map = {"read_files": cast(BaseTool, search_tool)}

        result = await AgenticLoopRunner._execute_tool_safely(name_map, "read_files", "{not json")

        assert result.startswith("Error: tool arguments are not valid JSON")
        search_tool.execute_tool.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_tool(self) -> None:
        result = await AgenticLoopRunner._execute_tool_safely({}, "rm_rf", {})

        assert result == "Error: unknown tool 'rm_rf'"

    @pytest.mark.asyncio
    async def test_tool_exception_becomes_error_text(self, search_tool: AsyncMock) -> None:
        search_tool.execute_tool.side_effect = OSError("disk gone")
        name_map = {"read_files": cast(BaseTool, search_tool)}

        result = await AgenticLoopRunner._execute_tool_safely(name_map, "read_files", {})

        assert "disk gone" in result
        assert result.startswith("Error:")


# ══════════════════════════════════════════════════════════════════════
# run_loop
# ══════════════════════════════════════════════════════════════════════


class TestRunLoop:
    @pytest.mark.asyncio
    async def test_returns_content_when_no_tool_calls(
        self, runner: AgenticLoopRunner, mock_brain: AsyncMock, search_tool: AsyncMock
    ) -> None:
        mock_brain.generate_with_tools.return_value = {"content": "<comments></comments>"}

        result = await runner.run_loop("system", "user", [search_tool], ["m"])

        assert result == "<comments></comments>"
        mock_brain.generate_with_tools.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_tool_results_are_fed_back(
        self, runner: AgenticLoopRunner, mock_brain: AsyncMock, search_tool: AsyncMock
    ) -> None:
        mock_brain.generate_with_tools.side_effect = [
            {"content": "", "tool_calls": [_tool_call("read_files", {"paths": ["a.ts"]})]},
            {"content": "final answer"},
        ]

        result = await runner.run_loop("system", "user", [search_tool], ["m"])

        assert result == "final answer"
        second_messages = mock_brain.generate_with_tools.call_args_list[1].kwargs["messages"]
        assert second_messages[-1] == {
            "role": "tool",
            "tool_call_id": "call_1",
            "content": "=== a.ts ===\nconst a = 1;",
        }
        assert second_messages[-2]["role"] == "assistant"

    @pytest.mark.asyncio
    async def test_stops_after_max_iterations(
        self, runner: AgenticLoopRunner, mock_brain: AsyncMock, search_tool: AsyncMock
    ) -> None:
        mock_brain.generate_with_tools.return_value = {
            "content": "",
            "tool_calls": [_tool_call("read_files", {"paths": ["a.ts"]})],
        }

        result = await runner.run_loop("system", "user", [search_tool], ["m"], max_iterations=3)

        assert mock_brain.generate_with_tools.await_count == 3
        assert result == ""

    @pytest.mark.asyncio
    async def test_max_iterations_returns_last_model_text(
        self, runner: AgenticLoopRunner, mock_brain: AsyncMock, search_tool: AsyncMock
    ) -> None:
        mock_brain.generate_with_tools.side_effect = [
            {
                "content": "<prSummary>partial</prSummary>",
                "tool_calls": [_tool_call("read_files", {"paths": ["a.ts"]})],
            },
            {"content": "", "tool_calls": [_tool_call("read_files", {"paths": ["b.ts"]})]},
        ]

        result = await runner.run_loop("system", "user", [search_tool], ["m"], max_iterations=2)

        assert result == "<prSummary>partial</prSummary>"
