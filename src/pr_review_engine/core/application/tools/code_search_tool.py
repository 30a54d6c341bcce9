from abc import abstractmethod
from typing import Any

from pr_review_engine.core.application.exceptions import ToolCallValidationError
from pr_review_engine.core.application.tools.tool_calls import (
    TOOL_CALL_MODELS,
    DependencyGraphCall,
    ReadFilesCall,
    SearchRepositoryCall,
    SearchWindowCall,
    ToolCall,
    parse_tool_call,
    tool_schema,
)
from pr_review_engine.core.domain.shared.base_tool import BaseTool
from pr_review_engine.core.domain.shared.tool_type import ToolType


class CodeSearchTool(BaseTool):
    """Read-only, workspace-sandboxed search operations offered to the agent.

    Every operation returns text. Failures (missing files, unavailable search
    binary, bad arguments) come back as ``Error: ...`` or "not found" strings so
    the agent can recover within the same turn.
    """

    @property
    def tool_type(self) -> ToolType:
        return ToolType.CODE_SEARCH

    @abstractmethod
    async def read_files(self, paths: list[str]) -> str:
        """Concatenated file contents; unreadable paths get an inline error block."""

    @abstractmethod
    async def search_window(self, path: str, text: str, context_lines: int = 5) -> str:
        """Every line of *path* containing *text*, with numbered context."""

    @abstractmethod
    async def search_repository(self, call: SearchRepositoryCall) -> str:
        """Repository-wide search honoring ignore rules; results are cached."""

    @abstractmethod
    async def dependency_graph(self, path: str, depth: int = 1) -> str:
        """Relative-import edges of *path*, both directions, up to *depth* hops."""

    async def get_tool_schemas(self) -> list[dict[str, Any]]:
        return [tool_schema(model) for model in TOOL_CALL_MODELS]

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> str:
        try:
            call = parse_tool_call(name, arguments)
        except ToolCallValidationError as exc:
            return f"Error: {exc}"
        return await self.dispatch(call)

    async def dispatch(self, call: ToolCall) -> str:
        match call:
            case ReadFilesCall():
                return await self.read_files(call.paths)
            case SearchWindowCall():
                return await self.search_window(call.path, call.text, call.context_lines)
            case SearchRepositoryCall():
                return await self.search_repository(call)
            case DependencyGraphCall():
                return await self.dependency_graph(call.path, call.depth)
        raise ToolCallValidationError(f"Unsupported tool call: {call!r}")
