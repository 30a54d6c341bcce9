from abc import ABC, abstractmethod
from typing import Any

from pr_review_engine.core.domain.shared.tool_type import ToolType


class BaseTool(ABC):
    """Domain-level contract every external tool adapter must satisfy."""

    @property
    @abstractmethod
    def tool_type(self) -> ToolType: ...

    async def connect(self) -> None:
        """Open any long-lived resources (no-op by default)."""
        return

    async def disconnect(self) -> None:
        """Release long-lived resources (no-op by default)."""
        return

    async def get_tool_schemas(self) -> list[dict[str, Any]]:
        """Function schemas this tool exposes to the agent."""
        return []

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> Any:  # noqa: ARG002
        return None
