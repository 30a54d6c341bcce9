from abc import ABC, abstractmethod
from typing import Any


class BaseWorkflow(ABC):
    """Abstract base for deterministic workflow pipelines."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        """Run the full workflow pipeline for the given request."""
