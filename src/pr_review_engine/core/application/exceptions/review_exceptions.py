"""Review-engine exception hierarchy.

Provides a typed, structured exception tree for the application layer so
callers can branch on failure kind without string-matching.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application-layer errors."""

    def __init__(self, message: str = "", *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


class UnparsableDiffError(ApplicationError):
    """Raised when diff text does not follow the unified-diff grammar."""


class RateLimitExceededError(ApplicationError):
    """Raised when secondary rate-limit retries are exhausted; aborts publishing only."""


class WorkflowExecutionError(ApplicationError):
    """Raised when the review pipeline fails at a step it cannot degrade."""


class ToolCallValidationError(ApplicationError):
    """Raised when an agent tool call does not match any known call schema."""
