from pr_review_engine.core.application.exceptions.provider_error import ProviderError
from pr_review_engine.core.application.exceptions.review_exceptions import (
    ApplicationError,
    RateLimitExceededError,
    ToolCallValidationError,
    UnparsableDiffError,
    WorkflowExecutionError,
)

__all__ = [
    "ApplicationError",
    "ProviderError",
    "RateLimitExceededError",
    "ToolCallValidationError",
    "UnparsableDiffError",
    "WorkflowExecutionError",
]
