from abc import abstractmethod
from typing import Any

from pr_review_engine.core.domain.quality import CodeReviewReport, PublishOutcome, ReviewEvent
from pr_review_engine.core.domain.shared.base_tool import BaseTool
from pr_review_engine.core.domain.shared.tool_type import ToolType


class VcsTool(BaseTool):
    """Abstract contract for the code-host calls the review run needs.

    The client handle is already authenticated. Implementations raise
    ``ProviderError`` subclasses carrying the HTTP status and response headers
    so rate-limit handling can classify them.
    """

    @property
    def tool_type(self) -> ToolType:
        return ToolType.VCS

    @abstractmethod
    async def get_head_commit(self, pr_number: int) -> str:
        """SHA of the pull request head revision."""

    @abstractmethod
    async def list_review_comments(self, pr_number: int) -> list[dict[str, Any]]:
        """All inline review comments already on the pull request."""

    @abstractmethod
    async def create_batch_review(
        self,
        pr_number: int,
        commit_id: str,
        comments: list[dict[str, Any]],
        body: str,
        event: ReviewEvent,
    ) -> dict[str, Any]:
        """Submit one review holding every inline comment."""

    @abstractmethod
    async def create_single_comment(
        self, pr_number: int, commit_id: str, path: str, line: int, body: str
    ) -> dict[str, Any]:
        """Post one inline comment on the right-hand side of the diff."""

    @abstractmethod
    async def publish_review(
        self, pr_number: int, commit_id: str, report: CodeReviewReport
    ) -> PublishOutcome:
        """Publish all anchored findings as one review, falling back to single comments.

        Raises ``RateLimitExceededError`` when rate-limit retries run out.
        """
