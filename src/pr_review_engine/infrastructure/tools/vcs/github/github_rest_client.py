"""Async GitHub REST client for the review calls, rate-limit aware."""

from __future__ import annotations

from typing import Any

import httpx

from pr_review_engine.core.application.tools import VcsTool
from pr_review_engine.core.domain.quality import CodeReviewReport, PublishOutcome, ReviewEvent
from pr_review_engine.infrastructure.observability.metrics_service import PLATFORM_CALLS_TOTAL
from pr_review_engine.infrastructure.observability.logger_factory_service import get_logger
from pr_review_engine.infrastructure.observability.redaction_service import redact_text
from pr_review_engine.infrastructure.tools.vcs.github.config import GitHubSettings
from pr_review_engine.infrastructure.tools.vcs.github.github_rate_limit_handler import (
    RateLimitHandler,
)
from pr_review_engine.infrastructure.tools.vcs.github.github_review_publisher import (
    GitHubReviewPublisher,
)
from pr_review_engine.infrastructure.tools.vcs.github.platform_api_error import PlatformApiError

logger = get_logger("github")

_ACCEPT = "application/vnd.github+json"
_API_VERSION = "2022-11-28"


class GitHubRestClient(VcsTool):
    """Implements ``VcsTool`` over the GitHub pulls API.

    Every call goes through the ``RateLimitHandler``; non-2xx answers become
    ``PlatformApiError`` with status and headers attached.
    """

    def __init__(
        self,
        settings: GitHubSettings,
        rate_limits: RateLimitHandler,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not settings.repository:
            raise ValueError("GITHUB_REPOSITORY is required")
        self._settings = settings
        self._rate_limits = rate_limits
        self._http = http_client or self._build_http_client(settings)

    @staticmethod
    def _build_http_client(settings: GitHubSettings) -> httpx.AsyncClient:
        headers = {"Accept": _ACCEPT, "X-GitHub-Api-Version": _API_VERSION}
        if settings.token is not None:
            headers["Authorization"] = f"Bearer {settings.token.get_secret_value()}"
        return httpx.AsyncClient(
            base_url=settings.api_url, headers=headers, timeout=settings.timeout_seconds
        )

    async def disconnect(self) -> None:
        await self._http.aclose()

    @property
    def _pulls(self) -> str:
        return f"/repos/{self._settings.owner}/{self._settings.repo}/pulls"

    async def get_head_commit(self, pr_number: int) -> str:
        data = await self._call("get_pull", "GET", f"{self._pulls}/{pr_number}")
        return str(data["head"]["sha"])

    async def list_review_comments(self, pr_number: int) -> list[dict[str, Any]]:
        comments: list[dict[str, Any]] = []
        url: str | None = f"{self._pulls}/{pr_number}/comments"
        params: dict[str, Any] | None = {"per_page": 100}
        while url:
            response = await self._rate_limits.run(
                lambda u=url, p=params: self._send("GET", u, params=p),
                operation="list_review_comments",
            )
            comments.extend(response.json())
            url = response.links.get("next", {}).get("url")
            params = None
        PLATFORM_CALLS_TOTAL.labels(call="list_review_comments", outcome="ok").inc()
        return comments

    async def create_batch_review(
        self,
        pr_number: int,
        commit_id: str,
        comments: list[dict[str, Any]],
        body: str,
        event: ReviewEvent,
    ) -> dict[str, Any]:
        payload = {
            "commit_id": commit_id,
            "body": body,
            "event": event.value,
            "comments": comments,
        }
        return await self._call(
            "create_batch_review", "POST", f"{self._pulls}/{pr_number}/reviews", json=payload
        )

    async def create_single_comment(
        self, pr_number: int, commit_id: str, path: str, line: int, body: str
    ) -> dict[str, Any]:
        payload = {
            "commit_id": commit_id,
            "path": path,
            "line": line,
            "side": "RIGHT",
            "body": body,
        }
        return await self._call(
            "create_single_comment", "POST", f"{self._pulls}/{pr_number}/comments", json=payload
        )

    async def publish_review(
        self, pr_number: int, commit_id: str, report: CodeReviewReport
    ) -> PublishOutcome:
        return await GitHubReviewPublisher(self).publish(pr_number, commit_id, report)

    async def _call(self, operation: str, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._rate_limits.run(
                lambda: self._send(method, url, **kwargs), operation=operation
            )
        except Exception as exc:
            PLATFORM_CALLS_TOTAL.labels(call=operation, outcome="error").inc()
            logger.warning(
                "GitHub call failed",
                operation=operation,
                error_type=type(exc).__name__,
                error_code=getattr(exc, "status_code", None),
                error_details=str(exc),
                source_system="GitHub",
            )
            raise
        PLATFORM_CALLS_TOTAL.labels(call=operation, outcome="ok").inc()
        return response.json() if response.content else {}

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise PlatformApiError(
                f"Transport error: {redact_text(str(exc))}", retryable=True
            ) from exc
        if response.is_success:
            return response
        raise PlatformApiError(
            _error_message(response),
            status_code=response.status_code,
            headers=dict(response.headers),
            retryable=response.status_code >= 500,
        )


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return redact_text(response.text[:500]) or response.reason_phrase
    if isinstance(data, dict):
        message = str(data.get("message", ""))
        errors = data.get("errors")
        if errors:
            message = f"{message} {errors}"
        return redact_text(message) or response.reason_phrase
    return response.reason_phrase
