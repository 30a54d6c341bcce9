"""Unit tests — GitHubRestClient against a respx-mocked GitHub API."""

import json

import httpx
import pytest
import respx

from pr_review_engine.core.application.exceptions import RateLimitExceededError
from pr_review_engine.core.domain.quality import (
    CodeReviewReport,
    Finding,
    PublishMode,
    ReviewEvent,
    ReviewSeverity,
)
from pr_review_engine.infrastructure.tools.vcs.github import (
    GitHubRestClient,
    PlatformApiError,
    RateLimitHandler,
)
from pr_review_engine.infrastructure.tools.vcs.github.config import GitHubSettings

API = "https://api.github.com"
PULLS = "/repos/acme/widgets/pulls"

# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture()
def github_api():
    with respx.mock(base_url=API, assert_all_called=False) as router:
        yield router


@pytest.fixture()
def client(fake_clock) -> GitHubRestClient:
    settings = GitHubSettings(repository="acme/widgets", token="ghp_testtoken")
    return GitHubRestClient(settings, RateLimitHandler(fake_clock))


def _report(*lines: int) -> CodeReviewReport:
    findings = []
    for line in lines:
        finding = Finding(
            path="src/app.ts",
            raw_quoted_line=f"+line {line}",
            message=f"Issue on {line}",
            severity=ReviewSeverity.OPTIONAL,
        )
        finding.attach_line(line)
        findings.append(finding)
    return CodeReviewReport(event=ReviewEvent.COMMENT, summary="Looks fine.", findings=findings)


# ══════════════════════════════════════════════════════════════════════
# Read calls
# ══════════════════════════════════════════════════════════════════════


class TestReadCalls:
    @pytest.mark.asyncio
    async def test_get_head_commit(self, client: GitHubRestClient, github_api) -> None:
        route = github_api.get(f"{PULLS}/7").mock(
            return_value=httpx.Response(200, json={"head": {"sha": "abc123"}})
        )

        assert await client.get_head_commit(7) == "abc123"
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer ghp_testtoken"
        assert request.headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.asyncio
    async def test_list_review_comments_follows_pagination(
        self, client: GitHubRestClient, github_api
    ) -> None:
        next_link = f'<{API}{PULLS}/7/comments?per_page=100&page=2>; rel="next"'
        route = github_api.get(f"{PULLS}/7/comments").mock(
            side_effect=[
                httpx.Response(200, json=[{"id": 1}], headers={"Link": next_link}),
                httpx.Response(200, json=[{"id": 2}]),
            ]
        )

        comments = await client.list_review_comments(7)

        assert [c["id"] for c in comments] == [1, 2]
        assert route.call_count == 2
        assert route.calls[0].request.url.params["per_page"] == "100"

    @pytest.mark.asyncio
    async def test_error_status_becomes_platform_error(
        self, client: GitHubRestClient, github_api
    ) -> None:
        github_api.get(f"{PULLS}/7").mock(
            return_value=httpx.Response(404, json={"message": "Not Found"})
        )

        with pytest.raises(PlatformApiError) as exc_info:
            await client.get_head_commit(7)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not Found"
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_server_errors_are_retryable(self, client: GitHubRestClient, github_api) -> None:
        github_api.get(f"{PULLS}/7").mock(return_value=httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(PlatformApiError) as exc_info:
            await client.get_head_commit(7)

        assert exc_info.value.retryable is True

    def test_repository_is_required(self, fake_clock) -> None:
        with pytest.raises(ValueError):
            GitHubRestClient(GitHubSettings(repository=""), RateLimitHandler(fake_clock))


# ══════════════════════════════════════════════════════════════════════
# Write calls / publish_review
# ══════════════════════════════════════════════════════════════════════


class TestPublishReview:
    @pytest.mark.asyncio
    async def test_batch_review_payload(self, client: GitHubRestClient, github_api) -> None:
        route = github_api.post(f"{PULLS}/7/reviews").mock(
            return_value=httpx.Response(200, json={"id": 99})
        )

        outcome = await client.publish_review(7, "abc123", _report(3, 9))

        assert outcome.mode is PublishMode.BATCH
        assert len(outcome.posted) == 2
        payload = json.loads(route.calls.last.request.content)
        assert payload["commit_id"] == "abc123"
        assert payload["event"] == "COMMENT"
        assert [(c["path"], c["line"], c["side"]) for c in payload["comments"]] == [
            ("src/app.ts", 3, "RIGHT"),
            ("src/app.ts", 9, "RIGHT"),
        ]
        assert "<!-- pr-review-engine -->" in payload["body"]

    @pytest.mark.asyncio
    async def test_rejected_batch_falls_back_to_single_comments(
        self, client: GitHubRestClient, github_api
    ) -> None:
        github_api.post(f"{PULLS}/7/reviews").mock(
            return_value=httpx.Response(
                422, json={"message": "Unprocessable Entity", "errors": ["Line could not be resolved"]}
            )
        )
        singles = github_api.post(f"{PULLS}/7/comments").mock(
            side_effect=[
                httpx.Response(201, json={"id": 1}),
                httpx.Response(422, json={"message": "Validation Failed"}),
            ]
        )

        outcome = await client.publish_review(7, "abc123", _report(3, 9))

        assert outcome.mode is PublishMode.INDIVIDUAL
        assert [f.resolved_line for f in outcome.posted] == [3]
        assert [f.resolved_line for f, _ in outcome.failed] == [9]
        assert json.loads(singles.calls[0].request.content)["side"] == "RIGHT"

    @pytest.mark.asyncio
    async def test_secondary_limit_exhaustion_aborts_publishing(
        self, client: GitHubRestClient, github_api, fake_clock
    ) -> None:
        github_api.post(f"{PULLS}/7/reviews").mock(
            return_value=httpx.Response(
                403, json={"message": "You have exceeded a secondary rate limit."}
            )
        )
        singles = github_api.post(f"{PULLS}/7/comments")

        with pytest.raises(RateLimitExceededError):
            await client.publish_review(7, "abc123", _report(3))

        assert fake_clock.sleeps == [60.0, 120.0, 240.0]
        assert not singles.called

    @pytest.mark.asyncio
    async def test_nothing_anchored_posts_nothing(
        self, client: GitHubRestClient, github_api
    ) -> None:
        reviews = github_api.post(f"{PULLS}/7/reviews")

        outcome = await client.publish_review(7, "abc123", _report())

        assert outcome.mode is PublishMode.SKIPPED
        assert not reviews.called
