"""Publishes a review as one batch, falling back to per-comment posting."""

import structlog

from pr_review_engine.core.application.exceptions import ProviderError, RateLimitExceededError
from pr_review_engine.core.application.tools import VcsTool
from pr_review_engine.core.domain.quality import CodeReviewReport, Finding, PublishMode, PublishOutcome
from pr_review_engine.infrastructure.tools.vcs.github.github_review_formatter import (
    build_review_body,
    format_inline_comment,
)

logger = structlog.get_logger()


class GitHubReviewPublisher:
    """Submits every anchored finding of a report to a pull request."""

    def __init__(self, vcs: VcsTool) -> None:
        self._vcs = vcs

    async def publish(self, pr_number: int, commit_id: str, report: CodeReviewReport) -> PublishOutcome:
        """Raises ``RateLimitExceededError`` when rate limits are exhausted; earlier posts remain."""
        findings = report.anchored_findings
        if not findings:
            logger.info("No anchored findings to publish", pr_number=pr_number)
            return PublishOutcome(mode=PublishMode.SKIPPED)

        comments = [
            {
                "path": f.path,
                "line": f.resolved_line,
                "side": "RIGHT",
                "body": format_inline_comment(f),
            }
            for f in findings
        ]
        try:
            await self._vcs.create_batch_review(
                pr_number, commit_id, comments, build_review_body(report), report.event
            )
        except RateLimitExceededError:
            raise
        except ProviderError as exc:
            logger.warning(
                "Batch review failed, posting comments individually",
                pr_number=pr_number,
                error_type=type(exc).__name__,
                error_details=str(exc),
                source_system="GitHub",
            )
            return await self._publish_individually(pr_number, commit_id, findings)

        logger.info("Review published", pr_number=pr_number, comments=len(findings))
        return PublishOutcome(mode=PublishMode.BATCH, posted=list(findings))

    async def _publish_individually(
        self, pr_number: int, commit_id: str, findings: list[Finding]
    ) -> PublishOutcome:
        outcome = PublishOutcome(mode=PublishMode.INDIVIDUAL)
        for finding in findings:
            try:
                await self._vcs.create_single_comment(
                    pr_number,
                    commit_id,
                    finding.path,
                    finding.resolved_line,
                    format_inline_comment(finding),
                )
            except RateLimitExceededError:
                raise
            except ProviderError as exc:
                logger.warning(
                    "Inline comment failed",
                    pr_number=pr_number,
                    file_path=finding.path,
                    line=finding.resolved_line,
                    error_details=str(exc),
                    source_system="GitHub",
                )
                outcome.failed.append((finding, str(exc)))
            else:
                outcome.posted.append(finding)
        logger.info(
            "Individual comments published",
            pr_number=pr_number,
            posted=len(outcome.posted),
            failed=len(outcome.failed),
        )
        return outcome
