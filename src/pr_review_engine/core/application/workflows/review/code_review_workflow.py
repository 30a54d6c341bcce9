"""Review pipeline: Segment -> Filter -> Analyze -> Anchor -> Publish."""

from collections.abc import Callable
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars

from pr_review_engine.core.application.diff import split_diff, strip_path_prefix
from pr_review_engine.core.application.exceptions import (
    ProviderError,
    RateLimitExceededError,
    UnparsableDiffError,
    WorkflowExecutionError,
)
from pr_review_engine.core.application.skills.review import ReviewDiffUnitSkill, ReviewUnitInput
from pr_review_engine.core.application.tools import CodeSearchTool, VcsTool
from pr_review_engine.core.application.workflows.base_workflow import BaseWorkflow
from pr_review_engine.core.application.workflows.review.review_request import ReviewRequest
from pr_review_engine.core.domain.diff import DiffUnit
from pr_review_engine.core.domain.quality import (
    AgentResponse,
    CodeReviewReport,
    Finding,
    PublishMode,
    PublishOutcome,
    ReviewEvent,
)
from pr_review_engine.core.domain.quality.value_objects.review_marker import is_bot_comment

logger = structlog.get_logger()


class CodeReviewWorkflow(BaseWorkflow):
    """Sequences the deterministic steps around the model call.

    Input problems (unparsable diff, a unit the model keeps failing on) degrade
    to skipped work. Rate-limit exhaustion propagates as is; failing to load the
    pull request state raises ``WorkflowExecutionError``.
    """

    def __init__(
        self,
        vcs: VcsTool,
        search: CodeSearchTool,
        review_unit: ReviewDiffUnitSkill,
        is_ignored: Callable[[str], bool],
        max_iterations: int = 8,
    ) -> None:
        self._vcs = vcs
        self._search = search
        self._review_unit = review_unit
        self._is_ignored = is_ignored
        self._max_iterations = max_iterations

    async def execute(self, request: ReviewRequest) -> PublishOutcome:
        bind_contextvars(pr_number=request.pr_number, event_type="workflow.code_review")
        logger.info("Code review workflow started", granularity=request.granularity.value)
        await self._connect_tools()
        try:
            return await self._run_review_pipeline(request)
        finally:
            await self._disconnect_tools()

    async def _run_review_pipeline(self, request: ReviewRequest) -> PublishOutcome:
        units = self._step_1_segment(request)
        if not units:
            return PublishOutcome(mode=PublishMode.SKIPPED)
        commit_id, existing = await self._fetch_pr_state(request)
        pending = self._step_2_skip_commented(units, existing)
        responses = await self._step_3_analyze(request, pending, existing)
        report = self._step_4_build_report(responses)
        outcome = await self._step_5_publish(request.pr_number, commit_id, report)
        logger.info(
            "Code review workflow completed",
            mode=outcome.mode.value,
            posted=len(outcome.posted),
            failed=len(outcome.failed),
        )
        return outcome

    # ── Step Methods ─────────────────────────────────────────────────

    async def _fetch_pr_state(self, request: ReviewRequest) -> tuple[str, list[dict[str, Any]]]:
        """Head commit and existing review comments; without them nothing can be anchored."""
        try:
            commit_id = request.commit_id or await self._vcs.get_head_commit(request.pr_number)
            existing = await self._vcs.list_review_comments(request.pr_number)
        except RateLimitExceededError:
            raise
        except ProviderError as exc:
            raise WorkflowExecutionError(
                f"Could not load pull request state: {exc}",
                context={"pr_number": request.pr_number, "provider": exc.provider},
            ) from exc
        return commit_id, existing

    def _step_1_segment(self, request: ReviewRequest) -> list[DiffUnit]:
        """Split the diff and drop units whose file matches an ignore rule."""
        try:
            units = split_diff(request.diff_text, request.granularity)
        except UnparsableDiffError as exc:
            logger.error(
                "Diff could not be parsed, nothing to review",
                error_type="UnparsableDiffError",
                error_details=str(exc),
            )
            return []
        kept = [u for u in units if not self._is_ignored(u.file_name)]
        logger.info("Step 1: Diff segmented", units=len(units), ignored=len(units) - len(kept))
        return kept

    @staticmethod
    def _step_2_skip_commented(
        units: list[DiffUnit], existing: list[dict[str, Any]]
    ) -> list[DiffUnit]:
        """Skip units whose changed range already carries one of our comments."""
        own = [c for c in existing if is_bot_comment(c.get("body"))]
        pending = []
        for unit in units:
            if any(_comment_in_unit(comment, unit) for comment in own):
                logger.info("Skipping already reviewed unit", file_path=unit.file_name)
                continue
            pending.append(unit)
        return pending

    async def _step_3_analyze(
        self,
        request: ReviewRequest,
        units: list[DiffUnit],
        existing: list[dict[str, Any]],
    ) -> list[AgentResponse]:
        responses = []
        for unit in units:
            comments = [
                c for c in existing if strip_path_prefix(str(c.get("path", ""))) == unit.file_name
            ]
            try:
                response = await self._review_unit.execute(
                    ReviewUnitInput(
                        unit=unit,
                        system_prompt=request.system_prompt,
                        priority_models=request.priority_models,
                        existing_comments=comments,
                        max_iterations=self._max_iterations,
                    )
                )
            except ProviderError as exc:
                logger.warning(
                    "Model call failed, skipping unit",
                    file_path=unit.file_name,
                    error_type=type(exc).__name__,
                    error_details=str(exc),
                    error_retryable=exc.retryable,
                )
                continue
            responses.append(response)
        return responses

    @staticmethod
    def _step_4_build_report(responses: list[AgentResponse]) -> CodeReviewReport:
        """Keep anchored findings only, de-duplicated on path, line and message."""
        seen: set[str] = set()
        findings: list[Finding] = []
        dropped = 0
        for response in responses:
            for finding in response.findings:
                if not finding.is_resolved or finding.dedupe_key in seen:
                    dropped += 1
                    continue
                seen.add(finding.dedupe_key)
                findings.append(finding)
        summary = "\n\n".join(r.pr_summary for r in responses if r.pr_summary)
        resolved = sum(len(r.resolved_comments) for r in responses)
        logger.info(
            "Step 4: Report built", findings=len(findings), dropped=dropped, resolved_comments=resolved
        )
        return CodeReviewReport(event=ReviewEvent.COMMENT, summary=summary, findings=findings)

    async def _step_5_publish(
        self, pr_number: int, commit_id: str, report: CodeReviewReport
    ) -> PublishOutcome:
        try:
            return await self._vcs.publish_review(pr_number, commit_id, report)
        except RateLimitExceededError as exc:
            logger.error(
                "Publishing aborted by rate limiting",
                error_type="RateLimitExceededError",
                error_details=str(exc),
            )
            raise

    # ── Tool Lifecycle ───────────────────────────────────────────────

    async def _connect_tools(self) -> None:
        await self._vcs.connect()
        await self._search.connect()

    async def _disconnect_tools(self) -> None:
        """Close tool resources; swallow errors to avoid masking the original exception."""
        for tool in (self._vcs, self._search):
            try:
                await tool.disconnect()
            except Exception:  # noqa: BLE001
                logger.warning("Failed to disconnect tool", tool_type=type(tool).__name__)


def _comment_in_unit(comment: dict[str, Any], unit: DiffUnit) -> bool:
    if strip_path_prefix(str(comment.get("path", ""))) != unit.file_name:
        return False
    line = comment.get("line") or comment.get("original_line")
    return isinstance(line, int) and unit.touches(line)
