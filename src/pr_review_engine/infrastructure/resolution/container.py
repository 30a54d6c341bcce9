"""Composition root: assembles a fully wired review workflow from ``AppConfig``."""

import httpx

from pr_review_engine.core.application.loops.agentic_loop_runner import AgenticLoopRunner
from pr_review_engine.core.application.parsing import XmlReviewResponseParser
from pr_review_engine.core.application.ports import BrainPort, ClockPort
from pr_review_engine.core.application.skills.review import ReviewDiffUnitSkill
from pr_review_engine.core.application.workflows.review import CodeReviewWorkflow, ReviewRequest
from pr_review_engine.infrastructure.common.clock.system_clock import SystemClock
from pr_review_engine.infrastructure.common.retry.retry_policy import RetryPolicy
from pr_review_engine.infrastructure.common.retry.retrying_brain import RetryingBrain
from pr_review_engine.infrastructure.configuration.app_config import AppConfig
from pr_review_engine.infrastructure.observability.logger_factory_service import get_logger
from pr_review_engine.infrastructure.tools.search import WorkspaceSearchTool
from pr_review_engine.infrastructure.tools.search.config import SearchSettings
from pr_review_engine.infrastructure.tools.search.ignore_rules import IgnoreMatcher
from pr_review_engine.infrastructure.tools.search.ripgrep_runner import (
    RipgrepRunner,
    locate_ripgrep,
)
from pr_review_engine.infrastructure.tools.search.search_cache import SearchCache
from pr_review_engine.infrastructure.tools.search.workspace_sandbox import WorkspaceSandbox
from pr_review_engine.infrastructure.tools.vcs.github import GitHubRestClient, RateLimitHandler

logger = get_logger("resolution")


def build_search_tool(settings: SearchSettings) -> WorkspaceSearchTool:
    binary = locate_ripgrep(settings.ripgrep_path) if settings.use_ripgrep else None
    if binary is None:
        logger.info("ripgrep not available, repository search will scan in-process")
    return WorkspaceSearchTool(
        sandbox=WorkspaceSandbox(settings.workspace_root),
        ripgrep=RipgrepRunner(binary, settings.timeout_seconds, settings.max_output_bytes),
        cache=SearchCache(settings.cache_capacity),
        ignore_file_name=settings.ignore_file_name,
    )


def build_review_workflow(
    config: AppConfig,
    brain: BrainPort,
    *,
    clock: ClockPort | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> CodeReviewWorkflow:
    """Wire one workflow per run; caches and rate-limit counters are not shared."""
    search = build_search_tool(config.search)
    vcs = GitHubRestClient(
        config.github,
        RateLimitHandler(clock or SystemClock(), config.rate_limits),
        http_client=http_client,
    )
    retrying = RetryingBrain(brain, RetryPolicy(max_attempts=config.review.llm_max_attempts))
    review_unit = ReviewDiffUnitSkill(
        runner=AgenticLoopRunner(retrying),
        search=search,
        parser=XmlReviewResponseParser(),
    )
    matcher = IgnoreMatcher.discover(search.root, None, config.search.ignore_file_name)
    return CodeReviewWorkflow(
        vcs=vcs,
        search=search,
        review_unit=review_unit,
        is_ignored=matcher.is_ignored,
        max_iterations=config.review.max_agent_iterations,
    )


def build_review_request(
    config: AppConfig, pr_number: int, diff_text: str, commit_id: str | None = None
) -> ReviewRequest:
    """Request carrying the configured granularity and model priority list."""
    return ReviewRequest(
        pr_number=pr_number,
        diff_text=diff_text,
        granularity=config.review.granularity,
        commit_id=commit_id,
        priority_models=list(config.review.priority_models),
    )
