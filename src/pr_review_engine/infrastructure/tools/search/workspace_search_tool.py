"""Working-tree implementation of the agent's code-search toolset."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

import structlog

from pr_review_engine.core.application.tools import CodeSearchTool, SearchRepositoryCall
from pr_review_engine.core.application.tools.tool_calls import ToolCall
from pr_review_engine.infrastructure.observability.metrics_service import (
    SEARCH_BACKEND_RUNS_TOTAL,
    TOOL_CALLS_TOTAL,
)
from pr_review_engine.infrastructure.tools.search.dependency_graph import (
    DependencyGraphBuilder,
    DependencyNode,
    render_graph,
)
from pr_review_engine.infrastructure.tools.search.ignore_rules import (
    DEFAULT_IGNORE_FILE_NAME,
    IgnoreMatcher,
)
from pr_review_engine.infrastructure.tools.search.in_process_scanner import (
    read_text_lines,
    scan_repository,
)
from pr_review_engine.infrastructure.tools.search.ripgrep_runner import (
    RipgrepRunner,
    RipgrepUnavailableError,
    SearchTimeoutError,
)
from pr_review_engine.infrastructure.tools.search.search_cache import SearchCache, make_cache_key
from pr_review_engine.infrastructure.tools.search.search_models import SearchHits, SearchPattern
from pr_review_engine.infrastructure.tools.search.snippet_formatter import (
    format_file_matches,
    format_no_matches,
    format_truncation,
    format_window_result,
)
from pr_review_engine.infrastructure.tools.search.workspace_sandbox import (
    SandboxViolationError,
    WorkspaceSandbox,
)

logger = structlog.get_logger()


class WorkspaceSearchTool(CodeSearchTool):
    """Read-only search over one working tree.

    Owns its own ``SearchCache`` so separate runs never share state.
    """

    def __init__(
        self,
        sandbox: WorkspaceSandbox,
        ripgrep: RipgrepRunner,
        cache: SearchCache,
        ignore_file_name: str = DEFAULT_IGNORE_FILE_NAME,
    ) -> None:
        self._sandbox = sandbox
        self._ripgrep = ripgrep
        self._cache = cache
        self._ignore_file_name = ignore_file_name

    @property
    def root(self) -> Path:
        return self._sandbox.root

    @property
    def cache(self) -> SearchCache:
        return self._cache

    async def dispatch(self, call: ToolCall) -> str:
        result = await super().dispatch(call)
        outcome = "error" if result.startswith("Error") else "ok"
        TOOL_CALLS_TOTAL.labels(tool=call.tool, outcome=outcome).inc()
        return result

    # ── ReadFiles ──

    async def read_files(self, paths: list[str]) -> str:
        return "\n\n".join([self._read_one(path) for path in paths])

    def _read_one(self, path: str) -> str:
        try:
            target = self._sandbox.resolve(path)
        except SandboxViolationError as exc:
            return f"=== {path} ===\nError: {exc}"
        if not target.is_file():
            return f"=== {path} ===\nError: File not found at {path}"
        try:
            content = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return f"=== {path} ===\nError reading file: {exc}"
        return f"=== {path} ===\n{content}"

    # ── SearchWindow ──

    async def search_window(self, path: str, text: str, context_lines: int = 5) -> str:
        try:
            target = self._sandbox.resolve(path)
        except SandboxViolationError as exc:
            return f"Error: {exc}"
        if not target.is_file():
            return f"Error: File not found at {path}"
        try:
            lines = target.read_text(encoding="utf-8").split("\n")
        except (OSError, UnicodeDecodeError) as exc:
            return f"Error reading file: {exc}"
        matches = [number for number, line in enumerate(lines, start=1) if text in line]
        return format_window_result(path, text, lines, matches, context_lines)

    # ── SearchRepository ──

    async def search_repository(self, call: SearchRepositoryCall) -> str:
        key = make_cache_key(call)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Search cache hit", query=call.query)
            return cached

        try:
            scopes = self._normalize_scopes(call.paths)
        except SandboxViolationError as exc:
            return f"Error: {exc}"

        pattern = SearchPattern.from_call(call)
        try:
            re.compile(pattern.text if not pattern.fixed else re.escape(pattern.text))
        except re.error as exc:
            return f"Error: invalid regular expression: {exc}"

        root = self._sandbox.root
        matcher = await asyncio.to_thread(
            IgnoreMatcher.discover, root, scopes, self._ignore_file_name
        )
        try:
            hits = await self._run_search(root, pattern, matcher, call, scopes)
        except SearchTimeoutError as exc:
            return f'Search timed out after {exc.seconds:g}s for "{call.query}"'

        result = self._render(call, hits)
        self._cache.put(key, result)
        return result

    async def _run_search(
        self,
        root: Path,
        pattern: SearchPattern,
        matcher: IgnoreMatcher,
        call: SearchRepositoryCall,
        scopes: list[str] | None,
    ) -> SearchHits:
        if self._ripgrep.available:
            try:
                hits = await self._ripgrep.search(
                    root,
                    pattern,
                    extensions=call.extensions,
                    paths=scopes,
                    max_results=call.max_results,
                    keep=lambda rel: not matcher.is_ignored(rel),
                    prune_globs=_prune_globs(matcher),
                )
            except SearchTimeoutError:
                SEARCH_BACKEND_RUNS_TOTAL.labels(backend="ripgrep", outcome="timeout").inc()
                raise
            except RipgrepUnavailableError as exc:
                SEARCH_BACKEND_RUNS_TOTAL.labels(backend="ripgrep", outcome="error").inc()
                logger.warning(
                    "ripgrep failed, falling back to in-process scan", error_details=str(exc)
                )
            else:
                SEARCH_BACKEND_RUNS_TOTAL.labels(backend="ripgrep", outcome="ok").inc()
                return hits

        hits = await asyncio.to_thread(
            scan_repository,
            root,
            pattern,
            matcher,
            extensions=call.extensions,
            paths=scopes,
            max_results=call.max_results,
        )
        SEARCH_BACKEND_RUNS_TOTAL.labels(backend="in_process", outcome="ok").inc()
        return hits

    def _normalize_scopes(self, paths: list[str] | None) -> list[str] | None:
        if not paths:
            return None
        scopes = [self._sandbox.normalize(p) for p in paths]
        if "." in scopes:
            return None
        return scopes

    def _render(self, call: SearchRepositoryCall, hits: SearchHits) -> str:
        sections = []
        for path, match_lines in hits.files.items():
            lines = read_text_lines(self._sandbox.root / path)
            if lines is None:
                continue
            sections.append(format_file_matches(path, lines, match_lines, call.context_lines))
        if not sections:
            return format_no_matches(call.query)
        if hits.truncated:
            sections.append(format_truncation(call.max_results))
        return "\n\n".join(sections)

    # ── DependencyGraph ──

    async def dependency_graph(self, path: str, depth: int = 1) -> str:
        try:
            rel = self._sandbox.normalize(path)
        except SandboxViolationError as exc:
            return f"Error: {exc}"
        if not (self._sandbox.root / rel).is_file():
            return f"Error: File not found at {path}"
        nodes = await asyncio.to_thread(self._build_graph, rel, depth)
        return render_graph(nodes)

    def _build_graph(self, rel: str, depth: int) -> dict[str, DependencyNode]:
        root = self._sandbox.root
        matcher = IgnoreMatcher.discover(root, None, self._ignore_file_name)
        return DependencyGraphBuilder(root, matcher).build(rel, depth)


def _prune_globs(matcher: IgnoreMatcher) -> list[str]:
    """Default directory patterns handed to ripgrep so it skips them while walking."""
    if matcher.has_negations:
        return []
    return [p for p in matcher.patterns if p.endswith("/") and "/" not in p.rstrip("/")]
