"""Async wrapper around ``rg --json`` bounded by a timeout and an output cap."""

from __future__ import annotations

import asyncio
import json
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from pr_review_engine.infrastructure.tools.search.search_models import SearchHits, SearchPattern

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024
_READ_CHUNK_BYTES = 64 * 1024


class RipgrepUnavailableError(RuntimeError):
    """The binary is missing or exited with an error and no usable output."""


class SearchTimeoutError(TimeoutError):
    def __init__(self, seconds: float) -> None:
        super().__init__(f"ripgrep exceeded {seconds}s")
        self.seconds = seconds


def locate_ripgrep(configured: str | None = None) -> str | None:
    """Explicit setting first, then ``rg`` on PATH."""
    if configured:
        return shutil.which(configured) or (configured if Path(configured).is_file() else None)
    return shutil.which("rg")


def build_arguments(
    pattern: SearchPattern,
    extensions: Sequence[str] | None,
    paths: Sequence[str] | None,
    prune_globs: Sequence[str] = (),
) -> list[str]:
    """Argument vector without the binary. Ignore rules are applied afterwards."""
    args = ["--json", "--no-ignore", "--hidden", "--sort", "path", "--no-messages"]
    args.append("--case-sensitive" if pattern.case_sensitive else "--ignore-case")
    if pattern.fixed:
        args.append("--fixed-strings")
    args.extend(["-g", "!.git"])
    for glob in prune_globs:
        args.extend(["-g", f"!{glob}"])
    for ext in extensions or ():
        args.extend(["-g", f"*.{ext.lstrip('.')}"])
    args.extend(["-e", pattern.text, "--"])
    args.extend(paths or ())
    return args


class RipgrepRunner:
    """Runs one ripgrep process per search and collects matched line numbers."""

    def __init__(
        self,
        binary: str | None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ) -> None:
        self._binary = binary
        self._timeout = timeout_seconds
        self._max_output_bytes = max_output_bytes

    @property
    def available(self) -> bool:
        return self._binary is not None

    async def search(
        self,
        root: Path,
        pattern: SearchPattern,
        *,
        extensions: Sequence[str] | None,
        paths: Sequence[str] | None,
        max_results: int,
        keep: Callable[[str], bool],
        prune_globs: Sequence[str] = (),
    ) -> SearchHits:
        if self._binary is None:
            raise RipgrepUnavailableError("ripgrep binary not found")
        args = build_arguments(pattern, extensions, paths, prune_globs)
        try:
            process = await asyncio.create_subprocess_exec(
                self._binary,
                *args,
                cwd=str(root),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise RipgrepUnavailableError(str(exc)) from exc

        try:
            return await asyncio.wait_for(
                self._run(process, max_results, keep), timeout=self._timeout
            )
        except TimeoutError as exc:
            raise SearchTimeoutError(self._timeout) from exc
        finally:
            # Reaped on every path, including cancellation by the caller.
            _terminate(process)
            await process.wait()

    async def _run(
        self,
        process: asyncio.subprocess.Process,
        max_results: int,
        keep: Callable[[str], bool],
    ) -> SearchHits:
        hits = await self._collect(process, max_results, keep)
        if hits.truncated:
            return hits
        stderr = await process.stderr.read() if process.stderr else b""
        returncode = await process.wait()
        if returncode == 2 and not hits.files:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise RipgrepUnavailableError(message or f"ripgrep exited with status {returncode}")
        return hits

    async def _collect(
        self,
        process: asyncio.subprocess.Process,
        max_results: int,
        keep: Callable[[str], bool],
    ) -> SearchHits:
        """Read stdout in chunks so a single oversized record cannot overrun a line buffer."""
        hits = SearchHits()
        decisions: dict[str, bool] = {}
        budget = self._max_output_bytes
        pending = b""
        assert process.stdout is not None
        while chunk := await process.stdout.read(_READ_CHUNK_BYTES):
            capped = len(chunk) > budget
            chunk = chunk[:budget]
            budget -= len(chunk)
            *records, pending = (pending + chunk).split(b"\n")
            for raw in records:
                if not self._accept(raw, hits, decisions, keep, max_results):
                    return hits
            if capped:
                logger.warning("ripgrep output cap reached", max_output_bytes=self._max_output_bytes)
                hits.truncated = True
                return hits
        if pending:
            self._accept(pending, hits, decisions, keep, max_results)
        return hits

    @staticmethod
    def _accept(
        raw: bytes,
        hits: SearchHits,
        decisions: dict[str, bool],
        keep: Callable[[str], bool],
        max_results: int,
    ) -> bool:
        """False once a kept match arrives past *max_results*."""
        record = _parse_match(raw)
        if record is None:
            return True
        path, line = record
        if path not in decisions:
            decisions[path] = keep(path)
        if not decisions[path]:
            return True
        return hits.offer(path, line, max_results)


def _parse_match(raw: bytes) -> tuple[str, int] | None:
    """Return ``(path, line_number)`` for a ``match`` record, else ``None``."""
    try:
        record = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(record, dict) or record.get("type") != "match":
        return None
    data = record.get("data") or {}
    path = (data.get("path") or {}).get("text")
    line = data.get("line_number")
    if not path or not isinstance(line, int):
        return None
    return path.removeprefix("./"), line


def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
