"""Maps model-quoted diff lines back to concrete head-revision line numbers.

The model only ever sees diff text, so the target line is rebuilt from that
same text: ``+++`` resets the file, ``@@`` sets the counter to the new start,
added lines are recorded then advance the counter, context lines only advance
it, and removed lines leave it untouched.
"""

from collections.abc import Iterable

import structlog

from pr_review_engine.core.application.diff.diff_segmenter import (
    DEV_NULL,
    HUNK_HEADER_RE,
    strip_path_prefix,
)
from pr_review_engine.core.domain.diff import FileLineMap
from pr_review_engine.core.domain.quality import Finding

logger = structlog.get_logger()


def build_file_line_map(diff_text: str) -> FileLineMap:
    line_map = FileLineMap()
    current_file: str | None = None
    counter = 0
    previous = ""
    for line in diff_text.splitlines():
        if line.startswith("+++ ") and (previous.startswith("--- ") or counter == 0):
            path = strip_path_prefix(line[4:])
            current_file = None if path == DEV_NULL else path
            counter = 0
            if current_file:
                line_map.touch(current_file)
        elif line.startswith("@@"):
            match = HUNK_HEADER_RE.match(line)
            counter = int(match.group(3)) if match else 0
        elif current_file is None or counter == 0:
            pass
        elif line.startswith("+"):
            line_map.record(current_file, line, counter)
            counter += 1
        elif line.startswith(" ") or line == "":
            counter += 1
        previous = line
    return line_map


def diff_path(path: str, line_map: FileLineMap) -> str:
    """Path as the diff names it; model paths may keep the ``a/`` or ``b/`` prefix."""
    return path if path in line_map else strip_path_prefix(path)


def resolve_line(
    finding: Finding,
    line_map: FileLineMap,
    claimed: set[int] | None = None,
) -> int | None:
    """Return the line whose text contains the finding's quote, or ``None``.

    Without *claimed* the first match in diff order wins. With *claimed*, the
    first match not already taken is preferred; if all are taken the first
    match is returned.
    """
    target = finding.line_to_match.rstrip("\r\n")
    if not target.strip():
        return None
    entries = line_map.entries(diff_path(finding.path, line_map))
    matches = [entry.line for entry in entries if target in entry.text]
    if not matches:
        return None
    if claimed:
        for line in matches:
            if line not in claimed:
                return line
    return matches[0]


def resolve_findings(findings: Iterable[Finding], diff_text: str) -> list[Finding]:
    """Attach a line to every unresolved finding; misses keep ``resolved_line=None``.
    Resolved findings also take the diff's spelling of their path.
    """
    line_map = build_file_line_map(diff_text)
    claimed: dict[str, set[int]] = {}
    resolved: list[Finding] = []
    for finding in findings:
        if not finding.is_resolved:
            path = diff_path(finding.path, line_map)
            taken = claimed.setdefault(path, set())
            line = resolve_line(finding, line_map, taken)
            if line is None:
                logger.debug(
                    "Quoted line not found in diff",
                    file_path=finding.path,
                    quoted=finding.raw_quoted_line[:80],
                )
            else:
                finding.path = path
                finding.attach_line(line)
                taken.add(line)
        resolved.append(finding)
    return resolved
