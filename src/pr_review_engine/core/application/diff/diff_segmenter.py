"""Pure functions that cut unified-diff text into per-file or per-hunk review units."""

import re

import structlog

from pr_review_engine.core.application.exceptions import UnparsableDiffError
from pr_review_engine.core.domain.diff import DiffGranularity, DiffUnit, HunkMeta

logger = structlog.get_logger()

DEV_NULL = "/dev/null"

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_GIT_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+?)\s*$")


def strip_path_prefix(path: str) -> str:
    """Normalize a diff path into a lookup key (``b/src/x.py`` -> ``src/x.py``)."""
    cleaned = path.strip()
    if "\t" in cleaned:
        cleaned = cleaned.split("\t", 1)[0]
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] == '"':
        cleaned = cleaned[1:-1]
    if cleaned.startswith(("a/", "b/")):
        cleaned = cleaned[2:]
    return cleaned


def split_diff(raw: str, granularity: DiffGranularity = DiffGranularity.FILE) -> list[DiffUnit]:
    """Split *raw* into ordered review units.

    Entries without hunks (binary, rename-only, mode changes) are skipped.
    Raises ``UnparsableDiffError`` when non-empty text has no file section or a
    hunk header cannot be read.
    """
    if not raw or not raw.strip():
        return []
    sections = _split_sections(raw.splitlines(keepends=True))
    if not sections:
        raise UnparsableDiffError(
            "No file sections found in diff", context={"preview": raw[:120]}
        )
    units: list[DiffUnit] = []
    for section in sections:
        units.extend(_units_for_section(section, granularity))
    return units


def _split_sections(lines: list[str]) -> list[list[str]]:
    """Group lines into file sections, keyed on ``diff --git`` or bare ``---``/``+++`` pairs."""
    starts = [i for i, line in enumerate(lines) if line.startswith("diff --git ")]
    if not starts:
        starts = [
            i
            for i, line in enumerate(lines[:-1])
            if line.startswith("--- ") and lines[i + 1].startswith("+++ ")
        ]
    if not starts:
        return []
    bounds = [*starts, len(lines)]
    return [lines[bounds[i] : bounds[i + 1]] for i in range(len(starts))]


def _units_for_section(section: list[str], granularity: DiffGranularity) -> list[DiffUnit]:
    """Build the units of a single file section."""
    first_hunk = next((i for i, line in enumerate(section) if line.startswith("@@")), None)
    if first_hunk is None:
        logger.debug("Skipping diff entry without hunks", header=section[0].rstrip())
        return []
    header_lines = section[:first_hunk]
    file_name = _resolve_file_name(header_lines)
    header_text = "".join(header_lines)
    hunks = _split_hunks(section[first_hunk:], file_name)

    if granularity == DiffGranularity.HUNK:
        return [
            DiffUnit(file_name=file_name, header_text=header_text, body_text=body, hunks=(meta,))
            for meta, body in hunks
        ]
    return [
        DiffUnit(
            file_name=file_name,
            header_text=header_text,
            body_text="".join(body for _, body in hunks),
            hunks=tuple(meta for meta, _ in hunks),
        )
    ]


def _resolve_file_name(header_lines: list[str]) -> str:
    """Pick the unit identity: new path, or old path when the file was deleted."""
    old_path = new_path = None
    for line in header_lines:
        if line.startswith("--- "):
            old_path = strip_path_prefix(line[4:])
        elif line.startswith("+++ "):
            new_path = strip_path_prefix(line[4:])
    if new_path and new_path != DEV_NULL:
        return new_path
    if old_path and old_path != DEV_NULL:
        return old_path
    match = _GIT_HEADER_RE.match(header_lines[0]) if header_lines else None
    if match:
        return strip_path_prefix(match.group(2))
    raise UnparsableDiffError(
        "Cannot determine file name for diff section",
        context={"header": "".join(header_lines)[:200]},
    )


def _split_hunks(lines: list[str], file_name: str) -> list[tuple[HunkMeta, str]]:
    """Split the body of a file section at every ``@@`` header."""
    hunks: list[tuple[HunkMeta, list[str]]] = []
    for line in lines:
        if line.startswith("@@"):
            hunks.append((parse_hunk_header(line, file_name), [line]))
        else:
            hunks[-1][1].append(line)
    return [(meta, "".join(body)) for meta, body in hunks]


def parse_hunk_header(line: str, file_name: str = "") -> HunkMeta:
    """Parse ``@@ -a,b +c,d @@``; omitted counts default to 1."""
    match = HUNK_HEADER_RE.match(line)
    if not match:
        raise UnparsableDiffError(
            "Malformed hunk header", context={"file_path": file_name, "line": line.rstrip()}
        )
    old_start, old_lines, new_start, new_lines = match.groups()
    return HunkMeta(
        old_start=int(old_start),
        old_lines=int(old_lines) if old_lines is not None else 1,
        new_start=int(new_start),
        new_lines=int(new_lines) if new_lines is not None else 1,
    )
