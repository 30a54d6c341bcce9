"""Pure-Python repository scan used when ripgrep is unavailable.

Walks the same files ripgrep would see (sorted by name, ignore rules applied,
binary files skipped) and returns the same ``SearchHits`` shape.
"""

from collections.abc import Sequence
from pathlib import Path

from pr_review_engine.infrastructure.tools.search.ignore_rules import IgnoreMatcher
from pr_review_engine.infrastructure.tools.search.search_models import SearchHits, SearchPattern

_BINARY_SNIFF_BYTES = 8000


def scan_repository(
    root: Path,
    pattern: SearchPattern,
    matcher: IgnoreMatcher,
    *,
    extensions: Sequence[str] | None,
    paths: Sequence[str] | None,
    max_results: int,
) -> SearchHits:
    """Raises ``re.error`` when the pattern is not a valid regex."""
    compiled = pattern.compile()
    suffixes = tuple(f".{ext.lstrip('.')}" for ext in extensions or ())
    hits = SearchHits()
    for rel in matcher.walk(root, paths):
        if suffixes and not rel.endswith(suffixes):
            continue
        lines = read_text_lines(root / rel)
        if lines is None:
            continue
        for number, text in enumerate(lines, start=1):
            if compiled.search(text):
                if not hits.offer(rel, number, max_results):
                    return hits
    return hits


def read_text_lines(path: Path) -> list[str] | None:
    """File split on ``\\n``; ``None`` for unreadable or binary files."""
    try:
        data = path.read_bytes()
    except OSError:
        return None
    if b"\0" in data[:_BINARY_SNIFF_BYTES]:
        return None
    return data.decode("utf-8", errors="replace").split("\n")
