"""Pure functions rendering numbered snippets for the search tools."""

from collections.abc import Sequence


def format_snippet(lines: Sequence[str], match_line: int, context_lines: int) -> str:
    """Numbered window around 1-indexed *match_line*; ``>>>`` marks the match."""
    index = match_line - 1
    start = max(0, index - context_lines)
    end = min(len(lines) - 1, index + context_lines)
    rendered = []
    for offset, text in enumerate(lines[start : end + 1]):
        number = start + offset + 1
        prefix = ">>> " if number == match_line else "    "
        rendered.append(f"{prefix}{number:>4}: {text}")
    return "\n".join(rendered)


def format_window_result(
    path: str, text: str, lines: Sequence[str], match_lines: Sequence[int], context_lines: int
) -> str:
    if not match_lines:
        return f'No matches found for "{text}" in {path}'
    if len(match_lines) == 1:
        snippet = format_snippet(lines, match_lines[0], context_lines)
        return f'Found 1 match for "{text}" in {path}:\n\n{snippet}'
    blocks = [
        f"=== Match {i} (line {line}) ===\n{format_snippet(lines, line, context_lines)}"
        for i, line in enumerate(match_lines, start=1)
    ]
    return f'Found {len(match_lines)} matches for "{text}" in {path}:\n\n' + "\n\n".join(blocks)


def format_file_matches(
    path: str, lines: Sequence[str], match_lines: Sequence[int], context_lines: int
) -> str:
    """One file section of a repository search result."""
    noun = "match" if len(match_lines) == 1 else "matches"
    blocks = [
        f"--- Match {i} (line {line}) ---\n{format_snippet(lines, line, context_lines)}"
        for i, line in enumerate(match_lines, start=1)
    ]
    return f"=== {path} ({len(match_lines)} {noun}) ===\n" + "\n\n".join(blocks)


def format_no_matches(query: str) -> str:
    return f'No matches found for "{query}"'


def format_truncation(max_results: int) -> str:
    return f"\n[Truncated after {max_results} matches]"
