import re
from dataclasses import dataclass, field

from pr_review_engine.core.application.tools.tool_calls import SearchRepositoryCall


@dataclass(frozen=True)
class SearchPattern:
    """Backend-neutral description of what a repository search matches."""

    text: str
    fixed: bool
    case_sensitive: bool

    @classmethod
    def from_call(cls, call: SearchRepositoryCall) -> "SearchPattern":
        """Word-boundary searches are always promoted to a regex."""
        if call.word_boundary:
            body = f"(?:{call.query})" if call.regex else re.escape(call.query)
            return cls(text=rf"\b{body}\b", fixed=False, case_sensitive=call.case_sensitive)
        return cls(text=call.query, fixed=not call.regex, case_sensitive=call.case_sensitive)

    def compile(self) -> re.Pattern[str]:
        """Python equivalent of the pattern; raises ``re.error`` on a bad regex."""
        source = re.escape(self.text) if self.fixed else self.text
        return re.compile(source, 0 if self.case_sensitive else re.IGNORECASE)


@dataclass
class SearchHits:
    """Matched line numbers per file, in discovery order."""

    files: dict[str, list[int]] = field(default_factory=dict)
    truncated: bool = False
    total: int = 0

    def add(self, path: str, line: int) -> None:
        self.files.setdefault(path, []).append(line)
        self.total += 1

    def offer(self, path: str, line: int, max_results: int) -> bool:
        """Add a match while under *max_results*.

        A match arriving once the limit is already reached is dropped and marks
        the hits truncated; returns False so the caller stops scanning.
        """
        if self.total >= max_results:
            self.truncated = True
            return False
        self.add(path, line)
        return True
