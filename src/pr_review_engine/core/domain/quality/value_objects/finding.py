from dataclasses import dataclass, field

from pr_review_engine.core.domain.quality.value_objects.review_severity import ReviewSeverity

_DIFF_MARKERS = ("+", "-", " ")


@dataclass
class Finding:
    """A candidate review comment, before and after line resolution.

    ``raw_quoted_line`` keeps the model's verbatim quote, diff marker included.
    ``resolved_line`` is attached once by the anchor resolver and stays ``None``
    when the quote matches nothing in the target revision.
    """

    path: str
    raw_quoted_line: str
    message: str
    severity: ReviewSeverity | None = None
    suggestion: str | None = None
    resolved_line: int | None = None
    resolved_comment_refs: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Finding requires a path")
        if not self.message:
            raise ValueError("Finding requires a message")

    @property
    def line_to_match(self) -> str:
        """Quoted line without its leading diff marker."""
        quoted = self.raw_quoted_line
        if quoted[:1] in _DIFF_MARKERS:
            return quoted[1:]
        return quoted

    @property
    def is_resolved(self) -> bool:
        return self.resolved_line is not None

    def attach_line(self, line: int) -> None:
        if self.resolved_line is not None:
            raise ValueError(f"Finding on {self.path} already resolved to {self.resolved_line}")
        if line <= 0:
            raise ValueError("Resolved line must be positive")
        self.resolved_line = line

    @property
    def dedupe_key(self) -> str:
        return f"{self.path}:{self.resolved_line}:{self.message}"
