from dataclasses import dataclass


@dataclass(frozen=True)
class ResolvedComment:
    """A previously posted comment the model reports as addressed."""

    comment_id: str
    path: str
    line: int
    reason: str = ""

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("ResolvedComment requires a path")
        if self.line < 0:
            raise ValueError("ResolvedComment line cannot be negative")
