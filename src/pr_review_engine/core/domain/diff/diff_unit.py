from dataclasses import dataclass, field


@dataclass(frozen=True)
class HunkMeta:
    """Old/new line ranges declared by a ``@@ -a,b +c,d @@`` header."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int

    def __post_init__(self) -> None:
        if min(self.old_start, self.old_lines, self.new_start, self.new_lines) < 0:
            raise ValueError("Hunk ranges cannot be negative")

    @property
    def new_end(self) -> int:
        """Last target-revision line covered by the hunk (inclusive)."""
        return self.new_start + max(self.new_lines, 1) - 1


@dataclass(frozen=True)
class DiffUnit:
    """A processable slice of a diff that belongs to exactly one file."""

    file_name: str
    header_text: str
    body_text: str
    hunks: tuple[HunkMeta, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.file_name:
            raise ValueError("DiffUnit requires a file name")

    @property
    def content(self) -> str:
        return self.header_text + self.body_text

    @property
    def hunk(self) -> HunkMeta | None:
        return self.hunks[0] if self.hunks else None

    def touches(self, line: int) -> bool:
        return any(h.new_start <= line <= h.new_end for h in self.hunks)
