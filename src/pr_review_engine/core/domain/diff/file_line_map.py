from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LineEntry:
    text: str
    line: int


@dataclass
class FileLineMap:
    """Per-file ordered record of target-revision lines quoted from a diff.

    Each entry keeps the full diff line (marker included) and the line number it
    occupies in the head revision. Order is the order the lines appear in the
    diff, so numbers strictly increase within a file.
    """

    _files: dict[str, list[LineEntry]] = field(default_factory=dict)

    def record(self, path: str, text: str, line: int) -> None:
        entries = self._files.setdefault(path, [])
        if entries and line <= entries[-1].line:
            raise ValueError(f"Line numbers must increase within {path}: {line}")
        entries.append(LineEntry(text=text, line=line))

    def touch(self, path: str) -> None:
        self._files.setdefault(path, [])

    def entries(self, path: str) -> list[LineEntry]:
        return list(self._files.get(path, ()))

    def for_file(self, path: str) -> dict[str, int]:
        """Return a ``text -> line`` view keeping the first occurrence of each text."""
        view: dict[str, int] = {}
        for entry in self._files.get(path, ()):
            view.setdefault(entry.text, entry.line)
        return view

    def __getitem__(self, path: str) -> dict[str, int]:
        if path not in self._files:
            raise KeyError(path)
        return self.for_file(path)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)
