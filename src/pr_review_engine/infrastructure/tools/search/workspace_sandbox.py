from pathlib import Path

from pr_review_engine.core.application.exceptions import ApplicationError


class SandboxViolationError(ApplicationError):
    """A requested path resolves outside the workspace root."""


class WorkspaceSandbox:
    """Confines tool paths to one working tree."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, rel_path: str) -> Path:
        candidate = (self._root / rel_path).resolve()
        if not candidate.is_relative_to(self._root):
            raise SandboxViolationError(
                f"Path escapes workspace: {rel_path}", context={"path": rel_path}
            )
        return candidate

    def relative(self, path: Path) -> str:
        return path.relative_to(self._root).as_posix()

    def normalize(self, rel_path: str) -> str:
        """Workspace-relative POSIX form of *rel_path* (``./src/../a.ts`` -> ``a.ts``)."""
        resolved = self.resolve(rel_path)
        return "." if resolved == self._root else self.relative(resolved)
