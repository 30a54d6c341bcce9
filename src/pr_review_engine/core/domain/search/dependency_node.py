from dataclasses import dataclass, field


@dataclass(frozen=True)
class DependencyNode:
    """Import edges of one source file, computed on demand."""

    path: str
    imports: tuple[str, ...] = field(default_factory=tuple)
    imported_by: tuple[str, ...] = field(default_factory=tuple)
