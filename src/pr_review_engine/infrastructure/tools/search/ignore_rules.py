"""Layered ignore rules for repository search.

Built-in defaults come first, then every ignore file discovered under the
search scope, shallowest first. Patterns from a nested ignore file are rebased
onto that file's directory. Matching follows gitignore semantics, so a later
``!pattern`` re-includes a path an earlier default excluded.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

import pathspec
import structlog

logger = structlog.get_logger()

DEFAULT_IGNORE_FILE_NAME = ".reviewignore"

# Directories never descended into while looking for ignore files or source files.
ALWAYS_SKIPPED_DIRS = frozenset({".git", "node_modules", "dist", "build", ".next"})

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    # Dependencies and lock files
    "node_modules/",
    "*.lock",
    "yarn.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
    "composer.lock",
    "Pipfile.lock",
    "poetry.lock",
    "Gemfile.lock",
    "go.sum",
    "cargo.lock",
    "uv.lock",
    # Build outputs and artifacts
    "dist/",
    "build/",
    "out/",
    "target/",
    "bin/",
    "obj/",
    ".next/",
    ".nuxt/",
    ".vuepress/dist/",
    ".docusaurus/",
    "coverage/",
    "*.min.js",
    "*.min.css",
    # Cache and temporary files
    ".cache/",
    ".tmp/",
    "tmp/",
    "temp/",
    "*.tmp",
    "*.temp",
    ".DS_Store",
    "Thumbs.db",
    # IDE and editor files
    ".vscode/",
    ".idea/",
    "*.swp",
    "*.swo",
    "*~",
    ".project",
    ".classpath",
    # Logs
    "*.log",
    "logs/",
    "npm-debug.log*",
    "yarn-debug.log*",
    "yarn-error.log*",
    # Secrets and environment files
    ".env",
    ".env.*",
    "*.key",
    "*.pem",
    "*.p12",
    "*.pfx",
    "config.json",
    "secrets.json",
    # Frontend bundles and vendored assets
    "public/assets/",
    "static/assets/",
    "assets/vendor/",
    "vendor/",
    "*.bundle.js",
    "*.chunk.js",
    # Python
    "__pycache__/",
    "*.pyc",
    "*.pyo",
    "*.pyd",
    ".pytest_cache/",
    ".tox/",
    "venv/",
    ".venv/",
    "env/",
    "virtualenv/",
    ".virtualenv/",
    "site-packages/",
    "*.egg-info/",
    ".mypy_cache/",
    ".ruff_cache/",
    # JVM
    "*.class",
    "*.jar",
    "*.war",
    "*.ear",
    "*.sar",
    ".gradle/",
    "gradle/",
    ".mvn/",
    "mvnw",
    "mvnw.cmd",
    # .NET
    "*.dll",
    "*.exe",
    "*.pdb",
    "*.user",
    "*.cache",
    "packages/",
    "TestResults/",
    # Ruby
    "*.gem",
    ".bundle/",
    "vendor/bundle/",
    ".yardoc/",
    "_yardoc/",
    "doc/",
    ".sass-cache/",
    # Go
    "*.test",
    "*.prof",
    # Rust
    "Cargo.lock",
    # Databases
    "*.db",
    "*.sqlite",
    "*.sqlite3",
    # Archives
    "*.zip",
    "*.tar.gz",
    "*.tgz",
    "*.rar",
    "*.7z",
    # Documentation build outputs
    "_book/",
    "_site/",
    ".jekyll-cache/",
    ".jekyll-metadata",
    "docs/.vuepress/dist/",
)


def rebase_pattern(pattern: str, base_dir: str) -> str:
    """Re-anchor a pattern read from an ignore file living in *base_dir*.

    Patterns containing an inner slash are anchored to *base_dir*; bare names
    match at any depth below it.
    """
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    if base_dir in ("", "."):
        rebased = body
    elif "/" in body.rstrip("/"):
        rebased = f"{base_dir}/{body.lstrip('/')}"
    else:
        rebased = f"{base_dir}/**/{body}"
    return f"!{rebased}" if negated else rebased


def read_ignore_file(path: Path) -> list[str]:
    """Plain text, one glob per line; blank lines and ``#`` comments skipped."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Unreadable ignore file", file_path=str(path), error_details=str(exc))
        return []
    patterns = []
    for raw in content.splitlines():
        line = raw.strip()
        if line and not line.startswith("#"):
            patterns.append(line)
    return patterns


class IgnoreMatcher:
    """Compiled default + discovered ignore patterns for one workspace."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self._patterns = list(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self._patterns)
        self._has_negations = any(p.startswith("!") for p in self._patterns)

    @classmethod
    def defaults(cls) -> IgnoreMatcher:
        return cls(DEFAULT_IGNORE_PATTERNS)

    @classmethod
    def discover(
        cls,
        root: Path,
        scopes: Iterable[str] | None = None,
        ignore_file_name: str = DEFAULT_IGNORE_FILE_NAME,
    ) -> IgnoreMatcher:
        """Build a matcher from the defaults plus every ignore file under *scopes*.

        Ignore files in directories above a scope apply too, so a root-level
        file still governs a search restricted to ``src/``.
        """
        found = _find_ignore_files(root, list(scopes or []), ignore_file_name)
        patterns = list(DEFAULT_IGNORE_PATTERNS)
        for rel_file in found:
            base_dir = PurePosixPath(rel_file).parent.as_posix()
            patterns.extend(
                rebase_pattern(p, base_dir) for p in read_ignore_file(root / rel_file)
            )
        logger.debug("Ignore rules loaded", ignore_files=found, pattern_count=len(patterns))
        return cls(patterns)

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    @property
    def has_negations(self) -> bool:
        return self._has_negations

    def is_ignored(self, rel_path: str) -> bool:
        return self._spec.match_file(rel_path)

    def prunes_dir(self, rel_dir: str) -> bool:
        """True when a directory can be skipped wholesale.

        With re-include patterns present nothing is pruned, since a file deep
        inside an excluded directory may be brought back.
        """
        return not self._has_negations and self._spec.match_file(rel_dir.rstrip("/") + "/")

    def walk(self, root: Path, scopes: Iterable[str] | None = None) -> Iterator[str]:
        """Yield non-ignored workspace-relative file paths, sorted by name per directory."""
        starts = list(scopes or []) or [""]
        seen: set[str] = set()
        for scope in starts:
            for rel in self._walk_scope(root, scope):
                if rel not in seen:
                    seen.add(rel)
                    yield rel

    def _walk_scope(self, root: Path, scope: str) -> Iterator[str]:
        target = root / scope if scope else root
        if target.is_file():
            rel = target.relative_to(root).as_posix()
            if not self.is_ignored(rel):
                yield rel
            return
        if target.is_dir():
            yield from self._walk_dir(root, target)

    def _walk_dir(self, root: Path, directory: Path) -> Iterator[str]:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            return
        for entry in entries:
            rel = Path(entry.path).relative_to(root).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name == ".git" or self.prunes_dir(rel):
                    continue
                yield from self._walk_dir(root, Path(entry.path))
            elif entry.is_file() and not self.is_ignored(rel):
                yield rel


def _find_ignore_files(root: Path, scopes: list[str], name: str) -> list[str]:
    """Workspace-relative ignore files, ordered shallowest first."""
    found: set[str] = set()
    for scope in scopes or [""]:
        target = (root / scope) if scope else root
        for ancestor in _ancestors_within(root, target):
            candidate = ancestor / name
            if candidate.is_file():
                found.add(candidate.relative_to(root).as_posix())
        if target.is_dir():
            for dirpath, dirnames, filenames in os.walk(target):
                dirnames[:] = sorted(d for d in dirnames if d not in ALWAYS_SKIPPED_DIRS)
                if name in filenames:
                    found.add((Path(dirpath) / name).relative_to(root).as_posix())
    return sorted(found, key=lambda p: (p.count("/"), p))


def _ancestors_within(root: Path, target: Path) -> list[Path]:
    """Directories from *root* down to the parent of *target* (root included)."""
    try:
        rel_parts = target.relative_to(root).parts
    except ValueError:
        return []
    chain = [root]
    current = root
    for part in rel_parts[:-1] if target.is_file() else rel_parts:
        current = current / part
        chain.append(current)
    return chain
