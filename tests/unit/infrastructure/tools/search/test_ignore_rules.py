"""Unit tests — IgnoreMatcher layering and traversal."""

from pathlib import Path

import pytest

from pr_review_engine.infrastructure.tools.search.ignore_rules import (
    IgnoreMatcher,
    read_ignore_file,
    rebase_pattern,
)


class TestRebasePattern:
    @pytest.mark.parametrize(
        ("pattern", "base_dir", "expected"),
        [
            ("*.snap", ".", "*.snap"),
            ("*.snap", "pkg", "pkg/**/*.snap"),
            ("fixtures/", "pkg", "pkg/**/fixtures/"),
            ("gen/out.ts", "pkg", "pkg/gen/out.ts"),
            ("/gen/out.ts", "pkg", "pkg/gen/out.ts"),
            ("!keep.log", "pkg", "!pkg/**/keep.log"),
        ],
    )
    def test_rebases_onto_ignore_file_directory(
        self, pattern: str, base_dir: str, expected: str
    ) -> None:
        assert rebase_pattern(pattern, base_dir) == expected


class TestReadIgnoreFile:
    def test_skips_blank_lines_and_comments(self, tmp_path: Path) -> None:
        ignore = tmp_path / ".reviewignore"
        ignore.write_text("# generated\n\n*.snap\n  fixtures/  \n", encoding="utf-8")

        assert read_ignore_file(ignore) == ["*.snap", "fixtures/"]

    def test_missing_file_yields_nothing(self, tmp_path: Path) -> None:
        assert read_ignore_file(tmp_path / "absent") == []


class TestDefaults:
    @pytest.mark.parametrize(
        "path",
        [
            "node_modules/lib/index.js",
            "web/node_modules/x.js",
            "dist/bundle.js",
            "yarn.lock",
            "src/app.min.js",
            ".env",
            "pkg/__pycache__/m.pyc",
        ],
    )
    def test_ignored(self, path: str) -> None:
        assert IgnoreMatcher.defaults().is_ignored(path)

    @pytest.mark.parametrize("path", ["src/app.ts", "README.md", "docs/guide.md"])
    def test_not_ignored(self, path: str) -> None:
        assert not IgnoreMatcher.defaults().is_ignored(path)


class TestDiscover:
    def test_root_ignore_file_adds_patterns(self, workspace: Path) -> None:
        (workspace / ".reviewignore").write_text("*.md\n", encoding="utf-8")

        matcher = IgnoreMatcher.discover(workspace)

        assert matcher.is_ignored("README.md")
        assert not matcher.is_ignored("src/a.ts")

    def test_nested_ignore_file_only_applies_below_it(self, workspace: Path) -> None:
        (workspace / "src" / "util" / ".reviewignore").write_text("*.ts\n", encoding="utf-8")

        matcher = IgnoreMatcher.discover(workspace)

        assert matcher.is_ignored("src/util/index.ts")
        assert not matcher.is_ignored("src/a.ts")

    def test_negation_re_includes_a_default(self, workspace: Path) -> None:
        (workspace / ".reviewignore").write_text("!dist/\n!dist/bundle.js\n", encoding="utf-8")

        matcher = IgnoreMatcher.discover(workspace)

        assert matcher.has_negations
        assert not matcher.is_ignored("dist/bundle.js")
        assert not matcher.prunes_dir("node_modules")

    def test_root_file_applies_to_scoped_search(self, workspace: Path) -> None:
        (workspace / ".reviewignore").write_text("util/\n", encoding="utf-8")

        matcher = IgnoreMatcher.discover(workspace, ["src"])

        assert matcher.is_ignored("src/util/index.ts")


class TestWalk:
    def test_yields_sorted_non_ignored_files(self, workspace: Path) -> None:
        files = list(IgnoreMatcher.defaults().walk(workspace))

        assert files == ["README.md", "src/a.ts", "src/b.ts", "src/c.ts", "src/util/index.ts"]

    def test_scopes_restrict_the_walk(self, workspace: Path) -> None:
        files = list(IgnoreMatcher.defaults().walk(workspace, ["src/util", "README.md"]))

        assert files == ["src/util/index.ts", "README.md"]

    def test_default_directories_are_pruned(self) -> None:
        matcher = IgnoreMatcher.defaults()

        assert matcher.prunes_dir("node_modules")
        assert not matcher.prunes_dir("src")
