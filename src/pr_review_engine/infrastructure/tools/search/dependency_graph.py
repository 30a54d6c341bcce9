"""Relative-import dependency graph over a working tree.

Only relative imports are followed (``./x``, ``../y`` in JS/TS, ``from .x
import y`` in Python); package imports cannot be resolved to workspace files
and are ignored.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import Path

from pr_review_engine.core.domain.search import DependencyNode
from pr_review_engine.infrastructure.tools.search.ignore_rules import IgnoreMatcher

JS_SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx")
PY_SOURCE_SUFFIXES = (".py",)
SOURCE_SUFFIXES = JS_SOURCE_SUFFIXES + PY_SOURCE_SUFFIXES

JS_RESOLUTION_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

_JS_IMPORT_RES = (
    re.compile(r"""\bimport\s+(?:[\w*\s{},$]*?\s*from\s*)?['"]([^'"]+)['"]"""),
    re.compile(r"""\bimport\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
    re.compile(r"""\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
    re.compile(r"""\bexport\s+(?:[\w*\s{},$]*?\s*)from\s*['"]([^'"]+)['"]"""),
)
_PY_RELATIVE_IMPORT_RE = re.compile(
    r"^[ \t]*from[ \t]+(\.+)([\w.]*)[ \t]+import[ \t]+(\([^)]*\)|[^\n]+)", re.MULTILINE
)


class DependencyGraphBuilder:
    """Computes ``DependencyNode`` records on demand; nothing is persisted."""

    def __init__(self, root: Path, matcher: IgnoreMatcher) -> None:
        self._root = root
        self._matcher = matcher
        self._imports_cache: dict[str, list[str]] = {}

    def source_files(self) -> list[str]:
        return [rel for rel in self._matcher.walk(self._root) if rel.endswith(SOURCE_SUFFIXES)]

    def build(self, path: str, depth: int) -> dict[str, DependencyNode]:
        """Walk both directions up to *depth* hops, visiting each file once."""
        if depth < 1:
            raise ValueError("depth must be at least 1")
        all_files = self.source_files()
        known = set(all_files)
        visited: set[str] = set()
        nodes: dict[str, DependencyNode] = {}

        def visit(current: str, level: int) -> None:
            if level > depth or current in visited:
                return
            visited.add(current)
            imports = [imp for imp in self.imports_of(current) if imp in known]
            importers = [f for f in all_files if f != current and current in self.imports_of(f)]
            nodes[current] = DependencyNode(
                path=current, imports=tuple(imports), imported_by=tuple(importers)
            )
            if level < depth:
                for neighbour in (*imports, *importers):
                    visit(neighbour, level + 1)

        visit(path, 1)
        return nodes

    def imports_of(self, rel_path: str) -> list[str]:
        """Resolved workspace-relative targets of the relative imports in *rel_path*."""
        cached = self._imports_cache.get(rel_path)
        if cached is not None:
            return cached
        try:
            source = (self._root / rel_path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            source = ""
        if rel_path.endswith(PY_SOURCE_SUFFIXES):
            targets = self._python_imports(rel_path, source)
        else:
            targets = self._js_imports(rel_path, source)
        resolved = list(dict.fromkeys(targets))
        self._imports_cache[rel_path] = resolved
        return resolved

    def _js_imports(self, rel_path: str, source: str) -> list[str]:
        base_dir = posixpath.dirname(rel_path)
        targets: list[str] = []
        for regex in _JS_IMPORT_RES:
            for specifier in regex.findall(source):
                if not specifier.startswith(("./", "../")):
                    continue
                resolved = self._resolve_js(posixpath.normpath(posixpath.join(base_dir, specifier)))
                if resolved:
                    targets.append(resolved)
        return targets

    def _resolve_js(self, target: str) -> str | None:
        if target.startswith("../"):
            return None
        candidates = [target]
        candidates += [f"{target}{ext}" for ext in JS_RESOLUTION_EXTENSIONS]
        candidates += [f"{target}/index{ext}" for ext in JS_RESOLUTION_EXTENSIONS]
        return self._first_file(candidates)

    def _python_imports(self, rel_path: str, source: str) -> list[str]:
        targets: list[str] = []
        for dots, module, names in _PY_RELATIVE_IMPORT_RE.findall(source):
            package_dir = posixpath.dirname(rel_path)
            for _ in range(len(dots) - 1):
                package_dir = posixpath.dirname(package_dir)
            if module:
                base = posixpath.join(package_dir, *module.split("."))
                found = self._first_file([f"{base}.py", f"{base}/__init__.py"])
                if found:
                    targets.append(found)
                continue
            for name in _imported_names(names):
                base = posixpath.join(package_dir, name)
                found = self._first_file([f"{base}.py", f"{base}/__init__.py"])
                if found:
                    targets.append(found)
        return targets

    def _first_file(self, candidates: list[str]) -> str | None:
        for candidate in candidates:
            normalized = posixpath.normpath(candidate)
            if normalized.startswith("../"):
                continue
            if (self._root / normalized).is_file():
                return normalized
        return None


def _imported_names(names: str) -> list[str]:
    """Names from ``a, b as c`` or a parenthesized, possibly multi-line, list."""
    code = " ".join(line.split("#", 1)[0] for line in names.strip().strip("()").splitlines())
    result = []
    for part in code.split(","):
        name = part.strip().split(" as ")[0].strip()
        if name and name != "*":
            result.append(name)
    return result


def render_graph(nodes: dict[str, DependencyNode]) -> str:
    output: list[str] = []
    for path, node in nodes.items():
        output.append(f"\n=== {path} ===")
        if node.imports:
            output.append(f"Imports ({len(node.imports)}):")
            output.extend(f"  → {imp}" for imp in node.imports)
        if node.imported_by:
            output.append(f"Imported by ({len(node.imported_by)}):")
            output.extend(f"  ← {imp}" for imp in node.imported_by)
        if not node.imports and not node.imported_by:
            output.append("No dependencies found")
    return "\n".join(output)
