from pathlib import Path

import pytest

from pr_review_engine.core.application.ports import ClockPort


class FakeClock(ClockPort):
    """Deterministic clock: ``sleep`` records the wait and advances ``now``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """Small TypeScript project used by the search tool tests."""
    files = {
        "src/a.ts": "import { b } from './b';\nexport const a = () => b();\n",
        "src/b.ts": "export function b() {\n  return 'TODO: value';\n}\n",
        "src/c.ts": "import { a } from './a';\nconsole.log(a());\n",
        "src/util/index.ts": "export const helper = 1; // TODO\n",
        "node_modules/lib/index.js": "// TODO vendored\n",
        "dist/bundle.js": "TODO in build output\n",
        "README.md": "Project notes. TODO later.\n",
    }
    for rel, content in files.items():
        target = tmp_path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return tmp_path
