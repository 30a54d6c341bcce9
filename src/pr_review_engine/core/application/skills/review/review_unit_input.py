from dataclasses import dataclass, field
from typing import Any

from pr_review_engine.core.domain.diff import DiffUnit


@dataclass(frozen=True)
class ReviewUnitInput:
    unit: DiffUnit
    system_prompt: str
    priority_models: list[str] = field(default_factory=list)
    existing_comments: list[dict[str, Any]] = field(default_factory=list)
    max_iterations: int = 8
