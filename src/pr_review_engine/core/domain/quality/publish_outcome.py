from dataclasses import dataclass, field
from enum import StrEnum

from pr_review_engine.core.domain.quality.value_objects.finding import Finding


class PublishMode(StrEnum):
    BATCH = "batch"
    INDIVIDUAL = "individual"
    SKIPPED = "skipped"


@dataclass
class PublishOutcome:
    """Best-effort trail of a publish step."""

    mode: PublishMode
    posted: list[Finding] = field(default_factory=list)
    failed: list[tuple[Finding, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed
