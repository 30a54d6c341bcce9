from dataclasses import dataclass, field

from pr_review_engine.core.domain.quality.value_objects.finding import Finding
from pr_review_engine.core.domain.quality.value_objects.review_event import ReviewEvent
from pr_review_engine.core.domain.quality.value_objects.review_severity import ReviewSeverity


@dataclass
class CodeReviewReport:
    """Consistency root: a review carrying required findings is never an approval."""

    event: ReviewEvent
    summary: str
    findings: list[Finding] = field(default_factory=list)

    def has_required_findings(self) -> bool:
        return any(f.severity == ReviewSeverity.REQUIRED for f in self.findings)

    def __post_init__(self) -> None:
        if self.event == ReviewEvent.APPROVE and self.has_required_findings():
            raise ValueError("Cannot approve a pull request with required findings")

    @property
    def anchored_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.is_resolved]
