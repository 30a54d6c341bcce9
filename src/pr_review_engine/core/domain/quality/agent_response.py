from dataclasses import dataclass, field

from pr_review_engine.core.domain.quality.value_objects.finding import Finding
from pr_review_engine.core.domain.quality.value_objects.resolved_comment import ResolvedComment


@dataclass
class AgentResponse:
    """Typed view of one structured model answer."""

    findings: list[Finding] = field(default_factory=list)
    resolved_comments: list[ResolvedComment] = field(default_factory=list)
    pr_summary: str | None = None
