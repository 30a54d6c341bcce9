from pr_review_engine.core.domain.quality.agent_response import AgentResponse
from pr_review_engine.core.domain.quality.code_review_report import CodeReviewReport
from pr_review_engine.core.domain.quality.publish_outcome import PublishMode, PublishOutcome
from pr_review_engine.core.domain.quality.value_objects.finding import Finding
from pr_review_engine.core.domain.quality.value_objects.resolved_comment import ResolvedComment
from pr_review_engine.core.domain.quality.value_objects.review_event import ReviewEvent
from pr_review_engine.core.domain.quality.value_objects.review_severity import ReviewSeverity

__all__ = [
    "AgentResponse",
    "CodeReviewReport",
    "Finding",
    "PublishMode",
    "PublishOutcome",
    "ResolvedComment",
    "ReviewEvent",
    "ReviewSeverity",
]
