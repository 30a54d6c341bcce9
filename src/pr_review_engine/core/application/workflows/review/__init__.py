from pr_review_engine.core.application.workflows.review.code_review_workflow import (
    CodeReviewWorkflow,
)
from pr_review_engine.core.application.workflows.review.review_request import ReviewRequest

__all__ = ["CodeReviewWorkflow", "ReviewRequest"]
