from pr_review_engine.core.application.skills.review.review_diff_unit_skill import (
    ReviewDiffUnitSkill,
)
from pr_review_engine.core.application.skills.review.review_unit_input import ReviewUnitInput

__all__ = ["ReviewDiffUnitSkill", "ReviewUnitInput"]
