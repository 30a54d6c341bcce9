from pr_review_engine.infrastructure.tools.vcs.github.github_rate_limit_handler import (
    RateLimitHandler,
)
from pr_review_engine.infrastructure.tools.vcs.github.github_rest_client import GitHubRestClient
from pr_review_engine.infrastructure.tools.vcs.github.github_review_publisher import (
    GitHubReviewPublisher,
)
from pr_review_engine.infrastructure.tools.vcs.github.platform_api_error import PlatformApiError

__all__ = [
    "GitHubRestClient",
    "GitHubReviewPublisher",
    "PlatformApiError",
    "RateLimitHandler",
]
