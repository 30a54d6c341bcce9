from pr_review_engine.infrastructure.tools.vcs.github.config.github_settings import (
    GitHubSettings,
    RateLimitSettings,
)

__all__ = ["GitHubSettings", "RateLimitSettings"]
