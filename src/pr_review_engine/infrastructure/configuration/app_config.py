from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pr_review_engine.infrastructure.configuration.review_settings import ReviewSettings
from pr_review_engine.infrastructure.tools.search.config import SearchSettings
from pr_review_engine.infrastructure.tools.vcs.github.config import (
    GitHubSettings,
    RateLimitSettings,
)


class AppConfig(BaseSettings):
    """Master configuration combining all sub-settings."""

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    rate_limits: RateLimitSettings = Field(default_factory=RateLimitSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    review: ReviewSettings = Field(default_factory=ReviewSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
