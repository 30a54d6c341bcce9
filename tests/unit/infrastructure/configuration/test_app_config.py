"""Unit tests — pydantic-settings configuration loaded from the environment."""

import pytest
from pydantic import ValidationError

from pr_review_engine.core.domain.diff import DiffGranularity
from pr_review_engine.infrastructure.configuration.app_config import AppConfig
from pr_review_engine.infrastructure.configuration.review_settings import ReviewSettings
from pr_review_engine.infrastructure.tools.search.config import SearchSettings
from pr_review_engine.infrastructure.tools.vcs.github.config import GitHubSettings


class TestReviewSettings:
    def test_defaults(self) -> None:
        settings = ReviewSettings(_env_file=None)

        assert settings.granularity is DiffGranularity.FILE
        assert settings.max_agent_iterations == 8
        assert settings.llm_max_attempts == 3

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REVIEW_GRANULARITY", "hunk")
        monkeypatch.setenv("LLM_PRIORITY_MODELS", "openai:gpt-4o, anthropic:claude")

        settings = ReviewSettings(_env_file=None)

        assert settings.granularity is DiffGranularity.HUNK
        assert settings.priority_models == ["openai:gpt-4o", "anthropic:claude"]

    def test_priority_models_accept_json_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_PRIORITY_MODELS", '["a:b", "c:d"]')

        assert ReviewSettings(_env_file=None).priority_models == ["a:b", "c:d"]


class TestGitHubSettings:
    def test_repository_is_split(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_REPOSITORY", "acme/widgets")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")

        settings = GitHubSettings(_env_file=None)

        assert (settings.owner, settings.repo) == ("acme", "widgets")
        assert "ghp_secret" not in repr(settings)

    def test_malformed_repository_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GitHubSettings(_env_file=None, repository="just-a-name")


class TestAppConfig:
    def test_combines_sub_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_CACHE_CAPACITY", "5")
        monkeypatch.setenv("SECONDARY_RATE_LIMIT_MAX_RETRIES", "2")

        config = AppConfig(_env_file=None)

        assert config.search.cache_capacity == 5
        assert config.rate_limits.max_secondary_retries == 2
        assert isinstance(config.search, SearchSettings)
