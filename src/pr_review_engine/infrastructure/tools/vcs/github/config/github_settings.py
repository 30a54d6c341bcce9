from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitHubSettings(BaseSettings):
    """Settings for the GitHub REST integration."""

    api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")
    token: SecretStr | None = Field(default=None, alias="GITHUB_TOKEN")
    repository: str = Field(default="", alias="GITHUB_REPOSITORY")
    timeout_seconds: float = Field(default=30.0, alias="GITHUB_TIMEOUT_SECONDS")

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, value: str) -> str:
        if value and value.count("/") != 1:
            raise ValueError(f"GITHUB_REPOSITORY must look like 'owner/repo', got '{value}'")
        return value

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0] if self.repository else ""

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1] if self.repository else ""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


class RateLimitSettings(BaseSettings):
    """Wait policy for primary and secondary GitHub rate limits."""

    secondary_base_wait_seconds: float = Field(default=60.0, alias="SECONDARY_RATE_LIMIT_BASE_WAIT")
    max_secondary_retries: int = Field(default=3, ge=0, alias="SECONDARY_RATE_LIMIT_MAX_RETRIES")
    primary_default_wait_seconds: float = Field(default=60.0, alias="PRIMARY_RATE_LIMIT_DEFAULT_WAIT")
    reset_buffer_seconds: float = Field(default=1.0, alias="RATE_LIMIT_RESET_BUFFER")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
