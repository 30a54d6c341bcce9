from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """Settings for the sandboxed code-search toolset."""

    workspace_root: Path = Field(default=Path("."), alias="REVIEW_WORKSPACE_ROOT")
    ripgrep_path: str | None = Field(default=None, alias="RIPGREP_PATH")
    use_ripgrep: bool = Field(default=True, alias="SEARCH_USE_RIPGREP")
    timeout_seconds: float = Field(default=20.0, gt=0, alias="SEARCH_TIMEOUT_SECONDS")
    max_output_bytes: int = Field(default=10 * 1024 * 1024, gt=0, alias="SEARCH_MAX_OUTPUT_BYTES")
    cache_capacity: int = Field(default=100, ge=1, alias="SEARCH_CACHE_CAPACITY")
    ignore_file_name: str = Field(default=".reviewignore", alias="REVIEW_IGNORE_FILE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
