import json
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from pr_review_engine.core.domain.diff import DiffGranularity


class ReviewSettings(BaseSettings):
    """Settings for the review run itself."""

    granularity: DiffGranularity = Field(default=DiffGranularity.FILE, alias="REVIEW_GRANULARITY")
    max_agent_iterations: int = Field(default=8, ge=1, alias="REVIEW_MAX_AGENT_ITERATIONS")
    llm_max_attempts: int = Field(default=3, ge=1, alias="LLM_MAX_ATTEMPTS")
    priority_models: Annotated[list[str], NoDecode] = Field(default_factory=list, alias="LLM_PRIORITY_MODELS")

    @field_validator("priority_models", mode="before")
    @classmethod
    def parse_json_list(cls, value: object) -> list[str]:
        """Accept a JSON list or a comma-separated string from the environment."""
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                parsed = json.loads(stripped)
                if not isinstance(parsed, list):
                    raise ValueError(f"Expected a JSON list, got {type(parsed).__name__}")
                return [str(item) for item in parsed]
            return [item.strip() for item in stripped.split(",") if item.strip()]
        if isinstance(value, list):
            return value
        return []

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
