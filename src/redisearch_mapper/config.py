"""Centralized configuration for redisearch-mapper using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library defaults loaded from environment variables.

    Every value here is only a default: options passed explicitly to a
    ``Schema`` or field definition always win.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDISEARCH_MAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    default_data_structure: Literal["HASH", "JSON"] = Field(
        default="JSON", description="Data structure used by schemas that do not choose one"
    )
    default_separator: str = Field(
        default="|", min_length=1, description="Separator for string and string[] fields stored as flat strings"
    )
    default_stop_words: Literal["OFF", "DEFAULT", "CUSTOM"] = Field(
        default="DEFAULT", description="Stop word mode used by schemas that do not choose one"
    )
    default_page_size: int = Field(default=10, ge=1, description="Batch size used by Search.all()")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("default_data_structure", "default_stop_words", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
