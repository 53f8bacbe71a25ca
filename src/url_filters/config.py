"""Settings loaded from the environment with pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Site settings for the URL filters.

    Values come from ``URL_FILTERS_*`` environment variables or a ``.env``
    file; environment variables win over the file.
    """

    model_config = SettingsConfigDict(
        env_prefix="URL_FILTERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Feature flag; when off the filter pass returns its input untouched
    enabled: bool = True

    database_path: Path = Field(default_factory=lambda: Path.home() / ".url_filters" / "forum.db")
    per_page: int = Field(default=30, ge=1)

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    @property
    def url_filters_enabled(self) -> bool:
        return self.enabled


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
