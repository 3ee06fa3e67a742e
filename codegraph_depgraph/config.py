"""
Depgraph Settings

Environment variables use the DEPGRAPH_ prefix.
Example: DEPGRAPH_LOG_LEVEL=DEBUG, DEPGRAPH_FORCE_PORTABLE=1
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IGNORED_DIRS = ("node_modules", "dist", "build", ".git")


class Settings(BaseSettings):
    """Application settings loaded from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DEPGRAPH_",
        extra="ignore",
    )

    # Logging
    log_level: str = Field("INFO", description="DEBUG, INFO, WARNING, ERROR")
    log_format: Literal["console", "json"] = "console"

    # Parsing
    force_portable: bool = Field(False, description="Load every grammar from the bundled language pack")
    max_workers: int = Field(1, ge=1, description="Threads used for per-file extraction")

    # Sources
    ignored_dirs: tuple[str, ...] = DEFAULT_IGNORED_DIRS

    # Diffing
    default_diff_ref: str = "HEAD~1"
    hook_ref: str = "HEAD"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
