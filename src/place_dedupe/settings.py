"""
Runtime settings for the place-dedupe runner and CLI.

Uses pydantic-settings so every default can be overridden through
``PLACE_DEDUPE_*`` environment variables or a local ``.env`` file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DedupeSettings(BaseSettings):
    """Defaults applied by the local pipeline and the command line."""

    model_config = SettingsConfigDict(
        env_prefix="PLACE_DEDUPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # Batch execution
    max_workers: int = Field(default=1, ge=1)
    max_candidates: int = Field(default=1000, ge=1)  # per-call cap applied by the caller layer

    # Clustering
    min_cluster_size: int = Field(default=2, ge=2)
    min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)

    # Output
    output_dir: Path = Field(default=Path("data/cli_output"))

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Loguru expects upper-case level names."""
        return str(v).upper()


@lru_cache()
def get_settings() -> DedupeSettings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DedupeSettings()
