"""Configuration settings for testledger."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Publishing settings loaded from ``TESTLEDGER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TESTLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str | None = None
    echo_sql: bool = False

    # Snapshot guard
    snapshot_results_enabled: bool = False
    snapshot_marker: str = "SNAPSHOT"

    # Metadata defaults for unresolved build parameters
    default_platform: str = "DEFAULT"
    default_build_number: int = 1

    # Suite parameters, used when not given on the command line or in the ini file
    component: str | None = None
    version: str | None = None
    build_number: str | None = None
    platform: str | None = None

    # Logging
    log_level: str = "INFO"
    log_json_format: bool = True

    # Retry
    retry_max_retries: int = 3
    retry_base_delay: float = 0.5
    retry_max_delay: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
