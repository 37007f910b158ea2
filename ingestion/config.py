"""
Application configuration using Pydantic settings.

Usage:
    from ingestion.config import get_settings
    settings = get_settings()

For extraction policy constants, import from ingestion.constants:
    from ingestion.constants import DEFAULT_WORD_CAP, MAX_SKILLS
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_WORD_CAP


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Every outbound call made by the ingestion core reads its deadline from here:
        - SOURCE_TIMEOUT_SECONDS for GitHub, LeetCode and LinkedIn
        - PROCESSING_TIMEOUT_SECONDS for the downstream embedding trigger
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Profile Signal Ingestion"
    api_prefix: str = "/api"
    debug: bool = Field(default=False)

    # Database
    database_url: str = Field(default="sqlite:///ingestion.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # Source endpoints
    github_graphql_url: str = Field(
        default="https://api.github.com/graphql", validation_alias="GITHUB_GRAPHQL_URL"
    )
    github_api_base: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_BASE")
    leetcode_graphql_url: str = Field(
        default="https://leetcode.com/graphql", validation_alias="LEETCODE_GRAPHQL_URL"
    )
    linkedin_jobs_base_url: str = Field(
        default="https://www.linkedin.com/jobs/view", validation_alias="LINKEDIN_JOBS_BASE_URL"
    )

    # Outbound call limits
    source_timeout_seconds: float = Field(default=30.0, validation_alias="SOURCE_TIMEOUT_SECONDS")
    readme_fetch_workers: int = Field(default=4, validation_alias="README_FETCH_WORKERS")
    ingest_all_parallel: bool = Field(default=False, validation_alias="INGEST_ALL_PARALLEL")

    # Resume extraction
    resume_word_cap: int = Field(default=DEFAULT_WORD_CAP, validation_alias="RESUME_WORD_CAP")
    max_upload_size_mb: int = Field(default=5, validation_alias="MAX_UPLOAD_SIZE_MB")

    # Downstream embedding trigger (disabled when unset)
    processing_service_url: Optional[str] = Field(
        default=None, validation_alias="PROCESSING_SERVICE_URL"
    )
    processing_timeout_seconds: float = Field(
        default=30.0, validation_alias="PROCESSING_TIMEOUT_SECONDS"
    )

    @field_validator("resume_word_cap", "readme_fetch_workers")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Caps and pool sizes must be at least 1."""
        if v < 1:
            raise ValueError(f"must be a positive integer (got {v})")
        return v

    @field_validator("source_timeout_seconds", "processing_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Every outbound call carries a finite, positive deadline."""
        if v <= 0:
            raise ValueError(f"timeout must be greater than zero (got {v})")
        return v

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def processing_trigger_enabled(self) -> bool:
        """Check if the embedding trigger has somewhere to go."""
        return bool(self.processing_service_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
