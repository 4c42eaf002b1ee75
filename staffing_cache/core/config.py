"""Application configuration using Pydantic Settings.

Environment variables are loaded with the STAFFING_CACHE_ prefix.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from staffing_cache.core.constants import CacheLimits, CacheTTL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service configuration
    service_name: str = "staffing-cache"
    environment: str = Field(default="development", description="Runtime environment")
    log_level: str = Field(default="INFO", description="Logging level")

    # Remote document store
    document_store_url: str = Field(
        default="http://localhost:8090",
        description="Base URL of the remote document store API"
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Remote fetch timeout"
    )

    # Cache storage
    cache_namespace: str = Field(
        default="shifty_",
        description="Prefix applied to every key in the backing store"
    )
    cache_storage_path: str | None = Field(
        default=None,
        description="JSON file for persistent storage; in-memory when unset"
    )
    cache_size_limit_bytes: int = Field(
        default=CacheLimits.STORAGE_LIMIT_BYTES,
        gt=0,
        description="Size limit the quota evictor measures against"
    )
    cache_cleanup_ratio: float = Field(
        default=CacheLimits.CLEANUP_THRESHOLD_RATIO,
        gt=0.0,
        le=1.0,
        description="Fraction of the size limit that triggers eviction"
    )
    cache_large_write_bytes: int = Field(
        default=CacheLimits.LARGE_WRITE_BYTES,
        gt=0,
        description="Serialized size at which a write triggers an eviction check"
    )

    # Per-category TTLs (seconds)
    staff_list_ttl_seconds: int = Field(default=CacheTTL.STAFF_LIST, gt=0)
    requirement_template_ttl_seconds: int = Field(default=CacheTTL.REQUIREMENT_TEMPLATE, gt=0)
    schedule_overview_ttl_seconds: int = Field(default=CacheTTL.SCHEDULE_OVERVIEW, gt=0)
    dashboard_summary_ttl_seconds: int = Field(default=CacheTTL.DASHBOARD_SUMMARY, gt=0)
    conversation_ttl_seconds: int = Field(default=CacheTTL.CONVERSATION, gt=0)

    conversation_retention_days: int = Field(
        default=CacheLimits.CONVERSATION_RETENTION_DAYS,
        gt=0,
        description="Conversation entries older than this are purged at startup"
    )

    model_config = SettingsConfigDict(
        env_prefix="STAFFING_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton
    """
    return Settings()
