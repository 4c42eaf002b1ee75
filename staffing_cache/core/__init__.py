"""Core module - Configuration, logging, constants, and exceptions.

Exports:
    - Settings, get_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - CacheTTL, CacheLimits: Cache defaults
    - Exception classes: StaffingCacheError, RemoteUnavailable, etc.
"""

from staffing_cache.core.config import Settings, get_settings
from staffing_cache.core.constants import CacheLimits, CacheTTL
from staffing_cache.core.exceptions import (
    CacheSerializationError,
    ClientError,
    InvalidCacheKeyError,
    RemoteUnavailable,
    StaffingCacheError,
)
from staffing_cache.core.logging import configure_logging, get_logger


__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Constants
    "CacheLimits",
    "CacheTTL",
    # Exceptions
    "CacheSerializationError",
    "ClientError",
    "InvalidCacheKeyError",
    "RemoteUnavailable",
    "StaffingCacheError",
    # Logging
    "configure_logging",
    "get_logger",
]
