"""Cache and coverage constants.

Provides centralized values for:
- Default per-category cache TTLs
- Storage quota limits
- Staffing classification thresholds
"""


# =============================================================================
# Cache TTLs
# =============================================================================

class CacheTTL:
    """Default cache TTLs in seconds.

    These can be overridden via Settings.
    """
    STAFF_LIST: int = 86400  # 24 hours
    REQUIREMENT_TEMPLATE: int = 604800  # 7 days
    SCHEDULE_OVERVIEW: int = 900  # 15 minutes
    DASHBOARD_SUMMARY: int = 300  # 5 minutes
    CONVERSATION: int = 3888000  # 45 days


# =============================================================================
# Storage Quota
# =============================================================================

class CacheLimits:
    """Storage quota defaults."""
    STORAGE_LIMIT_BYTES: int = 5 * 1024 * 1024  # 5 MiB
    CLEANUP_THRESHOLD_RATIO: float = 0.8
    EVICTION_FRACTION_DENOMINATOR: int = 3  # oldest third is dropped
    LARGE_WRITE_BYTES: int = 64 * 1024
    CONVERSATION_RETENTION_DAYS: int = 45


# =============================================================================
# Coverage Classification
# =============================================================================

UNDERSTAFFED_RATIO: float = 0.7
SEVERE_UNDERSTAFFED_RATIO: float = 0.5
OVERSTAFFED_RATIO: float = 1.3

# Used when neither a date override nor a weekday default is available
DEFAULT_REQUIRED_STAFF: int = 2

WINDOW_DAYS: int = 7


# =============================================================================
# Dashboard
# =============================================================================

DEFAULT_HOURLY_RATE: int = 1000
SHIFT_HOURS: int = 4
