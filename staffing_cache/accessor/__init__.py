"""Cache-aside data access for scheduling resources."""

from staffing_cache.accessor.data_accessor import CacheAsideDataAccessor, CacheLookup


__all__ = [
    "CacheAsideDataAccessor",
    "CacheLookup",
]
