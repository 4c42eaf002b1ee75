"""Test package for cache management.

Contains unit tests for:
- Resource categories and build_cache_key()
- Storage backends (in-memory, JSON file)
- TTLCacheStore expiry, self-healing and statistics
- QuotaEvictor oldest-third eviction
"""
