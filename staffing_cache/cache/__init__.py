"""Cache Management Package.

- keys: ResourceCategory and cache key builder
- backends: string key/value backing stores
- store: TTLCacheStore with lazy expiry and self-healing reads
- eviction: QuotaEvictor for size-triggered cleanup
"""

from staffing_cache.cache.backends import (
    InMemoryStorageBackend,
    JsonFileStorageBackend,
    StorageBackendProtocol,
)
from staffing_cache.cache.eviction import QuotaEvictor, eviction_order
from staffing_cache.cache.keys import (
    ResourceCategory,
    build_cache_key,
    category_of,
    owner_prefix,
    parse_cache_key,
)
from staffing_cache.cache.store import (
    CacheEntry,
    EntrySnapshot,
    TTLCacheStore,
    decode_envelope,
    encode_envelope,
)


__all__ = [
    # Keys
    "ResourceCategory",
    "build_cache_key",
    "category_of",
    "owner_prefix",
    "parse_cache_key",
    # Backends
    "InMemoryStorageBackend",
    "JsonFileStorageBackend",
    "StorageBackendProtocol",
    # Store
    "CacheEntry",
    "EntrySnapshot",
    "TTLCacheStore",
    "decode_envelope",
    "encode_envelope",
    # Eviction
    "QuotaEvictor",
    "eviction_order",
]
