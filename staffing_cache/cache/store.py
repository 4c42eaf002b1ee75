"""TTLCacheStore - namespaced key/value cache with per-entry expiry.

Every value is persisted as a JSON envelope:

    {"payload": <data>, "storedAt": <epoch seconds>, "ttl": <seconds>}

An entry is expired iff now - storedAt > ttl. Expired entries are never
returned; they are deleted lazily on read or by an explicit sweep.
Envelopes that fail to decode are deleted and read as a miss, so the
store never raises to its callers for bad data.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable

from staffing_cache.cache.backends import (
    InMemoryStorageBackend,
    JsonFileStorageBackend,
    StorageBackendProtocol,
)
from staffing_cache.cache.eviction import QuotaEvictor
from staffing_cache.cache.keys import ResourceCategory, category_of
from staffing_cache.core.config import Settings
from staffing_cache.core.constants import CacheLimits
from staffing_cache.core.exceptions import CacheSerializationError
from staffing_cache.core.logging import get_logger
from staffing_cache.schemas.cache import CacheStats


logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class CacheEntry:
    """Decoded cache envelope.

    Attributes:
        key: Cache key (without namespace)
        payload: Stored data
        stored_at: Write time, epoch seconds
        ttl: Time-to-live in seconds
    """

    key: str
    payload: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        """Check whether the entry is past its TTL at ``now``."""
        return now - self.stored_at > self.ttl


@dataclass(frozen=True)
class EntrySnapshot:
    """Point-in-time metadata about one stored entry.

    Corrupt entries carry ``stored_at=0`` so they sort as the oldest.
    """

    key: str
    stored_at: float
    size_bytes: int
    expired: bool = False
    corrupt: bool = False


def encode_envelope(payload: Any, stored_at: float, ttl: float) -> str:
    """Serialize a payload into its storage envelope.

    Raises:
        CacheSerializationError: If the payload is not JSON-serializable
    """
    try:
        return json.dumps(
            {"payload": payload, "storedAt": stored_at, "ttl": ttl},
            allow_nan=False,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise CacheSerializationError("Payload is not JSON-serializable", cause=e) from e


def decode_envelope(key: str, raw: str) -> CacheEntry:
    """Parse a stored envelope.

    Raises:
        CacheSerializationError: If the envelope is not valid JSON or is
            missing a numeric storedAt/ttl
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise CacheSerializationError("Envelope is not valid JSON", key, e) from e

    if not isinstance(data, dict) or "payload" not in data:
        raise CacheSerializationError("Envelope has no payload", key)

    stored_at = data.get("storedAt")
    ttl = data.get("ttl")
    for name, value in (("storedAt", stored_at), ("ttl", ttl)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CacheSerializationError(f"Envelope field '{name}' is not numeric", key)

    return CacheEntry(key=key, payload=data["payload"], stored_at=float(stored_at), ttl=float(ttl))


class TTLCacheStore:
    """Process-wide TTL cache over a pluggable string backend.

    Operations are synchronous. Each one holds a reentrant lock while it
    touches the backend, so single-entry operations are atomic but there
    are no guarantees across entries (last write wins).

    Example:
        >>> store = TTLCacheStore()
        >>> store.set("staff-list:mgr_1", [{"uid": "u1"}], ttl=60)
        >>> store.get("staff-list:mgr_1")
        [{'uid': 'u1'}]

    The clock is injectable for tests:
        >>> now = [1000.0]
        >>> store = TTLCacheStore(clock=lambda: now[0])
    """

    def __init__(
        self,
        backend: StorageBackendProtocol | None = None,
        namespace: str = "",
        clock: Callable[[], float] = time.time,
        size_limit_bytes: int = CacheLimits.STORAGE_LIMIT_BYTES,
        cleanup_ratio: float = CacheLimits.CLEANUP_THRESHOLD_RATIO,
        large_write_bytes: int = CacheLimits.LARGE_WRITE_BYTES,
        conversation_retention_days: int = CacheLimits.CONVERSATION_RETENTION_DAYS,
    ) -> None:
        """Initialize the store.

        Args:
            backend: Backing key/value store; in-memory when omitted
            namespace: Prefix applied to every key in the backend
            clock: Returns the current time in epoch seconds
            size_limit_bytes: Size limit the quota evictor measures against
            cleanup_ratio: Fraction of the limit that triggers eviction
            large_write_bytes: Writes at least this large trigger an eviction check
            conversation_retention_days: Age after which conversation entries
                are purged by init()
        """
        self._backend: StorageBackendProtocol = backend if backend is not None else InMemoryStorageBackend()
        self._namespace = namespace
        self._clock = clock
        self._large_write_bytes = large_write_bytes
        self._conversation_retention_days = conversation_retention_days
        self._lock = threading.RLock()
        self.evictor = QuotaEvictor(
            self,
            limit_bytes=size_limit_bytes,
            threshold_ratio=cleanup_ratio,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ) -> TTLCacheStore:
        """Build a store from application settings.

        Uses a JSON file backend when ``cache_storage_path`` is set.
        """
        backend: StorageBackendProtocol
        if settings.cache_storage_path:
            backend = JsonFileStorageBackend(settings.cache_storage_path)
        else:
            backend = InMemoryStorageBackend()
        return cls(
            backend=backend,
            namespace=settings.cache_namespace,
            clock=clock,
            size_limit_bytes=settings.cache_size_limit_bytes,
            cleanup_ratio=settings.cache_cleanup_ratio,
            large_write_bytes=settings.cache_large_write_bytes,
            conversation_retention_days=settings.conversation_retention_days,
        )

    @property
    def namespace(self) -> str:
        """Return the backend key prefix."""
        return self._namespace

    def now(self) -> float:
        """Return the store's notion of the current time."""
        return self._clock()

    def _full_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def _owned_keys(self) -> list[str]:
        """Return keys (without namespace) that belong to this store."""
        ns_len = len(self._namespace)
        return [k[ns_len:] for k in self._backend.keys() if k.startswith(self._namespace)]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Run startup housekeeping: conversation retention, then quota."""
        purged = self.purge_stale_conversations()
        removed = self.evictor.auto_cleanup_if_needed()
        stats = self.stats()
        logger.info(
            "Cache store initialized",
            purged_conversations=purged,
            evicted=removed,
            entries=stats.total_entries,
            size_bytes=stats.total_size_bytes,
        )

    def teardown(self) -> None:
        """Release the backend."""
        with self._lock:
            self._backend.close()

    # ------------------------------------------------------------------
    # Entry operations
    # ------------------------------------------------------------------

    def set(self, key: str, payload: Any, ttl: float) -> None:
        """Store ``payload`` under ``key`` for ``ttl`` seconds.

        A payload that cannot be serialized, or a backend write failure,
        is logged and leaves the key reading as a miss.

        Raises:
            ValueError: If ttl is not positive, or payload is None (which
                get() could not tell apart from a miss)
        """
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        if payload is None:
            raise ValueError("payload cannot be None")

        try:
            raw = encode_envelope(payload, self._clock(), ttl)
        except CacheSerializationError as e:
            logger.warning("Cache write skipped, payload not serializable", key=key, error=str(e.cause))
            self.remove(key)
            return

        try:
            with self._lock:
                self._backend.set(self._full_key(key), raw)
        except OSError as e:
            logger.warning("Cache write failed", key=key, error=str(e))
            self.remove(key)
            return

        size = len(raw.encode("utf-8"))
        logger.debug("Cached", key=key, ttl=ttl, size_bytes=size)
        if size >= self._large_write_bytes:
            self.evictor.auto_cleanup_if_needed()

    def get(self, key: str) -> Any | None:
        """Return the payload for ``key`` or None if absent, expired, or corrupt."""
        with self._lock:
            raw = self._backend.get(self._full_key(key))
            if raw is None:
                return None

            try:
                entry = decode_envelope(key, raw)
            except CacheSerializationError as e:
                logger.warning("Corrupt cache entry removed", key=key, error=str(e))
                self._delete(key)
                return None

            if entry.is_expired(self._clock()):
                self._delete(key)
                logger.debug("Expired cache entry removed", key=key)
                return None

        return entry.payload

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the decoded envelope without applying expiry or healing."""
        with self._lock:
            raw = self._backend.get(self._full_key(key))
        if raw is None:
            return None
        try:
            return decode_envelope(key, raw)
        except CacheSerializationError:
            return None

    def remove(self, key: str) -> None:
        """Delete ``key`` if present."""
        with self._lock:
            self._delete(key)

    def remove_many(self, keys: Iterable[str]) -> int:
        """Delete several keys with a single backend write.

        Returns:
            Number of keys that were present
        """
        full_keys = [self._full_key(key) for key in keys]
        if not full_keys:
            return 0
        with self._lock:
            try:
                return self._backend.delete_many(full_keys)
            except OSError as e:
                logger.warning("Cache batch delete failed", count=len(full_keys), error=str(e))
                return 0

    def _delete(self, key: str) -> bool:
        try:
            return self._backend.delete(self._full_key(key))
        except OSError as e:
            logger.warning("Cache delete failed", key=key, error=str(e))
            return False

    def clear_by_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``.

        Returns:
            Number of entries removed
        """
        with self._lock:
            removed = self.remove_many(k for k in self._owned_keys() if k.startswith(prefix))
        logger.info("Cleared cache entries", prefix=prefix, count=removed)
        return removed

    # ------------------------------------------------------------------
    # Sweeps and statistics
    # ------------------------------------------------------------------

    def snapshot(self) -> list[EntrySnapshot]:
        """Return metadata for every stored entry at this instant."""
        now = self._clock()
        snapshots: list[EntrySnapshot] = []
        with self._lock:
            for key in self._owned_keys():
                raw = self._backend.get(self._full_key(key))
                if raw is None:
                    continue
                size = len(raw.encode("utf-8"))
                try:
                    entry = decode_envelope(key, raw)
                except CacheSerializationError:
                    snapshots.append(EntrySnapshot(key, 0.0, size, corrupt=True))
                    continue
                snapshots.append(
                    EntrySnapshot(key, entry.stored_at, size, expired=entry.is_expired(now))
                )
        return snapshots

    def stats(self) -> CacheStats:
        """Summarize entries that are not expired at call time.

        Corrupt entries are counted since they still occupy storage.
        """
        by_category: dict[str, int] = {}
        total_size = 0
        live = [s for s in self.snapshot() if not s.expired]
        for snap in live:
            total_size += snap.size_bytes
            category = category_of(snap.key)
            by_category[category] = by_category.get(category, 0) + 1
        return CacheStats(
            total_entries=len(live),
            total_size_bytes=total_size,
            by_category=by_category,
        )

    def purge_expired(self) -> int:
        """Eagerly delete every expired or corrupt entry.

        Returns:
            Number of entries removed
        """
        removed = self.remove_many(s.key for s in self.snapshot() if s.expired or s.corrupt)
        if removed:
            logger.info("Purged expired cache entries", count=removed)
        return removed

    def purge_stale_conversations(self) -> int:
        """Delete conversation entries older than the retention window.

        Unreadable conversation entries are deleted as well.

        Returns:
            Number of entries removed
        """
        cutoff = self._clock() - self._conversation_retention_days * SECONDS_PER_DAY
        prefix = ResourceCategory.CONVERSATION.prefix
        removed = self.remove_many(
            s.key for s in self.snapshot()
            if s.key.startswith(prefix) and (s.corrupt or s.stored_at < cutoff)
        )
        if removed:
            logger.info("Purged old conversation history", count=removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._owned_keys())

    def __repr__(self) -> str:
        return (
            f"TTLCacheStore(namespace={self._namespace!r}, "
            f"backend={type(self._backend).__name__})"
        )
