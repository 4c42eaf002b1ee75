"""QuotaEvictor - size-triggered eviction of the oldest cache entries.

When the live size of the store exceeds ``threshold_ratio * limit_bytes``
the evictor snapshots every entry, orders them by write time and deletes
the oldest third (integer floor).

Ordering rules:
- Entries whose envelope cannot be parsed are given stored_at = 0, so
  they are always the first to go.
- Ties on stored_at are broken by key, ascending.

This approximates LRU by write recency only. Reading an entry does not
protect it; an entry that is read often but rarely rewritten can still
be evicted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from staffing_cache.core.constants import CacheLimits
from staffing_cache.core.logging import get_logger


if TYPE_CHECKING:
    from staffing_cache.cache.store import EntrySnapshot, TTLCacheStore


logger = get_logger(__name__)


def eviction_order(snapshots: list[EntrySnapshot]) -> list[EntrySnapshot]:
    """Sort snapshots oldest first, corrupt entries (stored_at 0) leading."""
    return sorted(snapshots, key=lambda s: (0.0 if s.corrupt else s.stored_at, s.key))


class QuotaEvictor:
    """Evicts the oldest third of a TTLCacheStore when it grows too large.

    Runs opportunistically (store init, large writes), never on every set.
    The sweep works on a point-in-time snapshot and is not atomic with
    concurrent writes; deletes are idempotent so that is harmless.
    """

    def __init__(
        self,
        store: TTLCacheStore,
        limit_bytes: int = CacheLimits.STORAGE_LIMIT_BYTES,
        threshold_ratio: float = CacheLimits.CLEANUP_THRESHOLD_RATIO,
    ) -> None:
        """Initialize the evictor.

        Args:
            store: Store to measure and evict from
            limit_bytes: Storage limit in bytes (default 5 MiB)
            threshold_ratio: Fraction of the limit that triggers a sweep
        """
        if limit_bytes <= 0:
            raise ValueError("limit_bytes must be positive")
        if not 0.0 < threshold_ratio <= 1.0:
            raise ValueError("threshold_ratio must be in (0, 1]")
        self._store = store
        self._limit_bytes = limit_bytes
        self._threshold_ratio = threshold_ratio

    @property
    def limit_bytes(self) -> int:
        return self._limit_bytes

    @property
    def threshold_bytes(self) -> float:
        """Size above which a sweep is performed."""
        return self._limit_bytes * self._threshold_ratio

    def needs_cleanup(self) -> bool:
        """Check whether the store's live size exceeds the threshold."""
        return self._store.stats().total_size_bytes > self.threshold_bytes

    def auto_cleanup_if_needed(self) -> int:
        """Evict the oldest third of entries if over the size threshold.

        Returns:
            Number of entries removed (0 when under the threshold)
        """
        size = self._store.stats().total_size_bytes
        if size <= self.threshold_bytes:
            return 0

        logger.warning(
            "Cache size over threshold, evicting oldest entries",
            size_bytes=size,
            threshold_bytes=self.threshold_bytes,
        )

        ordered = eviction_order(self._store.snapshot())
        delete_count = len(ordered) // CacheLimits.EVICTION_FRACTION_DENOMINATOR
        self._store.remove_many(snap.key for snap in ordered[:delete_count])

        logger.info("Auto-cleanup removed old cache entries", count=delete_count)
        return delete_count
