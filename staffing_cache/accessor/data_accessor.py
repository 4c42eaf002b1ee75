"""CacheAsideDataAccessor - stale-while-revalidate access to remote resources.

For each resource category the accessor:
1. builds the cache key and reads the TTL cache store;
2. on a hit returns the cached value at once and spawns an asyncio task
   that re-fetches and re-populates the store (failures are logged and
   the stale value stands);
3. on a miss awaits the remote fetch, stores the result and returns it
   (failures surface to the caller as RemoteUnavailable).

Mutating collaborators call invalidate() right after a write so the next
read misses. There is no per-key locking or request coalescing: concurrent
writers to one key resolve last-write-wins, which is acceptable because
the cache is never the system of record.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from staffing_cache.analytics.coverage import compute_overview, period_bounds
from staffing_cache.analytics.dashboard import (
    compute_dashboard,
    month_period,
    next_month_period,
    week_bounds,
)
from staffing_cache.cache.keys import (
    ResourceCategory,
    build_cache_key,
    owner_prefix,
    resolve_category,
)
from staffing_cache.cache.store import TTLCacheStore
from staffing_cache.clients.document_store import DocumentStoreClient
from staffing_cache.clients.protocols import ScheduleDataSourceProtocol
from staffing_cache.core.config import Settings, get_settings
from staffing_cache.core.exceptions import RemoteUnavailable, StaffingCacheError
from staffing_cache.core.logging import configure_logging, get_logger
from staffing_cache.schemas.cache import CacheStats, UsageReport
from staffing_cache.schemas.overview import DashboardSummary, ScheduleOverview
from staffing_cache.schemas.scheduling import ChatMessage, RequirementTemplate, StaffMember


logger = get_logger(__name__)

Loader = Callable[[str, str | None], Awaitable[Any]]

_staff_adapter = TypeAdapter(list[StaffMember])
_template_adapter = TypeAdapter(RequirementTemplate | None)
_overview_adapter = TypeAdapter(ScheduleOverview)
_dashboard_adapter = TypeAdapter(DashboardSummary)
_messages_adapter = TypeAdapter(list[ChatMessage])


@dataclass
class CacheLookup:
    """Result of a cache-aside read.

    Attributes:
        key: Cache key that was consulted
        value: JSON-ready payload (None only for absent templates)
        from_cache: True when served from the store
        refresh: Background refresh task on a hit; callers may await it
    """

    key: str
    value: Any
    from_cache: bool
    refresh: asyncio.Task[None] | None = None


class CacheAsideDataAccessor:
    """Cache-aside reads over a ScheduleDataSourceProtocol.

    The store and data source are injected; nothing here is global.

    Example:
        >>> accessor = CacheAsideDataAccessor(store=TTLCacheStore(), source=client)
        >>> accessor.init()
        >>> staff = await accessor.get_optimized_staff_roster("mgr_1")
        >>> accessor.invalidate(ResourceCategory.STAFF_LIST, "mgr_1")
        >>> await accessor.teardown()
    """

    def __init__(
        self,
        store: TTLCacheStore,
        source: ScheduleDataSourceProtocol,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the accessor.

        Args:
            store: Cache store shared by all categories
            source: Remote data source
            settings: Application settings. Uses get_settings() if not provided.
        """
        self._store = store
        self._source = source
        self._settings = settings or get_settings()
        self._ttls: dict[ResourceCategory, int] = {
            ResourceCategory.STAFF_LIST: self._settings.staff_list_ttl_seconds,
            ResourceCategory.REQUIREMENT_TEMPLATE: self._settings.requirement_template_ttl_seconds,
            ResourceCategory.SCHEDULE_OVERVIEW: self._settings.schedule_overview_ttl_seconds,
            ResourceCategory.DASHBOARD_SUMMARY: self._settings.dashboard_summary_ttl_seconds,
            ResourceCategory.CONVERSATION: self._settings.conversation_ttl_seconds,
        }
        self._loaders: dict[ResourceCategory, Loader] = {
            ResourceCategory.STAFF_LIST: self._load_staff_roster,
            ResourceCategory.REQUIREMENT_TEMPLATE: self._load_template,
            ResourceCategory.SCHEDULE_OVERVIEW: self._load_overview,
            ResourceCategory.DASHBOARD_SUMMARY: self._load_dashboard,
            ResourceCategory.CONVERSATION: self._load_conversation,
        }
        self._pending: set[asyncio.Task[None]] = set()
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CacheAsideDataAccessor:
        """Configure logging, then wire a store and an HTTP document store client."""
        settings = settings or get_settings()
        configure_logging(settings)
        return cls(
            store=TTLCacheStore.from_settings(settings),
            source=DocumentStoreClient.from_settings(settings),
            settings=settings,
        )

    @property
    def store(self) -> TTLCacheStore:
        return self._store

    @property
    def pending_refreshes(self) -> frozenset[asyncio.Task[None]]:
        """Background refresh tasks that have not finished yet."""
        return frozenset(self._pending)

    def ttl_for(self, category: ResourceCategory | str) -> int:
        """TTL in seconds used for a category."""
        return self._ttls[resolve_category(category)]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Run store housekeeping before first use."""
        self._store.init()

    async def teardown(self) -> None:
        """Let in-flight refreshes finish, then release the source and store."""
        await self.wait_for_refreshes()
        await self._source.close()
        self._store.teardown()

    async def wait_for_refreshes(self) -> None:
        """Await every background refresh spawned so far."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cache-aside read path
    # ------------------------------------------------------------------

    async def get_optimized(
        self,
        category: ResourceCategory | str,
        owner_id: str,
        period: str | None = None,
    ) -> CacheLookup:
        """Read a resource, serving the cache first.

        Raises:
            RemoteUnavailable: On a miss when the remote fetch fails
            InvalidCacheKeyError: If the category, owner, or period is malformed
        """
        resolved = resolve_category(category)
        key = build_cache_key(resolved, owner_id, period)

        cached = self._store.get(key)
        if cached is not None:
            self._hits += 1
            logger.debug("Cache hit", key=key)
            task = self._spawn_refresh(resolved, key, owner_id, period)
            return CacheLookup(key=key, value=cached, from_cache=True, refresh=task)

        self._misses += 1
        logger.debug("Cache miss, fetching", key=key)
        fresh = await self._fetch(resolved, key, owner_id, period)
        if fresh is not None:
            self._store.set(key, fresh, self._ttls[resolved])
        return CacheLookup(key=key, value=fresh, from_cache=False)

    async def _fetch(
        self,
        category: ResourceCategory,
        key: str,
        owner_id: str,
        period: str | None,
    ) -> Any:
        try:
            return await self._loaders[category](owner_id, period)
        except StaffingCacheError:
            raise
        except Exception as e:
            raise RemoteUnavailable(f"Fetching {key} failed: {e}", resource=key) from e

    def _spawn_refresh(
        self,
        category: ResourceCategory,
        key: str,
        owner_id: str,
        period: str | None,
    ) -> asyncio.Task[None]:
        task = asyncio.create_task(self._refresh(category, key, owner_id, period))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _refresh(
        self,
        category: ResourceCategory,
        key: str,
        owner_id: str,
        period: str | None,
    ) -> None:
        """Re-fetch one key; the previously served value stands on failure."""
        try:
            fresh = await self._fetch(category, key, owner_id, period)
        except StaffingCacheError as e:
            logger.warning("Background refresh failed", key=key, error=str(e))
            return

        try:
            if fresh is None:
                self._store.remove(key)
            else:
                self._store.set(key, fresh, self._ttls[category])
        except Exception as e:
            logger.warning("Background refresh write failed", key=key, error=str(e))
            return
        logger.debug("Cache refreshed in background", key=key)

    async def _get_typed(
        self,
        adapter: TypeAdapter[Any],
        category: ResourceCategory,
        owner_id: str,
        period: str | None = None,
    ) -> Any:
        """Read through the cache and validate into the category's model.

        A cached payload that no longer validates is dropped and fetched again.
        """
        lookup = await self.get_optimized(category, owner_id, period)
        try:
            return adapter.validate_python(lookup.value)
        except ValidationError as e:
            if not lookup.from_cache:
                raise RemoteUnavailable(f"Malformed {lookup.key} payload", resource=lookup.key) from e
            logger.warning("Cached payload failed validation, refetching", key=lookup.key)
            self._store.remove(lookup.key)
            lookup = await self.get_optimized(category, owner_id, period)
            return adapter.validate_python(lookup.value)

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    async def get_optimized_staff_roster(self, owner_id: str) -> list[StaffMember]:
        """Staff roster, cached for 24 hours by default."""
        staff: list[StaffMember] = await self._get_typed(
            _staff_adapter, ResourceCategory.STAFF_LIST, owner_id
        )
        return staff

    async def get_optimized_template(self, owner_id: str, period: str) -> RequirementTemplate | None:
        """Requirement template, cached for 7 days by default.

        Absent templates are not cached.
        """
        template: RequirementTemplate | None = await self._get_typed(
            _template_adapter, ResourceCategory.REQUIREMENT_TEMPLATE, owner_id, period
        )
        return template

    async def get_optimized_overview(self, owner_id: str, period: str) -> ScheduleOverview:
        """Coverage overview for a period, cached for 15 minutes by default."""
        overview: ScheduleOverview = await self._get_typed(
            _overview_adapter, ResourceCategory.SCHEDULE_OVERVIEW, owner_id, period
        )
        return overview

    async def get_optimized_dashboard(self, owner_id: str) -> DashboardSummary:
        """Dashboard summary, cached for 5 minutes by default."""
        summary: DashboardSummary = await self._get_typed(
            _dashboard_adapter, ResourceCategory.DASHBOARD_SUMMARY, owner_id
        )
        return summary

    async def get_optimized_conversation(self, room_id: str) -> list[ChatMessage]:
        """Conversation history within the retention window."""
        messages: list[ChatMessage] = await self._get_typed(
            _messages_adapter, ResourceCategory.CONVERSATION, room_id
        )
        return messages

    # ------------------------------------------------------------------
    # Loaders (return JSON-ready payloads)
    # ------------------------------------------------------------------

    def _today(self) -> date:
        return datetime.fromtimestamp(self._store.now(), tz=timezone.utc).date()

    async def _load_staff_roster(self, owner_id: str, period: str | None) -> Any:
        staff = await self._source.fetch_staff_roster(owner_id)
        return _staff_adapter.dump_python(staff, mode="json")

    async def _load_template(self, owner_id: str, period: str | None) -> Any:
        assert period is not None
        template = await self._source.fetch_requirement_template(owner_id, period)
        if template is None:
            logger.info("No requirement template", owner_id=owner_id, period=period)
            return None
        return template.model_dump(mode="json")

    async def _load_overview(self, owner_id: str, period: str | None) -> Any:
        assert period is not None
        start, end = period_bounds(period)
        slots, template = await asyncio.gather(
            self._source.fetch_schedule_slots(owner_id, start, end),
            self.get_optimized_template(owner_id, period),
        )
        overview = compute_overview(owner_id, period, slots, template)
        logger.info(
            "Computed schedule overview",
            owner_id=owner_id,
            period=period,
            fill_rate=round(overview.fill_rate, 1),
            problems=len(overview.problem_areas),
        )
        return overview.model_dump(mode="json")

    async def _load_dashboard(self, owner_id: str, period: str | None) -> Any:
        today = self._today()
        week_start, week_end = week_bounds(today)
        month_start, month_end = period_bounds(month_period(today))
        next_start, next_end = period_bounds(next_month_period(today))

        staff = await self.get_optimized_staff_roster(owner_id)
        week_slots, month_slots, next_month_slots = await asyncio.gather(
            self._source.fetch_schedule_slots(owner_id, week_start, week_end),
            self._source.fetch_schedule_slots(owner_id, month_start, month_end),
            self._source.fetch_schedule_slots(owner_id, next_start, next_end),
        )
        summary = compute_dashboard(staff, week_slots, month_slots, next_month_slots)
        return summary.model_dump(mode="json")

    async def _load_conversation(self, room_id: str, period: str | None) -> Any:
        now = datetime.fromtimestamp(self._store.now(), tz=timezone.utc)
        since = now - timedelta(days=self._settings.conversation_retention_days)
        messages = await self._source.fetch_conversation(room_id, since)
        return _messages_adapter.dump_python(messages, mode="json")

    # ------------------------------------------------------------------
    # Invalidation and maintenance
    # ------------------------------------------------------------------

    def invalidate(
        self,
        category: ResourceCategory | str,
        owner_id: str,
        extra_key: str | None = None,
    ) -> None:
        """Drop cached entries made stale by a write.

        Dependents are dropped too:
        - staff-list: staff roster and dashboard summary
        - requirement-template: template and schedule overview for the period
        - schedule-overview: overview for the period and dashboard summary
        - dashboard-summary: dashboard summary
        - conversation: the room given by extra_key (or owner_id)

        For period-scoped categories a missing extra_key clears every period
        of that owner. Invalidating absent keys is a no-op.
        """
        resolved = resolve_category(category)
        staff_key = build_cache_key(ResourceCategory.STAFF_LIST, owner_id)
        dashboard_key = build_cache_key(ResourceCategory.DASHBOARD_SUMMARY, owner_id)

        if resolved is ResourceCategory.STAFF_LIST:
            self._store.remove(staff_key)
            self._store.remove(dashboard_key)
        elif resolved is ResourceCategory.REQUIREMENT_TEMPLATE:
            self._invalidate_period(ResourceCategory.REQUIREMENT_TEMPLATE, owner_id, extra_key)
            self._invalidate_period(ResourceCategory.SCHEDULE_OVERVIEW, owner_id, extra_key)
        elif resolved is ResourceCategory.SCHEDULE_OVERVIEW:
            self._invalidate_period(ResourceCategory.SCHEDULE_OVERVIEW, owner_id, extra_key)
            self._store.remove(dashboard_key)
        elif resolved is ResourceCategory.DASHBOARD_SUMMARY:
            self._store.remove(dashboard_key)
        else:
            room_id = extra_key or owner_id
            self._store.remove(build_cache_key(ResourceCategory.CONVERSATION, room_id))

        logger.info(
            "Cache invalidated",
            category=resolved.value,
            owner_id=owner_id,
            extra_key=extra_key,
        )

    def _invalidate_period(
        self,
        category: ResourceCategory,
        owner_id: str,
        period: str | None,
    ) -> None:
        if period:
            self._store.remove(build_cache_key(category, owner_id, period))
        else:
            self._store.clear_by_prefix(owner_prefix(category, owner_id))

    def clear_all(self) -> int:
        """Clear every known category. Operational escape hatch.

        Returns:
            Number of entries removed
        """
        removed = sum(self._store.clear_by_prefix(c.prefix) for c in ResourceCategory)
        logger.warning("All resource caches cleared", count=removed)
        return removed

    def cache_stats(self) -> CacheStats:
        """Statistics of the underlying store."""
        return self._store.stats()

    def usage_report(self) -> UsageReport:
        """Hit/miss counters since construction alongside store stats."""
        stats = self._store.stats()
        lookups = self._hits + self._misses
        return UsageReport(
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / lookups if lookups else 0.0,
            total_entries=stats.total_entries,
            total_size_bytes=stats.total_size_bytes,
        )

    def __repr__(self) -> str:
        return (
            f"CacheAsideDataAccessor(store={self._store!r}, "
            f"pending_refreshes={len(self._pending)})"
        )
