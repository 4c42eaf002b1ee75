"""Resource cache keys - category constants and key builder.

Keys live in one flat namespace and always start with their category:
- staff-list:{owner_id}
- requirement-template:{owner_id}:{period}
- schedule-overview:{owner_id}:{period}
- dashboard-summary:{owner_id}
- conversation:{room_id}

The category is recovered as the first ":"-separated segment, which is
what categorized clearing and statistics rely on.
"""

from enum import Enum

from staffing_cache.core.exceptions import InvalidCacheKeyError


KEY_SEPARATOR = ":"


class ResourceCategory(str, Enum):
    """Categories of remotely fetched resources that are cached."""
    STAFF_LIST = "staff-list"
    REQUIREMENT_TEMPLATE = "requirement-template"
    SCHEDULE_OVERVIEW = "schedule-overview"
    DASHBOARD_SUMMARY = "dashboard-summary"
    CONVERSATION = "conversation"

    @property
    def prefix(self) -> str:
        """Key prefix shared by every entry of this category."""
        return f"{self.value}{KEY_SEPARATOR}"

    @property
    def is_period_scoped(self) -> bool:
        """Whether keys of this category carry a period segment."""
        return self in _PERIOD_SCOPED


_PERIOD_SCOPED = frozenset({
    ResourceCategory.REQUIREMENT_TEMPLATE,
    ResourceCategory.SCHEDULE_OVERVIEW,
})


def build_cache_key(
    category: ResourceCategory | str,
    owner_id: str,
    period: str | None = None,
) -> str:
    """Build a resource cache key.

    Args:
        category: Resource category (enum member or its value)
        owner_id: Owning manager, or the room ID for conversations
        period: Period string such as "2024-03" for period-scoped categories

    Returns:
        Formatted cache key: "{category}:{owner_id}[:{period}]"

    Raises:
        InvalidCacheKeyError: If the category is unknown, owner_id is empty,
            or the period is missing for a period-scoped category

    Example:
        >>> build_cache_key(ResourceCategory.STAFF_LIST, "mgr_1")
        'staff-list:mgr_1'

        >>> build_cache_key("schedule-overview", "mgr_1", "2024-03")
        'schedule-overview:mgr_1:2024-03'
    """
    resolved = resolve_category(category)

    if not owner_id:
        raise InvalidCacheKeyError("owner_id cannot be empty", owner_id)
    if KEY_SEPARATOR in owner_id:
        raise InvalidCacheKeyError(
            f"owner_id cannot contain '{KEY_SEPARATOR}'", owner_id
        )

    if resolved.is_period_scoped:
        if not period:
            raise InvalidCacheKeyError(
                f"Category '{resolved.value}' requires a period", period
            )
        return KEY_SEPARATOR.join((resolved.value, owner_id, period))

    if period:
        raise InvalidCacheKeyError(
            f"Category '{resolved.value}' does not take a period", period
        )
    return KEY_SEPARATOR.join((resolved.value, owner_id))


def owner_prefix(category: ResourceCategory | str, owner_id: str) -> str:
    """Prefix matching every key of a category for one owner.

    Example:
        >>> owner_prefix(ResourceCategory.SCHEDULE_OVERVIEW, "mgr_1")
        'schedule-overview:mgr_1:'
    """
    resolved = resolve_category(category)
    return f"{resolved.prefix}{owner_id}{KEY_SEPARATOR}"


def category_of(cache_key: str) -> str:
    """Return the category segment of a key.

    Unknown categories are returned verbatim so statistics still
    account for foreign keys sharing the namespace.

    Example:
        >>> category_of("requirement-template:mgr_1:2024-03")
        'requirement-template'
    """
    return cache_key.split(KEY_SEPARATOR, 1)[0]


def parse_cache_key(cache_key: str) -> tuple[ResourceCategory, str, str | None]:
    """Parse a cache key into its components.

    Args:
        cache_key: A key built by build_cache_key()

    Returns:
        Tuple of (category, owner_id, period or None)

    Raises:
        InvalidCacheKeyError: If the key format is invalid
    """
    parts = cache_key.split(KEY_SEPARATOR, 2)
    category = resolve_category(parts[0])

    expected = 3 if category.is_period_scoped else 2
    if len(parts) != expected or not all(parts):
        raise InvalidCacheKeyError(
            f"Invalid cache key format: '{cache_key}'", cache_key
        )

    period = parts[2] if category.is_period_scoped else None
    return category, parts[1], period


def resolve_category(category: ResourceCategory | str) -> ResourceCategory:
    """Coerce a category value to its enum member."""
    if isinstance(category, ResourceCategory):
        return category
    try:
        return ResourceCategory(category)
    except ValueError:
        raise InvalidCacheKeyError(
            f"Unknown resource category '{category}'. "
            f"Must be one of: {[c.value for c in ResourceCategory]}",
            category,
        ) from None
