"""Pydantic models for scheduling inputs, derived analytics, and cache stats."""

from staffing_cache.schemas.cache import CacheStats, UsageReport
from staffing_cache.schemas.overview import (
    DashboardSummary,
    IssueKind,
    ProblemArea,
    ScheduleOverview,
    Severity,
    WeeklyBreakdown,
)
from staffing_cache.schemas.scheduling import (
    TIME_SLOT_ORDER,
    ChatMessage,
    RequirementTemplate,
    ScheduleSlot,
    StaffMember,
    TimeSlot,
    Weekday,
)


__all__ = [
    "TIME_SLOT_ORDER",
    "CacheStats",
    "ChatMessage",
    "DashboardSummary",
    "IssueKind",
    "ProblemArea",
    "RequirementTemplate",
    "ScheduleOverview",
    "ScheduleSlot",
    "Severity",
    "StaffMember",
    "TimeSlot",
    "UsageReport",
    "Weekday",
    "WeeklyBreakdown",
]
