"""Coverage analysis - fill rates and staffing problem areas.

Pure functions that turn schedule slots plus a requirement template into a
ScheduleOverview. Results depend only on the inputs, so the same slots and
template always produce the same overview, including the order of
problem areas.

Classification of a (date, time slot) with ``required`` and ``current``
staff, first match wins:

    current == 0 and required > 0     -> empty / high
    current < required * 0.7          -> understaffed / high if < 0.5x else medium
    current > required * 1.3          -> overstaffed / low
    otherwise                         -> no problem
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from staffing_cache.core.constants import (
    DEFAULT_REQUIRED_STAFF,
    OVERSTAFFED_RATIO,
    SEVERE_UNDERSTAFFED_RATIO,
    UNDERSTAFFED_RATIO,
    WINDOW_DAYS,
)
from staffing_cache.core.exceptions import InvalidCacheKeyError
from staffing_cache.schemas.overview import (
    IssueKind,
    ProblemArea,
    ScheduleOverview,
    Severity,
    WeeklyBreakdown,
)
from staffing_cache.schemas.scheduling import (
    TIME_SLOT_ORDER,
    RequirementTemplate,
    ScheduleSlot,
    TimeSlot,
)


def period_bounds(period: str) -> tuple[date, date]:
    """Return the first and last day of a "YYYY-MM" period.

    Raises:
        InvalidCacheKeyError: If the period is not a valid year-month

    Example:
        >>> period_bounds("2024-02")
        (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    """
    try:
        year_str, month_str = period.split("-")
        year, month = int(year_str), int(month_str)
        start = date(year, month, 1)
    except ValueError:
        raise InvalidCacheKeyError(f"Invalid period '{period}', expected YYYY-MM", period) from None
    last_day = calendar.monthrange(year, month)[1]
    return start, date(year, month, last_day)


def fill_rate(filled: int, total: int) -> float:
    """Percentage of filled slots; 0 when there are no slots."""
    if total == 0:
        return 0.0
    return filled / total * 100


def _count(slots: Iterable[ScheduleSlot]) -> tuple[int, int]:
    total = filled = 0
    for slot in slots:
        total += 1
        if slot.is_filled:
            filled += 1
    return total, filled


def weekly_breakdown(
    slots: list[ScheduleSlot],
    period_start: date,
    period_end: date,
) -> list[WeeklyBreakdown]:
    """Split a period into 7-day windows and count slots in each.

    Windows start at ``period_start``; the last is clipped to ``period_end``.
    They partition the period, so every in-period slot lands in exactly one.
    """
    windows: list[WeeklyBreakdown] = []
    window_start = period_start
    week_number = 1

    while window_start <= period_end:
        window_end = min(window_start + timedelta(days=WINDOW_DAYS - 1), period_end)
        total, filled = _count(s for s in slots if window_start <= s.date <= window_end)
        windows.append(
            WeeklyBreakdown(
                week_number=week_number,
                start_date=window_start,
                end_date=window_end,
                total_slots=total,
                filled_slots=filled,
                fill_rate=fill_rate(filled, total),
            )
        )
        window_start = window_end + timedelta(days=1)
        week_number += 1

    return windows


def classify(required: int, current: int) -> tuple[IssueKind, Severity] | None:
    """Classify a staffing level against its requirement.

    Example:
        >>> classify(4, 1)
        (<IssueKind.UNDERSTAFFED: 'understaffed'>, <Severity.HIGH: 'high'>)
        >>> classify(4, 3) is None
        True
    """
    if current == 0 and required > 0:
        return IssueKind.EMPTY, Severity.HIGH
    if current < required * UNDERSTAFFED_RATIO:
        severity = Severity.HIGH if current < required * SEVERE_UNDERSTAFFED_RATIO else Severity.MEDIUM
        return IssueKind.UNDERSTAFFED, severity
    if current > required * OVERSTAFFED_RATIO:
        return IssueKind.OVERSTAFFED, Severity.LOW
    return None


def required_staff(template: RequirementTemplate | None, day: date, time_slot: TimeSlot) -> int:
    """Required staff from the template, falling back to the default count."""
    if template is None:
        return DEFAULT_REQUIRED_STAFF
    required = template.required_for(day, time_slot)
    return DEFAULT_REQUIRED_STAFF if required is None else required


def identify_problem_areas(
    slots: list[ScheduleSlot],
    template: RequirementTemplate | None,
) -> list[ProblemArea]:
    """Classify every (date, time slot) pair present in ``slots``.

    Pairs are enumerated by date, then morning, afternoon, evening. The
    result is sorted by severity, most severe first; equal severities keep
    enumeration order.
    """
    filled_by_pair: dict[tuple[date, TimeSlot], int] = {}
    for slot in slots:
        pair = (slot.date, slot.time_slot)
        filled_by_pair[pair] = filled_by_pair.get(pair, 0) + (1 if slot.is_filled else 0)

    problems: list[ProblemArea] = []
    for day, time_slot in sorted(filled_by_pair, key=lambda p: (p[0], TIME_SLOT_ORDER[p[1]])):
        current = filled_by_pair[(day, time_slot)]
        required = required_staff(template, day, time_slot)
        verdict = classify(required, current)
        if verdict is None:
            continue
        issue, severity = verdict
        problems.append(
            ProblemArea(
                date=day,
                time_slot=time_slot,
                issue=issue,
                severity=severity,
                required_staff=required,
                current_staff=current,
            )
        )

    # sorted() is stable, so ties keep enumeration order
    return sorted(problems, key=lambda p: -p.severity.rank)


def compute_overview(
    owner_id: str,
    period: str,
    schedule_slots: Iterable[ScheduleSlot],
    template: RequirementTemplate | None,
) -> ScheduleOverview:
    """Compute the fill-rate overview for one owner and period.

    Slots dated outside the period are ignored.

    Args:
        owner_id: Owning manager
        period: "YYYY-MM" period
        schedule_slots: Slots fetched for the period
        template: Requirement template, or None when the owner has none

    Returns:
        ScheduleOverview with totals, weekly windows and problem areas
    """
    start, end = period_bounds(period)
    in_period = [s for s in schedule_slots if start <= s.date <= end]
    total, filled = _count(in_period)

    return ScheduleOverview(
        owner_id=owner_id,
        period=period,
        total_slots=total,
        filled_slots=filled,
        empty_slots=total - filled,
        fill_rate=fill_rate(filled, total),
        weekly_breakdown=weekly_breakdown(in_period, start, end),
        problem_areas=identify_problem_areas(in_period, template),
    )
