"""Dashboard aggregate computation."""

from __future__ import annotations

from datetime import date, timedelta

from staffing_cache.analytics.coverage import period_bounds
from staffing_cache.core.constants import DEFAULT_HOURLY_RATE, SHIFT_HOURS
from staffing_cache.schemas.overview import DashboardSummary
from staffing_cache.schemas.scheduling import ScheduleSlot, StaffMember


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday-to-Saturday week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_period(day: date) -> str:
    """Format the "YYYY-MM" period containing ``day``."""
    return f"{day.year:04d}-{day.month:02d}"


def next_month_period(day: date) -> str:
    """Period string for the month after ``day``."""
    _, month_end = period_bounds(month_period(day))
    return month_period(month_end + timedelta(days=1))


def count_pending_approvals(staff: list[StaffMember], next_month_slots: list[ScheduleSlot]) -> int:
    """Staff members with no slot assigned next month."""
    roster = {member.uid for member in staff}
    submitted = {
        slot.assigned_staff_ref.strip()
        for slot in next_month_slots
        if slot.is_filled and slot.assigned_staff_ref
    }
    return max(0, len(roster) - len(submitted & roster))


def estimate_labour_cost(staff: list[StaffMember], month_slots: list[ScheduleSlot]) -> int:
    """Hourly rate times shift length, summed over filled slots."""
    rates = {m.uid: m.hourly_rate for m in staff}
    total = 0
    for slot in month_slots:
        if not slot.is_filled or slot.assigned_staff_ref is None:
            continue
        rate = rates.get(slot.assigned_staff_ref.strip())
        total += (rate if rate is not None else DEFAULT_HOURLY_RATE) * SHIFT_HOURS
    return total


def compute_dashboard(
    staff: list[StaffMember],
    week_slots: list[ScheduleSlot],
    month_slots: list[ScheduleSlot],
    next_month_slots: list[ScheduleSlot],
) -> DashboardSummary:
    """Build the dashboard summary from pre-fetched data."""
    return DashboardSummary(
        total_staff=len(staff),
        weekly_slots=len(week_slots),
        pending_approvals=count_pending_approvals(staff, next_month_slots),
        monthly_labour_cost=estimate_labour_cost(staff, month_slots),
    )
