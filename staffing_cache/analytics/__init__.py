"""Pure analytics over schedule data: coverage overview and dashboard."""

from staffing_cache.analytics.coverage import (
    classify,
    compute_overview,
    fill_rate,
    identify_problem_areas,
    period_bounds,
    required_staff,
    weekly_breakdown,
)
from staffing_cache.analytics.dashboard import (
    compute_dashboard,
    count_pending_approvals,
    estimate_labour_cost,
    month_period,
    next_month_period,
    week_bounds,
)


__all__ = [
    "classify",
    "compute_dashboard",
    "compute_overview",
    "count_pending_approvals",
    "estimate_labour_cost",
    "fill_rate",
    "identify_problem_areas",
    "month_period",
    "next_month_period",
    "period_bounds",
    "required_staff",
    "week_bounds",
    "weekly_breakdown",
]
