"""Derived coverage and dashboard models.

None of these are persisted on their own. A ScheduleOverview or
DashboardSummary may be cached by the data accessor as an opaque payload.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from staffing_cache.schemas.scheduling import TimeSlot


class IssueKind(str, Enum):
    """Kind of staffing problem."""
    EMPTY = "empty"
    UNDERSTAFFED = "understaffed"
    OVERSTAFFED = "overstaffed"


class Severity(str, Enum):
    """Problem severity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Numeric rank, higher is more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


class WeeklyBreakdown(BaseModel):
    """Fill statistics for one 7-day window of a period."""

    week_number: int = Field(..., ge=1)
    start_date: date
    end_date: date
    total_slots: int = Field(default=0, ge=0)
    filled_slots: int = Field(default=0, ge=0)
    fill_rate: float = Field(default=0.0, ge=0.0, le=100.0, description="Percentage")


class ProblemArea(BaseModel):
    """A date/segment whose staffing deviates from its requirement."""

    date: date
    time_slot: TimeSlot
    issue: IssueKind
    severity: Severity
    required_staff: int
    current_staff: int


class ScheduleOverview(BaseModel):
    """Fill-rate summary and problem areas for one owner and period."""

    owner_id: str
    period: str
    total_slots: int = Field(default=0, ge=0)
    filled_slots: int = Field(default=0, ge=0)
    empty_slots: int = Field(default=0, ge=0)
    fill_rate: float = Field(default=0.0, ge=0.0, le=100.0, description="Percentage")
    weekly_breakdown: list[WeeklyBreakdown] = Field(default_factory=list)
    problem_areas: list[ProblemArea] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    """Headline numbers for a manager's dashboard."""

    total_staff: int = Field(default=0, ge=0)
    weekly_slots: int = Field(default=0, ge=0, description="Slots in the current Sunday-Saturday week")
    pending_approvals: int = Field(default=0, ge=0, description="Staff with no slot next month")
    monthly_labour_cost: int = Field(default=0, ge=0)
