"""Unit tests for staffing_cache.analytics.coverage module.

Tests fill rates, weekly windows, problem-area classification and
the end-to-end overview computation.
"""

from datetime import date, timedelta

import pytest

from staffing_cache.analytics.coverage import (
    classify,
    compute_overview,
    fill_rate,
    identify_problem_areas,
    period_bounds,
    required_staff,
    weekly_breakdown,
)
from staffing_cache.core.exceptions import InvalidCacheKeyError
from staffing_cache.schemas.overview import IssueKind, ProblemArea, Severity
from staffing_cache.schemas.scheduling import RequirementTemplate, TimeSlot
from tests.fakes.fake_clock import slot


FRIDAY = date(2024, 3, 15)
THURSDAY = date(2024, 3, 14)


class TestPeriodBounds:
    """Tests for period_bounds function."""

    def test_leap_february(self) -> None:
        """Test February of a leap year ends on the 29th."""
        assert period_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_thirty_one_day_month(self) -> None:
        """Test a 31-day month."""
        assert period_bounds("2024-03") == (date(2024, 3, 1), date(2024, 3, 31))

    @pytest.mark.parametrize("period", ["2024", "2024-13", "march", "2024-03-01", ""])
    def test_invalid_period_raises(self, period: str) -> None:
        """Test malformed periods are rejected."""
        with pytest.raises(InvalidCacheKeyError):
            period_bounds(period)


class TestFillRate:
    """Tests for fill_rate function."""

    def test_zero_total_is_zero(self) -> None:
        """Test no slots gives 0 rather than dividing by zero."""
        assert fill_rate(0, 0) == 0.0

    def test_percentage(self) -> None:
        """Test rate is expressed as a percentage."""
        assert fill_rate(3, 4) == pytest.approx(75.0)


class TestWeeklyBreakdown:
    """Tests for weekly_breakdown function."""

    def test_windows_partition_month(self) -> None:
        """Test March splits into four 7-day windows and a 3-day tail."""
        start, end = period_bounds("2024-03")
        windows = weekly_breakdown([], start, end)

        assert [w.week_number for w in windows] == [1, 2, 3, 4, 5]
        assert windows[0].start_date == date(2024, 3, 1)
        assert windows[0].end_date == date(2024, 3, 7)
        assert windows[-1].start_date == date(2024, 3, 29)
        assert windows[-1].end_date == date(2024, 3, 31)
        for prev, nxt in zip(windows, windows[1:]):
            assert nxt.start_date == prev.end_date + timedelta(days=1)

    def test_slot_counts_sum_to_total(self) -> None:
        """Test every slot lands in exactly one window."""
        start, end = period_bounds("2024-02")
        slots = [
            slot(date(2024, 2, 1), TimeSlot.MORNING, "u1"),
            slot(date(2024, 2, 7), TimeSlot.EVENING),
            slot(date(2024, 2, 8), TimeSlot.MORNING, "u2"),
            slot(date(2024, 2, 29), TimeSlot.AFTERNOON, "u3"),
        ]

        windows = weekly_breakdown(slots, start, end)

        assert sum(w.total_slots for w in windows) == len(slots)
        assert sum(w.filled_slots for w in windows) == 3
        assert windows[0].total_slots == 2
        assert windows[0].fill_rate == pytest.approx(50.0)
        assert windows[-1].start_date == date(2024, 2, 29)
        assert windows[-1].fill_rate == pytest.approx(100.0)


class TestClassify:
    """Tests for classify function."""

    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            (0, (IssueKind.EMPTY, Severity.HIGH)),
            (1, (IssueKind.UNDERSTAFFED, Severity.HIGH)),
            (2, (IssueKind.UNDERSTAFFED, Severity.MEDIUM)),
            (3, None),
            (4, None),
            (5, None),
            (6, (IssueKind.OVERSTAFFED, Severity.LOW)),
        ],
    )
    def test_required_four(self, current: int, expected) -> None:
        """Test thresholds at 0.5x, 0.7x and 1.3x of four required."""
        assert classify(4, current) == expected

    def test_zero_required_zero_current(self) -> None:
        """Test nothing required and nobody assigned is fine."""
        assert classify(0, 0) is None

    def test_zero_required_any_current_is_overstaffed(self) -> None:
        """Test anybody assigned where nobody is required."""
        assert classify(0, 1) == (IssueKind.OVERSTAFFED, Severity.LOW)


class TestRequiredStaff:
    """Tests for required_staff lookup."""

    def test_override_wins(self, friday_template: RequirementTemplate) -> None:
        """Test date override takes precedence over weekday default."""
        assert required_staff(friday_template, FRIDAY, TimeSlot.AFTERNOON) == 4
        assert required_staff(friday_template, THURSDAY, TimeSlot.AFTERNOON) == 3

    def test_default_when_unspecified(self) -> None:
        """Test fallback of two when the template has no value."""
        template = RequirementTemplate(owner_id="mgr_1", period="2024-03")
        assert required_staff(template, FRIDAY, TimeSlot.MORNING) == 2
        assert required_staff(None, FRIDAY, TimeSlot.MORNING) == 2


class TestIdentifyProblemAreas:
    """Tests for identify_problem_areas function."""

    def test_friday_override_understaffed(self, friday_template: RequirementTemplate) -> None:
        """Test one filled Friday morning slot against an override of three."""
        problems = identify_problem_areas(
            [slot(FRIDAY, TimeSlot.MORNING, "u1")], friday_template
        )

        assert problems == [
            ProblemArea(
                date=FRIDAY,
                time_slot=TimeSlot.MORNING,
                issue=IssueKind.UNDERSTAFFED,
                severity=Severity.HIGH,
                required_staff=3,
                current_staff=1,
            )
        ]

    def test_only_present_pairs_classified(self, friday_template: RequirementTemplate) -> None:
        """Test pairs with no slot records are not reported."""
        slots = [slot(THURSDAY, TimeSlot.MORNING, "u1"), slot(THURSDAY, TimeSlot.MORNING, "u2")]
        assert identify_problem_areas(slots, friday_template) == []

    def test_empty_slots_count_as_zero(self, friday_template: RequirementTemplate) -> None:
        """Test a pair with only open slots is empty/high."""
        slots = [slot(THURSDAY, TimeSlot.EVENING), slot(THURSDAY, TimeSlot.EVENING, "  ")]
        (problem,) = identify_problem_areas(slots, friday_template)
        assert problem.issue is IssueKind.EMPTY
        assert problem.current_staff == 0
        assert problem.required_staff == 2

    def test_sorted_by_severity_stable(self, friday_template: RequirementTemplate) -> None:
        """Test most severe first, ties in date then time-slot order."""
        thursday_over = [slot(THURSDAY, TimeSlot.MORNING, f"u{i}") for i in range(3)]
        slots = [
            *thursday_over,
            slot(FRIDAY, TimeSlot.EVENING),
            slot(FRIDAY, TimeSlot.AFTERNOON, "u1"),
            slot(THURSDAY, TimeSlot.AFTERNOON, "u1"),
            slot(THURSDAY, TimeSlot.AFTERNOON, "u2"),
        ]

        problems = identify_problem_areas(slots, friday_template)

        assert [(p.date, p.time_slot, p.issue, p.severity) for p in problems] == [
            (FRIDAY, TimeSlot.AFTERNOON, IssueKind.UNDERSTAFFED, Severity.HIGH),
            (FRIDAY, TimeSlot.EVENING, IssueKind.EMPTY, Severity.HIGH),
            (THURSDAY, TimeSlot.AFTERNOON, IssueKind.UNDERSTAFFED, Severity.MEDIUM),
            (THURSDAY, TimeSlot.MORNING, IssueKind.OVERSTAFFED, Severity.LOW),
        ]


class TestComputeOverview:
    """Tests for compute_overview function."""

    def test_no_slots(self, friday_template: RequirementTemplate) -> None:
        """Test an empty month has zero rates and no problems."""
        overview = compute_overview("mgr_1", "2024-03", [], friday_template)

        assert overview.total_slots == 0
        assert overview.fill_rate == 0.0
        assert overview.problem_areas == []
        assert len(overview.weekly_breakdown) == 5
        assert all(w.fill_rate == 0.0 for w in overview.weekly_breakdown)

    def test_totals_and_out_of_period_ignored(self, friday_template: RequirementTemplate) -> None:
        """Test totals only count slots dated within the period."""
        slots = [
            slot(FRIDAY, TimeSlot.MORNING, "u1"),
            slot(FRIDAY, TimeSlot.MORNING),
            slot(FRIDAY, TimeSlot.MORNING),
            slot(date(2024, 3, 2), TimeSlot.MORNING, "u2"),
            slot(date(2024, 4, 1), TimeSlot.MORNING, "u3"),
        ]

        overview = compute_overview("mgr_1", "2024-03", slots, friday_template)

        assert overview.owner_id == "mgr_1"
        assert overview.period == "2024-03"
        assert overview.total_slots == 4
        assert overview.filled_slots == 2
        assert overview.empty_slots == 2
        assert overview.fill_rate == pytest.approx(50.0)
        assert sum(w.total_slots for w in overview.weekly_breakdown) == 4
        assert overview.problem_areas[0].current_staff == 1
        assert overview.problem_areas[0].required_staff == 3

    def test_deterministic(self, friday_template: RequirementTemplate) -> None:
        """Test identical inputs give identical overviews."""
        slots = [slot(FRIDAY, TimeSlot.EVENING), slot(THURSDAY, TimeSlot.MORNING)]
        first = compute_overview("mgr_1", "2024-03", slots, friday_template)
        second = compute_overview("mgr_1", "2024-03", list(reversed(slots)), friday_template)
        assert first == second
