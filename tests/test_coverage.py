"""Tests for coverage and overtime computation."""

from datetime import date, time

import pytest

from schedcheck.domain.models import (
    DAY_OFF,
    Employee,
    LeaveRecord,
    OvertimeEntry,
    Shift,
    Weekday,
)
from schedcheck.evaluation.coverage import CoverageAggregator, OvertimeCalculator
from schedcheck.evaluation.resolver import AssignmentResolver

MONDAY = date(2024, 1, 1)


@pytest.fixture
def shift():
    """Day shift wanting five people on Mondays, overtime enabled."""
    return Shift(
        id="day",
        start=time(7, 0),
        end=time(15, 0),
        ideal_counts={Weekday.MONDAY: 5},
        is_overtime_active=True,
    )


@pytest.fixture
def coverage(shift):
    return CoverageAggregator(AssignmentResolver([shift]))


def monday_worker(employee_id: str, **kwargs) -> Employee:
    return Employee(
        id=employee_id,
        name=employee_id,
        fixed_shifts={Weekday.MONDAY: ["day"]},
        **kwargs,
    )


class TestCoverageAggregator:
    """Tests for CoverageAggregator."""

    def test_counts_assigned_employees(self, coverage, shift):
        roster = [monday_worker(f"E{i}") for i in range(3)]

        assert coverage.count_scheduled(shift, MONDAY, roster) == 3
        assert coverage.coverage_gap(shift, MONDAY, roster) == 2

    def test_leave_and_day_off_not_counted(self, coverage, shift):
        """Fixed entries are ignored on leave days and manual days off."""
        roster = [
            monday_worker("E1"),
            monday_worker(
                "E2",
                leave=[LeaveRecord(id="L1", start_date=MONDAY, end_date=MONDAY)],
            ),
            monday_worker("E3", manual_shifts={MONDAY: DAY_OFF}),
        ]

        assert coverage.count_scheduled(shift, MONDAY, roster) == 1

    def test_gap_never_negative(self, coverage, shift):
        roster = [monday_worker(f"E{i}") for i in range(7)]
        result = coverage.shift_day_coverage(shift, MONDAY, roster)

        assert result.scheduled == 7
        assert result.gap == 0
        assert result.is_covered

    def test_no_ideal_for_weekday(self, coverage, shift):
        tuesday = date(2024, 1, 2)
        result = coverage.shift_day_coverage(shift, tuesday, [])
        assert result.ideal == 0
        assert result.gap == 0

    def test_from_timelines_matches_roster_count(self, coverage, shift):
        roster = [monday_worker(f"E{i}") for i in range(2)]
        timelines = [coverage.resolver.build_timeline(e, [MONDAY]) for e in roster]

        from_roster = coverage.shift_day_coverage(shift, MONDAY, roster)
        from_timelines = coverage.from_timelines(shift, MONDAY, timelines)

        assert from_roster == from_timelines


class TestOvertimeCalculator:
    """Tests for OvertimeCalculator."""

    def test_gap_plus_explicit_entry(self, shift):
        """Ideal 5, scheduled 3, plus one explicit position gives 3."""
        shift.overtime_entries.append(OvertimeEntry(day=MONDAY, quantity=1))
        coverage = CoverageAggregator(AssignmentResolver([shift]))
        roster = [monday_worker(f"E{i}") for i in range(3)]

        calculator = OvertimeCalculator(coverage)

        assert calculator.overtime_available(shift, MONDAY, roster) == 3

    def test_inactive_flag_keeps_only_entries(self, shift):
        shift.is_overtime_active = False
        shift.overtime_entries.append(OvertimeEntry(day=MONDAY, quantity=2))
        coverage = CoverageAggregator(AssignmentResolver([shift]))

        calculator = OvertimeCalculator(coverage)

        assert calculator.overtime_available(shift, MONDAY, []) == 2

    def test_inactive_entry_ignored(self, shift):
        shift.is_overtime_active = False
        shift.overtime_entries.append(OvertimeEntry(day=MONDAY, quantity=2, is_active=False))
        assert OvertimeCalculator.from_gap(shift, MONDAY, gap=4) == 0

    def test_fully_staffed_has_no_deficit_overtime(self, coverage, shift):
        roster = [monday_worker(f"E{i}") for i in range(5)]
        assert OvertimeCalculator(coverage).overtime_available(shift, MONDAY, roster) == 0
