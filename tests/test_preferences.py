"""Tests for preference matching."""

from datetime import date, time, timedelta

import pytest

from schedcheck.domain.calendar import date_range
from schedcheck.domain.models import DAY_OFF, Employee, LeaveRecord, Shift
from schedcheck.evaluation.preferences import PreferenceMatcher
from schedcheck.evaluation.resolver import AssignmentResolver

START = date(2024, 1, 1)
DAYS = date_range(START, START + timedelta(days=9))


@pytest.fixture
def shifts():
    return [
        Shift(id="day", start=time(7, 0), end=time(15, 0)),
        Shift(id="evening", start=time(15, 0), end=time(23, 0)),
    ]


@pytest.fixture
def matcher(shifts):
    return PreferenceMatcher(shifts)


@pytest.fixture
def resolver(shifts):
    return AssignmentResolver(shifts)


def manual_schedule(references: list[str]) -> dict[date, str]:
    return {day: ref for day, ref in zip(DAYS, references)}


class TestPreferenceMatcher:
    """Tests for PreferenceMatcher."""

    def test_preferred_shift(self, matcher):
        employee = Employee(id="E1", name="A", shift_preferences=[2, 1])
        assert matcher.preferred_shift(employee).id == "evening"

    def test_no_top_rank(self, matcher):
        employee = Employee(id="E1", name="A", shift_preferences=[2, 3])
        assert matcher.preferred_shift(employee) is None

    def test_leave_counts_as_match(self, matcher, resolver):
        """Eight preferred shifts plus two leave days is a full match."""
        employee = Employee(
            id="E1",
            name="A",
            shift_preferences=[1, 2],
            manual_shifts=manual_schedule(["day"] * 8),
            leave=[LeaveRecord(id="L1", start_date=DAYS[8], end_date=DAYS[9])],
        )
        timeline = resolver.build_timeline(employee, DAYS)

        assert matcher.match_percentage(timeline) == 100.0

    def test_other_shift_only_adds_to_denominator(self, matcher, resolver):
        employee = Employee(
            id="E1",
            name="A",
            shift_preferences=[1, 2],
            manual_shifts=manual_schedule(["day"] * 6 + ["evening"] * 2),
            leave=[LeaveRecord(id="L1", start_date=DAYS[8], end_date=DAYS[9])],
        )
        timeline = resolver.build_timeline(employee, DAYS)

        assert matcher.match_percentage(timeline) == 80.0

    def test_day_off_and_unassigned_ignored(self, matcher, resolver):
        employee = Employee(
            id="E1",
            name="A",
            shift_preferences=[1, 2],
            manual_shifts=manual_schedule(["day", "evening", DAY_OFF]),
        )
        timeline = resolver.build_timeline(employee, DAYS)

        assert matcher.match_percentage(timeline) == 50.0

    def test_nothing_countable_is_zero(self, matcher, resolver):
        employee = Employee(id="E1", name="A", shift_preferences=[1, 2])
        timeline = resolver.build_timeline(employee, DAYS)
        assert matcher.match_percentage(timeline) == 0.0

    def test_rounded_to_two_decimals(self, matcher, resolver):
        employee = Employee(
            id="E1",
            name="A",
            shift_preferences=[1, 2],
            manual_shifts=manual_schedule(["day", "evening", "evening"]),
        )
        timeline = resolver.build_timeline(employee, DAYS)
        assert matcher.match_percentage(timeline) == 33.33

    def test_shift_popularity(self, matcher):
        roster = [
            Employee(id="E1", name="A", shift_preferences=[1, 2]),
            Employee(id="E2", name="B", shift_preferences=[2, 1]),
            Employee(id="E3", name="C", shift_preferences=[1]),
            Employee(id="E4", name="D"),
        ]
        assert matcher.shift_popularity(0, roster) == 50.0
        assert matcher.shift_popularity(1, roster) == 25.0
        assert matcher.shift_popularity(0, []) == 0.0
