"""Tests for effective assignment resolution."""

from datetime import date, time

import pytest

from schedcheck.domain.calendar import date_range
from schedcheck.domain.integrity import WarningType
from schedcheck.domain.models import (
    DAY_OFF,
    Assigned,
    AssignmentKind,
    DayOff,
    Employee,
    LeaveRecord,
    OnLeave,
    Shift,
    Unassigned,
    Weekday,
)
from schedcheck.evaluation.resolver import AssignmentResolver

MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)


@pytest.fixture
def shifts():
    """Day and night shifts."""
    return [
        Shift(id="day", start=time(7, 0), end=time(15, 0), lunch_break_minutes=30),
        Shift(id="night", start=time(23, 0), end=time(7, 0)),
    ]


@pytest.fixture
def resolver(shifts):
    return AssignmentResolver(shifts)


class TestPrecedence:
    """Tests for leave > manual > fixed > unassigned."""

    def test_fixed_pattern(self, resolver):
        employee = Employee(id="E1", name="A", fixed_shifts={Weekday.MONDAY: ["day"]})

        assignment = resolver.resolve(employee, MONDAY)

        assert isinstance(assignment, Assigned)
        assert assignment.shift.id == "day"
        assert assignment.kind == AssignmentKind.SHIFT
        assert assignment.is_working

    def test_manual_overrides_fixed(self, resolver):
        employee = Employee(
            id="E1",
            name="A",
            fixed_shifts={Weekday.MONDAY: ["day"]},
            manual_shifts={MONDAY: "night"},
        )

        assignment = resolver.resolve(employee, MONDAY)

        assert assignment.shift.id == "night"

    def test_manual_day_off_overrides_fixed(self, resolver):
        employee = Employee(
            id="E1",
            name="A",
            fixed_shifts={Weekday.MONDAY: ["day"]},
            manual_shifts={MONDAY: DAY_OFF},
        )
        assert isinstance(resolver.resolve(employee, MONDAY), DayOff)

    def test_leave_overrides_everything(self, resolver):
        """Leave wins over both a manual and a fixed entry."""
        employee = Employee(
            id="E1",
            name="A",
            fixed_shifts={Weekday.MONDAY: ["day"]},
            manual_shifts={MONDAY: "night"},
            leave=[
                LeaveRecord(
                    id="L1",
                    start_date=MONDAY,
                    end_date=MONDAY,
                    leave_type="Vacation",
                    hours_per_day=7.5,
                )
            ],
        )

        assignment = resolver.resolve(employee, MONDAY)

        assert isinstance(assignment, OnLeave)
        assert not assignment.is_working
        assert assignment.label == "Leave: Vacation"

    def test_overlapping_leave_first_record_wins(self, resolver):
        employee = Employee(
            id="E1",
            name="A",
            leave=[
                LeaveRecord(id="L1", start_date=MONDAY, end_date=TUESDAY, leave_type="Sick"),
                LeaveRecord(id="L2", start_date=MONDAY, end_date=MONDAY, leave_type="Vacation"),
            ],
        )
        assert resolver.resolve(employee, MONDAY).record.id == "L1"

    def test_fixed_day_off(self, resolver):
        employee = Employee(id="E1", name="A", fixed_shifts={Weekday.MONDAY: [DAY_OFF]})
        assignment = resolver.resolve(employee, MONDAY)
        assert isinstance(assignment, DayOff)
        assert assignment.label == "Day off"

    def test_nothing_configured_is_unassigned(self, resolver):
        employee = Employee(id="E1", name="A")
        assignment = resolver.resolve(employee, MONDAY)
        assert isinstance(assignment, Unassigned)
        assert assignment.unresolved_ref is None

    def test_only_first_fixed_entry_counts(self, resolver):
        employee = Employee(
            id="E1", name="A", fixed_shifts={Weekday.MONDAY: ["night", "day"]}
        )
        assert resolver.resolve(employee, MONDAY).shift.id == "night"


class TestWarnings:
    """Tests for data-integrity warnings raised while resolving."""

    def test_unknown_shift_reference(self, resolver):
        """Unknown ids resolve to Unassigned without falling back to fixed."""
        employee = Employee(
            id="E1",
            name="A",
            fixed_shifts={Weekday.MONDAY: ["day"]},
            manual_shifts={MONDAY: "ghost"},
        )

        assignment, warnings = resolver.resolve_with_warnings(employee, MONDAY)

        assert isinstance(assignment, Unassigned)
        assert assignment.unresolved_ref == "ghost"
        assert len(warnings) == 1
        assert warnings[0].warning_type == WarningType.UNKNOWN_SHIFT_REFERENCE
        assert warnings[0].day == MONDAY

    def test_invalid_leave_flagged_once(self, resolver):
        employee = Employee(
            id="E1",
            name="A",
            leave=[LeaveRecord(id="L1", start_date=TUESDAY, end_date=MONDAY)],
        )

        timeline = resolver.build_timeline(employee, date_range(MONDAY, date(2024, 1, 7)))

        leave_warnings = [
            w for w in timeline.warnings
            if w.warning_type == WarningType.INVALID_LEAVE_RECORD
        ]
        assert len(leave_warnings) == 1
        assert not any(isinstance(a, OnLeave) for _, a in timeline)

    def test_preference_length_mismatch(self, resolver):
        employee = Employee(id="E1", name="A", shift_preferences=[1])
        timeline = resolver.build_timeline(employee, [MONDAY])
        assert [w.warning_type for w in timeline.warnings] == [
            WarningType.PREFERENCE_LENGTH_MISMATCH
        ]

    def test_empty_preferences_not_flagged(self, resolver):
        employee = Employee(id="E1", name="A")
        assert resolver.build_timeline(employee, [MONDAY]).warnings == []


class TestTimeline:
    """Tests for resolved timelines."""

    def test_one_assignment_per_day(self, resolver):
        employee = Employee(
            id="E1",
            name="A",
            fixed_shifts={d: ["day"] for d in Weekday if not d.is_weekend},
        )
        days = date_range(MONDAY, date(2024, 1, 7))

        timeline = resolver.build_timeline(employee, days)

        assert [d for d, _ in timeline] == days
        assert len(timeline.working_days()) == 5
        assert isinstance(timeline.on(date(2024, 1, 6)), Unassigned)

    def test_duplicate_shift_id_first_wins(self):
        resolver = AssignmentResolver([
            Shift(id="dup", start=time(7, 0), end=time(15, 0)),
            Shift(id="dup", start=time(15, 0), end=time(23, 0)),
        ])
        employee = Employee(id="E1", name="A", manual_shifts={MONDAY: "dup"})
        assert resolver.resolve(employee, MONDAY).shift.start == time(7, 0)
