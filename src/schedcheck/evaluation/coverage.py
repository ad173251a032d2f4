"""Staffing coverage and overtime availability per shift and date."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from schedcheck.domain.models import Assigned, EffectiveAssignment, Employee, Shift, Weekday
from schedcheck.evaluation.resolver import AssignmentResolver, EmployeeTimeline


@dataclass(frozen=True)
class ShiftDayCoverage:
    """Coverage figures for one shift on one date.

    Attributes:
        shift_id: Shift the figures belong to.
        day: Calendar date.
        scheduled: Employees effectively assigned to the shift.
        ideal: Ideal headcount configured for the weekday.
        overtime_available: Open overtime positions.
    """

    shift_id: str
    day: date
    scheduled: int
    ideal: int
    overtime_available: int = 0

    @property
    def gap(self) -> int:
        """Ideal minus scheduled, floored at zero."""
        return max(0, self.ideal - self.scheduled)

    @property
    def is_covered(self) -> bool:
        return self.gap == 0

    def to_dict(self) -> dict:
        return {
            "shift_id": self.shift_id,
            "date": self.day.isoformat(),
            "scheduled": self.scheduled,
            "ideal": self.ideal,
            "gap": self.gap,
            "overtime_available": self.overtime_available,
        }


def _is_assigned_to(assignment: EffectiveAssignment, shift: Shift) -> bool:
    return isinstance(assignment, Assigned) and assignment.shift.id == shift.id


class CoverageAggregator:
    """Counts scheduled staff per shift and compares with ideal headcount."""

    def __init__(self, resolver: AssignmentResolver):
        self.resolver = resolver

    def count_scheduled(self, shift: Shift, day: date, roster: list[Employee]) -> int:
        """Employees whose effective assignment on ``day`` is ``shift``.

        Employees on leave or with a day off never count, whatever their
        fixed or manual entries say.
        """
        return sum(
            1 for employee in roster
            if _is_assigned_to(self.resolver.resolve(employee, day), shift)
        )

    @staticmethod
    def ideal_headcount(shift: Shift, day: date) -> int:
        return shift.ideal_count(Weekday.of(day))

    def coverage_gap(self, shift: Shift, day: date, roster: list[Employee]) -> int:
        ideal = self.ideal_headcount(shift, day)
        return max(0, ideal - self.count_scheduled(shift, day, roster))

    def shift_day_coverage(
        self,
        shift: Shift,
        day: date,
        roster: list[Employee],
    ) -> ShiftDayCoverage:
        """Coverage for one (shift, date) pair, overtime included."""
        scheduled = self.count_scheduled(shift, day, roster)
        return self._build(shift, day, scheduled)

    def from_timelines(
        self,
        shift: Shift,
        day: date,
        timelines: Iterable[EmployeeTimeline],
    ) -> ShiftDayCoverage:
        """Same as ``shift_day_coverage`` using already-resolved timelines."""
        scheduled = sum(
            1 for timeline in timelines
            if _is_assigned_to(timeline.on(day), shift)
        )
        return self._build(shift, day, scheduled)

    def _build(self, shift: Shift, day: date, scheduled: int) -> ShiftDayCoverage:
        ideal = self.ideal_headcount(shift, day)
        gap = max(0, ideal - scheduled)
        return ShiftDayCoverage(
            shift_id=shift.id,
            day=day,
            scheduled=scheduled,
            ideal=ideal,
            overtime_available=OvertimeCalculator.from_gap(shift, day, gap),
        )


class OvertimeCalculator:
    """Open overtime positions for a shift on a date.

    Two independent sources are added together: the staffing deficit, when
    the shift's overtime flag is active, and any active explicit overtime
    entry for the date.
    """

    def __init__(self, coverage: CoverageAggregator):
        self.coverage = coverage

    def overtime_available(self, shift: Shift, day: date, roster: list[Employee]) -> int:
        gap = self.coverage.coverage_gap(shift, day, roster)
        return self.from_gap(shift, day, gap)

    @staticmethod
    def from_gap(shift: Shift, day: date, gap: int) -> int:
        """Overtime given an already computed coverage gap."""
        available = gap if shift.is_overtime_active else 0
        return available + shift.active_overtime_for(day)
