"""Effective assignment resolution.

For one employee and one date the resolver picks exactly one outcome by a
fixed precedence: leave, then the manual entry for the date, then the fixed
weekly pattern, then nothing. Each step is a guard clause so the order is
visible in one place.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from schedcheck.domain.integrity import DataWarning, WarningType
from schedcheck.domain.models import (
    DAY_OFF,
    Assigned,
    DayOff,
    EffectiveAssignment,
    Employee,
    OnLeave,
    Shift,
    Unassigned,
    Weekday,
)


@dataclass
class EmployeeTimeline:
    """Resolved assignments for one employee over an ordered date range.

    Attributes:
        employee: The employee the timeline belongs to.
        days: Ordered dates of the range.
        assignments: Date -> effective assignment, one entry per day.
        warnings: Data-integrity warnings raised while resolving.
    """

    employee: Employee
    days: list[date]
    assignments: dict[date, EffectiveAssignment] = field(default_factory=dict)
    warnings: list[DataWarning] = field(default_factory=list)

    def __iter__(self):
        for day in self.days:
            yield day, self.assignments[day]

    def on(self, day: date) -> EffectiveAssignment:
        return self.assignments[day]

    def working_days(self) -> list[date]:
        return [d for d in self.days if self.assignments[d].is_working]


class AssignmentResolver:
    """Resolves effective assignments against a shift list snapshot.

    Example:
        >>> resolver = AssignmentResolver(shifts)
        >>> resolver.resolve(employee, date(2024, 1, 15))
        Assigned(shift=Shift(shift_1, 07:00-15:00))
    """

    def __init__(self, shifts: list[Shift]):
        self.shifts = list(shifts)
        self.shifts_by_id: dict[str, Shift] = {}
        for shift in self.shifts:
            self.shifts_by_id.setdefault(shift.id, shift)

    def resolve(self, employee: Employee, day: date) -> EffectiveAssignment:
        """Resolve the single effective assignment for a date."""
        assignment, _ = self.resolve_with_warnings(employee, day)
        return assignment

    def resolve_with_warnings(
        self,
        employee: Employee,
        day: date,
    ) -> tuple[EffectiveAssignment, list[DataWarning]]:
        """Resolve an assignment and report unresolvable shift references.

        Args:
            employee: Employee to resolve for.
            day: Calendar date.

        Returns:
            Tuple of (assignment, warnings).
        """
        record = self._leave_on(employee, day)
        if record is not None:
            return OnLeave(record), []

        manual = employee.manual_shifts.get(day)
        if manual:
            return self._from_reference(employee, day, manual, "manual")

        fixed = employee.fixed_entry(Weekday.of(day))
        if fixed:
            return self._from_reference(employee, day, fixed, "fixed")

        return Unassigned(), []

    def build_timeline(self, employee: Employee, days: list[date]) -> EmployeeTimeline:
        """Resolve every day in ``days`` for one employee.

        Invalid leave records and preference arrays that do not line up
        with the shift list are flagged once per employee.
        """
        timeline = EmployeeTimeline(employee=employee, days=list(days))

        for record in employee.leave:
            if not record.is_valid:
                timeline.warnings.append(
                    DataWarning(
                        warning_type=WarningType.INVALID_LEAVE_RECORD,
                        message=(
                            f"Leave record {record.id} starts after it ends "
                            f"({record.start_date} > {record.end_date}); skipped"
                        ),
                        employee_id=employee.id,
                        reference=record.id,
                    )
                )

        if employee.shift_preferences and len(employee.shift_preferences) != len(self.shifts):
            timeline.warnings.append(
                DataWarning(
                    warning_type=WarningType.PREFERENCE_LENGTH_MISMATCH,
                    message=(
                        f"{len(employee.shift_preferences)} preferences for "
                        f"{len(self.shifts)} shifts; missing entries mean no preference"
                    ),
                    employee_id=employee.id,
                )
            )

        for day in timeline.days:
            assignment, warnings = self.resolve_with_warnings(employee, day)
            timeline.assignments[day] = assignment
            timeline.warnings.extend(warnings)

        return timeline

    def _leave_on(self, employee: Employee, day: date):
        for record in employee.leave:
            if record.covers(day):
                return record
        return None

    def _from_reference(
        self,
        employee: Employee,
        day: date,
        reference: str,
        source: str,
    ) -> tuple[EffectiveAssignment, list[DataWarning]]:
        if reference == DAY_OFF:
            return DayOff(), []

        shift: Optional[Shift] = self.shifts_by_id.get(reference)
        if shift is not None:
            return Assigned(shift), []

        warning = DataWarning(
            warning_type=WarningType.UNKNOWN_SHIFT_REFERENCE,
            message=f"{source.capitalize()} assignment references unknown shift {reference!r}",
            employee_id=employee.id,
            day=day,
            reference=reference,
        )
        return Unassigned(unresolved_ref=reference), [warning]
