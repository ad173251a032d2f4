"""Shift preference matching."""

from typing import Optional

from schedcheck.domain.models import Assigned, Employee, OnLeave, Shift
from schedcheck.evaluation.resolver import EmployeeTimeline

TOP_RANK = 1


class PreferenceMatcher:
    """Compares ranked shift preferences with resolved assignments.

    Preferences are positional: entry ``i`` of an employee's preference list
    ranks the shift at index ``i`` of the shift list.
    """

    def __init__(self, shifts: list[Shift]):
        self.shifts = list(shifts)

    def preferred_shift(self, employee: Employee) -> Optional[Shift]:
        """The employee's rank-1 shift, or None if nothing is ranked first."""
        for index, rank in enumerate(employee.shift_preferences[: len(self.shifts)]):
            if rank == TOP_RANK:
                return self.shifts[index]
        return None

    def match_percentage(
        self,
        timeline: EmployeeTimeline,
        employee: Optional[Employee] = None,
    ) -> float:
        """Share of countable days that match the rank-1 preference.

        Leave days count as matches. Days with an assigned shift count
        toward the denominator and match only when the shift is the
        preferred one. Day-off and unassigned days are ignored.

        Returns:
            Percentage in [0, 100] rounded to two decimals.
        """
        employee = employee or timeline.employee
        preferred = self.preferred_shift(employee)

        matched = 0
        countable = 0
        for _, assignment in timeline:
            if isinstance(assignment, OnLeave):
                countable += 1
                matched += 1
            elif isinstance(assignment, Assigned):
                countable += 1
                if preferred is not None and assignment.shift.id == preferred.id:
                    matched += 1

        if countable == 0:
            return 0.0
        return round(matched / countable * 100, 2)

    def shift_popularity(self, shift_index: int, roster: list[Employee]) -> float:
        """Percentage of the roster that ranks a shift first."""
        if not roster:
            return 0.0
        count = sum(
            1 for employee in roster
            if employee.preference_for(shift_index) == TOP_RANK
        )
        return round(count / len(roster) * 100, 2)
