"""Multi-day compliance checks over a resolved assignment timeline.

Every rule family is a forward scan over one employee's timeline. The
checker never changes the schedule; it only reports where it breaks a rule.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from schedcheck.domain.calendar import period_count, weekend_pairs
from schedcheck.domain.models import Assigned, Employee, Rules, Weekday
from schedcheck.evaluation.hours import HoursAggregator
from schedcheck.evaluation.resolver import EmployeeTimeline

WEEKEND_PERIOD_DAYS = 28


class ViolationType(Enum):
    """Types of compliance violations."""

    MAX_CONSECUTIVE_SHIFTS = "max_consecutive_shifts"
    INSUFFICIENT_DAYS_OFF_AFTER_MAX = "insufficient_days_off_after_max"
    MIN_REST_VIOLATION = "min_rest_violation"
    INSUFFICIENT_WEEKENDS_OFF = "insufficient_weekends_off"
    MIN_HOURS_PER_WEEK = "min_hours_per_week"
    MIN_HOURS_PER_TWO_WEEKS = "min_hours_per_two_weeks"
    BLOCKED_SHIFT_ASSIGNED = "blocked_shift_assigned"


@dataclass
class ComplianceViolation:
    """A single rule violation, tagged with the date it is reported on."""

    violation_type: ViolationType
    employee_id: str
    day: date
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return (
            f"[{self.violation_type.value}] Employee {self.employee_id}: "
            f"{self.message} ({self.day.isoformat()})"
        )

    def to_dict(self) -> dict:
        return {
            "type": self.violation_type.value,
            "employee_id": self.employee_id,
            "date": self.day.isoformat(),
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass
class ComplianceResult:
    """Result of checking one employee's timeline."""

    employee_id: str
    violations: list[ComplianceViolation] = field(default_factory=list)
    free_weekends: int = 0
    required_free_weekends: int = 0

    @property
    def is_compliant(self) -> bool:
        return len(self.violations) == 0

    def add_violation(self, violation: ComplianceViolation) -> None:
        self.violations.append(violation)

    def of_type(self, violation_type: ViolationType) -> list[ComplianceViolation]:
        return [v for v in self.violations if v.violation_type == violation_type]

    def days_flagged(self) -> set[date]:
        return {v.day for v in self.violations}


class ComplianceChecker:
    """Checks resolved timelines against a rule set.

    Example:
        >>> checker = ComplianceChecker(rules)
        >>> result = checker.check(timeline)
        >>> for violation in result.violations:
        ...     print(violation)
    """

    def __init__(self, rules: Rules):
        self.rules = rules

    def check(
        self,
        timeline: EmployeeTimeline,
        employee: Optional[Employee] = None,
    ) -> ComplianceResult:
        """Run every rule family over one employee's timeline."""
        employee = employee or timeline.employee
        result = ComplianceResult(employee_id=employee.id)

        self._check_consecutive_shifts(timeline, employee, result)
        self._check_min_rest(timeline, employee, result)
        self._check_weekends_off(timeline, employee, result)
        self._check_min_hours(timeline, employee, result)
        self._check_blocked_shifts(timeline, employee, result)

        result.violations.sort(key=lambda v: v.day)
        return result

    def _check_consecutive_shifts(
        self,
        timeline: EmployeeTimeline,
        employee: Employee,
        result: ComplianceResult,
    ) -> None:
        """Streak limit, plus the rest owed after a streak went past it."""
        max_streak = employee.effective_max_consecutive(self.rules)
        days_off_required = self.rules.min_days_off_after_max

        streak = 0
        exceeded = False
        rest_owed = False
        rest_run = 0

        for day, assignment in timeline:
            if not assignment.is_working:
                if streak > 0 and exceeded and days_off_required > 0:
                    rest_owed = True
                    rest_run = 0
                streak = 0
                exceeded = False
                rest_run += 1
                continue

            if rest_owed and rest_run < days_off_required:
                result.add_violation(
                    ComplianceViolation(
                        violation_type=ViolationType.INSUFFICIENT_DAYS_OFF_AFTER_MAX,
                        employee_id=employee.id,
                        day=day,
                        message=(
                            f"Back at work after {rest_run} day(s) off; "
                            f"{days_off_required} required after exceeding "
                            f"{max_streak} consecutive shifts"
                        ),
                        details={
                            "days_off": rest_run,
                            "required_days_off": days_off_required,
                        },
                    )
                )
            rest_owed = False
            rest_run = 0

            streak += 1
            if streak > max_streak:
                exceeded = True
                result.add_violation(
                    ComplianceViolation(
                        violation_type=ViolationType.MAX_CONSECUTIVE_SHIFTS,
                        employee_id=employee.id,
                        day=day,
                        message=(
                            f"Shift {streak} in a row exceeds maximum of {max_streak}"
                        ),
                        details={"streak": streak, "max_allowed": max_streak},
                    )
                )

    def _check_min_rest(
        self,
        timeline: EmployeeTimeline,
        employee: Employee,
        result: ComplianceResult,
    ) -> None:
        """Rest between each shift and the previous worked shift."""
        min_rest = self.rules.min_rest_hours_between_shifts
        if min_rest <= 0:
            return

        previous: Optional[tuple[date, Assigned]] = None
        for day, assignment in timeline:
            if not isinstance(assignment, Assigned):
                continue

            if previous is not None:
                prev_day, prev_assignment = previous
                prev_shift = prev_assignment.shift
                prev_end = datetime.combine(prev_day, prev_shift.end)
                if prev_shift.crosses_midnight:
                    prev_end += timedelta(days=1)
                curr_start = datetime.combine(day, assignment.shift.start)

                rest_hours = (curr_start - prev_end).total_seconds() / 3600
                if rest_hours < min_rest:
                    result.add_violation(
                        ComplianceViolation(
                            violation_type=ViolationType.MIN_REST_VIOLATION,
                            employee_id=employee.id,
                            day=day,
                            message=(
                                f"Only {rest_hours:.1f}h rest after shift on "
                                f"{prev_day.isoformat()} (min. {min_rest:g}h)"
                            ),
                            details={
                                "rest_hours": round(rest_hours, 2),
                                "min_rest_hours": min_rest,
                                "previous_day": prev_day.isoformat(),
                            },
                        )
                    )

            previous = (day, assignment)

    def _check_weekends_off(
        self,
        timeline: EmployeeTimeline,
        employee: Employee,
        result: ComplianceResult,
    ) -> None:
        """Free Saturday+Sunday pairs against the prorated minimum."""
        free = 0
        for saturday, sunday in weekend_pairs(timeline.days):
            if not timeline.on(saturday).is_working and not timeline.on(sunday).is_working:
                free += 1

        required = self.rules.min_weekends_off_per_period * period_count(
            timeline.days, WEEKEND_PERIOD_DAYS
        )
        result.free_weekends = free
        result.required_free_weekends = required

        if free < required:
            result.add_violation(
                ComplianceViolation(
                    violation_type=ViolationType.INSUFFICIENT_WEEKENDS_OFF,
                    employee_id=employee.id,
                    day=timeline.days[-1],
                    message=f"{free} free weekend(s), {required} required",
                    details={"free_weekends": free, "required": required},
                )
            )

    def _check_min_hours(
        self,
        timeline: EmployeeTimeline,
        employee: Employee,
        result: ComplianceResult,
    ) -> None:
        """Minimum hours for each complete week and fortnight."""
        checks = (
            (self.rules.min_hours_per_week, 7, ViolationType.MIN_HOURS_PER_WEEK),
            (self.rules.min_hours_per_two_weeks, 14, ViolationType.MIN_HOURS_PER_TWO_WEEKS),
        )
        for min_hours, period_days, violation_type in checks:
            if min_hours <= 0:
                continue
            for bucket in HoursAggregator(period_days).buckets(timeline):
                # Short trailing buckets are not judged
                if not bucket.is_complete(period_days):
                    continue
                if bucket.hours < min_hours:
                    result.add_violation(
                        ComplianceViolation(
                            violation_type=violation_type,
                            employee_id=employee.id,
                            day=bucket.end,
                            message=(
                                f"{bucket.hours:g}h between {bucket.start.isoformat()} "
                                f"and {bucket.end.isoformat()} (min. {min_hours:g}h)"
                            ),
                            details={
                                "hours": bucket.hours,
                                "min_hours": min_hours,
                                "period_start": bucket.start.isoformat(),
                            },
                        )
                    )

    def _check_blocked_shifts(
        self,
        timeline: EmployeeTimeline,
        employee: Employee,
        result: ComplianceResult,
    ) -> None:
        if not employee.blocked_shifts:
            return
        for day, assignment in timeline:
            if not isinstance(assignment, Assigned):
                continue
            weekday = Weekday.of(day)
            if employee.is_blocked(assignment.shift.id, weekday):
                result.add_violation(
                    ComplianceViolation(
                        violation_type=ViolationType.BLOCKED_SHIFT_ASSIGNED,
                        employee_id=employee.id,
                        day=day,
                        message=(
                            f"Assigned to shift {assignment.shift.id} which is "
                            f"blocked on {weekday.name.capitalize()}"
                        ),
                        details={"shift_id": assignment.shift.id},
                    )
                )
