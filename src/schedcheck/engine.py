"""Schedule evaluation facade.

This module provides the high-level ScheduleEngine that expands the date
range, resolves every employee's timeline once and feeds it to the hours,
coverage, compliance and preference components.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from schedcheck.domain.calendar import date_range
from schedcheck.domain.integrity import (
    ConfigurationError,
    DataWarning,
    WarningLog,
    WarningType,
)
from schedcheck.domain.models import (
    EffectiveAssignment,
    Employee,
    OnLeave,
    Rules,
    Shift,
)
from schedcheck.domain.policies import DefaultHoursPolicy, HoursPolicy, HoursStatus
from schedcheck.evaluation.coverage import CoverageAggregator, ShiftDayCoverage
from schedcheck.evaluation.hours import BIWEEKLY_DAYS, HoursAggregator
from schedcheck.evaluation.preferences import PreferenceMatcher
from schedcheck.evaluation.resolver import AssignmentResolver
from schedcheck.validation.compliance import ComplianceChecker, ComplianceViolation

logger = logging.getLogger(__name__)


@dataclass
class EmployeeReport:
    """Per-employee figures over the evaluated range."""

    employee_id: str
    name: str
    hours_per_bucket: list[float] = field(default_factory=list)
    hours_status: list[HoursStatus] = field(default_factory=list)
    total_hours: float = 0.0
    free_weekends: int = 0
    required_free_weekends: int = 0
    preference_match: float = 0.0
    violations: list[ComplianceViolation] = field(default_factory=list)
    assignments: dict[date, EffectiveAssignment] = field(default_factory=dict)

    @property
    def is_compliant(self) -> bool:
        return not self.violations

    @property
    def days_worked(self) -> int:
        return sum(1 for a in self.assignments.values() if a.is_working)

    @property
    def leave_days(self) -> int:
        return sum(1 for a in self.assignments.values() if isinstance(a, OnLeave))

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "hours_per_bucket": list(self.hours_per_bucket),
            "hours_status": [s.value for s in self.hours_status],
            "total_hours": self.total_hours,
            "free_weekends": self.free_weekends,
            "required_free_weekends": self.required_free_weekends,
            "preference_match": self.preference_match,
            "violations": [v.to_dict() for v in self.violations],
            "assignments": {
                d.isoformat(): {"kind": a.kind.value, "label": a.label}
                for d, a in self.assignments.items()
            },
        }


@dataclass
class ShiftReport:
    """Per-shift coverage over the evaluated range."""

    shift_id: str
    label: str
    preference_popularity: float = 0.0
    coverage: list[ShiftDayCoverage] = field(default_factory=list)

    @property
    def total_overtime(self) -> int:
        return sum(c.overtime_available for c in self.coverage)

    @property
    def total_gap(self) -> int:
        return sum(c.gap for c in self.coverage)

    def to_dict(self) -> dict:
        return {
            "shift_id": self.shift_id,
            "label": self.label,
            "preference_popularity": self.preference_popularity,
            "total_overtime": self.total_overtime,
            "coverage": [c.to_dict() for c in self.coverage],
        }


@dataclass(frozen=True)
class DayRosterEntry:
    """One line of the "who is in today" view."""

    employee_id: str
    name: str
    label: str
    shift_id: Optional[str] = None
    on_leave: bool = False


@dataclass
class ScheduleReport:
    """Combined evaluation output for a roster and date range."""

    start: date
    end: date
    days: list[date] = field(default_factory=list)
    employees: list[EmployeeReport] = field(default_factory=list)
    shifts: list[ShiftReport] = field(default_factory=list)
    warnings: list[DataWarning] = field(default_factory=list)
    period_days: int = BIWEEKLY_DAYS

    @property
    def num_days(self) -> int:
        return len(self.days)

    def get_employee(self, employee_id: str) -> Optional[EmployeeReport]:
        for report in self.employees:
            if report.employee_id == employee_id:
                return report
        return None

    def get_shift(self, shift_id: str) -> Optional[ShiftReport]:
        for report in self.shifts:
            if report.shift_id == shift_id:
                return report
        return None

    def coverage_for(self, shift_id: str, day: date) -> Optional[ShiftDayCoverage]:
        shift_report = self.get_shift(shift_id)
        if shift_report is None:
            return None
        for coverage in shift_report.coverage:
            if coverage.day == day:
                return coverage
        return None

    def all_violations(self) -> list[ComplianceViolation]:
        return [v for e in self.employees for v in e.violations]

    def get_summary(self) -> dict:
        """Summary statistics for the evaluated range."""
        coverage = [c for s in self.shifts for c in s.coverage]
        understaffed = [c for c in coverage if c.gap > 0]
        matches = [e.preference_match for e in self.employees]

        return {
            "start": self.start,
            "end": self.end,
            "days": self.num_days,
            "employees": len(self.employees),
            "shifts": len(self.shifts),
            "total_hours": round(sum(e.total_hours for e in self.employees), 2),
            "total_violations": len(self.all_violations()),
            "non_compliant_employees": sum(1 for e in self.employees if not e.is_compliant),
            "understaffed_slots": len(understaffed),
            "total_gap": sum(c.gap for c in coverage),
            "total_overtime": sum(c.overtime_available for c in coverage),
            "avg_preference_match": round(sum(matches) / len(matches), 2) if matches else 0.0,
            "warnings": len(self.warnings),
        }

    def to_dict(self) -> dict:
        summary = self.get_summary()
        summary["start"] = self.start.isoformat()
        summary["end"] = self.end.isoformat()
        return {
            "summary": summary,
            "employees": [e.to_dict() for e in self.employees],
            "shifts": [s.to_dict() for s in self.shifts],
            "warnings": [w.to_dict() for w in self.warnings],
        }


class ScheduleEngine:
    """High-level evaluator for an already-assigned schedule.

    The engine holds no roster state: every call receives a full snapshot
    and recomputes everything from it.

    Example:
        >>> engine = ScheduleEngine()
        >>> report = engine.evaluate(roster, shifts, rules)
        >>> report.get_summary()["total_violations"]
        0
    """

    def __init__(
        self,
        hours_policy: Optional[HoursPolicy] = None,
        period_days: int = BIWEEKLY_DAYS,
    ):
        """Initialize the engine.

        Args:
            hours_policy: Policy used to classify bucket hours.
            period_days: Length of an hours bucket in days.
        """
        self.hours_policy = hours_policy or DefaultHoursPolicy()
        self.period_days = period_days

    def evaluate(
        self,
        roster: list[Employee],
        shifts: list[Shift],
        rules: Rules,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ScheduleReport:
        """Evaluate a roster over a date range.

        Args:
            roster: Employees to evaluate.
            shifts: Shift list; order matters only for preferences and display.
            rules: Rule set (also supplies the default window).
            start: First day, defaults to ``rules.start_date``.
            end: Last day, defaults to ``rules.end_date``.

        Returns:
            ScheduleReport with per-employee and per-shift figures and all
            data-integrity warnings.

        Raises:
            TypeError: If roster, shifts or rules are missing.
            ConfigurationError: If the range is missing or inverted.
        """
        if roster is None or shifts is None:
            raise TypeError("roster and shifts are required")
        if not isinstance(rules, Rules):
            raise TypeError(f"rules must be a Rules instance, got {type(rules).__name__}")

        start = start or rules.start_date
        end = end or rules.end_date
        if start is None or end is None:
            raise ConfigurationError("No date range given and rules define no window")
        if start > end:
            raise ConfigurationError(f"Date range is inverted: {start} > {end}")

        days = date_range(start, end)
        logger.debug(
            "Evaluating %d employees, %d shifts over %d days (%s..%s)",
            len(roster), len(shifts), len(days), start, end,
        )

        warnings = WarningLog()
        warnings.extend(self._snapshot_warnings(roster, shifts))

        resolver = AssignmentResolver(shifts)
        hours = HoursAggregator(self.period_days)
        coverage = CoverageAggregator(resolver)
        checker = ComplianceChecker(rules)
        matcher = PreferenceMatcher(shifts)

        timelines = [resolver.build_timeline(employee, days) for employee in roster]
        for timeline in timelines:
            warnings.extend(timeline.warnings)

        report = ScheduleReport(start=start, end=end, days=days, period_days=self.period_days)

        for timeline in timelines:
            employee = timeline.employee
            buckets = hours.buckets(timeline)
            compliance = checker.check(timeline, employee)

            report.employees.append(
                EmployeeReport(
                    employee_id=employee.id,
                    name=employee.name,
                    hours_per_bucket=[b.hours for b in buckets],
                    hours_status=[
                        self.hours_policy.classify(
                            b.hours,
                            self.hours_policy.scaled_minimum(
                                rules.min_hours_per_two_weeks, b.days, BIWEEKLY_DAYS
                            ),
                        )
                        for b in buckets
                    ],
                    total_hours=hours.total(timeline),
                    free_weekends=compliance.free_weekends,
                    required_free_weekends=compliance.required_free_weekends,
                    preference_match=matcher.match_percentage(timeline, employee),
                    violations=compliance.violations,
                    assignments=dict(timeline.assignments),
                )
            )

        for index, shift in enumerate(shifts):
            report.shifts.append(
                ShiftReport(
                    shift_id=shift.id,
                    label=shift.label,
                    preference_popularity=matcher.shift_popularity(index, roster),
                    coverage=[coverage.from_timelines(shift, day, timelines) for day in days],
                )
            )

        report.warnings = list(warnings)
        for warning in report.warnings:
            logger.warning("%s", warning)
        logger.debug(
            "Evaluation done: %d violations, %d warnings",
            len(report.all_violations()), len(report.warnings),
        )
        return report

    def day_roster(
        self,
        roster: list[Employee],
        shifts: list[Shift],
        day: date,
    ) -> list[DayRosterEntry]:
        """Employees working or on leave on one day, in roster order."""
        resolver = AssignmentResolver(shifts)
        entries = []
        for employee in roster:
            assignment = resolver.resolve(employee, day)
            if isinstance(assignment, OnLeave):
                entries.append(
                    DayRosterEntry(
                        employee_id=employee.id,
                        name=employee.name,
                        label=assignment.label,
                        on_leave=True,
                    )
                )
            elif assignment.is_working:
                entries.append(
                    DayRosterEntry(
                        employee_id=employee.id,
                        name=employee.name,
                        label=assignment.label,
                        shift_id=assignment.shift.id,
                    )
                )
        return entries

    def _snapshot_warnings(
        self,
        roster: list[Employee],
        shifts: list[Shift],
    ) -> list[DataWarning]:
        warnings = []
        seen_shifts = set()
        for shift in shifts:
            if shift.id in seen_shifts:
                warnings.append(
                    DataWarning(
                        warning_type=WarningType.DUPLICATE_SHIFT_ID,
                        message=f"Shift id {shift.id!r} is used more than once; first wins",
                        reference=shift.id,
                    )
                )
            seen_shifts.add(shift.id)

        seen_employees = set()
        for employee in roster:
            if employee.id in seen_employees:
                warnings.append(
                    DataWarning(
                        warning_type=WarningType.DUPLICATE_EMPLOYEE_ID,
                        message=f"Employee id {employee.id!r} appears more than once",
                        employee_id=employee.id,
                        reference=employee.id,
                    )
                )
            seen_employees.add(employee.id)
        return warnings


def evaluate_schedule(
    roster: list[Employee],
    shifts: list[Shift],
    rules: Rules,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> ScheduleReport:
    """Evaluate with a default-configured engine."""
    return ScheduleEngine().evaluate(roster, shifts, rules, start, end)
