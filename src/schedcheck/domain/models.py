"""Domain models for the schedule evaluation engine.

This module contains all core data structures used throughout the engine:
shifts, rules, employees with their leave and assignment sources, and the
effective assignment that results from resolving those sources for one day.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum, IntEnum
from numbers import Real
from typing import Optional, Union

from schedcheck.domain.integrity import ConfigurationError

# Sentinel used in fixed and manual assignment maps for an explicit day off.
DAY_OFF = "day-off"


class Weekday(IntEnum):
    """Day of week, aligned with ``date.weekday()`` (Monday is 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Weekday of a calendar date."""
        return cls(day.weekday())

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        """Parse a weekday name such as "monday", "Mon" or "SUNDAY"."""
        key = name.strip().lower()
        for weekday in cls:
            full = weekday.name.lower()
            if key == full or (len(key) >= 3 and full.startswith(key)):
                return weekday
        raise ValueError(f"Unknown weekday name: {name!r}")

    @property
    def is_weekend(self) -> bool:
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)


@dataclass(frozen=True)
class OvertimeEntry:
    """Explicitly scheduled overtime positions for one shift on one date.

    Attributes:
        day: Date the overtime applies to.
        quantity: Number of additional open positions.
        is_active: Inactive entries are kept for display but ignored.
    """

    day: date
    quantity: int
    is_active: bool = True


@dataclass
class Shift:
    """A recurring shift time-block.

    Attributes:
        id: Opaque identifier referenced by employee assignments.
        start: Start time of day.
        end: End time of day. Earlier than ``start`` means the shift
            crosses midnight.
        lunch_break_minutes: Unpaid break deducted from worked time.
        ideal_counts: Ideal headcount per weekday.
        is_overtime_active: If True, staffing deficits open overtime positions.
        overtime_entries: Explicit per-date overtime allowances.
    """

    id: str
    start: time
    end: time
    lunch_break_minutes: int = 0
    ideal_counts: dict[Weekday, int] = field(default_factory=dict)
    is_overtime_active: bool = False
    overtime_entries: list[OvertimeEntry] = field(default_factory=list)

    @property
    def crosses_midnight(self) -> bool:
        return self.end < self.start

    @property
    def duration_minutes(self) -> int:
        """Gross length of the shift including the lunch break."""
        start_minutes = self.start.hour * 60 + self.start.minute
        end_minutes = self.end.hour * 60 + self.end.minute
        if end_minutes < start_minutes:
            end_minutes += 24 * 60
        return end_minutes - start_minutes

    @property
    def work_minutes(self) -> int:
        """Worked minutes after the lunch deduction (never negative)."""
        return max(0, self.duration_minutes - self.lunch_break_minutes)

    @property
    def work_hours(self) -> float:
        return self.work_minutes / 60.0

    @property
    def label(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    def ideal_count(self, weekday: Weekday) -> int:
        """Ideal headcount for a weekday (0 when not configured)."""
        return self.ideal_counts.get(weekday, 0)

    def active_overtime_for(self, day: date) -> int:
        """Quantity of active explicit overtime entries for a date."""
        return sum(
            entry.quantity for entry in self.overtime_entries
            if entry.day == day and entry.is_active
        )

    def __repr__(self) -> str:
        return f"Shift({self.id}, {self.label})"


def _check_threshold(
    name: str,
    value,
    minimum: float = 0,
    integer: bool = False,
):
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(f"Rule {name} must be numeric, got {value!r}")
    if value != value:  # NaN
        raise ConfigurationError(f"Rule {name} must be numeric, got NaN")
    if integer and int(value) != value:
        raise ConfigurationError(f"Rule {name} must be a whole number, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"Rule {name} must be >= {minimum}, got {value!r}")
    return int(value) if integer else float(value)


# Rule field -> accepted keys in the original list format, first match wins.
RULE_KEYS: dict[str, tuple[str, ...]] = {
    "max_consecutive_shifts": (
        "maxConsecutiveShifts",
        "maxConsecutiveShiftsForAllEmployees",
    ),
    "min_rest_hours_between_shifts": ("minRestHoursBetweenShifts",),
    "min_weekends_off_per_period": (
        "minWeekendsOffPerPeriod",
        "minWeekendsOffPerMonth",
        "weekendsOffPerMonth",
    ),
    "min_hours_per_week": ("minHoursPerWeek", "minHoursWeek"),
    "min_hours_per_two_weeks": (
        "minHoursPerTwoWeeks",
        "minHoursBiweekly",
        "minBiweeklyHours",
    ),
}

OPTIONAL_RULE_KEYS: dict[str, tuple[str, ...]] = {
    "min_days_off_after_max": (
        "minDaysOffAfterMax",
        "daysOffAfterMaxConsecutiveShift",
    ),
}


def _parse_number(name: str, raw) -> Real:
    if isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            raise ConfigurationError(f"Rule {name} must be numeric, got {raw!r}")
    return raw


@dataclass
class Rules:
    """Staffing rule set shared by every employee in the roster.

    Attributes:
        max_consecutive_shifts: Longest allowed run of working days.
        min_rest_hours_between_shifts: Minimum hours between two shifts.
        min_weekends_off_per_period: Free weekends required per 28 days.
        min_hours_per_week: Minimum worked hours per complete week.
        min_hours_per_two_weeks: Minimum worked hours per complete fortnight.
        min_days_off_after_max: Days off required after a streak that went
            past the maximum (0 disables the check).
        start_date: First day of the scheduling window, if configured.
        end_date: Last day of the scheduling window, if configured.
    """

    max_consecutive_shifts: int = 5
    min_rest_hours_between_shifts: float = 0.0
    min_weekends_off_per_period: int = 0
    min_hours_per_week: float = 0.0
    min_hours_per_two_weeks: float = 0.0
    min_days_off_after_max: int = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        self.max_consecutive_shifts = _check_threshold(
            "max_consecutive_shifts", self.max_consecutive_shifts, 1, integer=True
        )
        self.min_rest_hours_between_shifts = _check_threshold(
            "min_rest_hours_between_shifts", self.min_rest_hours_between_shifts
        )
        self.min_weekends_off_per_period = _check_threshold(
            "min_weekends_off_per_period", self.min_weekends_off_per_period, integer=True
        )
        self.min_hours_per_week = _check_threshold(
            "min_hours_per_week", self.min_hours_per_week
        )
        self.min_hours_per_two_weeks = _check_threshold(
            "min_hours_per_two_weeks", self.min_hours_per_two_weeks
        )
        self.min_days_off_after_max = _check_threshold(
            "min_days_off_after_max", self.min_days_off_after_max, integer=True
        )
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ConfigurationError(
                f"Scheduling window is inverted: {self.start_date} > {self.end_date}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "Rules":
        """Build rules from the original list format.

        Values may be numbers or numeric strings. Every threshold in
        ``RULE_KEYS`` must be present; a missing or non-numeric value
        raises ``ConfigurationError``.
        """
        kwargs = {}
        for field_name, keys in RULE_KEYS.items():
            raw = _first_present(data, keys)
            if raw is None:
                raise ConfigurationError(
                    f"Missing rule threshold {keys[0]!r}"
                )
            kwargs[field_name] = _parse_number(keys[0], raw)

        for field_name, keys in OPTIONAL_RULE_KEYS.items():
            raw = _first_present(data, keys)
            if raw is not None:
                kwargs[field_name] = _parse_number(keys[0], raw)

        for field_name, key in (("start_date", "startDate"), ("end_date", "endDate")):
            raw = data.get(key)
            if raw:
                try:
                    kwargs[field_name] = (
                        raw if isinstance(raw, date) else date.fromisoformat(str(raw)[:10])
                    )
                except ValueError:
                    raise ConfigurationError(f"Rule {key} is not a date: {raw!r}")

        return cls(**kwargs)


def _first_present(data: dict, keys: tuple[str, ...]):
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


@dataclass(frozen=True)
class LeaveRecord:
    """A leave period credited with a fixed number of hours per day.

    Attributes:
        id: Identifier of the record.
        start_date: First day of leave (inclusive).
        end_date: Last day of leave (inclusive).
        leave_type: Free-text category ("Vacation", "Sick", ...).
        hours_per_day: Hours credited for each leave day.
    """

    id: str
    start_date: date
    end_date: date
    leave_type: str = "Leave"
    hours_per_day: float = 0.0

    @property
    def is_valid(self) -> bool:
        return self.start_date <= self.end_date

    def covers(self, day: date) -> bool:
        """Check if a date falls inside this record (inclusive)."""
        return self.start_date <= day <= self.end_date


@dataclass
class Employee:
    """An employee on the roster together with every assignment source.

    Attributes:
        id: Unique identifier within the roster.
        name: Display name.
        hire_date: Date of hire, if known.
        fixed_shifts: Weekly pattern, weekday -> [shift id or DAY_OFF].
            Only the first entry of each list is meaningful.
        manual_shifts: One-off assignments, date -> shift id or DAY_OFF.
        leave: Leave records, earlier records win when they overlap.
        shift_preferences: Rank per shift, aligned with the shift list
            (1 = most preferred, None = no preference).
        max_consecutive_shifts: Per-employee override of the rule value.
        blocked_shifts: Shift id -> weekdays the shift is blocked on.
    """

    id: str
    name: str
    hire_date: Optional[date] = None
    fixed_shifts: dict[Weekday, list[str]] = field(default_factory=dict)
    manual_shifts: dict[date, str] = field(default_factory=dict)
    leave: list[LeaveRecord] = field(default_factory=list)
    shift_preferences: list[Optional[int]] = field(default_factory=list)
    max_consecutive_shifts: Optional[int] = None
    blocked_shifts: dict[str, set[Weekday]] = field(default_factory=dict)

    def effective_max_consecutive(self, rules: Rules) -> int:
        """Maximum consecutive shifts for this employee."""
        if self.max_consecutive_shifts is not None:
            return self.max_consecutive_shifts
        return rules.max_consecutive_shifts

    def fixed_entry(self, weekday: Weekday) -> Optional[str]:
        """First fixed-pattern entry for a weekday, if any."""
        entries = self.fixed_shifts.get(weekday)
        if not entries:
            return None
        return entries[0]

    def preference_for(self, index: int) -> Optional[int]:
        """Preference rank for the shift at ``index`` (None if missing)."""
        if 0 <= index < len(self.shift_preferences):
            return self.shift_preferences[index]
        return None

    def is_blocked(self, shift_id: str, weekday: Weekday) -> bool:
        return weekday in self.blocked_shifts.get(shift_id, set())


class AssignmentKind(Enum):
    """Discriminator for the effective assignment variants."""

    LEAVE = "leave"
    SHIFT = "shift"
    DAY_OFF = "day_off"
    UNASSIGNED = "unassigned"


@dataclass(frozen=True)
class OnLeave:
    """Employee is on leave; takes priority over every other source."""

    record: LeaveRecord
    kind = AssignmentKind.LEAVE
    is_working = False

    @property
    def label(self) -> str:
        return f"Leave: {self.record.leave_type}"


@dataclass(frozen=True)
class Assigned:
    """Employee works the given shift."""

    shift: Shift
    kind = AssignmentKind.SHIFT
    is_working = True

    @property
    def label(self) -> str:
        return self.shift.label


@dataclass(frozen=True)
class DayOff:
    """Employee has an explicit day off."""

    kind = AssignmentKind.DAY_OFF
    is_working = False

    @property
    def label(self) -> str:
        return "Day off"


@dataclass(frozen=True)
class Unassigned:
    """No assignment source applies.

    Attributes:
        unresolved_ref: Shift id that was referenced but does not exist.
    """

    unresolved_ref: Optional[str] = None
    kind = AssignmentKind.UNASSIGNED
    is_working = False

    @property
    def label(self) -> str:
        return ""


EffectiveAssignment = Union[OnLeave, Assigned, DayOff, Unassigned]
