"""Snapshot loading from the scheduling app's list JSON.

A snapshot is the roster, shift list and rules of one employee list as the
data-entry layer stores them: camelCase keys, "7:00 AM" style times and
weekday-name maps. Parsing turns them into domain objects; evaluation is
left to the engine.
"""

import json
from dataclasses import dataclass, field
from datetime import date, time
from pathlib import Path
from typing import Union

from schedcheck.domain.calendar import to_utc_date
from schedcheck.domain.models import (
    Employee,
    LeaveRecord,
    OvertimeEntry,
    Rules,
    Shift,
    Weekday,
)


class SnapshotError(ValueError):
    """Raised when a snapshot document cannot be parsed."""


@dataclass
class Snapshot:
    """Roster, shifts and rules of one employee list."""

    roster: list[Employee] = field(default_factory=list)
    shifts: list[Shift] = field(default_factory=list)
    rules: Rules = field(default_factory=Rules)
    name: str = ""


def parse_time(value: str) -> time:
    """Parse "07:00", "7:00 AM" or "11:00 PM" into a time."""
    text = str(value).strip().upper()
    period = None
    if text.endswith("AM") or text.endswith("PM"):
        period = text[-2:]
        text = text[:-2].strip()
    try:
        hours_text, minutes_text = text.split(":")[:2]
        hours, minutes = int(hours_text), int(minutes_text)
    except ValueError:
        raise SnapshotError(f"Invalid time: {value!r}")

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise SnapshotError(f"Invalid time: {value!r}")
    return time(hour=hours, minute=minutes)


def _parse_date(value, what: str) -> date:
    try:
        return to_utc_date(value)
    except (TypeError, ValueError):
        raise SnapshotError(f"Invalid {what}: {value!r}")


def _parse_int(value, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SnapshotError(f"Invalid {what}: {value!r}")


def _parse_float(value, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SnapshotError(f"Invalid {what}: {value!r}")


def _parse_weekday(value, what: str) -> Weekday:
    try:
        return Weekday.from_name(str(value))
    except ValueError:
        raise SnapshotError(f"Invalid weekday in {what}: {value!r}")


def _js_weekday(index) -> Weekday:
    """Convert a Sunday-based day index (0 = Sunday) to a Weekday."""
    return Weekday((_parse_int(index, "unavailableShifts day") - 1) % 7)


def parse_shift(data: dict, index: int) -> Shift:
    """Parse one shift row; rows without an id get ``shift_<n>``."""
    start = data.get("startTime") or data.get("start")
    end = data.get("endTime") or data.get("end")
    if not start or not end:
        raise SnapshotError(f"Shift {index + 1} is missing a start or end time")

    ideal_counts = {}
    for day_name, count in (data.get("nurseCounts") or {}).items():
        ideal_counts[_parse_weekday(day_name, "nurseCounts")] = _parse_int(
            count or 0, "nurseCounts"
        )

    entries = [
        OvertimeEntry(
            day=_parse_date(entry.get("date"), "overtime date"),
            quantity=_parse_int(entry.get("quantity") or 0, "overtime quantity"),
            is_active=bool(entry.get("isActive", True)),
        )
        for entry in data.get("overtimeEntries") or []
    ]

    lunch = data.get("lunchBreakDeduction", data.get("lunchBreak", 0))
    return Shift(
        id=str(data.get("id") or f"shift_{index + 1}"),
        start=parse_time(start),
        end=parse_time(end),
        lunch_break_minutes=_parse_int(lunch or 0, "lunchBreakDeduction"),
        ideal_counts=ideal_counts,
        is_overtime_active=bool(data.get("isOvertimeActive", False)),
        overtime_entries=entries,
    )


def parse_employee(data: dict, shifts: list[Shift]) -> Employee:
    """Parse one employee record."""
    employee_id = data.get("id") or data.get("uniqueId")
    if not employee_id:
        raise SnapshotError(f"Employee without id: {data.get('name')!r}")

    fixed_shifts = {}
    for day_name, entries in (data.get("fixedShifts") or {}).items():
        if isinstance(entries, str):
            entries = [entries]
        fixed_shifts[_parse_weekday(day_name, "fixedShifts")] = [str(e) for e in entries]

    manual_shifts = {}
    for day_text, reference in (data.get("manualShifts") or {}).items():
        if reference:
            manual_shifts[_parse_date(day_text, "manual shift date")] = str(reference)

    leave = []
    for position, record in enumerate(data.get("leave") or []):
        leave.append(
            LeaveRecord(
                id=str(record.get("id") or f"leave_{position + 1}"),
                start_date=_parse_date(record.get("startDate"), "leave start date"),
                end_date=_parse_date(record.get("endDate"), "leave end date"),
                leave_type=str(record.get("leaveType") or "Leave"),
                hours_per_day=_parse_float(record.get("hoursPerDay") or 0, "hoursPerDay"),
            )
        )

    preferences = data.get("shiftPreferences")
    if preferences is None:
        preferences = data.get("preferences") or []
    shift_preferences = [
        _parse_int(p, "shiftPreferences") if p not in (None, "") else None
        for p in preferences
    ]

    blocked: dict[str, set[Weekday]] = {}
    for shift_id, days in (data.get("blockedShifts") or {}).items():
        blocked[str(shift_id)] = {_parse_weekday(d, "blockedShifts") for d in days}
    for shift_index, day_numbers in (data.get("unavailableShifts") or {}).items():
        position = _parse_int(shift_index, "unavailableShifts index")
        if 0 <= position < len(shifts):
            blocked.setdefault(shifts[position].id, set()).update(
                _js_weekday(n) for n in day_numbers
            )

    max_consecutive = data.get("maxConsecutiveShiftsForThisSpecificEmployee")
    if max_consecutive in (None, ""):
        max_consecutive = data.get("maxConsecutiveShifts")
    try:
        max_consecutive = int(max_consecutive) if max_consecutive not in (None, "") else None
    except (TypeError, ValueError):
        raise SnapshotError(
            f"Employee {employee_id}: invalid maxConsecutiveShifts {max_consecutive!r}"
        )

    hire_date = data.get("hireDate")
    return Employee(
        id=str(employee_id),
        name=str(data.get("name") or employee_id),
        hire_date=_parse_date(hire_date, "hire date") if hire_date else None,
        fixed_shifts=fixed_shifts,
        manual_shifts=manual_shifts,
        leave=leave,
        shift_preferences=shift_preferences,
        max_consecutive_shifts=max_consecutive,
        blocked_shifts=blocked,
    )


def snapshot_from_dict(data: dict) -> Snapshot:
    """Build a snapshot from a decoded list document.

    Raises:
        SnapshotError: If the document structure cannot be parsed.
        ConfigurationError: If the rules are missing or invalid.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot document must be a JSON object")

    shifts = [parse_shift(row, i) for i, row in enumerate(data.get("shifts") or [])]
    roster = [parse_employee(row, shifts) for row in data.get("employees") or []]
    rules = Rules.from_dict(data.get("rules") or {})

    return Snapshot(
        roster=roster,
        shifts=shifts,
        rules=rules,
        name=str(data.get("name") or ""),
    )


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load a snapshot from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"{path}: invalid JSON ({exc})")
    return snapshot_from_dict(data)


def snapshot_to_dict(snapshot: Snapshot) -> dict:
    """Serialise a snapshot back to the list document shape."""
    rules = snapshot.rules
    return {
        "name": snapshot.name,
        "shifts": [
            {
                "id": shift.id,
                "startTime": shift.start.strftime("%H:%M"),
                "endTime": shift.end.strftime("%H:%M"),
                "lunchBreakDeduction": shift.lunch_break_minutes,
                "nurseCounts": {
                    weekday.name.lower(): count for weekday, count in shift.ideal_counts.items()
                },
                "isOvertimeActive": shift.is_overtime_active,
                "overtimeEntries": [
                    {
                        "date": entry.day.isoformat(),
                        "quantity": entry.quantity,
                        "isActive": entry.is_active,
                    }
                    for entry in shift.overtime_entries
                ],
            }
            for shift in snapshot.shifts
        ],
        "employees": [
            {
                "id": employee.id,
                "name": employee.name,
                "hireDate": employee.hire_date.isoformat() if employee.hire_date else None,
                "fixedShifts": {
                    weekday.name.lower(): list(entries)
                    for weekday, entries in employee.fixed_shifts.items()
                },
                "manualShifts": {
                    day.isoformat(): reference
                    for day, reference in employee.manual_shifts.items()
                },
                "leave": [
                    {
                        "id": record.id,
                        "startDate": record.start_date.isoformat(),
                        "endDate": record.end_date.isoformat(),
                        "leaveType": record.leave_type,
                        "hoursPerDay": record.hours_per_day,
                    }
                    for record in employee.leave
                ],
                "shiftPreferences": list(employee.shift_preferences),
                "maxConsecutiveShifts": employee.max_consecutive_shifts,
                "blockedShifts": {
                    shift_id: sorted(d.name.lower() for d in days)
                    for shift_id, days in employee.blocked_shifts.items()
                },
            }
            for employee in snapshot.roster
        ],
        "rules": {
            "startDate": rules.start_date.isoformat() if rules.start_date else None,
            "endDate": rules.end_date.isoformat() if rules.end_date else None,
            "maxConsecutiveShifts": rules.max_consecutive_shifts,
            "minDaysOffAfterMax": rules.min_days_off_after_max,
            "minRestHoursBetweenShifts": rules.min_rest_hours_between_shifts,
            "minWeekendsOffPerPeriod": rules.min_weekends_off_per_period,
            "minHoursPerWeek": rules.min_hours_per_week,
            "minHoursPerTwoWeeks": rules.min_hours_per_two_weeks,
        },
    }
