"""Calendar arithmetic for the evaluation window.

All dates are plain calendar dates. Weekday lookups use ``date.weekday()``,
which carries no timezone, so a day never shifts to its neighbour the way a
local-midnight timestamp can.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Union

from schedcheck.domain.models import Weekday


def to_utc_date(value: Union[date, datetime, str]) -> date:
    """Normalise a date, datetime or ISO string to a UTC calendar date.

    Aware datetimes are converted to UTC first; naive ones are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) > 10:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return to_utc_date(parsed)
    return date.fromisoformat(text)


def date_range(start: date, end: date) -> list[date]:
    """Inclusive, ordered list of days from ``start`` to ``end``.

    Returns an empty list when ``start`` is after ``end``.
    """
    days = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days


def weekday_of(day: date) -> Weekday:
    return Weekday.of(day)


def weekend_pairs(days: list[date]) -> list[tuple[date, date]]:
    """(Saturday, Sunday) pairs whose both days lie inside ``days``."""
    in_range = set(days)
    pairs = []
    for day in days:
        if weekday_of(day) == Weekday.SATURDAY:
            sunday = day + timedelta(days=1)
            if sunday in in_range:
                pairs.append((day, sunday))
    return pairs


def period_count(days: list[date], period_days: int = 28) -> int:
    """Number of periods covered by ``days``, rounded up."""
    if not days:
        return 0
    return math.ceil(len(days) / period_days)
