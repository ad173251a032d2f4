"""Worked-hours aggregation into fixed-length period buckets."""

from dataclasses import dataclass
from datetime import date

from schedcheck.domain.models import Assigned, EffectiveAssignment, OnLeave
from schedcheck.evaluation.resolver import EmployeeTimeline

BIWEEKLY_DAYS = 14


@dataclass(frozen=True)
class HoursBucket:
    """Hours accumulated over one period window.

    Attributes:
        start: First day of the bucket.
        end: Last day of the bucket (inclusive).
        days: Number of days in the bucket.
        hours: Total hours, rounded to two decimals.
    """

    start: date
    end: date
    days: int
    hours: float

    def is_complete(self, period_days: int) -> bool:
        return self.days == period_days


class HoursAggregator:
    """Turns a resolved timeline into per-period hour totals.

    Every ``period_days`` days close a bucket; the last day of the range
    always closes the current one, so the final bucket may be shorter.

    Example:
        >>> HoursAggregator().aggregate(timeline)
        [80.0, 40.0]
    """

    def __init__(self, period_days: int = BIWEEKLY_DAYS):
        if period_days < 1:
            raise ValueError("period_days must be at least 1")
        self.period_days = period_days

    @staticmethod
    def hours_for_day(assignment: EffectiveAssignment) -> float:
        """Hours worked or credited for one day."""
        if isinstance(assignment, OnLeave):
            return float(assignment.record.hours_per_day)
        if isinstance(assignment, Assigned):
            return assignment.shift.work_hours
        return 0.0

    def buckets(self, timeline: EmployeeTimeline) -> list[HoursBucket]:
        """Split the timeline into period buckets."""
        result = []
        hours = 0.0
        count = 0
        bucket_start = None
        last_index = len(timeline.days) - 1

        for index, (day, assignment) in enumerate(timeline):
            if count == 0:
                bucket_start = day
            hours += self.hours_for_day(assignment)
            count += 1
            if count == self.period_days or index == last_index:
                result.append(
                    HoursBucket(
                        start=bucket_start,
                        end=day,
                        days=count,
                        hours=round(hours, 2),
                    )
                )
                hours = 0.0
                count = 0

        return result

    def aggregate(self, timeline: EmployeeTimeline) -> list[float]:
        """Hour totals per bucket."""
        return [bucket.hours for bucket in self.buckets(timeline)]

    def total(self, timeline: EmployeeTimeline) -> float:
        """Hours over the whole range in a single pass."""
        return round(sum(self.hours_for_day(a) for _, a in timeline), 2)
