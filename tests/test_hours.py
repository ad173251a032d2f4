"""Tests for hours aggregation."""

from datetime import date, time, timedelta

import pytest

from schedcheck.domain.calendar import date_range
from schedcheck.domain.models import DAY_OFF, Employee, LeaveRecord, Shift, Weekday
from schedcheck.evaluation.hours import HoursAggregator
from schedcheck.evaluation.resolver import AssignmentResolver

START = date(2024, 1, 1)  # Monday


@pytest.fixture
def day_shift():
    """07:00-15:00 with a 30 minute lunch (7.5 h)."""
    return Shift(id="day", start=time(7, 0), end=time(15, 0), lunch_break_minutes=30)


@pytest.fixture
def night_shift():
    """23:00-07:00 without lunch (8 h)."""
    return Shift(id="night", start=time(23, 0), end=time(7, 0))


def weekday_worker(shift_id: str, **kwargs) -> Employee:
    return Employee(
        id="E1",
        name="Worker",
        fixed_shifts={
            d: [DAY_OFF if d.is_weekend else shift_id] for d in Weekday
        },
        **kwargs,
    )


class TestHoursAggregator:
    """Tests for HoursAggregator."""

    def test_full_biweekly_buckets(self, day_shift):
        """Four weeks of weekday shifts make two buckets of 75 h."""
        resolver = AssignmentResolver([day_shift])
        timeline = resolver.build_timeline(
            weekday_worker("day"), date_range(START, START + timedelta(days=27))
        )

        aggregator = HoursAggregator()

        assert aggregator.aggregate(timeline) == [75.0, 75.0]
        assert aggregator.total(timeline) == 150.0

    def test_short_trailing_bucket(self, day_shift):
        """20 days close one full bucket and one 6-day bucket."""
        resolver = AssignmentResolver([day_shift])
        timeline = resolver.build_timeline(
            weekday_worker("day"), date_range(START, START + timedelta(days=19))
        )

        buckets = HoursAggregator().buckets(timeline)

        assert [b.days for b in buckets] == [14, 6]
        assert buckets[1].start == date(2024, 1, 15)
        assert buckets[1].end == date(2024, 1, 20)
        assert buckets[1].hours == 37.5
        assert not buckets[1].is_complete(14)

    def test_buckets_sum_to_total(self, day_shift, night_shift):
        employee = Employee(
            id="E1",
            name="Mixed",
            fixed_shifts={
                Weekday.MONDAY: ["day"],
                Weekday.WEDNESDAY: ["night"],
                Weekday.FRIDAY: ["day"],
            },
        )
        resolver = AssignmentResolver([day_shift, night_shift])
        timeline = resolver.build_timeline(
            employee, date_range(START, START + timedelta(days=30))
        )

        aggregator = HoursAggregator()

        assert sum(aggregator.aggregate(timeline)) == pytest.approx(aggregator.total(timeline))

    def test_overnight_counts_on_start_day(self, night_shift):
        """A shift crossing midnight is credited entirely to its start date."""
        employee = Employee(id="E1", name="A", manual_shifts={START: "night"})
        resolver = AssignmentResolver([night_shift])
        timeline = resolver.build_timeline(employee, [START, START + timedelta(days=1)])

        buckets = HoursAggregator(period_days=1).buckets(timeline)

        assert [b.hours for b in buckets] == [8.0, 0.0]

    def test_single_day_range(self, day_shift):
        employee = Employee(id="E1", name="A", manual_shifts={START: "day"})
        timeline = AssignmentResolver([day_shift]).build_timeline(employee, [START])

        assert HoursAggregator().aggregate(timeline) == [7.5]

    def test_leave_credits_hours_per_day(self, day_shift):
        """Leave days add their credited hours instead of the shift."""
        employee = weekday_worker(
            "day",
            leave=[
                LeaveRecord(
                    id="L1",
                    start_date=START,
                    end_date=START + timedelta(days=1),
                    hours_per_day=8,
                )
            ],
        )
        timeline = AssignmentResolver([day_shift]).build_timeline(
            employee, date_range(START, START + timedelta(days=6))
        )

        # 2 leave days x 8 h + 3 shifts x 7.5 h
        assert HoursAggregator().total(timeline) == 38.5

    def test_rounding_to_two_decimals(self):
        shift = Shift(id="odd", start=time(9, 0), end=time(9, 20))
        employee = Employee(id="E1", name="A", fixed_shifts={d: ["odd"] for d in Weekday})
        timeline = AssignmentResolver([shift]).build_timeline(
            employee, date_range(START, START + timedelta(days=2))
        )
        assert HoursAggregator().total(timeline) == 1.0
        assert HoursAggregator(period_days=1).aggregate(timeline) == [0.33, 0.33, 0.33]

    def test_invalid_period_rejected(self):
        with pytest.raises(ValueError):
            HoursAggregator(period_days=0)
