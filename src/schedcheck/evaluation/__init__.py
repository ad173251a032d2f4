"""Evaluation components for already-assigned schedules."""

from schedcheck.evaluation.coverage import (
    CoverageAggregator,
    OvertimeCalculator,
    ShiftDayCoverage,
)
from schedcheck.evaluation.hours import HoursAggregator, HoursBucket
from schedcheck.evaluation.preferences import PreferenceMatcher
from schedcheck.evaluation.resolver import AssignmentResolver, EmployeeTimeline

__all__ = [
    "AssignmentResolver",
    "EmployeeTimeline",
    "HoursAggregator",
    "HoursBucket",
    "CoverageAggregator",
    "OvertimeCalculator",
    "ShiftDayCoverage",
    "PreferenceMatcher",
]
