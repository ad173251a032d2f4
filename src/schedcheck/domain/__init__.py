"""Domain models and business rules for schedule evaluation."""

from schedcheck.domain.calendar import (
    date_range,
    period_count,
    to_utc_date,
    weekday_of,
    weekend_pairs,
)
from schedcheck.domain.integrity import (
    ConfigurationError,
    DataWarning,
    WarningType,
)
from schedcheck.domain.models import (
    DAY_OFF,
    Assigned,
    AssignmentKind,
    DayOff,
    EffectiveAssignment,
    Employee,
    LeaveRecord,
    OnLeave,
    OvertimeEntry,
    Rules,
    Shift,
    Unassigned,
    Weekday,
)
from schedcheck.domain.policies import (
    DefaultHoursPolicy,
    HoursPolicy,
    HoursStatus,
)

__all__ = [
    # Models
    "DAY_OFF",
    "Employee",
    "LeaveRecord",
    "OvertimeEntry",
    "Rules",
    "Shift",
    "Weekday",
    # Effective assignments
    "Assigned",
    "AssignmentKind",
    "DayOff",
    "EffectiveAssignment",
    "OnLeave",
    "Unassigned",
    # Calendar
    "date_range",
    "period_count",
    "to_utc_date",
    "weekday_of",
    "weekend_pairs",
    # Errors and warnings
    "ConfigurationError",
    "DataWarning",
    "WarningType",
    # Policies
    "DefaultHoursPolicy",
    "HoursPolicy",
    "HoursStatus",
]
