"""Error and warning types shared across the evaluation engine.

Configuration problems stop a computation and are raised to the caller.
Data-integrity problems are recovered locally and collected as warnings
so the calling UI can surface them next to the report.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class ConfigurationError(ValueError):
    """Raised for invalid invocation parameters (bad range, bad thresholds)."""


class WarningType(Enum):
    """Kinds of recoverable data-integrity problems."""

    UNKNOWN_SHIFT_REFERENCE = "unknown_shift_reference"
    INVALID_LEAVE_RECORD = "invalid_leave_record"
    PREFERENCE_LENGTH_MISMATCH = "preference_length_mismatch"
    DUPLICATE_EMPLOYEE_ID = "duplicate_employee_id"
    DUPLICATE_SHIFT_ID = "duplicate_shift_id"


@dataclass(frozen=True)
class DataWarning:
    """A single data-integrity warning.

    Attributes:
        warning_type: Category of the problem.
        message: Human-readable description.
        employee_id: Employee the warning concerns, if any.
        day: Date the warning concerns, if any.
        reference: Offending identifier (shift id, leave id, ...).
    """

    warning_type: WarningType
    message: str
    employee_id: Optional[str] = None
    day: Optional[date] = None
    reference: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"[{self.warning_type.value}]"]
        if self.employee_id:
            parts.append(f"Employee {self.employee_id}:")
        parts.append(self.message)
        if self.day is not None:
            parts.append(f"({self.day.isoformat()})")
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "type": self.warning_type.value,
            "message": self.message,
            "employee_id": self.employee_id,
            "date": self.day.isoformat() if self.day else None,
            "reference": self.reference,
        }


@dataclass
class WarningLog:
    """Ordered collection of warnings with de-duplication."""

    warnings: list[DataWarning] = field(default_factory=list)
    _seen: set[DataWarning] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self):
        self._seen.update(self.warnings)

    def add(self, warning: DataWarning) -> None:
        if warning not in self._seen:
            self._seen.add(warning)
            self.warnings.append(warning)

    def extend(self, warnings: list[DataWarning]) -> None:
        for warning in warnings:
            self.add(warning)

    def __len__(self) -> int:
        return len(self.warnings)

    def __iter__(self):
        return iter(self.warnings)
