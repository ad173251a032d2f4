"""Compliance checks for resolved schedules."""

from schedcheck.validation.compliance import (
    ComplianceChecker,
    ComplianceResult,
    ComplianceViolation,
    ViolationType,
)

__all__ = [
    "ComplianceChecker",
    "ComplianceResult",
    "ComplianceViolation",
    "ViolationType",
]
