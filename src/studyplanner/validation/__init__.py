"""Validation helpers."""

from .errors import ValidationIssue, ValidationReport
from .plan_validator import validate, validate_plan
from .schedule_validator import validate_schedule

__all__ = [
    "ValidationIssue",
    "ValidationReport",
    "validate",
    "validate_plan",
    "validate_schedule",
]
