"""Reporting utilities."""

from .formatting import format_availability, format_history, format_schedule, format_subjects
from .reports import build_error_report, build_success_report

__all__ = [
    "build_error_report",
    "build_success_report",
    "format_availability",
    "format_history",
    "format_schedule",
    "format_subjects",
]
