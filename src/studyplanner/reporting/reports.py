"""Build CLI reports."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from studyplanner.model.schedule import Schedule
from studyplanner.validation import ValidationReport

if TYPE_CHECKING:
    from studyplanner.session import CommandResult


def _result_entry(line_number: int, command: str, result: CommandResult) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "line": line_number,
        "command": command,
        "success": result.success,
        "kind": result.kind.value if result.kind is not None else None,
        "message": result.message,
    }
    if result.error_code:
        entry["error_code"] = result.error_code
    if result.errors:
        entry["errors"] = list(result.errors)
    return entry


def build_error_report(
    results: list[tuple[int, str, CommandResult]],
    code: str = "command_error",
    validation_report: ValidationReport | None = None,
) -> dict[str, Any]:
    """Return a JSON-serializable error report."""
    failed = [_result_entry(line, command, result) for line, command, result in results if not result.success]
    payload: dict[str, Any] = {
        "status": "error",
        "error": {
            "code": code,
            "count": len(failed),
            "details": failed,
        },
        "commands": [_result_entry(line, command, result) for line, command, result in results],
    }
    if validation_report is not None:
        payload["validation_report"] = validation_report.as_dict()
    return payload


def build_success_report(
    results: list[tuple[int, str, CommandResult]],
    schedule: Schedule | None,
    validation_report: ValidationReport,
) -> dict[str, Any]:
    """Return a JSON-serializable success report."""
    generated_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return {
        "status": "ok",
        "generated_at": generated_at,
        "commands": [_result_entry(line, command, result) for line, command, result in results],
        "schedule": schedule.to_dict() if schedule is not None else None,
        "validation_report": validation_report.as_dict(),
    }
