"""Validation models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ValidationIssue:
    """One rule violation (or informational note) with a stable code."""

    code: str
    message: str
    field_path: str
    suggested_fix: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "field_path": self.field_path,
        }
        if self.suggested_fix:
            payload["suggested_fix"] = self.suggested_fix
        payload.update(self.extra)
        return payload


@dataclass(slots=True)
class ValidationReport:
    """Aggregated report with errors and infos (no short-circuit)."""

    errors: list[ValidationIssue] = field(default_factory=list)
    infos: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        *,
        code: str,
        message: str,
        field_path: str,
        suggested_fix: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.errors.append(
            ValidationIssue(
                code=code,
                message=message,
                field_path=field_path,
                suggested_fix=suggested_fix,
                extra=extra or {},
            )
        )

    def add_info(
        self,
        *,
        code: str,
        message: str,
        field_path: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.infos.append(
            ValidationIssue(
                code=code,
                message=message,
                field_path=field_path,
                extra=extra or {},
            )
        )

    def messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    def as_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "errors": [issue.as_dict() for issue in self.errors],
            "infos": [issue.as_dict() for issue in self.infos],
        }
