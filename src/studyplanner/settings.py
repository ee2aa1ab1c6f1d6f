"""Resolve effective session settings from layered inputs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from studyplanner.model.plan import DEFAULT_PLAN_NAME
from studyplanner.validation import ValidationReport

DEFAULT_SETTINGS: dict[str, Any] = {
    "data_dir": "~/.scheduler-chatbot",
    "export_timezone": "Asia/Ho_Chi_Minh",
    "default_plan_name": DEFAULT_PLAN_NAME,
    "auto_save": True,
}

_SETTING_TYPES: dict[str, type] = {
    "data_dir": str,
    "export_timezone": str,
    "default_plan_name": str,
    "auto_save": bool,
}


def resolve_settings(source: Any, validation_report: ValidationReport) -> dict[str, Any]:
    """Merge user settings over the defaults.

    Unknown keys are reported and dropped; values of the wrong type are
    reported and replaced by the default.
    """
    settings = dict(DEFAULT_SETTINGS)
    if not isinstance(source, dict):
        return settings

    for key, value in source.items():
        expected = _SETTING_TYPES.get(key)
        if expected is None:
            validation_report.add_error(
                code="INVALID_SETTING_KEY",
                message=f"Setting {key!r} is not allowed",
                field_path=f"$.settings.{key}",
                suggested_fix=f"Use one of: {', '.join(sorted(_SETTING_TYPES))}",
            )
            continue
        if not isinstance(value, expected) or (expected is str and not value.strip()):
            validation_report.add_error(
                code="INVALID_SETTING_VALUE",
                message=f"Setting {key!r} must be a non-empty {expected.__name__}",
                field_path=f"$.settings.{key}",
            )
            continue
        settings[key] = value

    return settings


def resolve_data_dir(settings: dict[str, Any]) -> Path:
    return Path(str(settings.get("data_dir", DEFAULT_SETTINGS["data_dir"]))).expanduser()
