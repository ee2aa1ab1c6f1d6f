from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

import pytest

from studyplanner.model import CourseSpec, PlanSpec, Priority, Schedule, ScheduledBlock
from studyplanner.persistence import ScheduleRepository
from studyplanner.settings import DEFAULT_SETTINGS, resolve_data_dir, resolve_settings
from studyplanner.validation import ValidationReport


def test_settings_defaults_and_overrides() -> None:
    report = ValidationReport()

    settings = resolve_settings({"auto_save": False, "data_dir": "/tmp/plans"}, report)

    assert report.errors == []
    assert settings["auto_save"] is False
    assert settings["data_dir"] == "/tmp/plans"
    assert settings["export_timezone"] == DEFAULT_SETTINGS["export_timezone"]


def test_settings_report_unknown_keys_and_bad_values() -> None:
    report = ValidationReport()

    settings = resolve_settings({"colour": "blue", "auto_save": "yes", "default_plan_name": "  "}, report)

    codes = [issue.code for issue in report.errors]
    assert codes.count("INVALID_SETTING_KEY") == 1
    assert codes.count("INVALID_SETTING_VALUE") == 2
    assert "colour" not in settings
    assert settings["auto_save"] is True
    assert settings["default_plan_name"] == "Untitled Plan"


def test_non_mapping_settings_fall_back_to_defaults() -> None:
    assert resolve_settings(None, ValidationReport()) == DEFAULT_SETTINGS
    assert resolve_data_dir({"data_dir": "~/x"}) == Path("~/x").expanduser()


def _schedule() -> Schedule:
    schedule = Schedule(plan_name="Saved", start_date=date(2025, 12, 8), end_date=date(2025, 12, 8))
    schedule.generated_at = datetime(2025, 12, 1, 8, 0, 0)
    schedule.add_block(
        ScheduledBlock(
            course_id="A",
            course_name="A",
            priority=Priority.HIGH,
            date=date(2025, 12, 8),
            start_time="08:00",
            end_time="10:00",
            duration_minutes=120,
        )
    )
    return schedule


def test_repository_saves_and_loads_schedules(tmp_path: Path) -> None:
    repository = ScheduleRepository(tmp_path)
    now = datetime(2025, 12, 8, 9, 30, 0)

    first = repository.save_schedule(_schedule(), now=now)
    second = repository.save_schedule(_schedule(), now=now)

    assert Path(first).name == "schedule_20251208_093000.json"
    assert Path(second).name == "schedule_20251208_093000_1.json"
    assert json.loads(Path(first).read_text(encoding="utf-8"))["planName"] == "Saved"
    assert repository.load_schedule(first) == _schedule()
    assert len(repository.list_schedules()) == 2
    assert repository.latest_schedule() == _schedule()


def test_repository_plans_and_deletion(tmp_path: Path) -> None:
    repository = ScheduleRepository(tmp_path)
    plan = PlanSpec(plan_name="P")
    plan.add_course(CourseSpec(id="A", priority=Priority.LOW, workload_hours=3))

    path = repository.save_plan(plan, now=datetime(2025, 12, 8, 9, 0, 0))

    assert repository.list_plans()[0].filename == "plan_20251208_090000.json"
    assert repository.load_plan(path) == plan
    assert repository.delete_plan(path) is True
    assert repository.delete_plan(path) is False
    assert repository.list_plans() == []


def test_repository_handles_missing_and_invalid_files(tmp_path: Path) -> None:
    repository = ScheduleRepository(tmp_path)
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")

    assert repository.list_schedules() == []
    assert repository.latest_schedule() is None
    with pytest.raises(FileNotFoundError):
        repository.load_schedule(tmp_path / "missing.json")
    with pytest.raises(ValueError):
        repository.load_schedule(bad)
