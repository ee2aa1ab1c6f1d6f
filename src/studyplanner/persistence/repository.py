"""JSON file repository for schedules and plans.

Layout under the data directory::

    plans/plan_YYYYMMDD_HHMMSS.json
    schedules/schedule_YYYYMMDD_HHMMSS.json
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from studyplanner.io import read_json, write_json
from studyplanner.model.plan import PlanSpec
from studyplanner.model.schedule import Schedule

logger = logging.getLogger(__name__)

_STAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(slots=True, frozen=True)
class StoredFile:
    path: str
    filename: str
    modified_at: float


class ScheduleRepository:
    """Save and load schedules/plans as JSON documents."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir).expanduser()
        self.plans_dir = self.data_dir / "plans"
        self.schedules_dir = self.data_dir / "schedules"

    def _ensure_dirs(self) -> None:
        self.plans_dir.mkdir(parents=True, exist_ok=True)
        self.schedules_dir.mkdir(parents=True, exist_ok=True)

    def _next_path(self, directory: Path, prefix: str, now: datetime | None) -> Path:
        stamp = (now or datetime.now()).strftime(_STAMP_FORMAT)
        candidate = directory / f"{prefix}_{stamp}.json"
        counter = 1
        while candidate.exists():
            candidate = directory / f"{prefix}_{stamp}_{counter}.json"
            counter += 1
        return candidate

    def save_schedule(self, schedule: Schedule, *, now: datetime | None = None) -> str:
        self._ensure_dirs()
        path = self._next_path(self.schedules_dir, "schedule", now)
        write_json(path, schedule.to_dict())
        logger.info("saved schedule to %s", path)
        return str(path)

    def load_schedule(self, path: str | Path) -> Schedule:
        """Raises ``OSError`` for a missing or unreadable file and ``ValueError``/``KeyError`` for a bad payload."""
        return Schedule.from_dict(read_json(Path(path).expanduser()))

    def save_plan(self, plan: PlanSpec, *, now: datetime | None = None) -> str:
        self._ensure_dirs()
        path = self._next_path(self.plans_dir, "plan", now)
        write_json(path, plan.to_dict())
        logger.info("saved plan to %s", path)
        return str(path)

    def load_plan(self, path: str | Path) -> PlanSpec:
        return PlanSpec.from_dict(read_json(Path(path).expanduser()))

    def list_schedules(self) -> list[StoredFile]:
        """Saved schedules, newest first."""
        return self._list(self.schedules_dir, "schedule_")

    def list_plans(self) -> list[StoredFile]:
        return self._list(self.plans_dir, "plan_")

    def latest_schedule(self) -> Schedule | None:
        files = self.list_schedules()
        if not files:
            return None
        return self.load_schedule(files[0].path)

    def delete_schedule(self, path: str | Path) -> bool:
        return self._delete(Path(path))

    def delete_plan(self, path: str | Path) -> bool:
        return self._delete(Path(path))

    def _delete(self, path: Path) -> bool:
        try:
            path.expanduser().unlink()
        except FileNotFoundError:
            return False
        return True

    def _list(self, directory: Path, prefix: str) -> list[StoredFile]:
        if not directory.exists():
            return []
        files = [
            StoredFile(path=str(path), filename=path.name, modified_at=path.stat().st_mtime)
            for path in directory.iterdir()
            if path.is_file() and path.name.startswith(prefix) and path.suffix == ".json"
        ]
        return sorted(files, key=lambda item: (item.modified_at, item.filename), reverse=True)
