"""Plan IR: the mutable planning state accumulated across commands."""

from __future__ import annotations

import math
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .priority import Priority, priority_from_string

DEFAULT_PLAN_NAME = "Untitled Plan"


def _parse_optional_date(raw: Any) -> date | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw))


def _format_optional_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(slots=True)
class ComponentSpec:
    """Informational sub-unit of a course (assignment, chapter, project)."""

    name: str
    estimated_hours: float
    due_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "estimatedHours": self.estimated_hours,
            "dueDate": _format_optional_date(self.due_date),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ComponentSpec:
        return cls(
            name=str(payload.get("name", "")),
            estimated_hours=float(payload.get("estimatedHours", 0.0)),
            due_date=_parse_optional_date(payload.get("dueDate")),
        )


@dataclass(slots=True)
class CourseSpec:
    id: str
    priority: Priority | None
    workload_hours: float
    exam_date: date | None = None
    components: list[ComponentSpec] = field(default_factory=list)

    def add_component(self, name: str, estimated_hours: float, due_date: date | None = None) -> ComponentSpec:
        component = ComponentSpec(name=name, estimated_hours=estimated_hours, due_date=due_date)
        self.components.append(component)
        return component

    def component_total_hours(self) -> float:
        return sum(component.estimated_hours for component in self.components)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "priority": self.priority.value if self.priority is not None else None,
            "workloadHours": self.workload_hours,
            "examDate": _format_optional_date(self.exam_date),
            "components": [component.to_dict() for component in self.components],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> CourseSpec:
        raw_priority = payload.get("priority")
        return cls(
            id=str(payload.get("id", "")),
            priority=priority_from_string(raw_priority) if raw_priority else None,
            workload_hours=float(payload.get("workloadHours", 0.0)),
            exam_date=_parse_optional_date(payload.get("examDate")),
            components=[ComponentSpec.from_dict(item) for item in payload.get("components", []) or []],
        )


@dataclass(slots=True)
class SchedulingRules:
    """Rule fields checked by the validator.

    The allocation engine schedules with its own fixed constants and does not
    read these values.
    """

    max_hours_per_day: float = 8.0
    block_duration_minutes: int = 90
    break_duration_minutes: int = 15
    max_continuous_block_minutes: int = 180

    @property
    def block_duration_hours(self) -> float:
        return self.block_duration_minutes / 60.0

    @property
    def break_duration_hours(self) -> float:
        return self.break_duration_minutes / 60.0

    @property
    def max_blocks_per_day(self) -> int:
        slot = self.block_duration_hours + self.break_duration_hours
        if slot <= 0:
            return 0
        return int(math.floor((self.max_hours_per_day + self.break_duration_hours) / slot))

    def to_dict(self) -> dict[str, Any]:
        return {
            "maxHoursPerDay": self.max_hours_per_day,
            "blockDurationMinutes": self.block_duration_minutes,
            "breakDurationMinutes": self.break_duration_minutes,
            "maxContinuousBlockMinutes": self.max_continuous_block_minutes,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SchedulingRules:
        defaults = cls()
        return cls(
            max_hours_per_day=float(payload.get("maxHoursPerDay", defaults.max_hours_per_day)),
            block_duration_minutes=int(payload.get("blockDurationMinutes", defaults.block_duration_minutes)),
            break_duration_minutes=int(payload.get("breakDurationMinutes", defaults.break_duration_minutes)),
            max_continuous_block_minutes=int(
                payload.get("maxContinuousBlockMinutes", defaults.max_continuous_block_minutes)
            ),
        )


@dataclass(slots=True)
class SoftPreferences:
    prefer_spreadness: bool = True
    prefer_buffer: bool = True
    prefer_interleave: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "preferSpreadness": self.prefer_spreadness,
            "preferBuffer": self.prefer_buffer,
            "preferInterleave": self.prefer_interleave,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SoftPreferences:
        return cls(
            prefer_spreadness=bool(payload.get("preferSpreadness", True)),
            prefer_buffer=bool(payload.get("preferBuffer", True)),
            prefer_interleave=bool(payload.get("preferInterleave", True)),
        )


@dataclass(slots=True)
class PlanSpec:
    """Planning state for one session: courses, per-day capacity, rules."""

    plan_name: str = DEFAULT_PLAN_NAME
    start_date: date | None = None
    end_date: date | None = None
    courses: list[CourseSpec] = field(default_factory=list)
    availability: dict[date, float] = field(default_factory=dict)
    rules: SchedulingRules = field(default_factory=SchedulingRules)
    soft_prefs: SoftPreferences = field(default_factory=SoftPreferences)

    def add_course(self, course: CourseSpec) -> None:
        self.courses.append(course)

    def remove_course(self, course_id: str) -> bool:
        for idx, course in enumerate(self.courses):
            if course.id == course_id:
                del self.courses[idx]
                return True
        return False

    def get_course(self, course_id: str) -> CourseSpec | None:
        return next((course for course in self.courses if course.id == course_id), None)

    def set_availability(self, day: date, hours: float) -> None:
        self.availability[day] = float(hours)

    def get_availability(self, day: date) -> float:
        return self.availability.get(day, 0.0)

    def available_dates(self) -> list[date]:
        return sorted(self.availability)

    def total_workload_hours(self) -> float:
        return sum(course.workload_hours for course in self.courses)

    def total_available_hours(self) -> float:
        return sum(self.availability.values())

    def shortfall_hours(self) -> float:
        return max(0.0, self.total_workload_hours() - self.total_available_hours())

    def has_shortfall(self) -> bool:
        return self.shortfall_hours() > 0.0

    def clear_courses(self) -> None:
        self.courses.clear()

    def snapshot(self) -> PlanSpec:
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "planName": self.plan_name,
            "startDate": _format_optional_date(self.start_date),
            "endDate": _format_optional_date(self.end_date),
            "courses": [course.to_dict() for course in self.courses],
            "availability": {day.isoformat(): hours for day, hours in sorted(self.availability.items())},
            "rules": self.rules.to_dict(),
            "softPrefs": self.soft_prefs.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> PlanSpec:
        availability = payload.get("availability", {}) or {}
        return cls(
            plan_name=str(payload.get("planName", DEFAULT_PLAN_NAME)),
            start_date=_parse_optional_date(payload.get("startDate")),
            end_date=_parse_optional_date(payload.get("endDate")),
            courses=[CourseSpec.from_dict(item) for item in payload.get("courses", []) or []],
            availability={date.fromisoformat(day): float(hours) for day, hours in availability.items()},
            rules=SchedulingRules.from_dict(payload.get("rules", {}) or {}),
            soft_prefs=SoftPreferences.from_dict(payload.get("softPrefs", {}) or {}),
        )
