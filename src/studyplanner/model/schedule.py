"""Schedule IR produced by one "generate" invocation."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .priority import Priority, priority_from_string

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


def _require_object(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object")
    return value


def _require_list(value: Any, name: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    return value


def _optional_date(raw: Any) -> date | None:
    if raw is None or raw == "":
        return None
    return date.fromisoformat(str(raw))


@dataclass(slots=True)
class ScheduledBlock:
    course_id: str
    course_name: str
    priority: Priority | None
    date: date
    start_time: str
    end_time: str
    duration_minutes: int
    component_name: str | None = None
    deadline: date | None = None
    reason: str = ""

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "courseId": self.course_id,
            "courseName": self.course_name,
            "priority": self.priority.value if self.priority is not None else None,
            "date": self.date.isoformat(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "componentName": self.component_name,
            "deadline": self.deadline.isoformat() if self.deadline is not None else None,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ScheduledBlock:
        payload = _require_object(payload, "block")
        raw_priority = payload.get("priority")
        return cls(
            course_id=str(payload["courseId"]),
            course_name=str(payload.get("courseName") or payload["courseId"]),
            priority=priority_from_string(raw_priority) if raw_priority else None,
            date=date.fromisoformat(str(payload["date"])),
            start_time=str(payload["startTime"]),
            end_time=str(payload["endTime"]),
            duration_minutes=int(payload["durationMinutes"]),
            component_name=payload.get("componentName"),
            deadline=_optional_date(payload.get("deadline")),
            reason=str(payload.get("reason") or ""),
        )

    def __str__(self) -> str:
        return f"{self.course_id} on {self.date.isoformat()} {self.start_time}-{self.end_time} ({self.duration_minutes} min)"


@dataclass(slots=True)
class ScheduleScore:
    """Quality metrics in [0, 100]; hour totals are plain sums."""

    overall_score: float = 0.0
    spreadness_score: float = 0.0
    buffer_score: float = 0.0
    interleave_score: float = 0.0
    total_scheduled_hours: float = 0.0
    course_hours: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallScore": self.overall_score,
            "spreadnessScore": self.spreadness_score,
            "bufferScore": self.buffer_score,
            "interleaveScore": self.interleave_score,
            "totalScheduledHours": self.total_scheduled_hours,
            "courseHours": dict(sorted(self.course_hours.items())),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ScheduleScore:
        payload = _require_object(payload, "score")
        course_hours = _require_object(payload.get("courseHours") or {}, "score.courseHours")
        return cls(
            overall_score=float(payload.get("overallScore", 0.0)),
            spreadness_score=float(payload.get("spreadnessScore", 0.0)),
            buffer_score=float(payload.get("bufferScore", 0.0)),
            interleave_score=float(payload.get("interleaveScore", 0.0)),
            total_scheduled_hours=float(payload.get("totalScheduledHours", 0.0)),
            course_hours={str(k): float(v) for k, v in course_hours.items()},
        )

    def __str__(self) -> str:
        return (
            f"Overall: {self.overall_score:.1f}, Spreadness: {self.spreadness_score:.1f}, "
            f"Buffer: {self.buffer_score:.1f}, Interleave: {self.interleave_score:.1f}"
        )


@dataclass(slots=True)
class ScheduleMetadata:
    """Fixed set of generation statistics attached after allocation."""

    total_courses: int = 0
    total_blocks: int = 0
    total_available_hours: float = 0.0
    completion_rate: float = 0.0
    utilization_rate: float = 0.0
    study_period_days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCourses": self.total_courses,
            "totalBlocks": self.total_blocks,
            "totalAvailableHours": self.total_available_hours,
            "completionRate": self.completion_rate,
            "utilizationRate": self.utilization_rate,
            "studyPeriodDays": self.study_period_days,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ScheduleMetadata:
        payload = _require_object(payload, "metadata")
        return cls(
            total_courses=int(payload.get("totalCourses", 0)),
            total_blocks=int(payload.get("totalBlocks", 0)),
            total_available_hours=float(payload.get("totalAvailableHours", 0.0)),
            completion_rate=float(payload.get("completionRate", 0.0)),
            utilization_rate=float(payload.get("utilizationRate", 0.0)),
            study_period_days=int(payload.get("studyPeriodDays", 0)),
        )


@dataclass(slots=True)
class ScheduleSummary:
    total_blocks: int
    total_hours: float
    scheduled_days: int
    courses_count: int
    average_hours_per_day: float

    def __str__(self) -> str:
        return (
            f"{self.total_blocks} blocks, {self.total_hours:.1f} hours, {self.scheduled_days} days, "
            f"{self.courses_count} courses, avg {self.average_hours_per_day:.1f} hours/day"
        )


@dataclass(slots=True)
class Schedule:
    """Generated blocks plus score, explanation log and metadata.

    Every block mutation rescores, so ``score`` always reflects ``blocks``.
    ``generated_at`` is excluded from equality.
    """

    plan_name: str = ""
    start_date: date | None = None
    end_date: date | None = None
    blocks: list[ScheduledBlock] = field(default_factory=list)
    score: ScheduleScore = field(default_factory=ScheduleScore)
    explanations: list[str] = field(default_factory=list)
    metadata: ScheduleMetadata = field(default_factory=ScheduleMetadata)
    generated_at: datetime = field(default_factory=_now, compare=False)

    # Block management

    def add_block(self, block: ScheduledBlock) -> None:
        if block is None:
            raise ValueError("Block cannot be None")
        self.blocks.append(block)
        self.recalculate_score()

    def remove_block(self, block: ScheduledBlock) -> bool:
        try:
            self.blocks.remove(block)
        except ValueError:
            return False
        self.recalculate_score()
        return True

    def remove_blocks_by_course(self, course_id: str) -> int:
        kept = [block for block in self.blocks if block.course_id != course_id]
        removed = len(self.blocks) - len(kept)
        if removed:
            self.blocks = kept
            self.recalculate_score()
        return removed

    def clear_blocks(self) -> None:
        self.blocks.clear()
        self.recalculate_score()

    def blocks_for_date(self, day: date) -> list[ScheduledBlock]:
        return sorted((block for block in self.blocks if block.date == day), key=lambda b: b.start_time)

    def blocks_for_course(self, course_id: str) -> list[ScheduledBlock]:
        return sorted((block for block in self.blocks if block.course_id == course_id), key=lambda b: b.date)

    def total_scheduled_hours(self) -> float:
        return sum(block.duration_hours for block in self.blocks)

    def scheduled_hours_for_course(self, course_id: str) -> float:
        return sum(block.duration_hours for block in self.blocks if block.course_id == course_id)

    def scheduled_dates(self) -> list[date]:
        return sorted({block.date for block in self.blocks})

    def course_ids(self) -> list[str]:
        return sorted({block.course_id for block in self.blocks})

    def is_empty(self) -> bool:
        return not self.blocks

    def hours_by_date(self) -> dict[date, float]:
        hours: dict[date, float] = defaultdict(float)
        for block in self.blocks:
            hours[block.date] += block.duration_hours
        return dict(hours)

    def completion_percentage(self, course_id: str, total_workload_hours: float) -> float:
        if total_workload_hours <= 0:
            return 0.0
        return self.scheduled_hours_for_course(course_id) / total_workload_hours * 100.0

    # Explanations

    def add_explanation(self, explanation: str | None) -> None:
        if explanation and explanation.strip():
            self.explanations.append(explanation)

    def add_explanations(self, explanations: list[str]) -> None:
        for explanation in explanations:
            self.add_explanation(explanation)

    # Scoring

    def recalculate_score(self) -> None:
        from studyplanner.engine.scoring import score_blocks

        self.score = score_blocks(self.blocks)

    def summary(self) -> ScheduleSummary:
        scheduled_days = len(self.scheduled_dates())
        total_hours = self.total_scheduled_hours()
        return ScheduleSummary(
            total_blocks=len(self.blocks),
            total_hours=total_hours,
            scheduled_days=scheduled_days,
            courses_count=len(self.course_ids()),
            average_hours_per_day=total_hours / scheduled_days if scheduled_days else 0.0,
        )

    # Persistence payload

    def to_dict(self) -> dict[str, Any]:
        return {
            "planName": self.plan_name,
            "generatedAt": self.generated_at.strftime(TIMESTAMP_FORMAT),
            "startDate": self.start_date.isoformat() if self.start_date is not None else None,
            "endDate": self.end_date.isoformat() if self.end_date is not None else None,
            "blocks": [block.to_dict() for block in self.blocks],
            "score": self.score.to_dict(),
            "explanations": list(self.explanations),
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Schedule:
        payload = _require_object(payload, "schedule")
        raw_generated = payload.get("generatedAt")
        return cls(
            plan_name=str(payload.get("planName") or ""),
            start_date=_optional_date(payload.get("startDate")),
            end_date=_optional_date(payload.get("endDate")),
            blocks=[ScheduledBlock.from_dict(item) for item in _require_list(payload.get("blocks") or [], "blocks")],
            score=ScheduleScore.from_dict(payload.get("score") or {}),
            explanations=[str(item) for item in _require_list(payload.get("explanations") or [], "explanations")],
            metadata=ScheduleMetadata.from_dict(payload.get("metadata") or {}),
            generated_at=datetime.strptime(raw_generated, TIMESTAMP_FORMAT) if raw_generated else _now(),
        )
