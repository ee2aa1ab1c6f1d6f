"""Schedule metadata collector."""

from __future__ import annotations

from studyplanner.model.plan import PlanSpec
from studyplanner.model.schedule import Schedule, ScheduleMetadata

# Engine day cap; kept here to avoid importing the engine package.
_DAY_CAP_HOURS = 8.0


def _clamp100(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def collect_metadata(plan: PlanSpec, schedule: Schedule, *, study_period_days: int) -> ScheduleMetadata:
    """Compute generation statistics; rates are percentages clamped in [0,100].

    - completion_rate: scheduled hours (capped per course at its workload) over total workload,
    - utilization_rate: scheduled hours over usable capacity (each day clamped to the day cap).
    """
    total_workload = plan.total_workload_hours()
    covered = sum(
        min(course.workload_hours, schedule.scheduled_hours_for_course(course.id))
        for course in plan.courses
        if course.workload_hours > 0
    )
    completion_rate = _clamp100(covered / total_workload * 100.0) if total_workload > 0 else 0.0

    usable_capacity = sum(
        min(max(0.0, hours), _DAY_CAP_HOURS)
        for day, hours in plan.availability.items()
        if (schedule.start_date is None or day >= schedule.start_date)
        and (schedule.end_date is None or day <= schedule.end_date)
    )
    scheduled = schedule.total_scheduled_hours()
    utilization_rate = _clamp100(scheduled / usable_capacity * 100.0) if usable_capacity > 0 else 0.0

    return ScheduleMetadata(
        total_courses=len(plan.courses),
        total_blocks=len(schedule.blocks),
        total_available_hours=plan.total_available_hours(),
        completion_rate=completion_rate,
        utilization_rate=utilization_rate,
        study_period_days=study_period_days,
    )


def course_completion(plan: PlanSpec, schedule: Schedule) -> dict[str, float]:
    """Return per-course completion percentage (uncapped) keyed by course id."""
    return {
        course.id: schedule.completion_percentage(course.id, course.workload_hours)
        for course in plan.courses
    }
