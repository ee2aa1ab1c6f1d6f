"""Deterministic priority-weighted block allocation.

Phases:
1) first half of the horizon, front-loaded share of each course,
2) second half of the horizon, remaining share,
3) shortfall report.

Courses are visited in descending priority (stable for ties) and each course
walks the dates of the phase window forward, placing atomic 2-hour blocks while
the day's clamped capacity allows. Day usage and next free start time carry
over from phase 1 into phase 2.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta

from studyplanner.metrics.collector import collect_metadata
from studyplanner.model.plan import CourseSpec, PlanSpec
from studyplanner.model.priority import Priority
from studyplanner.model.schedule import Schedule, ScheduledBlock

logger = logging.getLogger(__name__)

BLOCK_HOURS = 2.0
MAX_HOURS_PER_DAY = 8.0
BREAK_HOURS = 0.25
DAY_START_MINUTES = 8 * 60
SHORTFALL_TOLERANCE_HOURS = 0.1

PHASE_FIRST_HALF = "Phase 1 (first half)"
PHASE_SECOND_HALF = "Phase 2 (second half)"

SHORTFALL_SUGGESTIONS = (
    "Suggestion: add more availability days to the plan.",
    "Suggestion: raise the daily capacity of existing days (up to 8.0 hours per day).",
    "Suggestion: reduce the workload hours of lower-priority subjects.",
    "Suggestion: extend the planning horizon to a later end date.",
)

_EPSILON = 1e-9


def _iter_days(start: date, end: date) -> list[date]:
    days: list[date] = []
    cursor = start
    while cursor <= end:
        days.append(cursor)
        cursor += timedelta(days=1)
    return days


def _format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _course_priority(course: CourseSpec) -> Priority:
    return course.priority if course.priority is not None else Priority.LOW


def order_courses(courses: list[CourseSpec]) -> list[CourseSpec]:
    """HIGH > MEDIUM > LOW; ties keep input order."""
    return sorted(courses, key=lambda course: -_course_priority(course).rank)


def blocks_needed(hours: float) -> int:
    if hours <= _EPSILON:
        return 0
    return math.ceil(round(hours / BLOCK_HOURS, 9))


def split_horizon(start: date, end: date) -> tuple[list[date], list[date]]:
    """Return the first-half and second-half date windows.

    ``split = start + floor(total_days / 2)``; the split day opens the second half.
    """
    total_days = (end - start).days + 1
    split = start + timedelta(days=total_days // 2)
    return _iter_days(start, split - timedelta(days=1)), _iter_days(split, end)


def _resolve_horizon(plan: PlanSpec) -> tuple[date, date] | None:
    dates = plan.available_dates()
    start = plan.start_date or (dates[0] if dates else None)
    end = plan.end_date or (dates[-1] if dates else None)
    if start is None or end is None or start > end:
        return None
    return start, end


def _place_phase(
    *,
    phase_name: str,
    course: CourseSpec,
    hours: float,
    window: list[date],
    availability: dict[date, float],
    daily_usage: dict[date, float],
    daily_next_start: dict[date, int],
    scheduled_hours: dict[str, float],
    out: list[ScheduledBlock],
) -> tuple[int, int]:
    """Place up to ``ceil(hours / 2)`` blocks for one course; return (placed, needed)."""
    needed = blocks_needed(hours)
    if needed == 0:
        return 0, 0

    priority = _course_priority(course)
    placed = 0

    def _course_open() -> bool:
        return placed < needed and scheduled_hours[course.id] < course.workload_hours - _EPSILON

    for day in window:
        if not _course_open():
            break
        capacity = availability.get(day, 0.0)
        if capacity <= 0:
            continue
        day_remaining = min(capacity, MAX_HOURS_PER_DAY) - daily_usage.get(day, 0.0)
        while day_remaining >= BLOCK_HOURS - _EPSILON and _course_open():
            start_minutes = daily_next_start.get(day, DAY_START_MINUTES)
            end_minutes = start_minutes + int(BLOCK_HOURS * 60)
            placed += 1
            start_clock = _format_clock(start_minutes)
            end_clock = _format_clock(end_minutes)
            out.append(
                ScheduledBlock(
                    course_id=course.id,
                    course_name=course.id,
                    priority=priority,
                    date=day,
                    start_time=start_clock,
                    end_time=end_clock,
                    duration_minutes=int(BLOCK_HOURS * 60),
                    deadline=course.exam_date,
                    reason=(
                        f"{phase_name}: block {placed} of {needed} for {course.id} "
                        f"({priority.value} priority) on {day.isoformat()} {start_clock}-{end_clock}"
                    ),
                )
            )
            logger.debug("placed %s block %d/%d on %s at %s", course.id, placed, needed, day, start_clock)
            daily_usage[day] = daily_usage.get(day, 0.0) + BLOCK_HOURS
            daily_next_start[day] = end_minutes + int(BREAK_HOURS * 60)
            scheduled_hours[course.id] += BLOCK_HOURS
            day_remaining = min(capacity, MAX_HOURS_PER_DAY) - daily_usage[day]

    return placed, needed


def generate_schedule(plan: PlanSpec, *, generated_at: datetime | None = None) -> Schedule:
    """Allocate study blocks for a validated plan.

    Never fails on insufficient capacity: the result is the best achievable
    partial schedule and the explanation log reports what could not fit.
    """
    schedule = Schedule(plan_name=plan.plan_name)
    if generated_at is not None:
        schedule.generated_at = generated_at

    horizon = _resolve_horizon(plan)
    if horizon is None:
        schedule.add_explanation("No planning horizon: set availability or start/end dates before generating.")
        schedule.metadata = collect_metadata(plan, schedule, study_period_days=0)
        return schedule

    start, end = horizon
    schedule.start_date = start
    schedule.end_date = end
    first_window, second_window = split_horizon(start, end)
    total_days = len(first_window) + len(second_window)

    ordered = order_courses(plan.courses)
    schedule.add_explanation(
        f"Sorted {len(ordered)} courses by priority: "
        + ", ".join(f"{course.id} ({_course_priority(course).value})" for course in ordered)
    )
    first_label = (
        f"{first_window[0].isoformat()} to {first_window[-1].isoformat()}" if first_window else "(empty)"
    )
    schedule.add_explanation(
        f"Planning horizon: {start.isoformat()} to {end.isoformat()} ({total_days} days). "
        f"First half: {first_label}; second half: {second_window[0].isoformat()} to {end.isoformat()}."
    )

    split_hours: dict[str, tuple[float, float]] = {}
    for course in ordered:
        ratio = _course_priority(course).front_load_ratio
        first_half = course.workload_hours * ratio
        split_hours[course.id] = (first_half, course.workload_hours - first_half)
        schedule.add_explanation(
            f"{course.id}: {course.workload_hours:.1f}h workload split into {first_half:.1f}h first half "
            f"({ratio * 100:.0f}%) and {course.workload_hours - first_half:.1f}h second half."
        )

    blocks: list[ScheduledBlock] = []
    daily_usage: dict[date, float] = {}
    daily_next_start: dict[date, int] = {}
    scheduled_hours: dict[str, float] = {course.id: 0.0 for course in ordered}

    for phase_name, window, half_index in (
        (PHASE_FIRST_HALF, first_window, 0),
        (PHASE_SECOND_HALF, second_window, 1),
    ):
        for course in ordered:
            placed, needed = _place_phase(
                phase_name=phase_name,
                course=course,
                hours=split_hours[course.id][half_index],
                window=window,
                availability=plan.availability,
                daily_usage=daily_usage,
                daily_next_start=daily_next_start,
                scheduled_hours=scheduled_hours,
                out=blocks,
            )
            if needed:
                schedule.add_explanation(f"{phase_name}: placed {placed} of {needed} blocks for {course.id}.")

    shortfall = False
    for course in ordered:
        remaining = course.workload_hours - scheduled_hours[course.id]
        if remaining > SHORTFALL_TOLERANCE_HOURS:
            shortfall = True
            schedule.add_explanation(
                f"Shortfall: {course.id} has {remaining:.1f} hours unscheduled "
                f"({scheduled_hours[course.id]:.1f} of {course.workload_hours:.1f} hours placed)."
            )
            logger.info("shortfall for %s: %.1f hours unscheduled", course.id, remaining)
    if shortfall:
        schedule.add_explanations(list(SHORTFALL_SUGGESTIONS))

    schedule.blocks = blocks
    schedule.recalculate_score()
    schedule.metadata = collect_metadata(plan, schedule, study_period_days=total_days)
    schedule.add_explanation(
        f"Scheduled {len(blocks)} blocks ({schedule.total_scheduled_hours():.1f} hours) "
        f"across {len(schedule.scheduled_dates())} days."
    )
    return schedule
