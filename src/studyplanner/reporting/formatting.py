"""Plain-text renderings used by the interactive commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from studyplanner.model.plan import PlanSpec
from studyplanner.model.priority import PRIORITY_ICONS
from studyplanner.model.schedule import Schedule, ScheduledBlock

if TYPE_CHECKING:
    from studyplanner.session import HistoryEntry

_RULE = "=" * 60


def _block_line(block: ScheduledBlock) -> str:
    icon = PRIORITY_ICONS.get(block.priority, "[   ]") if block.priority is not None else "[   ]"
    line = f"  {icon} {block.start_time}-{block.end_time}  {block.course_name or block.course_id}"
    if block.component_name:
        line += f" ({block.component_name})"
    return line


def format_schedule(schedule: Schedule | None) -> str:
    """Render the schedule grouped by date, followed by score and explanations."""
    if schedule is None:
        return "No schedule generated yet. Use 'generate schedule' first."

    lines = [_RULE, f"Study schedule: {schedule.plan_name}"]
    if schedule.start_date is not None and schedule.end_date is not None:
        lines.append(f"Period: {schedule.start_date.isoformat()} to {schedule.end_date.isoformat()}")
    lines.append(_RULE)

    if schedule.is_empty():
        lines.append("No blocks could be placed in the available time.")
    for day in schedule.scheduled_dates():
        day_blocks = schedule.blocks_for_date(day)
        hours = sum(block.duration_hours for block in day_blocks)
        lines.append(f"{day.isoformat()} ({day.strftime('%A')}) - {hours:.1f}h")
        lines.extend(_block_line(block) for block in day_blocks)

    lines.append(_RULE)
    lines.append(f"Summary: {schedule.summary()}")
    lines.append(f"Score: {schedule.score}")
    if schedule.explanations:
        lines.append("Explanations:")
        lines.extend(f"  - {item}" for item in schedule.explanations)
    return "\n".join(lines)


def format_subjects(plan: PlanSpec) -> str:
    if not plan.courses:
        return "No subjects added yet."
    lines = [f"Subjects ({len(plan.courses)}):"]
    for course in plan.courses:
        priority = course.priority.value if course.priority is not None else "UNSET"
        icon = PRIORITY_ICONS.get(course.priority, "[   ]") if course.priority is not None else "[   ]"
        line = f"  {icon} {course.id}: {course.workload_hours:.1f}h, {priority}"
        if course.exam_date is not None:
            line += f", exam {course.exam_date.isoformat()}"
        lines.append(line)
    lines.append(f"Total workload: {plan.total_workload_hours():.1f}h")
    return "\n".join(lines)


def format_availability(plan: PlanSpec) -> str:
    dates = plan.available_dates()
    if not dates:
        return "No availability set yet."
    lines = [f"Availability ({len(dates)} days):"]
    lines.extend(f"  {day.isoformat()} ({day.strftime('%a')}): {plan.availability[day]:.1f}h" for day in dates)
    lines.append(f"Total available: {plan.total_available_hours():.1f}h")
    if plan.has_shortfall():
        lines.append(f"Shortfall vs workload: {plan.shortfall_hours():.1f}h")
    return "\n".join(lines)


def format_history(history: list[HistoryEntry]) -> str:
    if not history:
        return "No commands in history."
    lines = [f"Command history ({len(history)}):"]
    for index, entry in enumerate(history, start=1):
        lines.append(f"  {index:>3}. [{entry.timestamp.strftime('%H:%M:%S')}] {entry.command}")
    return "\n".join(lines)
