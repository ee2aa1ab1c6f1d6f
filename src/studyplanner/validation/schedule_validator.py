"""Integrity checks over a generated or loaded Schedule."""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from studyplanner.model.plan import PlanSpec
from studyplanner.model.schedule import Schedule, ScheduledBlock

from .errors import ValidationReport

# Engine day cap; blocks on one day never exceed min(availability, cap).
_DAY_CAP_HOURS = 8.0
_TOLERANCE = 1e-9


def validate_schedule(schedule: Schedule, plan: PlanSpec | None = None) -> ValidationReport:
    """Report overlapping blocks, blocks outside the horizon and over-capacity days.

    The capacity rule only runs when the source plan is supplied.
    """
    report = ValidationReport()

    by_date: dict[date, list[ScheduledBlock]] = defaultdict(list)
    for block in schedule.blocks:
        by_date[block.date].append(block)

    for day in sorted(by_date):
        day_blocks = sorted(by_date[day], key=lambda b: b.start_time)
        for previous, current in zip(day_blocks, day_blocks[1:]):
            if current.start_time < previous.end_time:
                report.add_error(
                    code="OVERLAPPING_BLOCKS",
                    message=(
                        f"Overlapping blocks on {day.isoformat()}: "
                        f"{previous.course_id} ({previous.start_time}-{previous.end_time}) and "
                        f"{current.course_id} ({current.start_time}-{current.end_time})"
                    ),
                    field_path=f"$.blocks[{day.isoformat()}]",
                )

    for idx, block in enumerate(schedule.blocks):
        if schedule.start_date is not None and block.date < schedule.start_date:
            report.add_error(
                code="BLOCK_BEFORE_START",
                message=(
                    f"Block on {block.date.isoformat()} is before schedule start date "
                    f"{schedule.start_date.isoformat()}"
                ),
                field_path=f"$.blocks[{idx}].date",
            )
        if schedule.end_date is not None and block.date > schedule.end_date:
            report.add_error(
                code="BLOCK_AFTER_END",
                message=(
                    f"Block on {block.date.isoformat()} is after schedule end date "
                    f"{schedule.end_date.isoformat()}"
                ),
                field_path=f"$.blocks[{idx}].date",
            )

    if plan is not None:
        for day, blocks in sorted(by_date.items()):
            used = sum(block.duration_hours for block in blocks)
            allowed = min(plan.get_availability(day), _DAY_CAP_HOURS)
            if used > allowed + _TOLERANCE:
                report.add_error(
                    code="DAY_OVER_CAPACITY",
                    message=(
                        f"Blocks on {day.isoformat()} use {used:.1f} hours but only "
                        f"{allowed:.1f} hours are available"
                    ),
                    field_path=f"$.blocks[{day.isoformat()}]",
                )

    return report
