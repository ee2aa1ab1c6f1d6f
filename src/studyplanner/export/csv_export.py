"""CSV export: one row per scheduled block."""

from __future__ import annotations

import csv
import io

from studyplanner.model.schedule import Schedule

CSV_HEADER = (
    "Date",
    "Course ID",
    "Course Name",
    "Start Time",
    "End Time",
    "Duration (minutes)",
    "Priority",
    "Component",
    "Deadline",
    "Reason",
)


def export_csv(schedule: Schedule) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for block in schedule.blocks:
        writer.writerow(
            (
                block.date.isoformat(),
                block.course_id,
                block.course_name,
                block.start_time,
                block.end_time,
                block.duration_minutes,
                block.priority.value if block.priority is not None else "",
                block.component_name or "",
                block.deadline.isoformat() if block.deadline is not None else "",
                block.reason,
            )
        )
    return buffer.getvalue()
