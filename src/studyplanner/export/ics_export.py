"""iCalendar (RFC 5545) export: one VEVENT per scheduled block."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from studyplanner.model.schedule import Schedule, ScheduledBlock

DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"
PRODID = "-//Multi-Subject Scheduler Chatbot//EN"
UID_DOMAIN = "scheduler-chatbot"

_ICS_FORMAT = "%Y%m%dT%H%M%S"


def escape_text(value: str | None) -> str:
    if value is None:
        return ""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def _format_offset(moment: datetime) -> str:
    offset = moment.utcoffset()
    total_minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "+" if total_minutes >= 0 else "-"
    total_minutes = abs(total_minutes)
    return f"{sign}{total_minutes // 60:02d}{total_minutes % 60:02d}"


def _vtimezone(tz_name: str, reference: date) -> list[str]:
    zone = ZoneInfo(tz_name)
    moment = datetime.combine(reference, time(0, 0), tzinfo=zone)
    offset = _format_offset(moment)
    return [
        "BEGIN:VTIMEZONE",
        f"TZID:{tz_name}",
        "BEGIN:STANDARD",
        "DTSTART:19700101T000000",
        f"TZOFFSETFROM:{offset}",
        f"TZOFFSETTO:{offset}",
        f"TZNAME:{moment.tzname()}",
        "END:STANDARD",
        "END:VTIMEZONE",
    ]


def _local(day: date, clock: str, zone: ZoneInfo) -> datetime:
    return datetime.combine(day, time.fromisoformat(clock), tzinfo=zone)


def _description(block: ScheduledBlock) -> str:
    lines = [f"Course: {block.course_id}"]
    if block.component_name:
        lines.append(f"Component: {block.component_name}")
    lines.append(f"Priority: {block.priority.value if block.priority is not None else ''}")
    if block.deadline is not None:
        lines.append(f"Deadline: {block.deadline.isoformat()}")
    if block.reason:
        lines.append(f"Reason: {block.reason}")
    return "\n".join(lines)


def _vevent(block: ScheduledBlock, tz_name: str, zone: ZoneInfo, stamp: str) -> list[str]:
    start = _local(block.date, block.start_time, zone)
    end = _local(block.date, block.end_time, zone)
    return [
        "BEGIN:VEVENT",
        f"UID:{block.course_id}-{block.date.isoformat()}-{block.start_time}@{UID_DOMAIN}",
        f"DTSTAMP:{stamp}",
        f"DTSTART;TZID={tz_name}:{start.strftime(_ICS_FORMAT)}",
        f"DTEND;TZID={tz_name}:{end.strftime(_ICS_FORMAT)}",
        f"SUMMARY:{escape_text(block.course_name or block.course_id)}",
        f"DESCRIPTION:{escape_text(_description(block))}",
        "END:VEVENT",
    ]


def export_ics(schedule: Schedule, *, tz_name: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> str:
    """Render the schedule as an iCalendar document in a fixed named time zone."""
    zone = ZoneInfo(tz_name)
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).strftime(_ICS_FORMAT) + "Z"
    reference = schedule.start_date or (schedule.blocks[0].date if schedule.blocks else moment.date())

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        *_vtimezone(tz_name, reference),
    ]
    for block in schedule.blocks:
        lines.extend(_vevent(block, tz_name, zone, stamp))
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"
