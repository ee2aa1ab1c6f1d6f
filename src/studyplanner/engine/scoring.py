"""Schedule quality scoring: spreadness, buffer, interleave and overall."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from statistics import pstdev

from studyplanner.model.schedule import ScheduledBlock, ScheduleScore

NEUTRAL_SCORE = 50.0
SPREADNESS_STDDEV_FACTOR = 25.0


def _clamp100(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def compute_spreadness_score(blocks: list[ScheduledBlock]) -> float:
    """Lower spread of daily hours scores higher; a single study day is neutral."""
    if not blocks:
        return 0.0
    daily_hours: dict[date, float] = defaultdict(float)
    for block in blocks:
        daily_hours[block.date] += block.duration_hours
    if len(daily_hours) <= 1:
        return NEUTRAL_SCORE
    return _clamp100(100.0 - pstdev(daily_hours.values()) * SPREADNESS_STDDEV_FACTOR)


def compute_buffer_score(blocks: list[ScheduledBlock]) -> float:
    """Share of blocks placed more than one day before their deadline.

    Blocks without a deadline count as buffered.
    """
    if not blocks:
        return 0.0
    buffered = sum(
        1
        for block in blocks
        if block.deadline is None or block.date < block.deadline - timedelta(days=1)
    )
    return _clamp100(buffered * 100.0 / len(blocks))


def compute_interleave_score(blocks: list[ScheduledBlock]) -> float:
    """Share of adjacent block pairs (list order) that switch course."""
    if not blocks:
        return 0.0
    if len(blocks) <= 1 or len({block.course_id for block in blocks}) <= 1:
        return NEUTRAL_SCORE
    transitions = sum(
        1 for previous, current in zip(blocks, blocks[1:]) if previous.course_id != current.course_id
    )
    return _clamp100(transitions / (len(blocks) - 1) * 100.0)


def score_blocks(blocks: list[ScheduledBlock]) -> ScheduleScore:
    """Recompute the full score from scratch."""
    if not blocks:
        return ScheduleScore()

    course_hours: dict[str, float] = defaultdict(float)
    for block in blocks:
        course_hours[block.course_id] += block.duration_hours

    spreadness = compute_spreadness_score(blocks)
    buffer = compute_buffer_score(blocks)
    interleave = compute_interleave_score(blocks)
    return ScheduleScore(
        overall_score=_clamp100((spreadness + buffer + interleave) / 3.0),
        spreadness_score=spreadness,
        buffer_score=buffer,
        interleave_score=interleave,
        total_scheduled_hours=sum(course_hours.values()),
        course_hours=dict(sorted(course_hours.items())),
    )
