"""Allocation engine and schedule scorer."""

from .allocator import (
    BLOCK_HOURS,
    BREAK_HOURS,
    MAX_HOURS_PER_DAY,
    SHORTFALL_SUGGESTIONS,
    blocks_needed,
    generate_schedule,
    order_courses,
    split_horizon,
)
from .scoring import (
    compute_buffer_score,
    compute_interleave_score,
    compute_spreadness_score,
    score_blocks,
)

__all__ = [
    "BLOCK_HOURS",
    "BREAK_HOURS",
    "MAX_HOURS_PER_DAY",
    "SHORTFALL_SUGGESTIONS",
    "blocks_needed",
    "compute_buffer_score",
    "compute_interleave_score",
    "compute_spreadness_score",
    "generate_schedule",
    "order_courses",
    "score_blocks",
    "split_horizon",
]
