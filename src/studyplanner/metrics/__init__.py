"""Schedule metrics."""

from .collector import collect_metadata, course_completion

__all__ = ["collect_metadata", "course_completion"]
