"""Schedule and plan persistence."""

from .repository import ScheduleRepository, StoredFile

__all__ = ["ScheduleRepository", "StoredFile"]
