"""Priority tiers with interleave weight and front-load ratio."""

from __future__ import annotations

from enum import Enum


class UnknownPriorityError(ValueError):
    """Raised when a priority token does not name a known tier."""


class Priority(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def weight(self) -> float:
        return _WEIGHTS[self]

    @property
    def front_load_ratio(self) -> float:
        """Fraction of a course's workload required in the first half of the horizon."""
        return _FRONT_LOAD_RATIOS[self]

    @property
    def rank(self) -> int:
        return _RANKS[self]


_WEIGHTS: dict[Priority, float] = {
    Priority.LOW: 1.0,
    Priority.MEDIUM: 1.2,
    Priority.HIGH: 1.5,
}

_FRONT_LOAD_RATIOS: dict[Priority, float] = {
    Priority.LOW: 0.40,
    Priority.MEDIUM: 0.50,
    Priority.HIGH: 0.60,
}

_RANKS: dict[Priority, int] = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}

_ALIASES: dict[str, Priority] = {
    "LOW": Priority.LOW,
    "MEDIUM": Priority.MEDIUM,
    "MED": Priority.MEDIUM,
    "HIGH": Priority.HIGH,
}

PRIORITY_ICONS: dict[Priority, str] = {
    Priority.HIGH: "[!!!]",
    Priority.MEDIUM: "[!! ]",
    Priority.LOW: "[!  ]",
}

VALID_PRIORITY_TOKENS = ("HIGH", "MEDIUM", "MED", "LOW")


def priority_from_string(raw: str | None) -> Priority:
    """Resolve a priority token case-insensitively; ``MED`` is an alias for ``MEDIUM``."""
    if raw is None:
        raise UnknownPriorityError("Priority string cannot be empty")
    priority = _ALIASES.get(raw.strip().upper())
    if priority is None:
        raise UnknownPriorityError(
            f"Unknown priority: {raw!r}. Valid values are: {', '.join(VALID_PRIORITY_TOKENS)}"
        )
    return priority
