"""Planning and schedule intermediate representations."""

from .plan import DEFAULT_PLAN_NAME, ComponentSpec, CourseSpec, PlanSpec, SchedulingRules, SoftPreferences
from .priority import PRIORITY_ICONS, Priority, UnknownPriorityError, priority_from_string
from .schedule import Schedule, ScheduledBlock, ScheduleMetadata, ScheduleScore, ScheduleSummary

__all__ = [
    "DEFAULT_PLAN_NAME",
    "PRIORITY_ICONS",
    "ComponentSpec",
    "CourseSpec",
    "PlanSpec",
    "Priority",
    "Schedule",
    "ScheduleMetadata",
    "ScheduleScore",
    "ScheduleSummary",
    "ScheduledBlock",
    "SchedulingRules",
    "SoftPreferences",
    "UnknownPriorityError",
    "priority_from_string",
]
