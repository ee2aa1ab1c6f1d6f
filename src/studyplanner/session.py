"""Interactive planning session: merges parsed commands into one running plan.

A session owns exactly one mutable ``PlanSpec`` and at most one current
``Schedule``. Each ``execute`` call parses one command line, applies the merge
policy and returns a ``CommandResult``; expected failures never raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from studyplanner.dsl import (
    CommandKind,
    CommandSyntaxError,
    EmptyCommandError,
    ParsedCommand,
    SemanticError,
    parse_command,
)
from studyplanner.engine import generate_schedule
from studyplanner.model.plan import CourseSpec, PlanSpec
from studyplanner.model.schedule import Schedule
from studyplanner.persistence import ScheduleRepository
from studyplanner.reporting.formatting import (
    format_availability,
    format_history,
    format_schedule,
    format_subjects,
)
from studyplanner.settings import DEFAULT_SETTINGS
from studyplanner.validation import validate_plan

logger = logging.getLogger(__name__)


class StateError(Exception):
    """A well-formed command that cannot be applied to the current session state."""


@dataclass(slots=True, frozen=True)
class HistoryEntry:
    timestamp: datetime
    command: str
    kind: CommandKind


@dataclass(slots=True)
class CommandResult:
    success: bool
    message: str
    kind: CommandKind | None = None
    error_code: str | None = None
    errors: list[str] = field(default_factory=list)
    schedule: Schedule | None = None

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        error_code: str,
        kind: CommandKind | None = None,
        errors: list[str] | None = None,
    ) -> CommandResult:
        return cls(success=False, message=message, kind=kind, error_code=error_code, errors=errors or [])


class PlannerSession:
    def __init__(
        self,
        repository: ScheduleRepository | None = None,
        settings: dict[str, Any] | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = dict(DEFAULT_SETTINGS)
        if settings:
            self.settings.update(settings)
        self.repository = repository
        self.auto_save = bool(self.settings["auto_save"]) and repository is not None
        self._clock = clock
        self.plan = self._new_plan()
        self.schedule: Schedule | None = None
        self.history: list[HistoryEntry] = []
        self._handlers: dict[CommandKind, Callable[[ParsedCommand], CommandResult]] = {
            CommandKind.ADD_SUBJECT: self._add_subject,
            CommandKind.SET_AVAILABILITY: self._set_availability,
            CommandKind.GENERATE_SCHEDULE: lambda _command: self.generate(),
            CommandKind.SHOW_SCHEDULE: self._show_schedule,
            CommandKind.LIST_SUBJECTS: lambda _command: CommandResult(True, format_subjects(self.plan)),
            CommandKind.LIST_AVAILABILITY: lambda _command: CommandResult(True, format_availability(self.plan)),
            CommandKind.DELETE_SUBJECT: self._delete_subject,
            CommandKind.UPDATE_SUBJECT_HOURS: self._update_hours,
            CommandKind.UPDATE_SUBJECT_PRIORITY: self._update_priority,
            CommandKind.CLEAR_ALL: self._clear_all,
            CommandKind.CLEAR_SUBJECTS: self._clear_subjects,
            CommandKind.CLEAR_SCHEDULE: self._clear_schedule,
            CommandKind.SHOW_HISTORY: lambda _command: CommandResult(True, format_history(self.history)),
            CommandKind.LOAD_SCHEDULE: self._load_schedule,
        }

    def _new_plan(self) -> PlanSpec:
        return PlanSpec(plan_name=str(self.settings["default_plan_name"]))

    def execute(self, text: str | None) -> CommandResult:
        try:
            command = parse_command(text)
        except EmptyCommandError as exc:
            return CommandResult.failure(str(exc), error_code="empty_command")
        except CommandSyntaxError as exc:
            logger.debug("syntax error in %r: %s", text, exc)
            return CommandResult.failure(f"Syntax error: {exc}", error_code="syntax_error")
        except SemanticError as exc:
            return CommandResult.failure(f"Invalid command: {exc}", error_code="semantic_error")

        if command.kind is not CommandKind.SHOW_HISTORY:
            self.history.append(HistoryEntry(timestamp=self._clock(), command=text.strip(), kind=command.kind))

        try:
            result = self._handlers[command.kind](command)
        except StateError as exc:
            result = CommandResult.failure(str(exc), error_code="state_error")
        result.kind = command.kind
        logger.info("%s -> %s", command.kind.value, "ok" if result.success else result.error_code)
        return result

    def generate(self) -> CommandResult:
        """Validate a snapshot of the plan and allocate a fresh schedule from it."""
        snapshot = self.plan.snapshot()
        report = validate_plan(snapshot)
        if not report.is_valid:
            errors = report.messages()
            return CommandResult.failure(
                "Cannot generate schedule:\n" + "\n".join(f"  - {message}" for message in errors),
                error_code="validation_error",
                errors=errors,
            )

        schedule = generate_schedule(snapshot, generated_at=self._clock().replace(microsecond=0))
        self.schedule = schedule
        message = (
            f"Schedule generated: {len(schedule.blocks)} blocks, "
            f"{schedule.total_scheduled_hours():.1f} hours, score {schedule.score.overall_score:.1f}"
        )
        if self.auto_save:
            try:
                saved_to = self.repository.save_schedule(schedule)
            except OSError as exc:
                logger.warning("auto-save failed: %s", exc)
                message += f"\nWarning: could not save schedule ({exc})"
            else:
                message += f"\nSaved to {saved_to}"
        return CommandResult(True, message, schedule=schedule)

    # Command handlers

    def _add_subject(self, command: ParsedCommand) -> CommandResult:
        for course in command.fragment.courses:
            self.plan.add_course(course)
        added = ", ".join(course.id for course in command.fragment.courses)
        return CommandResult(True, f"Added subject {added}")

    def _set_availability(self, command: ParsedCommand) -> CommandResult:
        for day, hours in command.fragment.availability.items():
            self.plan.set_availability(day, hours)
        labels = ", ".join(f"{day.isoformat()} ({hours:.1f}h)" for day, hours in command.fragment.availability.items())
        return CommandResult(True, f"Availability set: {labels}")

    def _show_schedule(self, _command: ParsedCommand) -> CommandResult:
        return CommandResult(True, format_schedule(self.schedule), schedule=self.schedule)

    def _require_course(self, subject: str | None) -> CourseSpec:
        course = self.plan.get_course(subject or "")
        if course is None:
            raise StateError(f"Subject not found: {subject}")
        return course

    def _delete_subject(self, command: ParsedCommand) -> CommandResult:
        if not self.plan.remove_course(command.target_subject or ""):
            raise StateError(f"Subject not found: {command.target_subject}")
        return CommandResult(True, f"Deleted subject {command.target_subject}")

    def _update_hours(self, command: ParsedCommand) -> CommandResult:
        course = self._require_course(command.target_subject)
        course.workload_hours = float(command.hours)
        return CommandResult(True, f"Updated {course.id}: {course.workload_hours:.1f} hours")

    def _update_priority(self, command: ParsedCommand) -> CommandResult:
        course = self._require_course(command.target_subject)
        course.priority = command.priority
        return CommandResult(True, f"Updated {course.id}: priority {course.priority.value}")

    def _clear_all(self, _command: ParsedCommand) -> CommandResult:
        self.plan = self._new_plan()
        self.schedule = None
        return CommandResult(True, "Cleared all subjects, availability and schedule")

    def _clear_subjects(self, _command: ParsedCommand) -> CommandResult:
        self.plan.clear_courses()
        return CommandResult(True, "Cleared all subjects")

    def _clear_schedule(self, _command: ParsedCommand) -> CommandResult:
        self.schedule = None
        return CommandResult(True, "Cleared current schedule")

    def _load_schedule(self, command: ParsedCommand) -> CommandResult:
        return self.load_schedule(command.path or "")

    def load_schedule(self, path: str) -> CommandResult:
        if self.repository is None:
            raise StateError("No schedule repository configured")
        try:
            schedule = self.repository.load_schedule(path)
        except FileNotFoundError:
            raise StateError(f"Schedule file not found: {path}") from None
        except OSError as exc:
            raise StateError(f"Could not read schedule file {path}: {exc}") from None
        except (ValueError, KeyError, TypeError) as exc:
            raise StateError(f"Invalid schedule file {path}: {exc}") from None
        self.schedule = schedule
        return CommandResult(True, f"Loaded schedule with {len(schedule.blocks)} blocks from {path}", schedule=schedule)
