"""Recursive-descent parser: one command line to a tagged PlanSpec fragment.

Grammar (keywords case-insensitive, names double-quoted):

    add subject "<name>" hours <int> priority <HIGH|MEDIUM|MED|LOW>
    set availability on <date> capacity <number> hours
    generate schedule
    show schedule | show history
    list subjects | list availability
    delete subject "<name>"
    update subject "<name>" hours <int>
    update subject "<name>" priority <priority>
    clear all | clear subjects | clear schedule
    load schedule "<path>"

The parser is stateless and never merges into an existing plan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from studyplanner.model.plan import CourseSpec, PlanSpec
from studyplanner.model.priority import (
    VALID_PRIORITY_TOKENS,
    Priority,
    UnknownPriorityError,
    priority_from_string,
)

from .errors import CommandSyntaxError, EmptyCommandError, SemanticError
from .lexer import DATE, EOF, NUMBER, STRING, WORD, Token, tokenize

DATE_FORMATS = (
    (re.compile(r"\d{4}-\d{2}-\d{2}"), "%Y-%m-%d"),
    (re.compile(r"\d{2}/\d{2}/\d{4}"), "%d/%m/%Y"),
)
_DATE_FORMAT_LABELS = "YYYY-MM-DD or DD/MM/YYYY"

_KIND_LABELS = {
    STRING: 'a quoted name ("...")',
    DATE: "a date",
    NUMBER: "a number",
    WORD: "a keyword",
    EOF: "end of command",
}


class CommandKind(str, Enum):
    ADD_SUBJECT = "ADD_SUBJECT"
    SET_AVAILABILITY = "SET_AVAILABILITY"
    GENERATE_SCHEDULE = "GENERATE_SCHEDULE"
    SHOW_SCHEDULE = "SHOW_SCHEDULE"
    LIST_SUBJECTS = "LIST_SUBJECTS"
    LIST_AVAILABILITY = "LIST_AVAILABILITY"
    DELETE_SUBJECT = "DELETE_SUBJECT"
    UPDATE_SUBJECT_HOURS = "UPDATE_SUBJECT_HOURS"
    UPDATE_SUBJECT_PRIORITY = "UPDATE_SUBJECT_PRIORITY"
    CLEAR_ALL = "CLEAR_ALL"
    CLEAR_SUBJECTS = "CLEAR_SUBJECTS"
    CLEAR_SCHEDULE = "CLEAR_SCHEDULE"
    SHOW_HISTORY = "SHOW_HISTORY"
    LOAD_SCHEDULE = "LOAD_SCHEDULE"


@dataclass(slots=True)
class ParsedCommand:
    """Command kind plus only the data introduced by this one command."""

    kind: CommandKind
    fragment: PlanSpec = field(default_factory=PlanSpec)
    target_subject: str | None = None
    hours: int | None = None
    priority: Priority | None = None
    path: str | None = None


def parse_date(raw: str) -> date:
    """Try zero-padded ``YYYY-MM-DD`` then ``DD/MM/YYYY``; the first successful format wins."""
    for pattern, fmt in DATE_FORMATS:
        if not pattern.fullmatch(raw):
            continue
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise SemanticError(f"Invalid date format: {raw}. Expected formats: {_DATE_FORMAT_LABELS}")


class _Cursor:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    def peek(self) -> Token:
        return self._tokens[self._index]

    def advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind != EOF:
            self._index += 1
        return token

    def error(self, expected: str, token: Token | None = None) -> CommandSyntaxError:
        offending = token or self.peek()
        found = "end of command" if offending.kind == EOF else repr(offending.text)
        return CommandSyntaxError(
            f"expected {expected}, found {found}",
            line=offending.line,
            column=offending.column,
            token=None if offending.kind == EOF else offending.text,
        )

    def keyword(self, *choices: str) -> str:
        token = self.peek()
        if token.kind == WORD and token.text.lower() in choices:
            self.advance()
            return token.text.lower()
        raise self.error(" or ".join(f"'{choice}'" for choice in choices))

    def expect(self, kind: str) -> Token:
        token = self.peek()
        if token.kind != kind:
            raise self.error(_KIND_LABELS[kind])
        return self.advance()

    def end(self) -> None:
        token = self.peek()
        if token.kind != EOF:
            raise CommandSyntaxError(
                f"extraneous input {token.text!r}, expected end of command",
                line=token.line,
                column=token.column,
                token=token.text,
            )


def _name(cursor: _Cursor, what: str = "Subject name") -> str:
    value = cursor.expect(STRING).value
    if not value.strip():
        raise SemanticError(f"{what} cannot be empty")
    return value


def _positive_int_hours(token: Token) -> int:
    try:
        hours = int(token.text)
    except ValueError:
        raise SemanticError(f"Invalid number format for hours: {token.text}") from None
    if hours <= 0:
        raise SemanticError(f"Hours must be positive, got: {hours}")
    return hours


def _priority(token: Token) -> Priority:
    try:
        return priority_from_string(token.value)
    except UnknownPriorityError:
        raise SemanticError(
            f"Invalid priority: {token.value}. Valid values are: {', '.join(VALID_PRIORITY_TOKENS)}"
        ) from None


def _priority_token(cursor: _Cursor) -> Token:
    token = cursor.peek()
    if token.kind not in (WORD, STRING):
        raise cursor.error("a priority (HIGH, MEDIUM, MED, LOW)")
    return cursor.advance()


def _parse_add(cursor: _Cursor) -> ParsedCommand:
    cursor.keyword("subject")
    name = _name(cursor)
    cursor.keyword("hours")
    hours_token = cursor.expect(NUMBER)
    cursor.keyword("priority")
    priority_token = _priority_token(cursor)
    cursor.end()

    fragment = PlanSpec()
    fragment.add_course(
        CourseSpec(id=name, priority=_priority(priority_token), workload_hours=_positive_int_hours(hours_token))
    )
    return ParsedCommand(kind=CommandKind.ADD_SUBJECT, fragment=fragment)


def _parse_set(cursor: _Cursor) -> ParsedCommand:
    cursor.keyword("availability")
    cursor.keyword("on")
    date_token = cursor.expect(DATE)
    cursor.keyword("capacity")
    capacity_token = cursor.expect(NUMBER)
    cursor.keyword("hours")
    cursor.end()

    day = parse_date(date_token.text)
    capacity = float(capacity_token.text)
    if capacity <= 0:
        raise SemanticError(f"Capacity must be positive, got: {capacity_token.text}")

    fragment = PlanSpec()
    fragment.set_availability(day, capacity)
    return ParsedCommand(kind=CommandKind.SET_AVAILABILITY, fragment=fragment)


def _parse_update(cursor: _Cursor) -> ParsedCommand:
    cursor.keyword("subject")
    name = _name(cursor)
    field_name = cursor.keyword("hours", "priority")
    if field_name == "hours":
        hours_token = cursor.expect(NUMBER)
        cursor.end()
        return ParsedCommand(
            kind=CommandKind.UPDATE_SUBJECT_HOURS,
            target_subject=name,
            hours=_positive_int_hours(hours_token),
        )
    priority_token = _priority_token(cursor)
    cursor.end()
    return ParsedCommand(
        kind=CommandKind.UPDATE_SUBJECT_PRIORITY,
        target_subject=name,
        priority=_priority(priority_token),
    )


def _parse_simple(cursor: _Cursor, kind: CommandKind, *keywords: str) -> ParsedCommand:
    for word in keywords:
        cursor.keyword(word)
    cursor.end()
    return ParsedCommand(kind=kind)


def _parse_show(cursor: _Cursor) -> ParsedCommand:
    target = cursor.keyword("schedule", "history")
    cursor.end()
    return ParsedCommand(kind=CommandKind.SHOW_SCHEDULE if target == "schedule" else CommandKind.SHOW_HISTORY)


def _parse_list(cursor: _Cursor) -> ParsedCommand:
    target = cursor.keyword("subjects", "availability")
    cursor.end()
    return ParsedCommand(
        kind=CommandKind.LIST_SUBJECTS if target == "subjects" else CommandKind.LIST_AVAILABILITY
    )


def _parse_delete(cursor: _Cursor) -> ParsedCommand:
    cursor.keyword("subject")
    name = _name(cursor)
    cursor.end()
    return ParsedCommand(kind=CommandKind.DELETE_SUBJECT, target_subject=name)


def _parse_clear(cursor: _Cursor) -> ParsedCommand:
    target = cursor.keyword("all", "subjects", "schedule")
    cursor.end()
    return ParsedCommand(kind=CommandKind(f"CLEAR_{target.upper()}"))


def _parse_load(cursor: _Cursor) -> ParsedCommand:
    cursor.keyword("schedule")
    path = _name(cursor, what="Schedule file path")
    cursor.end()
    return ParsedCommand(kind=CommandKind.LOAD_SCHEDULE, path=path)


_STATEMENTS = {
    "add": _parse_add,
    "set": _parse_set,
    "generate": lambda cursor: _parse_simple(cursor, CommandKind.GENERATE_SCHEDULE, "schedule"),
    "show": _parse_show,
    "list": _parse_list,
    "delete": _parse_delete,
    "update": _parse_update,
    "clear": _parse_clear,
    "load": _parse_load,
}


def parse_command(text: str | None) -> ParsedCommand:
    """Parse one command line.

    Raises ``EmptyCommandError`` for blank text, ``CommandSyntaxError`` when the
    text does not match the grammar, ``SemanticError`` for invalid values.
    """
    if text is None or not text.strip():
        raise EmptyCommandError()

    cursor = _Cursor(tokenize(text))
    head = cursor.peek()
    if head.kind != WORD or head.text.lower() not in _STATEMENTS:
        raise cursor.error("one of " + ", ".join(f"'{word}'" for word in _STATEMENTS))
    cursor.advance()
    return _STATEMENTS[head.text.lower()](cursor)
