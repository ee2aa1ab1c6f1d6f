"""Command parsing errors."""

from __future__ import annotations


class CommandError(Exception):
    """Base class for failures while turning command text into an IR fragment."""

    code = "command_error"


class EmptyCommandError(CommandError):
    code = "empty_command"

    def __init__(self, message: str = "Command cannot be empty") -> None:
        super().__init__(message)


class CommandSyntaxError(CommandError):
    """Command text does not match the grammar."""

    code = "syntax_error"

    def __init__(self, message: str, *, line: int, column: int, token: str | None) -> None:
        self.line = line
        self.column = column
        self.token = token
        self.detail = message
        super().__init__(f"Line {line}:{column} - {message}")


class SemanticError(CommandError):
    """Command is well-formed but carries a locally invalid value."""

    code = "semantic_error"
