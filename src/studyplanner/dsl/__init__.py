"""Command language parsing."""

from .errors import CommandError, CommandSyntaxError, EmptyCommandError, SemanticError
from .lexer import Token, tokenize
from .parser import CommandKind, ParsedCommand, parse_command, parse_date

__all__ = [
    "CommandError",
    "CommandKind",
    "CommandSyntaxError",
    "EmptyCommandError",
    "ParsedCommand",
    "SemanticError",
    "Token",
    "parse_command",
    "parse_date",
    "tokenize",
]
