"""Tokenizer for the planner command language."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import CommandSyntaxError

STRING = "STRING"
DATE = "DATE"
NUMBER = "NUMBER"
WORD = "WORD"
EOF = "EOF"

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<WS>[ \t\r\n]+)
  | (?P<STRING>"[^"\n]*")
  | (?P<UNTERMINATED>"[^"\n]*)
  | (?P<DATE>\d{1,4}[-/]\d{1,2}[-/]\d{1,4})
  | (?P<NUMBER>-?\d+(?:\.\d+)?)
  | (?P<WORD>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)


@dataclass(slots=True, frozen=True)
class Token:
    kind: str
    text: str
    line: int
    column: int

    @property
    def value(self) -> str:
        """Token text without the surrounding quotes of a string literal."""
        if self.kind == STRING:
            return self.text[1:-1]
        return self.text


def _position(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def tokenize(text: str) -> list[Token]:
    """Split command text into tokens; line and column are 1-based."""
    tokens: list[Token] = []
    offset = 0
    while offset < len(text):
        match = _TOKEN_PATTERN.match(text, offset)
        if match is None:
            line, column = _position(text, offset)
            raise CommandSyntaxError(
                f"token recognition error at: {text[offset]!r}",
                line=line,
                column=column,
                token=text[offset],
            )
        kind = match.lastgroup
        if kind == "UNTERMINATED":
            line, column = _position(text, offset)
            raise CommandSyntaxError(
                "unterminated string literal",
                line=line,
                column=column,
                token=match.group(),
            )
        if kind != "WS":
            line, column = _position(text, offset)
            tokens.append(Token(kind=kind, text=match.group(), line=line, column=column))
        offset = match.end()

    line, column = _position(text, len(text))
    tokens.append(Token(kind=EOF, text="<EOF>", line=line, column=column))
    return tokens
