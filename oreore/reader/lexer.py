"""
  Lexer for the oreore language

- Never fails: anything that is not whitespace, a paren or a comment is part
  of a number or variable token.
- Positions are zero-based (line, UTF-16 column); a newline resets the column.
- `kind` is the lexical kind and never changes. `display_kind` starts equal to
  it and is upgraded to "keyword" or "function" by the expander; semantic
  highlighting reads `display_kind`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from oreore.types.location import Location, Position, Range

WHITESPACE = " \t\r\n"
DELIMITERS = WHITESPACE + "();"

NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z")

# Lexical token kinds
LPAREN = "("
RPAREN = ")"
COMMENT = "comment"
NUMBER = "number"
VARIABLE = "variable"

# Display-only kinds, set during expansion
KEYWORD = "keyword"
FUNCTION = "function"


@dataclass(eq=False)
class Token:
    """A lexeme. Compared by identity: definitions point at their binding token."""

    kind: str
    text: str
    location: Location
    display_kind: str = field(default="")

    def __post_init__(self):
        if not self.display_kind:
            self.display_kind = self.kind

    @property
    def range(self) -> Range:
        return self.location.range

    def __repr__(self):
        start = self.range.start
        return f"Token({self.kind!r}, {self.text!r}, {start.line}:{start.character})"


def is_number(text: str) -> bool:
    return NUMBER_RE.match(text) is not None


def utf16_len(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def tokenize(uri: str, text: str) -> List[Token]:
    """Split `text` into tokens, comments included."""
    tokens: List[Token] = []
    i = 0
    n = len(text)
    line = 0
    character = 0

    def next_char():
        nonlocal i, line, character
        if i == n:
            return
        ch = text[i]
        i += 1
        if ch == "\n":
            line += 1
            character = 0
        else:
            character += 2 if ord(ch) > 0xFFFF else 1

    while True:
        while i < n and text[i] in WHITESPACE:
            next_char()
        if i == n:
            return tokens

        start = Position(line, character)
        begin = i
        ch = text[i]
        if ch == "(" or ch == ")":
            kind = ch
            next_char()
        elif ch == ";":
            # line comment, up to (not including) the newline
            kind = COMMENT
            while i < n and text[i] != "\n":
                next_char()
        else:
            while i < n and text[i] not in DELIMITERS:
                next_char()
            kind = NUMBER if is_number(text[begin:i]) else VARIABLE

        end = Position(line, character)
        tokens.append(Token(kind, text[begin:i], Location(uri, Range(start, end))))
