"""Parse nodes: the parenthesized tree produced before resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from oreore.reader.lexer import Token
from oreore.types.location import Range


@dataclass(eq=False)
class SNode:
    first_token: Token
    last_token: Token

    @property
    def range(self) -> Range:
        return Range(self.first_token.range.start, self.last_token.range.end)


@dataclass(eq=False)
class SArray(SNode):
    items: List["SExpression"] = field(default_factory=list)


@dataclass(eq=False)
class SNumber(SNode):
    value: float = 0.0


@dataclass(eq=False)
class SVariable(SNode):
    text: str = ""


@dataclass(eq=False)
class SError(SNode):
    """A stray close paren."""


SExpression = Union[SArray, SNumber, SVariable, SError]
