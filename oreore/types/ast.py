"""Resolved syntax tree.

Every node spans its first to its last constituent token and carries a
TypeId in the document's TypeTable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, List, Optional, Union

from oreore.reader.lexer import Token
from oreore.types.location import Range
from oreore.types.typetable import ERROR, TypeId

if TYPE_CHECKING:
    from oreore.types.scope import Definition


@dataclass(eq=False)
class Node:
    kind: ClassVar[str] = ""

    first_token: Token
    last_token: Token
    type: TypeId

    @property
    def range(self) -> Range:
        return Range(self.first_token.range.start, self.last_token.range.end)

    def children(self) -> List["AST"]:
        return []


@dataclass(eq=False)
class VariableNode(Node):
    kind: ClassVar[str] = "variable"

    text: str = ""
    definition: Optional["Definition"] = None


@dataclass(eq=False)
class NumberNode(Node):
    kind: ClassVar[str] = "number"

    value: float = 0.0


@dataclass(eq=False)
class UnitNode(Node):
    kind: ClassVar[str] = "unit"


@dataclass(eq=False)
class ErrorNode(Node):
    kind: ClassVar[str] = "error"

    type: TypeId = ERROR


@dataclass(eq=False)
class DefunNode(Node):
    kind: ClassVar[str] = "defun"

    name: Optional[VariableNode] = None
    params: List[VariableNode] = field(default_factory=list)
    body: List["AST"] = field(default_factory=list)

    def children(self) -> List["AST"]:
        head: List[AST] = [self.name] if self.name is not None else []
        return head + list(self.params) + list(self.body)


@dataclass(eq=False)
class IfNode(Node):
    kind: ClassVar[str] = "if"

    cond: Optional["AST"] = None
    con: Optional["AST"] = None
    alt: Optional["AST"] = None

    def children(self) -> List["AST"]:
        return [self.cond, self.con, self.alt]


@dataclass(eq=False)
class CallNode(Node):
    """`callee` is None when the operator is not an identifier."""

    kind: ClassVar[str] = "call"

    callee: Optional[VariableNode] = None
    args: List["AST"] = field(default_factory=list)

    def children(self) -> List["AST"]:
        head: List[AST] = [self.callee] if self.callee is not None else []
        return head + list(self.args)


AST = Union[DefunNode, IfNode, CallNode, UnitNode, NumberNode, VariableNode, ErrorNode]
