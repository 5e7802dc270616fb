"""Lexical scopes.

The global scope is process-wide and read-only: it holds the built-in
subroutines and is shared by every document. Each compilation owns a
ScopeTree whose scope 0 is the toplevel scope (parent: the global scope);
every `defun` adds one local scope under it. Scopes refer to their parent by
id, and a parent lists its children by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from oreore.reader.lexer import Token
from oreore.types.location import Range
from oreore.types.typetable import BUILTIN_TYPES, TypeId

if TYPE_CHECKING:
    from oreore.types.ast import Node

PARAMETER = "parameter"
FUNCTION = "function"
SUBROUTINE = "subroutine"

ScopeId = int
TOPLEVEL: ScopeId = 0


@dataclass(eq=False)
class Definition:
    kind: str
    type: TypeId
    token: Optional[Token] = None  # binding site; built-ins have none
    ast: Optional["Node"] = None

    @property
    def callable(self) -> bool:
        return self.kind in (FUNCTION, SUBROUTINE)


@dataclass(eq=False)
class Scope:
    id: ScopeId
    parent: Optional[ScopeId]
    range: Optional[Range] = None
    definitions: Dict[str, Definition] = field(default_factory=dict)
    children: List[ScopeId] = field(default_factory=list)


GLOBAL_SCOPE: Mapping[str, Definition] = MappingProxyType(
    {name: Definition(SUBROUTINE, tid) for name, tid in BUILTIN_TYPES.items()}
)


class ScopeTree:
    def __init__(self):
        self.scopes: List[Scope] = [Scope(TOPLEVEL, None)]

    @property
    def toplevel(self) -> Scope:
        return self.scopes[TOPLEVEL]

    def __getitem__(self, scope_id: ScopeId) -> Scope:
        return self.scopes[scope_id]

    def new_scope(self, parent: ScopeId, range_: Optional[Range] = None) -> Scope:
        scope = Scope(len(self.scopes), parent, range_)
        self.scopes.append(scope)
        self.scopes[parent].children.append(scope.id)
        return scope

    def local_scopes(self) -> List[Scope]:
        return [self.scopes[i] for i in self.toplevel.children]

    def find_definition(self, scope_id: Optional[ScopeId], name: str) -> Optional[Definition]:
        """Plain lexical lookup up the parent chain, ending at the global scope."""
        while scope_id is not None:
            scope = self.scopes[scope_id]
            if name in scope.definitions:
                return scope.definitions[name]
            scope_id = scope.parent
        return GLOBAL_SCOPE.get(name)
