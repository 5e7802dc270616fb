"""Arena-indexed types.

A type is a `TypeId`, an index into a `TypeTable`. Each slot holds one of

    - Atom(name)                       number, bool, unit, error
    - FunctionType(params, result)     params/result are TypeIds
    - TypeVar(ref)                     unbound while ref is None; bound once

Every table allocates the atoms and the built-in signatures first and in the
same order, so those ids are valid in every table and can be shared by the
process-wide global scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from oreore.errors import OreoreInternalError

TypeId = int


@dataclass(frozen=True)
class Atom:
    name: str


@dataclass(frozen=True)
class FunctionType:
    params: Tuple[TypeId, ...]
    result: TypeId


class TypeVar:
    __slots__ = ("ref",)

    def __init__(self):
        self.ref: Optional[TypeId] = None

    def __repr__(self):
        return f"TypeVar(ref={self.ref})"


TypeEntry = Union[Atom, FunctionType, TypeVar]

NUMBER: TypeId = 0
BOOL: TypeId = 1
UNIT: TypeId = 2
ERROR: TypeId = 3

_ATOMS = ("number", "bool", "unit", "error")

# name -> (param atoms, result atom)
BUILTIN_SIGNATURES: Dict[str, Tuple[Tuple[TypeId, ...], TypeId]] = {
    "print": ((NUMBER,), UNIT),
    "+": ((NUMBER, NUMBER), NUMBER),
    "-": ((NUMBER, NUMBER), NUMBER),
    "*": ((NUMBER, NUMBER), NUMBER),
    "=": ((NUMBER, NUMBER), BOOL),
}


class TypeTable:
    def __init__(self):
        self.entries: List[TypeEntry] = [Atom(name) for name in _ATOMS]
        self.builtins: Dict[str, TypeId] = {
            name: self.function(params, result)
            for name, (params, result) in BUILTIN_SIGNATURES.items()
        }

    def fresh(self) -> TypeId:
        self.entries.append(TypeVar())
        return len(self.entries) - 1

    def function(self, params: Sequence[TypeId], result: TypeId) -> TypeId:
        self.entries.append(FunctionType(tuple(params), result))
        return len(self.entries) - 1

    def deref(self, tid: TypeId) -> TypeId:
        entry = self.entries[tid]
        while isinstance(entry, TypeVar) and entry.ref is not None:
            tid = entry.ref
            entry = self.entries[tid]
        return tid

    def entry(self, tid: TypeId) -> TypeEntry:
        return self.entries[self.deref(tid)]

    def is_unbound(self, tid: TypeId) -> bool:
        return isinstance(self.entry(tid), TypeVar)

    def bind(self, var: TypeId, target: TypeId) -> None:
        cell = self.entries[var]
        if not isinstance(cell, TypeVar) or cell.ref is not None:
            raise OreoreInternalError(f"type {var} is not an unbound variable")
        cell.ref = target

    def occurs(self, var: TypeId, tid: TypeId) -> bool:
        tid = self.deref(tid)
        if tid == var:
            return True
        entry = self.entries[tid]
        if isinstance(entry, FunctionType):
            return any(self.occurs(var, p) for p in entry.params) or self.occurs(var, entry.result)
        return False

    def to_string(self, tid: TypeId) -> str:
        entry = self.entry(tid)
        if isinstance(entry, Atom):
            return entry.name
        if isinstance(entry, FunctionType):
            params = ", ".join(self.to_string(p) for p in entry.params)
            return f"({params}) -> {self.to_string(entry.result)}"
        return "unknown"


# Shared ids of the built-in signatures (identical in every table).
BUILTIN_TYPES: Dict[str, TypeId] = dict(TypeTable().builtins)
