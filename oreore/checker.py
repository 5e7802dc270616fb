"""Unification-based type checker.

`typing` walks the AST and binds type variables in the document's TypeTable;
diagnostics are its only output. `unify(expected, actual, range)` reports
mismatches as "<expected> is expected" at the actual operand's range, so the
argument order matters. Once either side is the `error` type nothing more is
reported for that pair.
"""

from __future__ import annotations

from typing import Iterable

from oreore.diagnostics import Diagnostics
from oreore.errors import OreoreInternalError
from oreore.trampoline import Step, trampoline
from oreore.types.ast import AST, CallNode, DefunNode, IfNode
from oreore.types.location import Range
from oreore.types.typetable import BOOL, ERROR, FunctionType, TypeId, TypeTable


class TypeChecker:
    def __init__(self, types: TypeTable, diagnostics: Diagnostics):
        self.types = types
        self.diagnostics = diagnostics

    def unify(self, expected: TypeId, actual: TypeId, actual_range: Range) -> None:
        if expected == actual:
            return
        types = self.types
        lhs = types.deref(expected)
        rhs = types.deref(actual)
        if lhs == rhs or lhs == ERROR or rhs == ERROR:
            return

        if types.is_unbound(lhs):
            if not types.occurs(lhs, rhs):
                types.bind(lhs, rhs)
                return
        elif types.is_unbound(rhs):
            if not types.occurs(rhs, lhs):
                types.bind(rhs, lhs)
                return
        else:
            lhs_entry = types.entries[lhs]
            rhs_entry = types.entries[rhs]
            if (
                isinstance(lhs_entry, FunctionType)
                and isinstance(rhs_entry, FunctionType)
                and len(lhs_entry.params) == len(rhs_entry.params)
            ):
                for p, q in zip(lhs_entry.params, rhs_entry.params):
                    self.unify(p, q, actual_range)
                self.unify(lhs_entry.result, rhs_entry.result, actual_range)
                return

        self.diagnostics.report(actual_range, f"{types.to_string(expected)} is expected")

    def check(self, ast: AST) -> None:
        trampoline(self.check_steps(ast))

    def check_steps(self, ast: AST) -> Step:
        if isinstance(ast, DefunNode):
            for body in ast.body:
                yield self.check_steps(body)
            if ast.body:
                signature = self.types.entry(ast.type)
                if not isinstance(signature, FunctionType):
                    raise OreoreInternalError(f"defun has type {self.types.to_string(ast.type)}")
                last = ast.body[-1]
                self.unify(signature.result, last.type, last.range)

        elif isinstance(ast, IfNode):
            yield self.check_steps(ast.cond)
            yield self.check_steps(ast.con)
            yield self.check_steps(ast.alt)
            self.unify(BOOL, ast.cond.type, ast.cond.range)
            self.unify(ast.con.type, ast.alt.type, ast.alt.range)
            self.unify(ast.type, ast.con.type, ast.con.range)

        elif isinstance(ast, CallNode):
            signature = None
            if ast.callee is not None:
                entry = self.types.entry(ast.callee.type)
                if isinstance(entry, FunctionType):
                    signature = entry
                    self.unify(ast.type, signature.result, ast.callee.range)

            for arg in ast.args:
                yield self.check_steps(arg)

            if signature is not None:
                if len(signature.params) != len(ast.args):
                    self.diagnostics.report(ast.range, "wrong number of arguments")
                for param, arg in zip(signature.params, ast.args):
                    self.unify(param, arg.type, arg.range)

        # unit, number, variable and error nodes are leaves


def typing(asts: Iterable[AST], types: TypeTable, diagnostics: Diagnostics) -> None:
    checker = TypeChecker(types, diagnostics)
    for ast in asts:
        checker.check(ast)
