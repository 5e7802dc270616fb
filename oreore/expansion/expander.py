"""Expander/resolver.

Turns parse nodes into AST nodes, building the document's scope tree as it
goes. Arrays headed by a special-form identifier go through SPECIAL_FORMS;
other identifier-headed arrays are calls. Every problem becomes a diagnostic
plus a placeholder (an error node, the error type or a fresh type variable)
so expansion always yields a complete tree.
"""

from __future__ import annotations

from typing import List, Tuple

from oreore.diagnostics import Diagnostics
from oreore.errors import OreoreInternalError
from oreore.expansion.special_forms import SPECIAL_FORMS
from oreore.reader.lexer import FUNCTION as FUNCTION_TOKEN
from oreore.reader.sexpr import SArray, SExpression, SNumber, SVariable
from oreore.trampoline import Step, trampoline
from oreore.types.ast import AST, CallNode, ErrorNode, NumberNode, UnitNode, VariableNode
from oreore.types.scope import TOPLEVEL, ScopeId, ScopeTree
from oreore.types.typetable import ERROR, NUMBER, UNIT, FunctionType, TypeId, TypeTable


class Expander:
    """Expansion steps run on the trampoline; special forms are step
    generators too, and `yield expander.expand_steps(form, scope)` to expand
    their operands."""

    def __init__(self, types: TypeTable, diagnostics: Diagnostics):
        self.types = types
        self.diagnostics = diagnostics
        self.scopes = ScopeTree()

    def expand1(self, form: SExpression, scope: ScopeId) -> AST:
        return trampoline(self.expand_steps(form, scope))

    def expand_steps(self, form: SExpression, scope: ScopeId) -> Step:
        if isinstance(form, SArray):
            if not form.items:
                return UnitNode(form.first_token, form.last_token, UNIT)
            head = form.items[0]
            if isinstance(head, SVariable):
                special = SPECIAL_FORMS.get(head.text)
                if special is not None:
                    return (yield from special(form, scope, self))
                return (yield from self.expand_call(form, head, scope))
            self.diagnostics.report(form.range, "An operator must be an identifier")
            args: List[AST] = []
            for item in form.items:
                args.append((yield self.expand_steps(item, scope)))
            return CallNode(form.first_token, form.last_token, ERROR, args=args)

        if isinstance(form, SNumber):
            return NumberNode(form.first_token, form.last_token, NUMBER, value=form.value)

        if isinstance(form, SVariable):
            definition = self.scopes.find_definition(scope, form.text)
            if definition is None:
                self.diagnostics.report(form.range, "undefined variable")
                type_ = self.types.fresh()
            else:
                type_ = definition.type
            return VariableNode(form.first_token, form.last_token, type_, text=form.text, definition=definition)

        return ErrorNode(form.first_token, form.last_token)

    def expand_call(self, form: SArray, head: SVariable, scope: ScopeId) -> Step:
        head.first_token.display_kind = FUNCTION_TOKEN
        arity = len(form.items) - 1
        types = self.types

        definition = self.scopes.find_definition(scope, head.text)
        func_type: TypeId
        if definition is None:
            self.diagnostics.report(head.range, "undefined variable")
            func_type = types.function([types.fresh() for _ in range(arity)], types.fresh())
        elif definition.callable:
            func_type = definition.type
        else:
            self.diagnostics.report(head.range, "A function is expected")
            func_type = types.function([ERROR] * arity, ERROR)

        signature = types.entry(func_type)
        if not isinstance(signature, FunctionType):
            raise OreoreInternalError(f"callable {head.text!r} has type {types.to_string(func_type)}")
        callee = VariableNode(head.first_token, head.last_token, func_type, text=head.text, definition=definition)
        args: List[AST] = []
        for item in form.items[1:]:
            args.append((yield self.expand_steps(item, scope)))
        return CallNode(form.first_token, form.last_token, signature.result, callee=callee, args=args)

    def expand(self, forms: List[SExpression]) -> List[AST]:
        return [self.expand1(form, TOPLEVEL) for form in forms]


def expand(forms: List[SExpression], types: TypeTable, diagnostics: Diagnostics) -> Tuple[List[AST], ScopeTree]:
    expander = Expander(types, diagnostics)
    asts = expander.expand(forms)
    return asts, expander.scopes
