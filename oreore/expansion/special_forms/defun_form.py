from __future__ import annotations

from typing import TYPE_CHECKING, List

from oreore.reader.lexer import FUNCTION as FUNCTION_TOKEN, KEYWORD
from oreore.reader.sexpr import SArray, SVariable
from oreore.trampoline import Step
from oreore.types.ast import DefunNode, ErrorNode, VariableNode
from oreore.types.location import Range
from oreore.types.scope import FUNCTION, PARAMETER, TOPLEVEL, Definition, ScopeId

if TYPE_CHECKING:
    from oreore.expansion.expander import Expander


def defun_form(form: SArray, scope: ScopeId, expander: Expander) -> Step:
    """
    (defun name (param ...) body ...)

    Parameters live in a new local scope whose range runs from the first body
    form (or the closing paren when there is no body) to the closing paren.
    The function itself is defined in the enclosing scope before the body is
    expanded, so the body can refer to it. Yields the body forms to the
    expander, one step each.
    """
    report = expander.diagnostics.report
    items = form.items
    items[0].first_token.display_kind = KEYWORD

    if scope != TOPLEVEL:
        report(form.range, "nested function is not allowed")

    if len(items) < 3:
        report(form.range, "malformed defun")
        return ErrorNode(form.first_token, form.last_token)

    name = items[1]
    if not isinstance(name, SVariable):
        report(name.range, "A variable is expected")
        return ErrorNode(form.first_token, form.last_token)
    name.first_token.display_kind = FUNCTION_TOKEN

    param_list = items[2]
    if not isinstance(param_list, SArray):
        report(param_list.range, "An array of variables is expected")
        return ErrorNode(form.first_token, form.last_token)

    body_forms = items[3:]
    first = body_forms[0].first_token if body_forms else form.last_token
    local = expander.scopes.new_scope(scope, Range(first.range.start, form.last_token.range.end))

    types = expander.types
    params: List[VariableNode] = []
    for param in param_list.items:
        if not isinstance(param, SVariable):
            report(param.range, "A variable is expected")
            return ErrorNode(form.first_token, form.last_token)

        node = VariableNode(param.first_token, param.last_token, types.fresh(), text=param.text)
        if param.text in local.definitions:
            report(param.range, "multiple definition")
        node.definition = Definition(PARAMETER, node.type, param.first_token, node)
        local.definitions[param.text] = node.definition
        params.append(node)

    func_type = types.function([p.type for p in params], types.fresh())
    definition = Definition(FUNCTION, func_type, name.first_token)
    expander.scopes[scope].definitions[name.text] = definition

    defun = DefunNode(
        form.first_token,
        form.last_token,
        func_type,
        name=VariableNode(name.first_token, name.last_token, func_type, text=name.text, definition=definition),
        params=params,
    )
    definition.ast = defun
    for item in body_forms:
        defun.body.append((yield expander.expand_steps(item, local.id)))
    return defun
