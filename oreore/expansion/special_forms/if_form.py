from __future__ import annotations

from typing import TYPE_CHECKING

from oreore.reader.lexer import KEYWORD
from oreore.reader.sexpr import SArray
from oreore.trampoline import Step
from oreore.types.ast import ErrorNode, IfNode
from oreore.types.scope import ScopeId

if TYPE_CHECKING:
    from oreore.expansion.expander import Expander


def if_form(form: SArray, scope: ScopeId, expander: Expander) -> Step:
    """
    (if cond con alt)
    All three operands are required; the node's own type is a fresh variable.
    """
    form.items[0].first_token.display_kind = KEYWORD

    if len(form.items) != 4:
        expander.diagnostics.report(form.range, "malformed if")
        return ErrorNode(form.first_token, form.last_token)

    cond = yield expander.expand_steps(form.items[1], scope)
    con = yield expander.expand_steps(form.items[2], scope)
    alt = yield expander.expand_steps(form.items[3], scope)
    return IfNode(
        form.first_token,
        form.last_token,
        expander.types.fresh(),
        cond=cond,
        con=con,
        alt=alt,
    )
