import pytest

from oreore.diagnostics import Diagnostics
from oreore.expansion.expander import expand
from oreore.reader.lexer import tokenize
from oreore.reader.parser import parse
from oreore.types.ast import CallNode, DefunNode, ErrorNode, IfNode, NumberNode, UnitNode, VariableNode
from oreore.types.location import Position, Range
from oreore.types.scope import FUNCTION, GLOBAL_SCOPE, PARAMETER, SUBROUTINE, TOPLEVEL
from oreore.types.typetable import ERROR, UNIT, FunctionType, TypeTable

URI = "file:///expander.oreore"


def _expand(source):
    diagnostics = Diagnostics()
    types = TypeTable()
    asts, scopes = expand(parse(tokenize(URI, source), diagnostics), types, diagnostics)
    return asts, scopes, types, diagnostics


def test_defun_registers_function_in_toplevel_scope():
    asts, scopes, types, diagnostics = _expand("(defun f (x) (+ x 1))")
    assert len(diagnostics) == 0
    definition = scopes.toplevel.definitions["f"]
    assert definition.kind == FUNCTION
    assert definition.token.text == "f"
    signature = types.entry(definition.type)
    assert isinstance(signature, FunctionType)
    assert len(signature.params) == 1

    (defun,) = asts
    assert isinstance(defun, DefunNode)
    assert definition.ast is defun
    assert [p.text for p in defun.params] == ["x"]
    (body,) = defun.body
    assert isinstance(body, CallNode)
    assert body.callee.definition is GLOBAL_SCOPE["+"]


def test_parameter_use_shares_the_binding_token():
    asts, scopes, _, _ = _expand("(defun f (x) x)")
    defun = asts[0]
    use = defun.body[0]
    assert isinstance(use, VariableNode)
    assert use.definition.kind == PARAMETER
    assert use.definition.token is defun.params[0].first_token
    assert use.type == defun.params[0].type


def test_local_scope_range_and_parent():
    asts, scopes, _, _ = _expand("(defun f (x) (g x) 1)")
    (local,) = scopes.local_scopes()
    assert local.parent == TOPLEVEL
    assert local.id in scopes.toplevel.children
    assert set(local.definitions) == {"x"}
    # from the first body form to the closing paren
    assert local.range == Range(Position(0, 13), Position(0, 21))


def test_local_scope_without_body_covers_closing_paren():
    _, scopes, _, _ = _expand("(defun f (x))")
    (local,) = scopes.local_scopes()
    assert local.range == Range(Position(0, 12), Position(0, 13))


def test_no_body_gives_empty_body_list():
    asts, _, _, diagnostics = _expand("(defun f ())")
    assert len(diagnostics) == 0
    assert asts[0].body == []


@pytest.mark.parametrize(
    "source,messages",
    [
        ("(defun)", ["malformed defun"]),
        ("(defun f)", ["malformed defun"]),
        ("(defun 1 (x) x)", ["A variable is expected"]),
        ("(defun f x x)", ["An array of variables is expected"]),
        ("(defun f (1) 1)", ["A variable is expected"]),
        ("(defun f (x x) x)", ["multiple definition"]),
        ("(defun f () (defun g () 1))", ["nested function is not allowed"]),
        ("(if 1 2)", ["malformed if"]),
        ("(if 1 2 3 4)", ["malformed if"]),
        ("(foo 1)", ["undefined variable"]),
        ("x", ["undefined variable"]),
        ("((f) 1)", ["An operator must be an identifier", "undefined variable"]),
        ("(1 2)", ["An operator must be an identifier"]),
    ],
)
def test_structural_diagnostics(source, messages):
    _, _, _, diagnostics = _expand(source)
    assert diagnostics.messages() == messages


def test_malformed_forms_become_error_nodes():
    asts, _, _, _ = _expand("(defun) (if)")
    assert all(isinstance(a, ErrorNode) and a.type == ERROR for a in asts)
    assert asts[0].range == Range(Position(0, 0), Position(0, 7))


def test_duplicate_parameter_later_one_wins():
    asts, scopes, _, _ = _expand("(defun f (x x) x)")
    defun = asts[0]
    assert defun.body[0].definition.token is defun.params[1].first_token


def test_non_callable_callee():
    asts, _, types, diagnostics = _expand("(defun f (x) (x 1))")
    assert diagnostics.messages() == ["A function is expected"]
    call = asts[0].body[0]
    assert call.type == ERROR
    assert types.entry(call.callee.type) == FunctionType((ERROR,), ERROR)


def test_undefined_callee_gets_unknowns_of_matching_arity():
    asts, _, types, _ = _expand("(foo 1 2 3)")
    call = asts[0]
    signature = types.entry(call.callee.type)
    assert len(signature.params) == 3
    assert all(types.is_unbound(p) for p in signature.params)
    assert call.callee.definition is None


def test_non_identifier_operator_has_no_callee():
    asts, _, _, _ = _expand("((f) 1)")
    call = asts[0]
    assert call.callee is None
    assert call.type == ERROR
    assert [type(a) for a in call.args] == [CallNode, NumberNode]


def test_leaves():
    asts, _, _, diagnostics = _expand("() 3 )")
    assert diagnostics.messages() == ["extra close parenthesis"]
    unit, number, error = asts
    assert isinstance(unit, UnitNode) and unit.type == UNIT
    assert isinstance(number, NumberNode) and number.value == 3.0
    assert isinstance(error, ErrorNode)


def test_if_node():
    asts, _, types, diagnostics = _expand("(if (= 1 2) 3 4)")
    assert len(diagnostics) == 0
    node = asts[0]
    assert isinstance(node, IfNode)
    assert isinstance(node.cond, CallNode)
    assert types.is_unbound(node.type)


def test_parameter_invisible_outside_its_defun():
    _, _, _, diagnostics = _expand("(defun f (x) x) x")
    assert diagnostics.messages() == ["undefined variable"]
    assert diagnostics.items[0].range == Range(Position(0, 16), Position(0, 17))


def test_parameter_may_shadow_builtin():
    asts, _, _, diagnostics = _expand("(defun f (print) (+ print 1))")
    assert len(diagnostics) == 0
    call = asts[0].body[0]
    assert call.args[0].definition.kind == PARAMETER


def test_function_visible_in_later_forms_and_its_own_body():
    asts, _, _, diagnostics = _expand("(defun f (n) (f n)) (f 1)")
    assert len(diagnostics) == 0
    assert asts[0].body[0].callee.definition.kind == FUNCTION
    assert asts[1].callee.definition.kind == FUNCTION


def test_builtins_are_subroutines():
    assert set(GLOBAL_SCOPE) == {"print", "+", "-", "*", "="}
    assert all(d.kind == SUBROUTINE and d.token is None for d in GLOBAL_SCOPE.values())
    with pytest.raises(TypeError):
        GLOBAL_SCOPE["x"] = GLOBAL_SCOPE["+"]


def test_display_kinds_are_upgraded():
    diagnostics = Diagnostics()
    tokens = tokenize(URI, "(defun f (x) (if x (g x) 1))")
    expand(parse(tokens, diagnostics), TypeTable(), diagnostics)
    kinds = {t.text: t.display_kind for t in tokens if t.kind == "variable"}
    assert kinds == {"defun": "keyword", "f": "function", "x": "variable", "if": "keyword", "g": "function"}
    assert all(t.kind in ("(", ")", "variable", "number") for t in tokens)
