"""Position-based queries over a compiled document."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from oreore.compiler import CompiledDocument
from oreore.reader.lexer import utf16_len
from oreore.types.ast import AST, VariableNode
from oreore.types.location import Location, Position
from oreore.types.scope import GLOBAL_SCOPE, Definition


def _deepest(ast: AST, position: Position) -> Optional[AST]:
    if not ast.range.contains(position):
        return None
    while True:
        for child in ast.children():
            if child.range.contains(position):
                ast = child
                break
        else:
            return ast


def find_ast_of_position(document: CompiledDocument, position: Position) -> Optional[AST]:
    """Innermost AST node whose range contains `position`.

    Top-level forms never overlap, so the first one that contains the
    position is the only one.
    """
    for ast in document.asts:
        found = _deepest(ast, position)
        if found is not None:
            return found
    return None


def completion_candidates(document: CompiledDocument, position: Position) -> Dict[str, Definition]:
    """Names visible at `position`: built-ins, toplevel functions and the
    parameters of each toplevel defun whose scope contains the position.
    Inner definitions replace outer ones of the same name. Scopes of
    (rejected) nested defuns are not offered."""
    candidates: Dict[str, Definition] = dict(GLOBAL_SCOPE)
    candidates.update(document.scopes.toplevel.definitions)
    for scope in document.scopes.local_scopes():
        if scope.range is not None and scope.range.contains(position):
            candidates.update(scope.definitions)
    return candidates


def definition_location(document: CompiledDocument, position: Position) -> Optional[Location]:
    ast = find_ast_of_position(document, position)
    if not isinstance(ast, VariableNode) or ast.definition is None or ast.definition.token is None:
        return None
    return ast.definition.token.location


def hover_text(document: CompiledDocument, position: Position) -> Optional[str]:
    ast = find_ast_of_position(document, position)
    if ast is None:
        return None
    return document.types.to_string(ast.type)


def semantic_tokens(document: CompiledDocument, token_type_index: Mapping[str, int]) -> List[int]:
    """Delta-encoded [deltaLine, deltaStart, length, tokenType, 0] tuples for
    the tokens whose display kind is in the negotiated legend."""
    data: List[int] = []
    line = 0
    character = 0
    for token in document.tokens:
        index = token_type_index.get(token.display_kind)
        if index is None:
            continue
        start = token.range.start
        if start.line == line:
            data.extend((0, start.character - character))
        else:
            data.extend((start.line - line, start.character))
        line, character = start.line, start.character
        data.extend((utf16_len(token.text), index, 0))
    return data
