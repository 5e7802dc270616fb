"""
  Error-recovering parser

Turns the token list into parse nodes. Bracketing problems never abort the
parse; they are reported and replaced:

    - missing ')'  -> "unclosed parenthesis" at the '(' and the array closes
                      at the last consumed token
    - stray ')'    -> "extra close parenthesis" and an SError node

Comment tokens are dropped before parsing.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from oreore.diagnostics import Diagnostics
from oreore.reader.lexer import COMMENT, LPAREN, NUMBER, RPAREN, Token
from oreore.reader.sexpr import SArray, SError, SExpression, SNumber, SVariable


class TokenStream:
    def __init__(self, tokens: Iterable[Token], diagnostics: Diagnostics):
        self.tokens: List[Token] = [t for t in tokens if t.kind != COMMENT]
        self.pos = 0
        self.diagnostics = diagnostics

    def peek(self) -> Optional[Token]:
        if self.pos == len(self.tokens):
            return None
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def parse_expr(self) -> SExpression:
        """One complete expression starting at the current token.

        Open arrays are kept on an explicit stack of (open paren, items), so
        nesting depth is not limited by the interpreter's recursion limit.
        """
        open_arrays: List[Tuple[Token, List[SExpression]]] = []
        token = self.advance()
        while True:
            if token.kind == LPAREN:
                open_arrays.append((token, []))
            else:
                node = self._leaf(token)
                if not open_arrays:
                    return node
                open_arrays[-1][1].append(node)

            while True:
                nxt = self.peek()
                if nxt is None:
                    lparen, items = open_arrays.pop()
                    self.diagnostics.report(lparen.range, "unclosed parenthesis")
                elif nxt.kind == RPAREN:
                    self.advance()
                    lparen, items = open_arrays.pop()
                else:
                    break
                array = SArray(lparen, self.tokens[self.pos - 1], items)
                if not open_arrays:
                    return array
                open_arrays[-1][1].append(array)

            token = self.advance()

    def _leaf(self, token: Token) -> SExpression:
        # a ')' only gets here when no array is open
        if token.kind == RPAREN:
            self.diagnostics.report(token.range, "extra close parenthesis")
            return SError(token, token)

        if token.kind == NUMBER:
            return SNumber(token, token, float(token.text))

        return SVariable(token, token, token.text)

    def parse_all(self) -> Iterator[SExpression]:
        while self.peek() is not None:
            yield self.parse_expr()


def parse(tokens: Iterable[Token], diagnostics: Diagnostics) -> List[SExpression]:
    return list(TokenStream(tokens, diagnostics).parse_all())
