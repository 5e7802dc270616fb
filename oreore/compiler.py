"""Compilation pipeline and per-URI document store.

Every open or change runs the whole pipeline on the document's full text
(lexer -> parser -> expander -> type checker) and replaces whatever was
stored for that URI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from oreore.checker import typing
from oreore.diagnostics import Diagnostics
from oreore.expansion.expander import expand
from oreore.reader.lexer import Token, tokenize
from oreore.reader.parser import parse
from oreore.types.ast import AST
from oreore.types.scope import ScopeTree
from oreore.types.typetable import TypeTable

logger = logging.getLogger(__name__)


@dataclass
class CompiledDocument:
    uri: str
    tokens: List[Token]
    asts: List[AST]
    scopes: ScopeTree
    types: TypeTable
    diagnostics: Diagnostics


def compile_document(uri: str, text: str) -> CompiledDocument:
    diagnostics = Diagnostics()
    types = TypeTable()
    tokens = tokenize(uri, text)
    forms = parse(tokens, diagnostics)
    asts, scopes = expand(forms, types, diagnostics)
    typing(asts, types, diagnostics)
    logger.debug("compiled %s: %d tokens, %d forms, %d diagnostics", uri, len(tokens), len(asts), len(diagnostics))
    return CompiledDocument(uri, tokens, asts, scopes, types, diagnostics)


class DocumentStore:
    def __init__(self):
        self.documents: Dict[str, CompiledDocument] = {}

    def compile(self, uri: str, text: str) -> CompiledDocument:
        document = compile_document(uri, text)
        self.documents[uri] = document
        return document

    def get(self, uri: str) -> Optional[CompiledDocument]:
        return self.documents.get(uri)

    def remove(self, uri: str) -> None:
        self.documents.pop(uri, None)

    def __contains__(self, uri: str) -> bool:
        return uri in self.documents
