"""
The oreore Language Server, built on pygls.

Features:
- Initialize/Shutdown/Exit with capability negotiation
- Full-document text synchronization; every change recompiles the document
- Diagnostics: parser, expander and type checker diagnostics
- Hover: the type of the innermost expression under the cursor
- Go to definition: binding site of a parameter or function
- Completion: built-ins, toplevel functions, parameters in scope
- Semantic tokens: keyword/function/variable/number/comment by the client's legend

One `OreoreLanguageServer` is one session: it owns the document store, the
negotiated capabilities and the token legend. Handlers run to completion
one message at a time.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from lsprotocol.types import (
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    ClientCapabilities,
    CompletionItem,
    CompletionItemKind,
    CompletionOptions,
    CompletionParams,
    DefinitionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    Hover,
    HoverParams,
    InitializedParams,
    Location,
    MarkupContent,
    MarkupKind,
    MessageType,
    Position,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensOptions,
    SemanticTokensParams,
    ServerCapabilities,
    TextDocumentSyncKind,
)
from pygls.server import LanguageServer

from oreore.compiler import CompiledDocument, DocumentStore
from oreore.diagnostics import Diagnostic as OreoreDiagnostic
from oreore.query import completion_candidates, definition_location, hover_text, semantic_tokens
from oreore.types import location
from oreore.types.scope import PARAMETER
from oreore_lsp.protocol import OreoreLanguageServerProtocol

logger = logging.getLogger(__name__)

SERVER_NAME = "oreore-ls"
SERVER_VERSION = "0.1.0"


class OreoreLanguageServer(LanguageServer):
    def __init__(self):
        super().__init__(
            name=SERVER_NAME,
            version=SERVER_VERSION,
            protocol_cls=OreoreLanguageServerProtocol,
            text_document_sync_kind=TextDocumentSyncKind.Full,
        )
        self.documents = DocumentStore()
        self.publish_diagnostics_capable = False
        self.token_types: List[str] = []
        self.token_type_index: Dict[str, int] = {}

    def negotiate(self, client: ClientCapabilities, capabilities: ServerCapabilities) -> None:
        """Record what the client supports; offer semantic tokens only with
        a legend made of the client's own token types."""
        text_document = client.text_document
        self.publish_diagnostics_capable = text_document is not None and text_document.publish_diagnostics is not None

        semantic = text_document.semantic_tokens if text_document is not None else None
        if semantic is not None and semantic.token_types:
            self.token_types = list(semantic.token_types)
            self.token_type_index = {name: i for i, name in enumerate(self.token_types)}
            capabilities.semantic_tokens_provider = SemanticTokensOptions(
                legend=SemanticTokensLegend(token_types=self.token_types, token_modifiers=[]),
                full=True,
            )
        else:
            capabilities.semantic_tokens_provider = None

        logger.info(
            "initialized: publishDiagnostics=%s, %d semantic token types",
            self.publish_diagnostics_capable,
            len(self.token_types),
        )


# --- Conversions ---

def _to_lsp_range(range_: location.Range) -> Range:
    return Range(
        start=Position(line=range_.start.line, character=range_.start.character),
        end=Position(line=range_.end.line, character=range_.end.character),
    )


def _to_position(position: Position) -> location.Position:
    return location.Position(position.line, position.character)


def _to_lsp_diagnostic(diagnostic: OreoreDiagnostic) -> Diagnostic:
    return Diagnostic(
        range=_to_lsp_range(diagnostic.range),
        message=diagnostic.message,
        severity=DiagnosticSeverity.Error,
        source="oreore",
    )


def create_server() -> OreoreLanguageServer:
    ls = OreoreLanguageServer()

    def _publish_diagnostics(uri: str, diagnostics: List[Diagnostic]) -> None:
        if ls.publish_diagnostics_capable:
            ls.publish_diagnostics(uri, diagnostics)

    def _compile_and_publish(uri: str, text: str) -> CompiledDocument:
        document = ls.documents.compile(uri, text)
        _publish_diagnostics(uri, [_to_lsp_diagnostic(d) for d in document.diagnostics])
        return document

    # --- Lifecycle ---
    @ls.feature(INITIALIZED)
    def on_initialized(params: InitializedParams) -> None:
        ls.show_message_log("initialized!", MessageType.Info)

    # --- Text sync ---
    @ls.feature(TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: DidOpenTextDocumentParams) -> None:
        _compile_and_publish(params.text_document.uri, params.text_document.text)

    @ls.feature(TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: DidChangeTextDocumentParams) -> None:
        # full sync: the last change holds the whole text
        if params.content_changes:
            _compile_and_publish(params.text_document.uri, params.content_changes[-1].text)

    @ls.feature(TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: DidCloseTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.documents.remove(uri)
        _publish_diagnostics(uri, [])

    # --- Language features ---
    @ls.feature(TEXT_DOCUMENT_HOVER)
    def on_hover(params: HoverParams) -> Optional[Hover]:
        document = ls.documents.get(params.text_document.uri)
        if document is None:
            return None
        text = hover_text(document, _to_position(params.position))
        if text is None:
            return None
        return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=text))

    @ls.feature(TEXT_DOCUMENT_DEFINITION)
    def on_definition(params: DefinitionParams) -> Optional[Location]:
        document = ls.documents.get(params.text_document.uri)
        if document is None:
            return None
        found = definition_location(document, _to_position(params.position))
        if found is None:
            return None
        return Location(uri=found.uri, range=_to_lsp_range(found.range))

    @ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions())
    def on_completion(params: CompletionParams) -> List[CompletionItem]:
        document = ls.documents.get(params.text_document.uri)
        if document is None:
            return []
        items: List[CompletionItem] = []
        for name, definition in completion_candidates(document, _to_position(params.position)).items():
            if definition.kind == PARAMETER:
                items.append(CompletionItem(label=name, kind=CompletionItemKind.Variable))
            else:
                items.append(
                    CompletionItem(
                        label=name,
                        kind=CompletionItemKind.Function,
                        detail=document.types.to_string(definition.type),
                    )
                )
        return items

    # advertised only when the client declares token types (see `negotiate`)
    @ls.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL)
    def on_semantic_tokens(params: SemanticTokensParams) -> SemanticTokens:
        document = ls.documents.get(params.text_document.uri)
        if document is None:
            return SemanticTokens(data=[])
        return SemanticTokens(data=semantic_tokens(document, ls.token_type_index))

    return ls


if __name__ == "__main__":
    # Run the language server over stdio
    create_server().start_io()
