from __future__ import annotations

"""
A minimal pygls-based Language Server for gune.

Features:
- Initialize/Shutdown/Exit
- Text synchronization and document store
- Diagnostics: lexer errors (unknown characters) and parser errors
- Hover: seeded constants, keywords and identifiers
- Completion: constants, keywords, identifiers used in the document
- Document Symbols: distinct identifiers, at their first occurrence

Note: We never evaluate the buffer. We build a static index per document.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
)

from gune import __version__, config
from gune.reader.lexer import KEYWORDS, TokenKind
from gune.types.values import Float, render
from gune_lsp.indexer import DocumentIndex, build_index, token_at

logger = logging.getLogger(__name__)

SOURCE = "gune-ls"

KEYWORD_DOCS = {
    "nil": "nil: the Nil literal. nil combined with nil gives nil; nil with a number is a type error.",
    "let": "let: reserved keyword. It is not accepted where an expression is expected.",
}


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class GuneLanguageServer(LanguageServer):
    CMD_NAME = "gune-ls"

    def __init__(self, constants: Optional[Mapping[str, float]] = None):
        super().__init__(self.CMD_NAME, __version__)
        self.documents: Dict[str, DocumentState] = {}
        self.constants: Dict[str, float] = dict(config.get_constants() if constants is None else constants)


ls = GuneLanguageServer()


# --- Pure helpers (no server state) ---
def diagnostics_for(idx: DocumentIndex) -> List[Diagnostic]:
    diags: List[Diagnostic] = []
    for problem in idx.problems:
        diags.append(
            Diagnostic(
                range=Range(
                    start=Position(line=problem.line, character=problem.col),
                    end=Position(line=problem.line, character=problem.col + problem.length),
                ),
                message=problem.message,
                severity=DiagnosticSeverity.Error,
                source=SOURCE,
                code=problem.kind,
            )
        )
    return diags


def hover_text(idx: DocumentIndex, text: str, position: Position, constants: Mapping[str, float]) -> Optional[str]:
    tok = token_at(idx, text, position.line, position.character)
    if tok is None:
        return None
    if tok.kind in (TokenKind.NIL, TokenKind.LET):
        return KEYWORD_DOCS[tok.text]
    if tok.kind is not TokenKind.IDENTIFIER:
        return None
    if tok.text in constants:
        return f"{tok.text} = {render(Float(float(constants[tok.text])))} (constant)"
    uses = len(idx.identifiers.get(tok.text, []))
    return f"{tok.text}: unbound identifier ({uses} occurrence{'s' if uses != 1 else ''}); evaluating it fails"


def completion_items(idx: DocumentIndex, constants: Mapping[str, float]) -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name, value in sorted(constants.items()):
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Constant, detail=render(Float(float(value)))))
    for word in sorted(KEYWORDS):
        items.append(CompletionItem(label=word, kind=CompletionItemKind.Keyword))
    for name in sorted(idx.identifiers):
        if name not in constants:
            items.append(CompletionItem(label=name, kind=CompletionItemKind.Variable))
    return items


def document_symbols(idx: DocumentIndex) -> List[DocumentSymbol]:
    symbols: List[DocumentSymbol] = []
    for name, occurrences in idx.identifiers.items():
        first = occurrences[0]
        rng = Range(
            start=Position(line=first.line, character=first.col),
            end=Position(line=first.line, character=first.col + len(name)),
        )
        symbols.append(DocumentSymbol(name=name, kind=SymbolKind.Variable, range=rng, selection_range=rng))
    return symbols


# --- Text sync ---
def _refresh(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("indexed %s: %d tokens, %d problems", uri, len(idx.tokens), len(idx.problems))
    ls.publish_diagnostics(uri, diagnostics_for(idx))


@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    _refresh(params.text_document.uri, params.text_document.text or "")


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        state = ls.documents.get(uri)
        text = state.text if state else ""
    _refresh(uri, text)


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Hover ---
@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    contents = hover_text(state.index, state.text, params.position, ls.constants)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature("textDocument/completion")
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    idx = state.index if state else DocumentIndex()
    return CompletionList(is_incomplete=False, items=completion_items(idx, ls.constants))


# --- Document Symbols ---
@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    return document_symbols(state.index)


def main() -> None:
    logging.basicConfig(level=config.get_log_level())
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
