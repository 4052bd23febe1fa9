"""Minimal LSP server for LP files: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lpreader import __version__
from lpreader.errors import ParseError, ReadError, UnexpectedCharacterError
from lpreader.reader import read_lp_string

server = LanguageServer("lpreader-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _error_range(exc: ReadError) -> Range:
    if isinstance(exc, UnexpectedCharacterError):
        line = exc.position.line - 1
        col = exc.position.column - 1
        return Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 1),
        )
    if isinstance(exc, ParseError):
        return Range(
            start=Position(line=exc.span.start.line - 1, character=exc.span.start.column - 1),
            end=Position(line=exc.span.end.line - 1, character=exc.span.end.column - 1),
        )
    return Range(start=Position(line=0, character=0), end=Position(line=0, character=0))


def _validate(ls: LanguageServer, uri: str) -> None:
    """Read the document as an LP model and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        read_lp_string(doc.source, filename)
    except ReadError as exc:
        diagnostics.append(
            Diagnostic(
                range=_error_range(exc),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="lpreader",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
