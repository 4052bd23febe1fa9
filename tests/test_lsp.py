"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from lpreader.lsp import _validate


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.lp") -> None:
        ws.put_text_document(TextDocumentItem(uri=uri, language_id="lp", version=0, text=source))

    return ls, published, put


# ---------------------------------------------------------------------------
# Lexer errors
# ---------------------------------------------------------------------------


class TestLexErrors:
    def test_nul_character(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("min x\0")
        _validate(ls, "file:///test.lp")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "NUL" in d.message
        assert d.source == "lpreader"
        # NUL is at column 6 (1-based) -> character 5 (0-based)
        assert d.range.start.line == 0
        assert d.range.start.character == 5
        assert d.range.end.character == 6


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


class TestParseErrors:
    def test_strict_bound(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("min x\nbounds\n x < 3\n")
        _validate(ls, "file:///test.lp")

        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "strict" in d.message
        assert d.source == "lpreader"

    def test_duplicate_section(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("min x\nst\n x >= 1\nst\n x <= 2\n")
        _validate(ls, "file:///test.lp")

        d = published[0].diagnostics[0]
        assert "twice" in d.message


# ---------------------------------------------------------------------------
# Clean document -> empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("min x + y\nst\n c: x + y >= 1\nend\n")
        _validate(ls, "file:///test.lp")

        assert len(published) == 1
        assert published[0].diagnostics == []


# ---------------------------------------------------------------------------
# Position conversion (1-based -> 0-based)
# ---------------------------------------------------------------------------


class TestPositionConversion:
    def test_error_on_third_line(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("min x\nst\n x <= y\n")
        _validate(ls, "file:///test.lp")

        d = published[0].diagnostics[0]
        # y is on line 3, column 7 (1-based) -> line 2, character 6 (0-based)
        assert d.range.start.line == 2
        assert d.range.start.character == 6
        assert d.range.end.character == 7
