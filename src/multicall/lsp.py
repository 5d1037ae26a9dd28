"""Minimal LSP server for multicall — diagnostics only."""

from __future__ import annotations

from pathlib import Path

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

from multicall import __version__
from multicall.cli import config_settings, load_config
from multicall.errors import ExpandError, LexError
from multicall.host import expand_tokens
from multicall.lexer import tokenize
from multicall.options import ExpandOptions

server = LanguageServer(
    "multicall-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _document_settings(path: str | None) -> tuple[ExpandOptions, str]:
    """Read multicall.toml beside the document, as the CLI does for its input."""
    config = load_config(None, Path(path).parent) if path else {}
    settings = config_settings(config)
    options = ExpandOptions(binding=settings["binding"], placeholder=settings["placeholder"])
    return options, settings["macro"]


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex the document, expand its invocations, and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        options, macro_name = _document_settings(doc.path)
    except ValueError as exc:
        # Bad multicall.toml: report it once at the top of the document
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=0, character=0),
                    end=Position(line=0, character=0),
                ),
                message=f"invalid multicall config: {exc}",
                severity=DiagnosticSeverity.Error,
                source="multicall",
            )
        )
        ls.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )
        return

    try:
        expand_tokens(tokenize(source, filename), options, macro_name)
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="multicall",
            )
        )
    except ExpandError as exc:
        if exc.span is None:
            start = end = Position(line=0, character=0)
        else:
            start = Position(line=exc.span.start.line - 1, character=exc.span.start.column - 1)
            end = Position(line=exc.span.end.line - 1, character=exc.span.end.column - 1)
        diagnostics.append(
            Diagnostic(
                range=Range(start=start, end=end),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="multicall",
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
