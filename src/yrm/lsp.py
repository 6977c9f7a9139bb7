"""yrm Language Server: pygls-based LSP for .yrm files.

Provides diagnostics, document symbols and hover via stdio transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from yrm import __version__
from yrm.errors import Diagnostic, YrmError
from yrm.lexer import Lexer
from yrm.parser import Parser
from yrm.source import Span
from yrm.tokens import Token, TokenKind
from yrm.values import Document, Value, value_kind

# ── Conversion helpers ────────────────────────────────────────────

_SYMBOL_KINDS = {
    "mapping": lsp.SymbolKind.Namespace,
    "integer": lsp.SymbolKind.Number,
    "float": lsp.SymbolKind.Number,
    "boolean": lsp.SymbolKind.Boolean,
    "string": lsp.SymbolKind.String,
}


def span_to_range(span: Span) -> lsp.Range:
    """Convert a 1-indexed Span to a 0-indexed LSP Range."""
    return lsp.Range(
        start=lsp.Position(line=span.start_line - 1, character=span.start_col - 1),
        end=lsp.Position(line=span.end_line - 1, character=span.end_col),
    )


def _to_lsp_diag(d: Diagnostic) -> lsp.Diagnostic:
    span_range = lsp.Range(start=lsp.Position(0, 0), end=lsp.Position(0, 0))
    if d.span is not None:
        span_range = span_to_range(d.span)
    return lsp.Diagnostic(
        range=span_range, severity=lsp.DiagnosticSeverity.Error, source="yrm",
        code=d.code, message=f"[{d.code}] {d.message}",
    )


# ── Key outline ───────────────────────────────────────────────────


@dataclass(frozen=True)
class KeyEntry:
    """A key as written in the source, with its path from the root."""

    path: tuple[str, ...]
    span: Span


def key_entries(tokens: list[Token]) -> list[KeyEntry]:
    """Recover every key and its path from the token list."""
    entries: list[KeyEntry] = []
    parents: list[str] = []
    depth = 0
    at_line_start = True

    for tok in tokens:
        match tok.kind:
            case TokenKind.NEWLINE:
                depth = 0
                at_line_start = True
            case TokenKind.TAB if at_line_start:
                depth += 1
            case TokenKind.IDENTIFIER:
                del parents[depth:]
                path = (*parents, tok.literal)
                entries.append(KeyEntry(path=path, span=tok.span))
                parents.append(tok.literal)
                at_line_start = False
            case _:
                at_line_start = False
    return entries


def lookup(document: Document, path: tuple[str, ...]) -> Value | None:
    """Follow ``path`` down from the root; None if it does not resolve."""
    value: Value = document
    for key in path:
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


# ── Per-document state ────────────────────────────────────────────


@dataclass
class DocumentState:
    """Cached analysis results for a single open document."""

    source: str = ""
    tokens: list[Token] = field(default_factory=list)
    document: Document | None = None
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)


# ── Server ────────────────────────────────────────────────────────

server = LanguageServer(
    "yrm-lsp", __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
_state: dict[str, DocumentState] = {}


def _analyze(uri: str, source: str) -> DocumentState:
    """Run Lexer → Parser, cache results, return state."""
    ds = DocumentState(source=source)
    lexer = Lexer(source, uri)
    try:
        ds.tokens = lexer.lex()
        ds.document = Parser(ds.tokens, uri).parse()
    except YrmError as e:
        ds.diagnostics = [_to_lsp_diag(e.diagnostic)]
    if not ds.tokens:
        ds.tokens = lexer.tokens
    _state[uri] = ds
    return ds


def _publish(uri: str, ds: DocumentState) -> None:
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


def _contains(span: Span, line: int, character: int) -> bool:
    """Check if a 0-indexed position falls inside a single-line span."""
    return (
        span.start_line - 1 == line
        and span.start_col - 1 <= character <= span.end_col
    )


# ── LSP Feature Handlers ─────────────────────────────────────────


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
    uri = params.text_document.uri
    _publish(uri, _analyze(uri, params.text_document.text))


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    # Full sync, last change holds the whole text
    source = params.content_changes[-1].text if params.content_changes else ""
    _publish(uri, _analyze(uri, source))


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
    _state.pop(params.text_document.uri, None)


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams) -> lsp.Hover | None:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.document is None:
        return None
    return hover_for(ds, params.position.line, params.position.character)


def hover_for(ds: DocumentState, line: int, character: int) -> lsp.Hover | None:
    """Describe the key under a 0-indexed position."""
    if ds.document is None:
        return None
    for entry in key_entries(ds.tokens):
        if not _contains(entry.span, line, character):
            continue
        value = lookup(ds.document, entry.path)
        if value is None:
            return None
        kind = value_kind(value)
        dotted = ".".join(entry.path)
        if isinstance(value, dict):
            content = f"**{kind}** `{dotted}` ({len(value)} keys)"
        else:
            content = f"**{kind}** `{dotted}` = `{value!r}`"
        return lsp.Hover(
            contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=content),
            range=span_to_range(entry.span),
        )
    return None


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams) -> list[lsp.DocumentSymbol]:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.document is None:
        return []
    return outline(ds.tokens, ds.document)


def outline(tokens: list[Token], document: Document) -> list[lsp.DocumentSymbol]:
    """Build the nested key outline of a parsed document."""
    children: dict[tuple[str, ...], list[KeyEntry]] = {}
    for entry in key_entries(tokens):
        children.setdefault(entry.path[:-1], []).append(entry)

    def build(entry: KeyEntry) -> lsp.DocumentSymbol | None:
        value = lookup(document, entry.path)
        if value is None:
            return None
        kind = value_kind(value)
        nested = [s for s in map(build, children.get(entry.path, [])) if s is not None]
        return lsp.DocumentSymbol(
            name=entry.path[-1],
            kind=_SYMBOL_KINDS[kind],
            range=span_to_range(entry.span),
            selection_range=span_to_range(entry.span),
            detail=kind if isinstance(value, dict) else repr(value),
            children=nested if nested else None,
        )

    return [s for s in map(build, children.get((), [])) if s is not None]


# ── Entry point ──────────────────────────────────────────────────


def main() -> None:
    """Start the yrm language server on stdio."""
    server.start_io()
