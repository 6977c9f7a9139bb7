"""Parser for yrm configuration files.

Builds a nested mapping from a token list in one pass, keeping the open
mappings on an explicit stack. A line's depth is the number of TAB
tokens that start it.
"""

from __future__ import annotations

import logging
import math

from yrm.errors import ConversionError, Diagnostic, DiagnosticLabel, ParseError
from yrm.source import Span
from yrm.tokens import SCALAR_KINDS, Token, TokenKind
from yrm.values import INT64_MAX, INT64_MIN, Document, Value

logger = logging.getLogger(__name__)


class Parser:
    """Parses a list of tokens into a yrm document."""

    def __init__(self, tokens: list[Token], filename: str = "<string>") -> None:
        self.tokens = tokens
        self.pos = 0
        self.filename = filename
        end = tokens[-1].span if tokens else Span(filename, 1, 1, 1, 1)
        self._eof = Token(TokenKind.EOF, "", end)

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self._eof

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        self.pos += 1
        return tok

    def _expect(self, kind: TokenKind, what: str) -> Token:
        tok = self._current()
        if tok.kind != kind:
            raise self._error("E204", f"expected {what}, got {tok}", tok)
        return self._advance()

    def _count(self, kind: TokenKind) -> int:
        """Count consecutive tokens of ``kind`` without consuming them."""
        n = 0
        while self.pos + n < len(self.tokens) and self.tokens[self.pos + n].kind == kind:
            n += 1
        return n

    def _error(self, code: str, message: str, tok: Token) -> ParseError:
        return ParseError(Diagnostic(
            code=code,
            message=message,
            labels=[DiagnosticLabel(span=tok.span)],
        ))

    def _skip_blank_lines(self) -> None:
        """Skip empty lines and comment lines."""
        while True:
            if self._at(TokenKind.NEWLINE):
                self._advance()
                continue
            if self._at(TokenKind.COMMENT):
                self._advance()
                # A trailing comment may close the input; the Go yrm parser
                # required a newline here.
                if self._at(TokenKind.EOF):
                    return
                self._expect(TokenKind.NEWLINE, "new line after comment")
                continue
            return

    # ── Parsing ──────────────────────────────────────────────────

    def parse(self) -> Document:
        """Parse the entire token list into the root mapping."""
        root: Document = {}
        # Open nested mappings, innermost last, each with the key that opened it.
        # A line's expected depth is the number of open nested mappings.
        blocks: list[tuple[Document, Token]] = []

        # Each iteration parses one line holding an entry, or closes a block.
        while True:
            self._skip_blank_lines()
            depth = len(blocks)
            mapping = blocks[-1][0] if blocks else root

            tok = self._current()
            if tok.kind == TokenKind.EOF:
                while blocks:
                    self._close_block(root, blocks)
                return root

            tabs = self._count(TokenKind.TAB)
            if tabs > depth:
                raise self._error(
                    "E200", f"expected {depth} tabs, got {tabs} tabs", tok,
                )
            if tabs < depth:
                # A block may not close before it holds an entry.
                if not mapping:
                    raise self._error("E201", "incomplete nested structure", tok)
                # The tabs are left for the enclosing level to read.
                self._close_block(root, blocks)
                continue

            self.pos += depth
            key = self._expect(TokenKind.IDENTIFIER, "identifier")
            self._expect(TokenKind.COLON_SIGN, "':'")

            nxt = self._current()
            if nxt.kind == TokenKind.NEWLINE:
                self._advance()
                logger.debug("entering level %d at token %d", depth + 1, self.pos)
                blocks.append(({}, key))
            elif nxt.kind in SCALAR_KINDS:
                self._check_duplicate(mapping, key)
                mapping[key.literal] = self._to_value(nxt)
                self._advance()
                self._expect(TokenKind.NEWLINE, "new line")
            else:
                raise self._error(
                    "E205", f"unexpected token after colon: {nxt}", nxt,
                )

    def _close_block(self, root: Document, blocks: list[tuple[Document, Token]]) -> None:
        """Pop the innermost mapping and store it under its key."""
        sub, key = blocks.pop()
        if not sub:
            raise self._error("E202", "unfinished nested structure", key)
        logger.debug("leaving level %d with %d keys", len(blocks), len(sub))
        parent = blocks[-1][0] if blocks else root
        self._check_duplicate(parent, key)
        parent[key.literal] = sub

    def _check_duplicate(self, mapping: Document, key: Token) -> None:
        if key.literal in mapping:
            raise self._error("E203", f"duplicate key '{key.literal}'", key)

    # ── Scalars ──────────────────────────────────────────────────

    def _to_value(self, tok: Token) -> Value:
        match tok.kind:
            case TokenKind.INT:
                return self._to_int(tok)
            case TokenKind.FLOAT:
                return self._to_float(tok)
            case TokenKind.STRING:
                return tok.literal
            case TokenKind.BOOL:
                return tok.literal == "true"
        raise self._error("E205", f"unexpected token after colon: {tok}", tok)

    def _conversion_error(self, code: str, message: str, tok: Token) -> ConversionError:
        return ConversionError(Diagnostic(
            code=code,
            message=message,
            labels=[DiagnosticLabel(span=tok.span)],
        ))

    def _to_int(self, tok: Token) -> int:
        try:
            value = int(tok.literal)
        except ValueError:
            raise self._conversion_error(
                "E300", f"invalid integer literal '{tok.literal}'", tok,
            ) from None
        if not INT64_MIN <= value <= INT64_MAX:
            raise self._conversion_error(
                "E301", f"integer literal '{tok.literal}' out of 64-bit range", tok,
            )
        return value

    def _to_float(self, tok: Token) -> float:
        try:
            value = float(tok.literal)
        except ValueError:
            raise self._conversion_error(
                "E302", f"invalid float literal '{tok.literal}'", tok,
            ) from None
        if math.isinf(value):
            raise self._conversion_error(
                "E303", f"float literal '{tok.literal}' out of range", tok,
            )
        return value
