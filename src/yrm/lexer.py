"""Lexer for yrm configuration files.

A byte-level state machine. Exactly one state is active at a time; each
state consumes some input, emits zero or more tokens and names the next
state. Scanning halts after an EOF token or at the first ILLEGAL token.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from yrm.errors import Diagnostic, DiagnosticLabel, LexError
from yrm.source import Span
from yrm.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_DIGITS = "0123456789_"
_NUMBER_START = "0123456789+-."


def _is_letter(ch: str) -> bool:
    return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'


class LexState(Enum):
    NEW_LINE = auto()
    IDENTIFIER = auto()
    COLON = auto()
    VALUE = auto()
    NUMBER = auto()
    BOOL = auto()
    STRING = auto()
    COMMENT = auto()


class Lexer:
    """Tokenizes yrm source text."""

    def __init__(self, source: str, filename: str = "<string>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        # Start of the token being scanned
        self.start = 0
        self.start_line = 1
        self.start_col = 1
        self.tokens: list[Token] = []
        self.diagnostic: Diagnostic | None = None

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list.

        Raises LexError at the first illegal construct. The tokens scanned
        up to and including the ILLEGAL token remain on ``self.tokens``.
        """
        self.run()
        if self.diagnostic is not None:
            raise LexError(self.diagnostic)
        return self.tokens

    def run(self, state: LexState | None = LexState.NEW_LINE) -> None:
        """Drive the state machine from ``state`` until it halts."""
        while state is not None:
            logger.debug(
                "%s; pos: %d, line: %d, col: %d, current: %r",
                state.name, self.pos, self.line, self.col, self._current(),
            )
            match state:
                case LexState.NEW_LINE:
                    state = self._lex_new_line()
                case LexState.IDENTIFIER:
                    state = self._lex_identifier()
                case LexState.COLON:
                    state = self._lex_colon()
                case LexState.VALUE:
                    state = self._lex_value()
                case LexState.NUMBER:
                    state = self._lex_number()
                case LexState.BOOL:
                    state = self._lex_bool()
                case LexState.STRING:
                    state = self._lex_string()
                case LexState.COMMENT:
                    state = self._lex_comment()

    # ── Helpers ───────────────────────────────────────────────────

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return '\0'

    def _peek(self, offset: int = 1) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _accept_run(self, valid: str) -> None:
        while not self._at_end() and self._current() in valid:
            self._advance()

    def _ignore(self) -> None:
        """Drop everything scanned since the last emit."""
        self.start = self.pos
        self.start_line = self.line
        self.start_col = self.col

    def _emit(self, kind: TokenKind) -> Token:
        literal = self.source[self.start:self.pos]
        if kind == TokenKind.NEWLINE or not literal:
            end_line, end_col = self.start_line, self.start_col
        else:
            end_line, end_col = self.start_line, self.start_col + len(literal) - 1
        span = Span(self.filename, self.start_line, self.start_col, end_line, end_col)
        tok = Token(kind, literal, span)
        self.tokens.append(tok)
        self._ignore()
        return tok

    def _illegal(
        self,
        code: str,
        message: str,
        line: int | None = None,
        col: int | None = None,
    ) -> None:
        """Emit an ILLEGAL token and halt the scan."""
        line = self.line if line is None else line
        col = self.col if col is None else col
        span = Span(self.filename, line, col, line, col)
        self.tokens.append(Token(TokenKind.ILLEGAL, message, span))
        self.diagnostic = Diagnostic(
            code=code,
            message=message,
            labels=[DiagnosticLabel(span=span)],
        )
        logger.debug("illegal input at %s: %s", span, message)

    # ── States ───────────────────────────────────────────────────

    def _lex_new_line(self) -> LexState | None:
        if self._at_end():
            self._emit(TokenKind.EOF)
            return None

        ch = self._current()
        if ch == '\n':
            self._advance()
            self._emit(TokenKind.NEWLINE)
            return LexState.NEW_LINE
        if ch == '\t':
            self._advance()
            self._emit(TokenKind.TAB)
            return LexState.NEW_LINE
        if ch == '/':
            return LexState.COMMENT
        if _is_letter(ch):
            return LexState.IDENTIFIER
        if ch == ' ':
            self._advance()
            self._ignore()
            return LexState.NEW_LINE
        return self._illegal("E105", f"unexpected character {ch!r} at start of line")

    def _lex_identifier(self) -> LexState | None:
        while not self._at_end() and _is_letter(self._current()):
            self._advance()
        self._emit(TokenKind.IDENTIFIER)
        return LexState.COLON

    def _lex_colon(self) -> LexState | None:
        if self._at_end() or self._current() != ':':
            return self._illegal("E100", "expected ':'")
        self._advance()
        self._emit(TokenKind.COLON_SIGN)
        return LexState.VALUE

    def _lex_value(self) -> LexState | None:
        """Scan up to a scalar or the newline opening a nested block.

            some_key: 5
            nested:        <- a newline here starts a deeper block
                     ^ scanning starts after the colon
        """
        self._accept_run(" \t")
        self._ignore()

        if self._at_end():
            self._emit(TokenKind.EOF)
            return None

        ch = self._current()
        if ch == '\n':
            self._advance()
            self._emit(TokenKind.NEWLINE)
            return LexState.NEW_LINE
        if ch in _NUMBER_START:
            return LexState.NUMBER
        if ch == '"':
            return LexState.STRING
        if ch in ('t', 'f'):
            return LexState.BOOL
        return self._illegal("E101", f"unknown identifier {ch!r}")

    def _lex_number(self) -> LexState | None:
        if self._current() in ('+', '-'):
            self._advance()
        self._accept_run(_DIGITS)
        if not self._at_end() and self._current() == '.':
            self._advance()
            self._accept_run(_DIGITS)
            self._emit(TokenKind.FLOAT)
        else:
            self._emit(TokenKind.INT)
        return LexState.VALUE

    def _lex_bool(self) -> LexState | None:
        expected = "true" if self._current() == 't' else "false"
        for ch in expected:
            if self._at_end() or self._current() != ch:
                return self._illegal(
                    "E102", f"invalid boolean value (expected '{expected}')",
                )
            self._advance()
        self._emit(TokenKind.BOOL)
        return LexState.VALUE

    def _lex_string(self) -> LexState | None:
        quote_line, quote_col = self.line, self.col
        self._advance()  # skip opening "
        self._ignore()

        while True:
            if self._at_end() or self._current() == '\n':
                return self._illegal(
                    "E103", "unterminated quoted string", quote_line, quote_col,
                )
            ch = self._current()
            if ch == '"':
                break
            self._advance()
            if ch == '\\':
                # The escaped byte is kept as written.
                if self._at_end() or self._current() == '\n':
                    return self._illegal(
                        "E103", "unterminated quoted string", quote_line, quote_col,
                    )
                self._advance()

        self._emit(TokenKind.STRING)
        self._advance()  # skip closing "
        self._ignore()
        return LexState.VALUE

    def _lex_comment(self) -> LexState | None:
        if self._peek(1) != '/':
            return self._illegal(
                "E104", "comment must start with two forward slashes",
            )

        while not self._at_end() and self._current() != '\n':
            self._advance()
        self._emit(TokenKind.COMMENT)

        if self._at_end():
            self._emit(TokenKind.EOF)
            return None
        self._advance()
        self._emit(TokenKind.NEWLINE)
        return LexState.NEW_LINE
