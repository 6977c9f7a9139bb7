"""Token kinds and token representation for the yrm lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yrm.source import Span


class TokenKind(Enum):
    # Basic
    ILLEGAL = auto()
    EOF = auto()
    IDENTIFIER = auto()

    # Literals
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    BOOL = auto()

    # Special characters
    COLON_SIGN = auto()
    NEWLINE = auto()
    TAB = auto()
    COMMENT = auto()


# Kinds whose literal carries no information beyond the kind itself.
_BARE_KINDS = frozenset({
    TokenKind.ILLEGAL,
    TokenKind.EOF,
    TokenKind.COLON_SIGN,
    TokenKind.NEWLINE,
    TokenKind.TAB,
})

SCALAR_KINDS: frozenset[TokenKind] = frozenset({
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.STRING,
    TokenKind.BOOL,
})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str
    span: Span

    def __str__(self) -> str:
        if self.kind in _BARE_KINDS:
            return self.kind.name
        return f"{self.kind.name} {self.literal!r}"
