"""Entry points: parse yrm text or a yrm file into a document."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from yrm.errors import Diagnostic, ReadError
from yrm.lexer import Lexer
from yrm.parser import Parser
from yrm.source import SourceFile
from yrm.values import Document

logger = logging.getLogger(__name__)


def parse(text: str, filename: str = "<string>") -> Document:
    """Lex ``text`` completely, then parse the tokens.

    Raises the first LexError, ParseError or ConversionError found.
    """
    tokens = Lexer(text, filename).lex()
    return Parser(tokens, filename).parse()


def parse_file(path: str | os.PathLike[str]) -> Document:
    """Read a file and parse its contents. I/O failures raise ReadError."""
    source = read_source(Path(path))
    return parse(source.content, source.name)


def read_source(path: Path) -> SourceFile:
    logger.debug("reading %s", path)
    try:
        return SourceFile.read(path)
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        raise ReadError(Diagnostic(
            code="E001",
            message=f"could not read file {path}: {reason}",
        )) from exc
