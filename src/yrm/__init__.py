"""yrm: a tab-indented key/value configuration format."""

from __future__ import annotations

from yrm.errors import ConversionError, LexError, ParseError, ReadError, YrmError
from yrm.loader import parse, parse_file

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "LexError",
    "ParseError",
    "ReadError",
    "YrmError",
    "__version__",
    "parse",
    "parse_file",
]
