"""Pygments lexer for yrm configuration files."""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Comment,
    Error,
    Keyword,
    Name,
    Number,
    Punctuation,
    String,
    Whitespace,
)


class YrmLexer(RegexLexer):
    """Pygments lexer for yrm configuration files."""

    name = "yrm"
    aliases = ["yrm"]
    filenames = ["*.yrm"]
    mimetypes = ["text/x-yrm"]

    tokens = {
        "root": [
            (r"\n", Whitespace),
            # Tabs are indentation, spaces are ignored
            (r"[ \t]+", Whitespace),
            (r"//.*$", Comment.Single),
            # Key followed by its colon
            (r"([A-Za-z_]+)(:)", bygroups(Name.Tag, Punctuation), "value"),
        ],
        "value": [
            (r"[ \t]+", Whitespace),
            (r"\n", Whitespace, "#pop"),
            (r"[+-]?[0-9_]*\.[0-9_]*", Number.Float),
            (r"[+-]?[0-9_]+", Number.Integer),
            (r"true|false", Keyword.Constant),
            (r'"', String.Double, "string"),
        ],
        # Escapes are kept as written, so any escaped byte is accepted
        "string": [
            (r"\\.", String.Escape),
            (r'[^"\\\n]+', String.Double),
            (r'"', String.Double, "#pop"),
            (r"\n", Error, "#pop:2"),
        ],
    }
