"""Tests for diagnostics rendering and the error types."""

from __future__ import annotations

import pytest

from yrm.errors import (
    Diagnostic,
    DiagnosticLabel,
    DiagnosticRenderer,
    LexError,
    ParseError,
    ReadError,
)
from yrm.loader import parse
from yrm.source import SourceFile, Span


def render(source: str, name: str = "f.yrm") -> str:
    """Helper: parse failing source and render its diagnostic without color."""
    with pytest.raises((LexError, ParseError)) as exc_info:
        parse(source, name)
    renderer = DiagnosticRenderer(color=False)
    return renderer.render(exc_info.value.diagnostic, SourceFile(source, name))


class TestDiagnosticRenderer:
    def test_header_and_location(self):
        out = render("a: 1\na: 2\n")
        lines = out.splitlines()
        assert lines[0] == "error[E203]: duplicate key 'a'"
        assert lines[1] == "  --> f.yrm:2:1"

    def test_source_line_and_caret(self):
        out = render("a: 1\na: 2\n")
        assert "     2 | a: 2" in out
        assert out.splitlines()[-1] == "     | ^"

    def test_caret_under_multi_char_span(self):
        out = render("abc: 1\nabc: 2\n")
        assert out.splitlines()[-1] == "     | ^^^"

    def test_tabs_are_widened(self):
        out = render("a:\n\tb c\n")
        assert "     2 |     b c" in out
        assert out.splitlines()[-1] == "     |      ^"

    def test_without_source(self):
        diag = Diagnostic(
            code="E203",
            message="duplicate key 'a'",
            labels=[DiagnosticLabel(span=Span("f.yrm", 2, 1, 2, 1))],
        )
        out = DiagnosticRenderer(color=False).render(diag)
        assert out.splitlines() == [
            "error[E203]: duplicate key 'a'",
            "  --> f.yrm:2:1",
            "     |",
        ]

    def test_source_for_another_file_is_not_shown(self):
        diag = Diagnostic(
            code="E100",
            message="expected ':'",
            labels=[DiagnosticLabel(span=Span("a.yrm", 1, 2, 1, 2))],
        )
        out = DiagnosticRenderer(color=False).render(diag, SourceFile("x y\n", "b.yrm"))
        assert "x y" not in out

    def test_label_message_and_notes(self):
        diag = Diagnostic(
            code="E201",
            message="incomplete nested structure",
            labels=[DiagnosticLabel(span=Span("f.yrm", 2, 1, 2, 1), message="block ends here")],
            notes=["a nested block needs at least one entry"],
        )
        out = DiagnosticRenderer(color=False).render(diag)
        assert "block ends here" in out
        assert "= note: a nested block needs at least one entry" in out

    def test_color(self):
        diag = Diagnostic(code="E001", message="could not read file x")
        out = DiagnosticRenderer(color=True).render(diag)
        assert "\033[1;31m" in out
        assert "\033[0m" in out


class TestErrors:
    def test_str_includes_location(self):
        diag = Diagnostic(
            code="E203",
            message="duplicate key 'a'",
            labels=[DiagnosticLabel(span=Span("f.yrm", 2, 1, 2, 1))],
        )
        err = ParseError(diag)
        assert str(err) == "f.yrm:2:1: duplicate key 'a'"
        assert err.code == "E203"
        assert err.span == Span("f.yrm", 2, 1, 2, 1)

    def test_str_without_location(self):
        err = ReadError(Diagnostic(code="E001", message="could not read file x"))
        assert str(err) == "could not read file x"
        assert err.span is None
