"""Diagnostics and the exceptions that carry them.

Every failure aborts the whole parse, so an exception carries exactly one
diagnostic: the first error found by whichever stage found it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yrm.source import SourceFile, Span


# ANSI color codes
_RED = "\033[1;31m"
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str = ""


@dataclass
class Diagnostic:
    """A single error message with optional labels and notes."""

    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def span(self) -> Span | None:
        if self.labels:
            return self.labels[0].span
        return None


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic, source: SourceFile | None = None) -> str:
        lines: list[str] = []

        # Header: error[E203]: message
        lines.append(
            f"{self._c(_RED)}error[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = None
            if source is not None and source.name == span.file:
                source_line = source.line_at(span.start_line)
            if source_line is not None:
                # Tabs are the indentation unit; widen them so carets line up.
                shown = source_line.replace("\t", "    ")
                gutter = f"{span.start_line:>4}"
                lines.append(f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {shown}")

                prefix = source_line[: span.start_col - 1]
                padding = " " * len(prefix.replace("\t", "    "))
                if span.start_line == span.end_line:
                    caret_len = max(1, span.end_col - span.start_col + 1)
                else:
                    caret_len = 1
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                    f"{padding}{self._c(_RED)}{'^' * caret_len}{self._c(_RESET)}"
                )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(_RED)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class YrmError(Exception):
    """Base error; carries the diagnostic that aborted the operation."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        span = diagnostic.span
        if span is not None:
            super().__init__(f"{span}: {diagnostic.message}")
        else:
            super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def span(self) -> Span | None:
        return self.diagnostic.span


class LexError(YrmError):
    """Malformed input found while tokenizing."""


class ParseError(YrmError):
    """The token stream does not follow the indentation grammar."""


class ConversionError(YrmError):
    """A well-formed numeric literal could not be converted to a value."""


class ReadError(YrmError):
    """The input file could not be read."""
