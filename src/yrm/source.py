"""Source text representation and span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


class SourceFile:
    """Loaded source text with line access for diagnostics."""

    def __init__(self, content: str, name: str = "<string>") -> None:
        self.name = name
        self.content = content
        self.lines = content.splitlines()

    @classmethod
    def read(cls, path: Path) -> SourceFile:
        return cls(path.read_text(encoding="utf-8"), str(path))

    def line_at(self, n: int) -> str | None:
        """Return the 1-indexed line, or None if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return None
