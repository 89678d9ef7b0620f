"""Coverage data model.

File-centric, line-level model: each record says, for one source file, which
instrumented lines were hit. Records are produced one at a time by a reader
and are not retained after attribution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

DiagnosticKind = Literal["truncated", "malformed", "missing_filename"]


class CoverageParseError(Exception):
    """Coverage report could not be opened or identified."""

    pass


@dataclass(slots=True)
class CoverageRecord:
    """Coverage data for a single source file.

    Lines map line number → covered. Line numbers are 1-based; the reader
    never stores line 0.
    """

    path: str
    lines: dict[int, bool] = field(default_factory=dict)  # line_number → covered

    def add_line(self, line_number: int, covered: bool) -> None:
        self.lines[line_number] = covered

    @property
    def lines_found(self) -> int:
        return len(self.lines)


@dataclass(frozen=True, slots=True)
class ReadDiagnostic:
    """Something the reader recovered from while streaming a report.

    A diagnostic never invalidates the records emitted before it; it explains
    why fewer records than expected may have been produced.
    """

    kind: DiagnosticKind
    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} at {self.line}:{self.column}: {self.message}"


@dataclass(slots=True)
class ReadOutcome:
    """Mutable bookkeeping shared between a reader and its stream."""

    diagnostics: list[ReadDiagnostic] = field(default_factory=list)
    completed: bool = False
    records_emitted: int = 0
