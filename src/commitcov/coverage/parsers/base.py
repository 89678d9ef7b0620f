"""Coverage reader protocol and the record stream it produces."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import TracebackType
from typing import Protocol

from commitcov.coverage.models import CoverageRecord, ReadDiagnostic, ReadOutcome


class CoverageRecordStream:
    """Lazy, finite, non-restartable sequence of CoverageRecord values.

    Wraps the reader's generator, which owns the open document handle. The
    handle is released when the sequence is exhausted, when reading fails,
    or when the stream is closed (directly or by leaving a ``with`` block).
    Iterating a second time yields nothing.
    """

    def __init__(
        self,
        path: Path,
        source_format: str,
        records: Iterator[CoverageRecord],
        outcome: ReadOutcome,
    ) -> None:
        self.path = path
        self.source_format = source_format
        self._records = records
        self._outcome = outcome

    def __iter__(self) -> CoverageRecordStream:
        return self

    def __next__(self) -> CoverageRecord:
        return next(self._records)

    def __enter__(self) -> CoverageRecordStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        close = getattr(self._records, "close", None)
        if close is not None:
            close()

    @property
    def diagnostics(self) -> list[ReadDiagnostic]:
        return list(self._outcome.diagnostics)

    @property
    def completed(self) -> bool:
        """True once the whole document was read without decode errors."""
        return self._outcome.completed

    @property
    def records_emitted(self) -> int:
        return self._outcome.records_emitted


class CoverageReader(Protocol):
    """Protocol for coverage format readers.

    Each reader handles one coverage format and streams it as
    CoverageRecord values.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'cobertura')."""
        ...

    def can_parse(self, path: Path) -> bool:
        """Check if this reader can handle the given file.

        Uses file names and content sniffing for auto-detection.
        """
        ...

    def open(self, path: Path) -> CoverageRecordStream:
        """Open a coverage document for streaming.

        Raises:
            CoverageParseError: If the document does not exist or cannot be opened.
        """
        ...
