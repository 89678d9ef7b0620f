"""Streaming coverage report reading.

Usage:
    from commitcov.coverage import open_report

    with open_report(Path("coverage.xml")) as stream:
        for record in stream:
            ...
        if not stream.completed:
            print(stream.diagnostics)
"""

from commitcov.coverage.models import (
    CoverageParseError,
    CoverageRecord,
    ReadDiagnostic,
    ReadOutcome,
)
from commitcov.coverage.parsers import (
    READER_BY_FORMAT,
    READER_REGISTRY,
    CoberturaReader,
    CoverageReader,
    CoverageRecordStream,
    detect_reader,
    open_report,
)

__all__ = [
    # Models
    "CoverageParseError",
    "CoverageRecord",
    "ReadDiagnostic",
    "ReadOutcome",
    # Readers
    "CoberturaReader",
    "CoverageReader",
    "CoverageRecordStream",
    "READER_BY_FORMAT",
    "READER_REGISTRY",
    "detect_reader",
    "open_report",
]
