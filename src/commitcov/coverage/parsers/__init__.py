"""Coverage reader registry and auto-detection.

This module provides:
- READER_REGISTRY: All available readers
- detect_reader: Auto-detect format from file/directory
- open_report: Convenience function to open a stream with auto-detection

Only Cobertura is registered. Other formats plug in as further readers
producing the same CoverageRecordStream.
"""

from collections.abc import Sequence
from pathlib import Path

from commitcov.coverage.models import CoverageParseError

from .base import CoverageReader, CoverageRecordStream
from .cobertura import CoberturaReader

READER_REGISTRY: Sequence[CoverageReader] = (CoberturaReader(),)

READER_BY_FORMAT: dict[str, CoverageReader] = {r.format_id: r for r in READER_REGISTRY}

__all__ = [
    "READER_REGISTRY",
    "READER_BY_FORMAT",
    "detect_reader",
    "open_report",
    "CoverageReader",
    "CoverageRecordStream",
    "CoberturaReader",
]


def detect_reader(path: Path) -> CoverageReader | None:
    """Return the first registered reader that claims the path, if any."""
    for reader in READER_REGISTRY:
        if reader.can_parse(path):
            return reader
    return None


def open_report(path: Path, *, format_id: str | None = None) -> CoverageRecordStream:
    """Open a coverage report as a stream of CoverageRecord values.

    Args:
        path: Path to coverage file or directory.
        format_id: Force specific format (skip auto-detection).

    Raises:
        CoverageParseError: If the path is missing or the format unknown.
    """
    if not path.exists():
        raise CoverageParseError(f"Coverage path not found: {path}")

    if format_id:
        reader = READER_BY_FORMAT.get(format_id)
        if not reader:
            valid = ", ".join(sorted(READER_BY_FORMAT.keys()))
            raise CoverageParseError(
                f"Unknown coverage format: {format_id!r}. Valid formats: {valid}"
            )
    else:
        reader = detect_reader(path)
        if not reader:
            raise CoverageParseError(
                f"Could not detect coverage format for: {path}. Supported formats: cobertura"
            )

    return reader.open(path)
