"""Drive attribution over a coverage report.

Records are pulled one at a time from the reader, blamed through the
configured provider and folded into a single summary. Files that are not
under version control are skipped and reported; any other blame failure
aborts the run, since a summary missing arbitrary files is not trustworthy.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx
import structlog

from commitcov.attribution.aggregator import fold
from commitcov.attribution.summary import CoverageSummary
from commitcov.authorship.base import AuthorshipProvider
from commitcov.authorship.errors import AuthorshipError, FileNotTrackedError
from commitcov.core.errors import AttributionError, CoverageError
from commitcov.coverage.models import CoverageRecord, ReadDiagnostic
from commitcov.coverage.parsers.base import CoverageRecordStream

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """A coverage record that could not be attributed."""

    path: str
    reason: str


@dataclass
class AttributionResult:
    """Outcome of one attribution run."""

    summary: CoverageSummary
    files_seen: int = 0
    files_attributed: int = 0
    skipped: list[SkippedFile] = field(default_factory=list)
    report_diagnostics: list[ReadDiagnostic] = field(default_factory=list)
    report_complete: bool = True

    @property
    def is_partial(self) -> bool:
        """True when files were skipped or the report was not fully read."""
        return bool(self.skipped) or not self.report_complete


def attribute(
    records: Iterable[CoverageRecord],
    provider: AuthorshipProvider,
    *,
    summary: CoverageSummary | None = None,
) -> AttributionResult:
    """Fold every record into a summary using the provider's blame.

    Args:
        records: Coverage records, typically a CoverageRecordStream.
        provider: Source of per-line authorship.
        summary: Existing summary to extend. A new one is created if omitted.

    Returns:
        The summary plus bookkeeping about skipped files and reader diagnostics.

    Raises:
        AttributionError: If blame fails for a reason other than the file not
            being tracked.
    """
    result = AttributionResult(summary=summary if summary is not None else CoverageSummary())

    for record in records:
        result.files_seen += 1
        try:
            authorship = provider.get_authorship(record.path)
        except FileNotTrackedError as e:
            reason = e.reason or str(e)
            logger.warning("file_not_tracked", path=record.path, reason=reason)
            result.skipped.append(SkippedFile(record.path, reason))
            continue
        except (AuthorshipError, OSError, httpx.HTTPError) as e:
            logger.error(
                "attribution_aborted",
                path=record.path,
                provider=provider.name,
                error=str(e),
            )
            raise AttributionError.authorship_failed(record.path, str(e)) from e

        folded = fold(record, authorship, result.summary)
        result.files_attributed += 1
        logger.debug(
            "file_attributed",
            path=record.path,
            coverage_lines=record.lines_found,
            folded=folded,
        )

    if isinstance(records, CoverageRecordStream):
        result.report_diagnostics = records.diagnostics
        result.report_complete = records.completed

    logger.info(
        "attribution_complete",
        files_seen=result.files_seen,
        files_attributed=result.files_attributed,
        skipped=len(result.skipped),
        report_complete=result.report_complete,
        total_lines=result.summary.lines,
        total_covered=result.summary.covered,
    )
    return result


def attribute_report(
    stream: CoverageRecordStream,
    provider: AuthorshipProvider,
    *,
    fail_on_partial_report: bool = False,
) -> AttributionResult:
    """Attribute a whole report stream and close it afterwards.

    Raises:
        AttributionError: As for ``attribute``.
        CoverageError: If ``fail_on_partial_report`` is set and the report
            could not be read to its end.
    """
    with stream:
        result = attribute(stream, provider)

    for diagnostic in result.report_diagnostics:
        logger.warning("coverage_report_diagnostic", path=str(stream.path), diagnostic=str(diagnostic))

    if fail_on_partial_report and not result.report_complete:
        raise CoverageError.partial(
            str(stream.path),
            [str(d) for d in result.report_diagnostics],
        )
    return result
