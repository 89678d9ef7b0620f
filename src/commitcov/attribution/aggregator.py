"""Join one coverage record against one file's authorship."""

from __future__ import annotations

from commitcov.attribution.summary import CoverageSummary
from commitcov.authorship.models import AuthorshipMap
from commitcov.coverage.models import CoverageRecord


def fold(record: CoverageRecord, authorship: AuthorshipMap, summary: CoverageSummary) -> int:
    """Add every line known to both sides to the summary.

    Lines present only in the coverage record (no blame) or only in the
    authorship map (not instrumented) are ignored.

    Args:
        record: Coverage facts for one file.
        authorship: Blame for the same file.
        summary: Summary updated in place.

    Returns:
        Number of lines folded into the summary.
    """
    folded = 0
    for line_number in sorted(record.lines.keys() & authorship.lines.keys()):
        blame = authorship.lines[line_number]
        summary.ensure_author(blame.email, blame.name)
        summary.record_line(blame.email, record.lines[line_number])
        folded += 1
    return folded
