"""Coverage-to-authorship attribution."""

from commitcov.attribution.aggregator import fold
from commitcov.attribution.orchestrator import (
    AttributionResult,
    SkippedFile,
    attribute,
    attribute_report,
)
from commitcov.attribution.summary import (
    NO_EMAIL_KEY,
    AuthorNotFoundError,
    CommitterStat,
    CoverageSummary,
    SummaryError,
    compute_percent,
)

__all__ = [
    "AttributionResult",
    "AuthorNotFoundError",
    "CommitterStat",
    "CoverageSummary",
    "NO_EMAIL_KEY",
    "SkippedFile",
    "SummaryError",
    "attribute",
    "attribute_report",
    "compute_percent",
    "fold",
]
