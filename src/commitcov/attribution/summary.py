"""Running per-author coverage statistics."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from commitcov.authorship.models import UNKNOWN

# per_author key for the author without an email; no address can take it
NO_EMAIL_KEY = "<no email>"


def compute_percent(lines: int, covered: int) -> float:
    """Percentage of covered lines, 0.0 when no lines were seen."""
    if lines == 0:
        return 0.0
    return covered / lines * 100.0


class SummaryError(Exception):
    """Base error for summary mutations."""


class AuthorNotFoundError(SummaryError, KeyError):
    """Mutation targeted an author that was never created."""

    def __init__(self, email: str | None) -> None:
        super().__init__(f"Author not found: {email or UNKNOWN}")
        self.email = email

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


@dataclass(slots=True)
class CommitterStat:
    """Line counts attributed to one author email.

    ``percent`` is stored and recomputed on every mutation so that reads
    between increments are always consistent with the counts.
    """

    email: str | None
    name: str | None = None
    lines: int = 0
    covered: int = 0
    percent: float = 0.0

    @classmethod
    def from_counts(
        cls,
        email: str | None,
        name: str | None,
        lines: int,
        covered: int,
    ) -> CommitterStat:
        return cls(email, name, lines, covered, compute_percent(lines, covered))

    @property
    def display_email(self) -> str:
        return self.email or UNKNOWN

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN

    def increment(self, covered: bool) -> None:
        self.lines += 1
        if covered:
            self.covered += 1
        self.percent = compute_percent(self.lines, self.covered)

    def set_counts(self, lines: int, covered: int) -> None:
        if lines < 0 or covered < 0:
            raise ValueError("Counts must be non-negative")
        if covered > lines:
            raise ValueError(f"Covered count {covered} exceeds line count {lines}")
        self.lines = lines
        self.covered = covered
        self.percent = compute_percent(lines, covered)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "lines": self.lines,
            "covered": self.covered,
            "percent": self.percent,
        }


@dataclass
class CoverageSummary:
    """Global and per-author totals for one run.

    Authors are keyed by email exactly as the blame reported it; ``None`` is
    the key for lines whose author has no email. Write methods other than
    ensure_author require the author to exist and raise AuthorNotFoundError
    otherwise.
    """

    lines: int = 0
    covered: int = 0
    percent_covered: float = 0.0
    _authors: dict[str | None, CommitterStat] = field(default_factory=dict, repr=False)

    @property
    def authors(self) -> Mapping[str | None, CommitterStat]:
        """Read-only view of per-author stats."""
        return MappingProxyType(self._authors)

    def get_author(self, email: str | None) -> CommitterStat | None:
        return self._authors.get(email)

    def sorted_authors(self) -> list[CommitterStat]:
        """Authors by descending percentage, then descending line count."""
        return sorted(self._authors.values(), key=lambda s: (-s.percent, -s.lines))

    def ensure_author(self, email: str | None, name: str | None = None) -> CommitterStat:
        """Return the author's stat, creating it with zero counts if absent.

        An existing stat keeps its counts; a missing name is back-filled.
        """
        stat = self._authors.get(email)
        if stat is None:
            stat = CommitterStat(email=email, name=name or None)
            self._authors[email] = stat
        elif stat.name is None and name:
            stat.name = name
        return stat

    def record_line(self, email: str | None, covered: bool) -> None:
        """Count one attributed line for the author and the global totals."""
        stat = self._require(email)
        stat.increment(covered)
        self.lines += 1
        if covered:
            self.covered += 1
        self.percent_covered = compute_percent(self.lines, self.covered)

    def set_author_counts(self, email: str | None, lines: int, covered: int) -> None:
        """Overwrite an author's counts. Global totals are left untouched."""
        self._require(email).set_counts(lines, covered)

    def reset_author(self, email: str | None) -> None:
        self._require(email).set_counts(0, 0)

    def _require(self, email: str | None) -> CommitterStat:
        stat = self._authors.get(email)
        if stat is None:
            raise AuthorNotFoundError(email)
        return stat

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_lines": self.lines,
            "total_covered": self.covered,
            "total_percent": self.percent_covered,
            "per_author": {
                NO_EMAIL_KEY if stat.email is None else stat.email: stat.to_dict()
                for stat in self.sorted_authors()
            },
        }
