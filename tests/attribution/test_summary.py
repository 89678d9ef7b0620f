"""Tests for CoverageSummary and CommitterStat."""

import pytest

from commitcov.attribution import (
    NO_EMAIL_KEY,
    AuthorNotFoundError,
    CommitterStat,
    CoverageSummary,
    SummaryError,
    compute_percent,
)


class TestComputePercent:
    def test_zero_lines_is_zero(self) -> None:
        assert compute_percent(0, 0) == 0.0

    def test_ratio(self) -> None:
        assert compute_percent(4, 3) == 75.0

    def test_all_covered(self) -> None:
        assert compute_percent(7, 7) == 100.0


class TestCommitterStat:
    def test_from_counts_computes_percent(self) -> None:
        stat = CommitterStat.from_counts("a@example.com", "A", 8, 2)
        assert stat.percent == 25.0

    def test_increment_recomputes_every_time(self) -> None:
        stat = CommitterStat("a@example.com")
        stat.increment(True)
        assert stat.percent == 100.0
        stat.increment(False)
        assert stat.percent == 50.0
        assert (stat.lines, stat.covered) == (2, 1)

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValueError):
            CommitterStat("a@example.com").set_counts(-1, 0)

    def test_covered_above_lines_rejected(self) -> None:
        stat = CommitterStat.from_counts("a@example.com", "A", 2, 1)

        with pytest.raises(ValueError, match="exceeds"):
            stat.set_counts(2, 3)

        assert (stat.lines, stat.covered, stat.percent) == (2, 1, 50.0)

    def test_display_values_for_missing_identity(self) -> None:
        stat = CommitterStat(None)
        assert stat.display_email == "unknown"
        assert stat.display_name == "unknown"


class TestEnsureAuthor:
    """Create-if-absent semantics."""

    def test_creates_with_zero_counts(self) -> None:
        summary = CoverageSummary()
        stat = summary.ensure_author("a@example.com", "Alice")

        assert (stat.lines, stat.covered, stat.percent) == (0, 0, 0.0)
        assert summary.get_author("a@example.com") is stat

    def test_second_call_is_noop(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com", "Alice")
        summary.record_line("a@example.com", True)

        again = summary.ensure_author("a@example.com", "Someone Else")

        assert len(summary.authors) == 1
        assert again.lines == 1
        assert again.name == "Alice"

    def test_backfills_missing_name(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")
        summary.ensure_author("a@example.com", "Alice")

        assert summary.get_author("a@example.com").name == "Alice"  # type: ignore[union-attr]

    def test_none_is_a_distinct_identity(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author(None)
        summary.ensure_author("unknown")

        assert set(summary.authors) == {None, "unknown"}


class TestRecordLine:
    """Running totals stay consistent after every increment."""

    def test_updates_author_and_global(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")
        summary.ensure_author("b@example.com")

        summary.record_line("a@example.com", True)
        assert summary.percent_covered == 100.0

        summary.record_line("b@example.com", False)
        assert (summary.lines, summary.covered) == (2, 1)
        assert summary.percent_covered == 50.0
        assert summary.get_author("a@example.com").percent == 100.0  # type: ignore[union-attr]
        assert summary.get_author("b@example.com").percent == 0.0  # type: ignore[union-attr]

    def test_requires_existing_author(self) -> None:
        summary = CoverageSummary()
        with pytest.raises(AuthorNotFoundError) as exc_info:
            summary.record_line("ghost@example.com", True)

        assert exc_info.value.email == "ghost@example.com"
        assert summary.lines == 0


class TestSetAuthorCounts:
    def test_overwrites_counts(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")

        summary.set_author_counts("a@example.com", 10, 4)

        stat = summary.get_author("a@example.com")
        assert stat is not None
        assert (stat.lines, stat.covered, stat.percent) == (10, 4, 40.0)

    def test_leaves_global_totals(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")
        summary.set_author_counts("a@example.com", 10, 4)

        assert (summary.lines, summary.covered) == (0, 0)

    def test_missing_author_fails(self) -> None:
        with pytest.raises(AuthorNotFoundError):
            CoverageSummary().set_author_counts("ghost@example.com", 1, 1)


class TestResetAuthor:
    def test_zeroes_only_that_author(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")
        summary.ensure_author("b@example.com")
        summary.set_author_counts("a@example.com", 3, 2)
        summary.set_author_counts("b@example.com", 5, 5)

        summary.reset_author("a@example.com")

        a = summary.get_author("a@example.com")
        b = summary.get_author("b@example.com")
        assert a is not None and b is not None
        assert (a.lines, a.covered, a.percent) == (0, 0, 0.0)
        assert (b.lines, b.covered, b.percent) == (5, 5, 100.0)

    def test_missing_author_fails_identifiably(self) -> None:
        with pytest.raises(AuthorNotFoundError) as exc_info:
            CoverageSummary().reset_author(None)

        err = exc_info.value
        assert isinstance(err, KeyError)
        assert isinstance(err, SummaryError)
        assert err.email is None
        assert str(err) == "Author not found: unknown"


class TestReadViews:
    def test_authors_view_is_read_only(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")

        with pytest.raises(TypeError):
            summary.authors["b@example.com"] = CommitterStat("b@example.com")  # type: ignore[index]

    def test_sorted_by_percent_then_lines(self) -> None:
        summary = CoverageSummary()
        for email, lines, covered in [
            ("low@example.com", 4, 1),
            ("full-small@example.com", 1, 1),
            ("full-big@example.com", 9, 9),
            ("half@example.com", 2, 1),
        ]:
            summary.ensure_author(email)
            summary.set_author_counts(email, lines, covered)

        assert [s.email for s in summary.sorted_authors()] == [
            "full-big@example.com",
            "full-small@example.com",
            "half@example.com",
            "low@example.com",
        ]

    def test_to_dict(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com", "Alice")
        summary.ensure_author(None)
        summary.record_line("a@example.com", True)
        summary.record_line(None, False)

        assert summary.to_dict() == {
            "total_lines": 2,
            "total_covered": 1,
            "total_percent": 50.0,
            "per_author": {
                "a@example.com": {"name": "Alice", "lines": 1, "covered": 1, "percent": 100.0},
                NO_EMAIL_KEY: {"name": None, "lines": 1, "covered": 0, "percent": 0.0},
            },
        }

    def test_no_email_author_kept_apart_from_literal_unknown(self) -> None:
        # Given an author without email and one whose address is literally "unknown"
        summary = CoverageSummary()
        summary.ensure_author(None)
        summary.ensure_author("unknown", "Unknown Person")
        summary.record_line(None, True)
        summary.record_line("unknown", False)

        # When
        result = summary.to_dict()

        # Then
        per_author = result["per_author"]
        assert set(per_author) == {NO_EMAIL_KEY, "unknown"}
        assert sum(a["lines"] for a in per_author.values()) == result["total_lines"] == 2
        assert sum(a["covered"] for a in per_author.values()) == result["total_covered"] == 1
