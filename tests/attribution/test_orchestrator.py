"""Tests for attribute / attribute_report."""

from pathlib import Path

import httpx
import pytest

from commitcov.attribution import CoverageSummary, SkippedFile, attribute, attribute_report
from commitcov.authorship import AuthorshipError, AuthorshipMap, BlameLine, FileNotTrackedError
from commitcov.core.errors import AttributionError, CoverageError, ErrorCode
from commitcov.coverage import CoberturaReader, CoverageRecord


class FakeProvider:
    """In-memory provider: every known path is blamed to one author."""

    def __init__(
        self,
        blame: dict[str, str | None],
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self._blame = blame
        self._failures = failures or {}
        self.requested: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    def get_authorship(self, path: str) -> AuthorshipMap:
        self.requested.append(path)
        if path in self._failures:
            raise self._failures[path]
        if path not in self._blame:
            raise FileNotTrackedError(path, "not in tree")
        email = self._blame[path]
        return AuthorshipMap.from_lines(
            path, [BlameLine(line, "c0", email, None) for line in range(1, 200)]
        )


class TestAttribute:
    def test_folds_every_record(self) -> None:
        records = [
            CoverageRecord("a.py", {1: True, 2: False}),
            CoverageRecord("b.py", {1: True}),
        ]
        provider = FakeProvider({"a.py": "a@example.com", "b.py": "b@example.com"})

        result = attribute(records, provider)

        assert provider.requested == ["a.py", "b.py"]
        assert (result.files_seen, result.files_attributed) == (2, 2)
        assert (result.summary.lines, result.summary.covered) == (3, 2)
        assert result.skipped == []
        assert result.report_complete
        assert not result.is_partial

    def test_untracked_file_skipped(self) -> None:
        records = [
            CoverageRecord("generated.py", {1: True}),
            CoverageRecord("a.py", {1: False}),
        ]
        provider = FakeProvider({"a.py": "a@example.com"})

        result = attribute(records, provider)

        assert result.skipped == [SkippedFile("generated.py", "not in tree")]
        assert (result.files_seen, result.files_attributed) == (2, 1)
        assert result.summary.lines == 1
        assert result.is_partial

    @pytest.mark.parametrize(
        "failure",
        [
            AuthorshipError("Failed to get blame: boom", path="b.py"),
            OSError("disk gone"),
            httpx.ConnectError("connection refused"),
        ],
    )
    def test_other_failures_abort(self, failure: Exception) -> None:
        records = [CoverageRecord("a.py", {1: True}), CoverageRecord("b.py", {1: True})]
        provider = FakeProvider(
            {"a.py": "a@example.com", "b.py": "b@example.com"},
            failures={"b.py": failure},
        )

        with pytest.raises(AttributionError) as exc_info:
            attribute(records, provider)

        err = exc_info.value
        assert err.code == ErrorCode.AUTHORSHIP_FAILED
        assert err.details["path"] == "b.py"
        assert err.__cause__ is failure

    def test_extends_existing_summary(self) -> None:
        summary = CoverageSummary()
        summary.ensure_author("a@example.com")
        summary.record_line("a@example.com", True)

        result = attribute(
            [CoverageRecord("a.py", {1: False})],
            FakeProvider({"a.py": "a@example.com"}),
            summary=summary,
        )

        assert result.summary is summary
        assert summary.get_author("a@example.com").lines == 2  # type: ignore[union-attr]


class TestAttributeReport:
    def test_complete_report(self, fixtures_dir: Path) -> None:
        stream = CoberturaReader().open(fixtures_dir / "cobertura_four_classes.xml")
        provider = FakeProvider(
            {
                "src/main.rs": "a@example.com",
                "src/lib.rs": "b@example.com",
                "src/util/math.rs": "a@example.com",
                "src/util/empty.rs": "b@example.com",
            }
        )

        result = attribute_report(stream, provider)

        assert result.report_complete
        assert result.files_attributed == 4
        # main.rs 4 lines (3 covered), lib.rs 2 (1), math.rs 3 (1)
        assert (result.summary.lines, result.summary.covered) == (9, 5)

    def test_partial_report_is_returned_with_diagnostics(self, fixtures_dir: Path) -> None:
        stream = CoberturaReader().open(fixtures_dir / "cobertura_truncated.xml")

        result = attribute_report(stream, FakeProvider({"src/a.py": "a@example.com"}))

        assert not result.report_complete
        assert [d.kind for d in result.report_diagnostics] == ["truncated"]
        assert result.summary.lines == 2
        assert result.is_partial

    def test_partial_report_can_fail_the_run(self, fixtures_dir: Path) -> None:
        stream = CoberturaReader().open(fixtures_dir / "cobertura_malformed.xml")

        with pytest.raises(CoverageError) as exc_info:
            attribute_report(
                stream,
                FakeProvider({"src/a.py": "a@example.com"}),
                fail_on_partial_report=True,
            )

        assert exc_info.value.code == ErrorCode.COVERAGE_PARTIAL

    def test_stream_closed_on_abort(self, fixtures_dir: Path) -> None:
        stream = CoberturaReader().open(fixtures_dir / "cobertura_four_classes.xml")
        provider = FakeProvider({}, failures={"src/main.rs": AuthorshipError("boom")})

        with pytest.raises(AttributionError):
            attribute_report(stream, provider)

        assert list(stream) == []
        assert not stream.completed
