"""Tests for commitcov summary command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from commitcov.cli.main import cli

runner = CliRunner()


def _invoke(project: Path, *args: str):
    return runner.invoke(
        cli,
        ["summary", "--coverage", str(project / "coverage.xml"), "--workspace", str(project), *args],
    )


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMMITCOV__LOGGING__LEVEL", "ERROR")


class TestSummaryCommand:
    def test_json_output(self, project: Path) -> None:
        result = _invoke(project, "--format", "json", "--min-threshold", "50")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["total_lines"] == 4
        assert payload["total_covered"] == 3
        assert payload["total_percent"] == 75.0
        assert payload["min_threshold"] == 50.0
        assert payload["per_author"]["alice@example.com"] == {
            "name": "Alice",
            "lines": 3,
            "covered": 3,
            "percent": 100.0,
        }
        assert payload["per_author"]["bob@example.com"]["covered"] == 0
        assert payload["skipped"] == ["src/generated.py"]
        assert payload["report_complete"] is True

    def test_markdown_output(self, project: Path) -> None:
        result = _invoke(project, "--format", "markdown")

        assert result.exit_code == 0, result.output
        assert "# Committer Coverage Report" in result.output
        assert "Total coverage: 3 / 4 (75.00%)" in result.output
        assert "| Alice | 3 | 3 | 100.00 ✅ |" in result.output
        assert "| Bob | 1 | 0 | 0.00 ❌ |" in result.output

    def test_text_output(self, project: Path) -> None:
        result = _invoke(project, "--format", "text")

        assert result.exit_code == 0, result.output
        assert "✅ Alice <alice@example.com>: 3 / 3 (100.00%)" in result.output

    def test_table_output_default(self, project: Path) -> None:
        result = _invoke(project)

        assert result.exit_code == 0, result.output
        assert "Alice" in result.output
        assert "bob@example.com" in result.output

    def test_missing_coverage_file(self, project: Path) -> None:
        result = runner.invoke(
            cli,
            ["summary", "--coverage", str(project / "nope.xml"), "--workspace", str(project)],
        )

        assert result.exit_code == 1
        assert "COVERAGE_NOT_FOUND" in result.output

    def test_workspace_not_a_repository(self, project: Path, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        result = runner.invoke(
            cli,
            ["summary", "--coverage", str(project / "coverage.xml"), "--workspace", str(plain)],
        )

        assert result.exit_code == 1
        assert "AUTHORSHIP_UNAVAILABLE" in result.output

    def test_github_source_without_token(self, project: Path) -> None:
        result = _invoke(project, "--source", "github")

        assert result.exit_code == 1
        assert "github.token" in result.output

    def test_threshold_out_of_range_rejected_by_click(self, project: Path) -> None:
        result = _invoke(project, "--min-threshold", "150")

        assert result.exit_code == 2


class TestGroup:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])

        assert "summary" in result.output
        assert "run" in result.output


BRACKETED_COVERAGE_XML = """<?xml version="1.0" ?>
<coverage version="7.4.0" line-rate="0.5" branch-rate="0" complexity="0">
  <packages>
    <package name="app" line-rate="0.5" branch-rate="0" complexity="0">
      <classes>
        <class name="app.py" filename="src/app.py" line-rate="1" branch-rate="0" complexity="0">
          <lines>
            <line number="1" hits="1"/>
          </lines>
        </class>
        <class name="page" filename="app/[slug]/page.tsx" line-rate="0" branch-rate="0" complexity="0">
          <lines>
            <line number="1" hits="0"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>
"""


class TestSkippedNotices:
    def test_bracketed_path_printed_literally(self, project: Path) -> None:
        # Given a report naming an untracked file with brackets in its path
        report = project / "bracketed.xml"
        report.write_text(BRACKETED_COVERAGE_XML)

        # When
        result = runner.invoke(
            cli,
            ["summary", "--coverage", str(report), "--workspace", str(project), "--format", "text"],
        )

        # Then
        assert result.exit_code == 0, result.output
        assert "app/[slug]/page.tsx" in result.output
