"""Helpers shared by the summary and run commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click
import structlog

from commitcov.attribution import AttributionResult, attribute_report
from commitcov.authorship import create_authorship_provider
from commitcov.config import CommitCovConfig, load_config
from commitcov.core.errors import CoverageError
from commitcov.core.logging import configure_logging
from commitcov.coverage import CoverageParseError, open_report
from commitcov.github import CachedUserDirectory, GitHubClient, GitHubUserDirectory, UserDirectory

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


def report_options(func: F) -> F:
    """Options common to every command that computes a summary."""
    decorators = [
        click.option(
            "--coverage",
            "coverage_file",
            type=click.Path(dir_okay=False, path_type=Path),
            help="Cobertura XML report (default: coverage.files from config)",
        ),
        click.option(
            "--workspace",
            type=click.Path(file_okay=False, path_type=Path),
            help="Repository checkout to blame (default: blame.workspace)",
        ),
        click.option(
            "--source",
            type=click.Choice(["local", "github"]),
            help="Authorship source (default: blame.source)",
        ),
        click.option(
            "--min-threshold",
            type=click.FloatRange(0, 100),
            help="Passing percentage per author (default: report.min_threshold)",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def load_cli_config(
    *,
    coverage_file: Path | None,
    workspace: Path | None,
    source: str | None,
    min_threshold: float | None,
) -> CommitCovConfig:
    """Load configuration with command line options taking precedence."""
    overrides: dict[str, dict[str, Any]] = {}
    if coverage_file is not None:
        overrides.setdefault("coverage", {})["files"] = [str(coverage_file)]
    if workspace is not None:
        overrides.setdefault("blame", {})["workspace"] = str(workspace)
    if source is not None:
        overrides.setdefault("blame", {})["source"] = source
    if min_threshold is not None:
        overrides.setdefault("report", {})["min_threshold"] = min_threshold

    repo_root = workspace or Path.cwd()
    return load_config(repo_root, **overrides)


def apply_logging_config(ctx: click.Context, config: CommitCovConfig) -> None:
    """Switch to the configured logging unless flags already chose it."""
    obj = ctx.find_root().obj or {}
    if obj.get("verbose") or obj.get("json_logs"):
        return
    configure_logging(config=config.logging)


def compute_attribution(
    config: CommitCovConfig,
    *,
    client: GitHubClient | None = None,
) -> AttributionResult:
    """Read the first configured coverage report and attribute it.

    Raises:
        CoverageError: If no report is configured or it cannot be opened.
        AttributionError: If blame fails for a tracked file.
    """
    if not config.coverage.files:
        raise CoverageError.no_files()
    if len(config.coverage.files) > 1:
        logger.warning(
            "coverage_files_ignored",
            used=config.coverage.files[0],
            ignored=config.coverage.files[1:],
        )

    path = Path(config.coverage.files[0])
    try:
        stream = open_report(path, format_id=config.coverage.format)
    except CoverageParseError as e:
        raise CoverageError.not_found(str(path), str(e)) from e

    provider = create_authorship_provider(config, client=client)
    logger.info("attribution_started", coverage=str(path), source=provider.name)
    return attribute_report(
        stream,
        provider,
        fail_on_partial_report=config.coverage.fail_on_partial_report,
    )


def user_directory(config: CommitCovConfig, client: GitHubClient | None) -> UserDirectory | None:
    if client is None or not config.github.resolve_users:
        return None
    return CachedUserDirectory(GitHubUserDirectory(client))


def has_github_token(config: CommitCovConfig) -> bool:
    token = config.github.token
    return token is not None and bool(token.get_secret_value())
