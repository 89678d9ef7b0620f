"""commitcov run command - the GitHub Action entrypoint."""

from pathlib import Path

import click
import structlog

from commitcov.cli.utils import (
    apply_logging_config,
    compute_attribution,
    has_github_token,
    load_cli_config,
    report_options,
    user_directory,
)
from commitcov.config import CommitCovConfig, require_github
from commitcov.core.errors import CommitCovError, DeliveryError
from commitcov.core.logging import set_run_id
from commitcov.github import (
    GitHubAPIError,
    GitHubClient,
    GitHubCommentPublisher,
    create_github_client,
    parse_pr_number_from_ref,
)
from commitcov.report import render_markdown

logger = structlog.get_logger()


def _post_summary(config: CommitCovConfig, client: GitHubClient, body: str) -> str | None:
    """Comment on the pull request that triggered the workflow."""
    _, repository = require_github(config)
    ref_name = config.github.ref_name or ""
    pr_number = parse_pr_number_from_ref(ref_name)
    if pr_number is None:
        raise DeliveryError.no_pull_request(ref_name)

    publisher = GitHubCommentPublisher(client, repository)
    target = f"{repository}#{pr_number}"
    try:
        return publisher.post_comment(pr_number, body)
    except GitHubAPIError as e:
        raise DeliveryError.failed(target, str(e), retryable=e.retryable) from e


@click.command()
@report_options
@click.pass_context
def run_command(
    ctx: click.Context,
    coverage_file: Path | None,
    workspace: Path | None,
    source: str | None,
    min_threshold: float | None,
) -> None:
    """Compute committer coverage and comment on the pull request.

    Reads settings from GitHub Actions variables (INPUT_*, GITHUB_*). Outside
    a pull_request event the report is printed instead of posted.
    """
    set_run_id()
    try:
        config = load_cli_config(
            coverage_file=coverage_file,
            workspace=workspace,
            source=source,
            min_threshold=min_threshold,
        )
        apply_logging_config(ctx, config)

        needs_client = (
            config.is_pull_request
            or config.blame.source == "github"
            or has_github_token(config)
        )
        client: GitHubClient | None = create_github_client(config) if needs_client else None
        try:
            result = compute_attribution(config, client=client)
            body = render_markdown(
                result.summary,
                config.report.min_threshold,
                users=user_directory(config, client),
            )

            if config.is_pull_request and client is not None:
                url = _post_summary(config, client, body)
                click.echo(f"Posted coverage report: {url}" if url else "Posted coverage report")
            else:
                logger.info("comment_skipped", event_name=config.github.event_name)
                click.echo("Not a pull request event, printing the report instead.")
                click.echo(body)
        finally:
            if client is not None:
                client.close()
    except CommitCovError as e:
        logger.error("run_failed", code=e.code.value, error=e.message)
        raise click.ClickException(str(e)) from e

    click.echo("Success!")
