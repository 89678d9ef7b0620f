"""commitcov summary command - compute and print committer coverage."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from commitcov.cli.utils import (
    apply_logging_config,
    compute_attribution,
    has_github_token,
    load_cli_config,
    report_options,
    user_directory,
)
from commitcov.core.errors import CommitCovError
from commitcov.github import GitHubClient, create_github_client
from commitcov.report import render_markdown, render_table, render_text


@click.command()
@report_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "markdown", "json", "text"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.pass_context
def summary_command(
    ctx: click.Context,
    coverage_file: Path | None,
    workspace: Path | None,
    source: str | None,
    min_threshold: float | None,
    output_format: str,
) -> None:
    """Attribute coverage to committers and print the summary.

    Nothing is posted to GitHub. The GitHub API is only used for remote
    blame (--source github) and, with a token, for avatars in markdown.
    """
    try:
        config = load_cli_config(
            coverage_file=coverage_file,
            workspace=workspace,
            source=source,
            min_threshold=min_threshold,
        )
        apply_logging_config(ctx, config)

        needs_client = config.blame.source == "github" or (
            output_format == "markdown" and has_github_token(config)
        )
        client: GitHubClient | None = create_github_client(config) if needs_client else None
        try:
            result = compute_attribution(config, client=client)
            threshold = config.report.min_threshold

            if output_format == "json":
                payload = result.summary.to_dict()
                payload["min_threshold"] = threshold
                payload["skipped"] = [s.path for s in result.skipped]
                payload["report_complete"] = result.report_complete
                click.echo(json.dumps(payload, indent=2))
            elif output_format == "markdown":
                users = user_directory(config, client)
                click.echo(render_markdown(result.summary, threshold, users=users))
            elif output_format == "text":
                click.echo(render_text(result.summary, threshold))
            else:
                Console().print(render_table(result.summary, threshold))
        finally:
            if client is not None:
                client.close()
    except CommitCovError as e:
        raise click.ClickException(str(e)) from e

    # json output already carries skipped files and completeness
    if output_format != "json" and (result.skipped or not result.report_complete):
        console = Console(stderr=True)
        for skipped in result.skipped:
            console.print(
                f"[yellow]Skipped[/yellow] {escape(skipped.path)}: {escape(skipped.reason)}"
            )
        for diagnostic in result.report_diagnostics:
            console.print(f"[yellow]Report[/yellow] {escape(str(diagnostic))}")
