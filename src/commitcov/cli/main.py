"""commitcov CLI - committer coverage statistics."""

import click

from commitcov.cli.run import run_command
from commitcov.cli.summary import summary_command
from commitcov.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="commitcov")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, json_logs: bool) -> None:
    """commitcov - attribute test coverage to the people who wrote the code."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json_logs"] = json_logs
    configure_logging(json_format=json_logs, level="DEBUG" if verbose else "INFO")


cli.add_command(summary_command, name="summary")
cli.add_command(run_command, name="run")


if __name__ == "__main__":
    cli()
