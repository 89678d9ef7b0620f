"""Terminal table rendering with rich."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from commitcov.attribution.summary import CoverageSummary


def render_table(summary: CoverageSummary, min_threshold: float) -> Table:
    table = Table(
        title=(
            f"Committer coverage: {summary.covered} / {summary.lines} "
            f"({summary.percent_covered:.2f}%)"
        ),
        title_justify="left",
    )
    table.add_column("User", style="cyan")
    table.add_column("Email", style="dim")
    table.add_column("Lines", justify="right")
    table.add_column("Covered", justify="right")
    table.add_column("% Covered", justify="right")

    for stat in summary.sorted_authors():
        color = "green" if stat.percent >= min_threshold else "red"
        table.add_row(
            escape(stat.display_name),
            escape(stat.display_email),
            str(stat.lines),
            str(stat.covered),
            f"[{color}]{stat.percent:.2f}[/{color}]",
        )
    return table
