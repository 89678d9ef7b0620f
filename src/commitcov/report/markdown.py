"""Render a coverage summary as a pull request comment."""

from __future__ import annotations

import re

import structlog

from commitcov.attribution.summary import CommitterStat, CoverageSummary
from commitcov.github.errors import GitHubAPIError
from commitcov.github.users import UserDirectory

logger = structlog.get_logger()

HEADER = "# Committer Coverage Report"
TABLE_HEADER = (
    "|  | **User** | **Lines** | **Covered** | **% Covered** |\n"
    "|--|------|-------:|---------:|-----------|\n"
)
FOOTER = (
    "\n⭐ [github-action-committer-coverage-stats]"
    "(https://github.com/petrabarus/github-action-committer-coverage-stats)"
)

PLACEHOLDER_URL = "https://github.com"
PLACEHOLDER_AVATAR_URL = "https://avatars.githubusercontent.com/u/1234567890?v=4"

PASS_MARK = "✅"
FAIL_MARK = "❌"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(email: str | None) -> bool:
    return bool(email) and _EMAIL_RE.match(email) is not None  # type: ignore[arg-type]


def status_mark(percent: float, min_threshold: float) -> str:
    return PASS_MARK if percent >= min_threshold else FAIL_MARK


def user_display(name: str, url: str, avatar_url: str) -> str:
    """Avatar link and name, spanning the first two table columns."""
    return f'<a href="{url}"><img src="{avatar_url}" width="20"/></a> | {name}'


def _author_display(stat: CommitterStat, users: UserDirectory | None) -> str:
    fallback = user_display(stat.display_name, PLACEHOLDER_URL, PLACEHOLDER_AVATAR_URL)
    if users is None:
        return fallback
    if not is_valid_email(stat.email):
        logger.debug("user_lookup_skipped", email=stat.display_email, reason="invalid email")
        return fallback

    try:
        user = users.find_by_email(stat.email)  # type: ignore[arg-type]
    except GitHubAPIError as e:
        # The comment is still useful without avatars.
        logger.warning("user_lookup_failed", email=stat.email, error=str(e))
        return fallback

    if user is None:
        return fallback
    return user_display(user.username, user.url, user.avatar_url)


def render_markdown(
    summary: CoverageSummary,
    min_threshold: float,
    *,
    users: UserDirectory | None = None,
) -> str:
    """Render the summary as GitHub-flavored Markdown.

    Args:
        summary: Finished summary.
        min_threshold: Percentage at or above which an author passes.
        users: Directory used to resolve avatars and profile links. Authors
               are shown with a placeholder avatar when omitted.
    """
    parts = [
        f"{HEADER}\n",
        f"Total coverage: {summary.covered} / {summary.lines} ({summary.percent_covered:.2f}%)\n\n",
        TABLE_HEADER,
    ]
    for stat in summary.sorted_authors():
        parts.append(
            f"| {_author_display(stat, users)} | {stat.lines} | {stat.covered} "
            f"| {stat.percent:.2f} {status_mark(stat.percent, min_threshold)} |\n"
        )
    parts.append(FOOTER)
    return "".join(parts)


def render_text(summary: CoverageSummary, min_threshold: float) -> str:
    """One line per author, for logs and terminals without rich output."""
    lines = [
        f"Total coverage: {summary.covered} / {summary.lines} ({summary.percent_covered:.2f}%)"
    ]
    for stat in summary.sorted_authors():
        lines.append(
            f"{status_mark(stat.percent, min_threshold)} {stat.display_name} <{stat.display_email}>: "
            f"{stat.covered} / {stat.lines} ({stat.percent:.2f}%)"
        )
    return "\n".join(lines)
