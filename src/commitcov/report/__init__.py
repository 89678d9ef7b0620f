"""Summary rendering."""

from commitcov.report.markdown import (
    PLACEHOLDER_AVATAR_URL,
    PLACEHOLDER_URL,
    is_valid_email,
    render_markdown,
    render_text,
)
from commitcov.report.table import render_table

__all__ = [
    "PLACEHOLDER_AVATAR_URL",
    "PLACEHOLDER_URL",
    "is_valid_email",
    "render_markdown",
    "render_table",
    "render_text",
]
