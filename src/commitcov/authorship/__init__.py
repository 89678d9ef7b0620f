"""Per-line authorship (blame) providers."""

from commitcov.authorship.base import AuthorshipProvider
from commitcov.authorship.errors import AuthorshipError, FileNotTrackedError, NotARepositoryError
from commitcov.authorship.factory import create_authorship_provider
from commitcov.authorship.github import GitHubAuthorshipProvider, parse_blame_ranges
from commitcov.authorship.local import GitAuthorshipProvider
from commitcov.authorship.models import UNKNOWN, AuthorshipMap, BlameLine

__all__ = [
    "UNKNOWN",
    "AuthorshipError",
    "AuthorshipMap",
    "AuthorshipProvider",
    "BlameLine",
    "FileNotTrackedError",
    "GitAuthorshipProvider",
    "GitHubAuthorshipProvider",
    "NotARepositoryError",
    "create_authorship_provider",
    "parse_blame_ranges",
]
