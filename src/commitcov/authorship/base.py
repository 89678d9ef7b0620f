"""Authorship provider protocol."""

from typing import Protocol

from commitcov.authorship.models import AuthorshipMap


class AuthorshipProvider(Protocol):
    """Returns per-line authorship for a file path.

    Implementations: GitAuthorshipProvider (local repository via pygit2) and
    GitHubAuthorshipProvider (GitHub GraphQL blame). Selected once from
    configuration and then used only through this interface.
    """

    @property
    def name(self) -> str:
        """Source identifier ('local' or 'github')."""
        ...

    def get_authorship(self, path: str) -> AuthorshipMap:
        """Blame a file.

        Args:
            path: File path as written in the coverage report.

        Raises:
            FileNotTrackedError: If the file is not under version control.
            AuthorshipError: On any other retrieval failure.
        """
        ...
