"""Authorship module error types."""


class AuthorshipError(Exception):
    """Base error for blame retrieval."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class FileNotTrackedError(AuthorshipError):
    """File is in the coverage report but not in version control history.

    Usually generated code or ignored files. Callers skip the file.
    """

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"File not tracked: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path=path)
        self.reason = reason


class NotARepositoryError(AuthorshipError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}", path=path)
