"""GitHub module error types."""


class GitHubAPIError(Exception):
    """A GitHub API request failed or returned an unexpected response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code is None or self.status_code >= 500 or self.status_code == 429


class GraphQLError(GitHubAPIError):
    """GraphQL request succeeded at the HTTP level but reported errors."""

    def __init__(self, errors: list[dict[str, object]]) -> None:
        messages = "; ".join(str(err.get("message", err)) for err in errors) or "unknown error"
        super().__init__(f"GraphQL errors: {messages}", status_code=200)
        self.errors = errors

    @property
    def types(self) -> set[str]:
        return {str(err["type"]) for err in self.errors if "type" in err}
