"""Remote authorship via the GitHub GraphQL blame API."""

from __future__ import annotations

from typing import Any

import structlog

from commitcov.authorship.errors import AuthorshipError, FileNotTrackedError
from commitcov.authorship.models import AuthorshipMap
from commitcov.github.client import GitHubClient
from commitcov.github.errors import GitHubAPIError, GraphQLError

logger = structlog.get_logger()

BLAME_QUERY = """
query($owner: String!, $name: String!, $expression: String!, $path: String!) {
  repository(owner: $owner, name: $name) {
    object(expression: $expression) {
      ... on Commit {
        blame(path: $path) {
          ranges {
            startingLine
            endingLine
            commit {
              oid
              author {
                name
                email
              }
            }
          }
        }
      }
    }
  }
}
"""

_NOT_FOUND_MESSAGES = ("Could not resolve file", "Could not resolve to a Blob")


def _is_not_found(error: GraphQLError) -> bool:
    if "NOT_FOUND" in error.types:
        return True
    return any(marker in str(error) for marker in _NOT_FOUND_MESSAGES)


def _as_line(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise AuthorshipError(f"Invalid blame range bound: {value!r}", path=path)
    return value


def parse_blame_ranges(path: str, data: dict[str, Any]) -> AuthorshipMap:
    """Expand a GraphQL blame payload into per-line authorship.

    Args:
        path: File path the blame was requested for.
        data: The ``data`` object of the GraphQL response.

    Raises:
        AuthorshipError: If the payload does not have the expected shape.
    """
    repository = data.get("repository")
    if not isinstance(repository, dict):
        raise AuthorshipError("Repository not found in blame response", path=path)
    obj = repository.get("object")
    if not isinstance(obj, dict):
        raise AuthorshipError("Commit not found in blame response", path=path)
    blame = obj.get("blame")
    ranges = blame.get("ranges") if isinstance(blame, dict) else None
    if not isinstance(ranges, list):
        raise AuthorshipError("Invalid blame response: ranges is not an array", path=path)

    authorship = AuthorshipMap(path=path)
    for blame_range in ranges:
        if not isinstance(blame_range, dict):
            raise AuthorshipError("Invalid blame response: range is not an object", path=path)
        start = _as_line(blame_range.get("startingLine"), path)
        end = _as_line(blame_range.get("endingLine"), path)
        if not 1 <= start <= end:
            raise AuthorshipError(f"Invalid blame range: {start}..{end}", path=path)

        commit = blame_range.get("commit") or {}
        if not isinstance(commit, dict):
            raise AuthorshipError("Invalid blame response: commit is not an object", path=path)
        author = commit.get("author") or {}
        if not isinstance(author, dict):
            raise AuthorshipError("Invalid blame response: author is not an object", path=path)
        commit_id = str(commit.get("oid", ""))
        email = author.get("email") or None
        name = author.get("name") or None

        for line in range(start, end + 1):
            authorship.add_line(line, commit_id, email, name)

    return authorship


class GitHubAuthorshipProvider:
    """Blames files through GitHub, for checkouts without history.

    Shallow clones (the default for actions/checkout) attribute every line to
    the single fetched commit when blamed locally.
    """

    def __init__(self, client: GitHubClient, repository: str, *, ref: str = "HEAD") -> None:
        owner, sep, name = repository.partition("/")
        if not sep or not owner or not name:
            raise ValueError(f"Repository must be 'owner/name': {repository!r}")
        self._client = client
        self._owner = owner
        self._name = name
        self._ref = ref

    @property
    def name(self) -> str:
        return "github"

    @property
    def repository(self) -> str:
        return f"{self._owner}/{self._name}"

    def get_authorship(self, path: str) -> AuthorshipMap:
        variables = {
            "owner": self._owner,
            "name": self._name,
            "expression": self._ref,
            "path": path,
        }
        try:
            data = self._client.graphql(BLAME_QUERY, variables)
        except GraphQLError as e:
            if _is_not_found(e):
                raise FileNotTrackedError(path, str(e)) from e
            raise AuthorshipError(f"Failed to get blame: {e}", path=path) from e
        except GitHubAPIError as e:
            raise AuthorshipError(f"Failed to get blame: {e}", path=path) from e

        authorship = parse_blame_ranges(path, data)
        logger.debug(
            "github_blame_loaded",
            repository=self.repository,
            path=path,
            lines=len(authorship),
        )
        return authorship
