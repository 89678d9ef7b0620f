"""GitHub account lookup by commit email, with an optional cache decorator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from commitcov.github.client import GitHubClient
from commitcov.github.errors import GitHubAPIError

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class GitHubUser:
    """Public profile data used to render an author."""

    username: str
    avatar_url: str
    url: str


class UserDirectory(Protocol):
    """Resolves an author email to a GitHub account."""

    def find_by_email(self, email: str) -> GitHubUser | None:
        """Return the matching account, or None when there is none.

        Raises:
            GitHubAPIError: If the lookup itself fails.
        """
        ...


def parse_user_from_search_response(payload: Any) -> GitHubUser | None:
    """Extract the first user from a ``/search/users`` response body."""
    if not isinstance(payload, dict) or payload.get("total_count") is None:
        raise GitHubAPIError("Invalid JSON response: missing total_count")
    if payload["total_count"] == 0:
        return None

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        return None

    item = items[0]
    return GitHubUser(
        username=str(item.get("login", "")),
        avatar_url=str(item.get("avatar_url", "")),
        url=str(item.get("html_url", "")),
    )


class GitHubUserDirectory:
    """Looks users up with the GitHub search API."""

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    def find_by_email(self, email: str) -> GitHubUser | None:
        payload = self._client.get_json("/search/users", params={"q": f"{email} in:email"})
        return parse_user_from_search_response(payload)


class CachedUserDirectory:
    """Memoizes another directory by email, including negative results."""

    def __init__(self, inner: UserDirectory) -> None:
        self._inner = inner
        self._cache: dict[str, GitHubUser | None] = {}

    def find_by_email(self, email: str) -> GitHubUser | None:
        if email in self._cache:
            return self._cache[email]
        user = self._inner.find_by_email(email)
        self._cache[email] = user
        logger.debug("github_user_cached", email=email, found=user is not None)
        return user

    def __len__(self) -> int:
        return len(self._cache)
