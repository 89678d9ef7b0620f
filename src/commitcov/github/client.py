"""Thin synchronous GitHub REST/GraphQL client over httpx."""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from commitcov.config.loader import require_github
from commitcov.config.models import CommitCovConfig
from commitcov.github.errors import GitHubAPIError, GraphQLError

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "commitcov"


class GitHubClient:
    """Owns an httpx.Client configured for one GitHub API endpoint and token.

    Every failure (transport error, unexpected status, undecodable body) is
    raised as GitHubAPIError so callers only handle one exception type.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.api_url,
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # =========================================================================
    # Requests
    # =========================================================================

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = self._send("GET", path, params=params)
        return self._expect(response, 200)

    def post_json(self, path: str, payload: dict[str, Any], *, expected_status: int = 201) -> Any:
        response = self._send("POST", path, json=payload)
        return self._expect(response, expected_status)

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object.

        Raises:
            GraphQLError: If the response carries an ``errors`` list.
            GitHubAPIError: On transport or HTTP failures.
        """
        body = self.post_json(
            "/graphql",
            {"query": query, "variables": variables or {}},
            expected_status=200,
        )
        if not isinstance(body, dict):
            raise GitHubAPIError("Invalid GraphQL response: expected an object")
        errors = body.get("errors")
        if errors:
            raise GraphQLError(errors if isinstance(errors, list) else [{"message": errors}])
        data = body.get("data")
        if not isinstance(data, dict):
            raise GitHubAPIError("Invalid GraphQL response: missing data")
        return data

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"Failed to send request: {e}") from e

    @staticmethod
    def _expect(response: httpx.Response, status: int) -> Any:
        if response.status_code != status:
            logger.debug(
                "github_unexpected_status",
                url=str(response.request.url),
                status=response.status_code,
            )
            raise GitHubAPIError(
                f"Failed to send request: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Failed to parse JSON: {e}", status_code=status) from e


def create_github_client(
    config: CommitCovConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> GitHubClient:
    """Build a client from the ``github`` config section.

    Raises:
        ConfigError: If the token or repository is not configured.
    """
    token, _ = require_github(config)
    return GitHubClient(
        token,
        api_url=config.github.api_url,
        timeout=config.github.timeout_sec,
        transport=transport,
    )
