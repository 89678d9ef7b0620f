"""Pull request comment delivery."""

from __future__ import annotations

import structlog

from commitcov.github.client import GitHubClient

logger = structlog.get_logger()


def parse_pr_number_from_ref(github_ref: str) -> int | None:
    """Parse the pull request number from a ref name.

    For pull_request events GITHUB_REF_NAME is ``<number>/merge``:

        >>> parse_pr_number_from_ref("715/merge")
        715
    """
    pr, sep, _ = github_ref.partition("/")
    if not sep or not pr.isdigit():
        return None
    return int(pr)


class GitHubCommentPublisher:
    """Posts a preformatted body as a comment on a pull request."""

    def __init__(self, client: GitHubClient, repository: str) -> None:
        self._client = client
        self._repository = repository

    def comment_path(self, pull_request_number: int) -> str:
        return f"/repos/{self._repository}/issues/{pull_request_number}/comments"

    def post_comment(self, pull_request_number: int, body: str) -> str | None:
        """Create the comment and return its URL when GitHub reports one.

        Raises:
            GitHubAPIError: Unless GitHub answers 201 Created.
        """
        created = self._client.post_json(
            self.comment_path(pull_request_number),
            {"body": body},
            expected_status=201,
        )
        url = created.get("html_url") if isinstance(created, dict) else None
        logger.info("pull_request_comment_posted", pull_request=pull_request_number, url=url)
        return url
