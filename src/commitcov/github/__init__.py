"""GitHub API access: client, user lookup and pull request comments."""

from commitcov.github.client import DEFAULT_API_URL, GitHubClient, create_github_client
from commitcov.github.comments import GitHubCommentPublisher, parse_pr_number_from_ref
from commitcov.github.errors import GitHubAPIError, GraphQLError
from commitcov.github.users import (
    CachedUserDirectory,
    GitHubUser,
    GitHubUserDirectory,
    UserDirectory,
    parse_user_from_search_response,
)

__all__ = [
    "DEFAULT_API_URL",
    "CachedUserDirectory",
    "GitHubAPIError",
    "GitHubClient",
    "GitHubCommentPublisher",
    "GitHubUser",
    "GitHubUserDirectory",
    "GraphQLError",
    "UserDirectory",
    "create_github_client",
    "parse_pr_number_from_ref",
    "parse_user_from_search_response",
]
