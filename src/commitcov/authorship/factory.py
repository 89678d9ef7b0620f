"""Choose the authorship provider from configuration."""

from __future__ import annotations

from pathlib import Path

import structlog

from commitcov.authorship.base import AuthorshipProvider
from commitcov.authorship.errors import AuthorshipError
from commitcov.authorship.github import GitHubAuthorshipProvider
from commitcov.authorship.local import GitAuthorshipProvider
from commitcov.config.loader import require_github
from commitcov.config.models import CommitCovConfig
from commitcov.core.errors import AttributionError
from commitcov.github.client import GitHubClient, create_github_client

logger = structlog.get_logger()


def create_authorship_provider(
    config: CommitCovConfig,
    *,
    client: GitHubClient | None = None,
) -> AuthorshipProvider:
    """Build the provider named by ``config.blame.source``.

    Args:
        config: Resolved configuration.
        client: GitHub client to reuse for the "github" source. Created from
                config when omitted.

    Raises:
        AttributionError: If the local repository cannot be opened.
        ConfigError: If the "github" source lacks a token or repository.
    """
    blame = config.blame

    if blame.source == "github":
        _, repository = require_github(config)
        ref = blame.ref or config.github.sha or "HEAD"
        logger.debug("authorship_provider_selected", source="github", repository=repository, ref=ref)
        return GitHubAuthorshipProvider(
            client or create_github_client(config),
            repository,
            ref=ref,
        )

    workspace = Path(blame.workspace).expanduser()
    try:
        provider = GitAuthorshipProvider(
            workspace,
            ref=blame.ref,
            disable_owner_validation=blame.disable_owner_validation,
        )
    except AuthorshipError as e:
        raise AttributionError.provider_unavailable("local", str(e)) from e

    logger.debug("authorship_provider_selected", source="local", workdir=str(provider.workdir))
    return provider
