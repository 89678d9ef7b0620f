"""Config module exports."""

from commitcov.config.loader import load_config, require_github
from commitcov.config.models import (
    BlameConfig,
    CommitCovConfig,
    CoverageConfig,
    GitHubConfig,
    LoggingConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "require_github",
    "BlameConfig",
    "CommitCovConfig",
    "CoverageConfig",
    "GitHubConfig",
    "LoggingConfig",
    "ReportConfig",
]
