"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COMMITCOV__SECTION__KEY)
3. GitHub Actions variables (INPUT_*, GITHUB_*)
4. Repo YAML (.commitcov.yaml)
5. Global YAML (~/.config/commitcov/config.yaml)
6. Built-in defaults (this file)

Environment Variable Format:
    COMMITCOV__<SECTION>__<KEY>=<VALUE>

Examples:
    COMMITCOV__LOGGING__LEVEL=DEBUG
    COMMITCOV__REPORT__MIN_THRESHOLD=75
    COMMITCOV__BLAME__SOURCE=github
    COMMITCOV__COVERAGE__FILES='["build/coverage.xml"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
BlameSource = Literal["local", "github"]


def parse_files(files: str) -> list[str]:
    """Split a comma separated file list, dropping blanks."""
    return [part.strip() for part in files.split(",") if part.strip()]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COMMITCOV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every attributed file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Coverage report selection.

    Env vars:
        COMMITCOV__COVERAGE__FILES: JSON list of report paths
        COMMITCOV__COVERAGE__FORMAT: Force a report format (default: auto-detect)
        COMMITCOV__COVERAGE__FAIL_ON_PARTIAL_REPORT: Abort on truncated/malformed reports
    """

    files: list[str] = Field(
        default_factory=lambda: ["coverage.xml"],
        description="Coverage report paths. Only the first one is read.",
    )
    format: str | None = Field(
        default=None,
        description="Report format id. None auto-detects from the file.",
    )
    fail_on_partial_report: bool = Field(
        default=False,
        description="Abort the run when the report could not be read to its end. "
        "When false, the summary covers the records parsed before the damage.",
    )

    @field_validator("files", mode="before")
    @classmethod
    def split_files(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_files(v)
        return v


class BlameConfig(BaseModel):
    """Authorship (blame) source configuration.

    Env vars:
        COMMITCOV__BLAME__SOURCE: "local" (pygit2) or "github" (GraphQL API)
        COMMITCOV__BLAME__WORKSPACE: Repository checkout for local blame
        COMMITCOV__BLAME__REF: Revision to blame (default: HEAD)
        COMMITCOV__BLAME__DISABLE_OWNER_VALIDATION: Skip libgit2 safe.directory checks
    """

    source: BlameSource = Field(
        default="local",
        description="Where per-line authorship comes from.",
    )
    workspace: str = Field(
        default=".",
        description="Repository checkout used for local blame.",
    )
    ref: str | None = Field(
        default=None,
        description="Revision to blame. None means HEAD for local blame and "
        "the workflow commit (GITHUB_SHA) or HEAD for GitHub blame.",
    )
    disable_owner_validation: bool = Field(
        default=False,
        description="Disable libgit2 owner validation. CI checkouts are often owned "
        "by a different uid than the job. RISK: only enable on trusted workspaces.",
    )


class GitHubConfig(BaseModel):
    """GitHub API configuration.

    Env vars:
        COMMITCOV__GITHUB__TOKEN: API token
        COMMITCOV__GITHUB__REPOSITORY: owner/name
        COMMITCOV__GITHUB__TIMEOUT_SEC: Per-request timeout
    """

    api_url: str = Field(default="https://api.github.com")
    token: SecretStr | None = Field(default=None)
    repository: str | None = Field(
        default=None,
        description="Repository in owner/name form.",
    )
    ref: str | None = None
    ref_name: str | None = Field(
        default=None,
        description="For pull_request events this is '<number>/merge'.",
    )
    event_name: str | None = None
    head_ref: str | None = None
    sha: str | None = None
    timeout_sec: float = Field(
        default=30.0,
        description="Per-request timeout. Remote blame makes one request per file.",
    )
    resolve_users: bool = Field(
        default=True,
        description="Look up GitHub accounts by email for the report avatars.",
    )

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        if v is None:
            return v
        owner, sep, name = v.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository must be in owner/name form, got {v!r}")
        return v

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ReportConfig(BaseModel):
    """Report rendering configuration.

    Env vars:
        COMMITCOV__REPORT__MIN_THRESHOLD: Percentage below which an author fails
    """

    min_threshold: float = Field(
        default=80.0,
        description="Authors with coverage below this percentage are marked as failing.",
    )

    @field_validator("min_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not (0.0 <= v <= 100.0):
            raise ValueError(f"min_threshold must be 0-100, got {v}")
        return v


class CommitCovConfig(BaseModel):
    """Root configuration for commitcov."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    blame: BlameConfig = Field(default_factory=BlameConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @property
    def is_pull_request(self) -> bool:
        return self.github.event_name == "pull_request"
