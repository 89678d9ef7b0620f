"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (COMMITCOV__SECTION__KEY)
3. GitHub Actions variables (INPUT_* action inputs and GITHUB_* context)
4. Repo config (.commitcov.yaml)
5. Global config (~/.config/commitcov/config.yaml)
6. Built-in defaults (lowest priority)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from commitcov.config.models import (
    BlameConfig,
    CommitCovConfig,
    CoverageConfig,
    GitHubConfig,
    LoggingConfig,
    ReportConfig,
)
from commitcov.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/commitcov/config.yaml").expanduser()
REPO_CONFIG_NAME = ".commitcov.yaml"

# GitHub Actions variable -> (section, key)
_ACTIONS_ENV_MAP: dict[str, tuple[str, str]] = {
    "INPUT_FILES": ("coverage", "files"),
    "INPUT_GITHUB_TOKEN": ("github", "token"),
    "INPUT_WORKSPACE": ("blame", "workspace"),
    "INPUT_MIN_THRESHOLD": ("report", "min_threshold"),
    "GITHUB_API_URL": ("github", "api_url"),
    "GITHUB_REPOSITORY": ("github", "repository"),
    "GITHUB_REF": ("github", "ref"),
    "GITHUB_REF_NAME": ("github", "ref_name"),
    "GITHUB_EVENT_NAME": ("github", "event_name"),
    "GITHUB_HEAD_REF": ("github", "head_ref"),
    "GITHUB_SHA": ("github", "sha"),
}

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError.invalid_value(name, value, "not a valid boolean")


def actions_environment(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Map GitHub Actions variables onto the nested config structure.

    Empty values are ignored: Actions passes unset inputs as empty strings.
    """
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}

    for var, (section, key) in _ACTIONS_ENV_MAP.items():
        value = env.get(var, "")
        if value:
            result.setdefault(section, {})[key] = value

    use_api = env.get("INPUT_USE_GITHUB_API_FOR_BLAME", "")
    if use_api:
        source = "github" if _parse_bool("use_github_api_for_blame", use_api) else "local"
        result.setdefault("blame", {})["source"] = source

    return result


class _StaticSource(PydanticBaseSettingsSource):
    """Settings source over an already resolved nested dict."""

    def __init__(self, settings_cls: type[BaseSettings], values: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._values = values

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        value = self._values.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._values


def _make_settings_class(
    yaml_config: dict[str, Any],
    actions_config: dict[str, Any],
) -> type[BaseSettings]:
    """Build a Settings class bound to this load's file and Actions values."""

    class CommitCovSettings(BaseSettings):
        """Root config. Env vars: COMMITCOV__REPORT__MIN_THRESHOLD, etc."""

        model_config = SettingsConfigDict(
            env_prefix="COMMITCOV__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        coverage: CoverageConfig = CoverageConfig()
        blame: BlameConfig = BlameConfig()
        github: GitHubConfig = GitHubConfig()
        report: ReportConfig = ReportConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > actions vars > yaml files
            return (
                init_settings,
                env_settings,
                _StaticSource(settings_cls, actions_config),
                _StaticSource(settings_cls, yaml_config),
            )

    return CommitCovSettings


def load_config(
    repo_root: Path | None = None,
    *,
    environ: dict[str, str] | None = None,
    **kwargs: Any,
) -> CommitCovConfig:
    """Load config: defaults < global yaml < repo yaml < actions vars < env vars < kwargs.

    Args:
        repo_root: Directory holding .commitcov.yaml.
                   Defaults to current working directory.
        environ: Source of GitHub Actions variables. Defaults to os.environ.
        **kwargs: Override values per section (highest precedence), e.g.
                  ``report={"min_threshold": 90}``.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    repo_root = repo_root or Path.cwd()

    yaml_config = _load_yaml(repo_root / REPO_CONFIG_NAME)

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(global_config, yaml_config)

    settings_cls = _make_settings_class(yaml_config, actions_environment(environ))
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    return CommitCovConfig.model_validate(settings.model_dump())


def require_github(config: CommitCovConfig) -> tuple[str, str]:
    """Return (token, repository), raising if either is missing.

    Raises:
        ConfigError: When GitHub features are used without credentials.
    """
    if config.github.token is None or not config.github.token.get_secret_value():
        raise ConfigError.missing_required("github.token")
    if not config.github.repository:
        raise ConfigError.missing_required("github.repository")
    return config.github.token.get_secret_value(), config.github.repository
