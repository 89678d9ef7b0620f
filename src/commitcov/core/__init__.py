"""Core module exports."""

from commitcov.core.errors import (
    AttributionError,
    CommitCovError,
    ConfigError,
    CoverageError,
    DeliveryError,
    ErrorCode,
)
from commitcov.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "AttributionError",
    "CommitCovError",
    "ConfigError",
    "CoverageError",
    "DeliveryError",
    "ErrorCode",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
