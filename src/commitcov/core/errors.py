"""commitcov error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Coverage report
- 4xxx: Authorship / attribution
- 5xxx: Delivery

These are run-level errors: raising one means the run is aborted and no
summary should be trusted. Recoverable conditions (skipped lines, skipped
files, truncated reports) are reported as diagnostics instead.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003

    # Coverage (3xxx)
    COVERAGE_NOT_FOUND = 3001
    COVERAGE_NO_FILES = 3002
    COVERAGE_PARTIAL = 3003

    # Authorship (4xxx)
    AUTHORSHIP_FAILED = 4001
    AUTHORSHIP_UNAVAILABLE = 4002

    # Delivery (5xxx)
    DELIVERY_FAILED = 5001
    DELIVERY_NO_PULL_REQUEST = 5002


@dataclass(frozen=True, slots=True)
class CommitCovError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'AUTHORSHIP_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CommitCovError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )


class CoverageError(CommitCovError):
    """Coverage report selection and completeness errors."""

    @classmethod
    def not_found(cls, path: str, reason: str) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_NOT_FOUND,
            message=f"Failed to load coverage file {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def no_files(cls) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_NO_FILES,
            message="No coverage files specified",
        )

    @classmethod
    def partial(cls, path: str, diagnostics: list[str]) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_PARTIAL,
            message=f"Coverage report {path} was only partially read",
            details={"path": path, "diagnostics": diagnostics},
        )


class AttributionError(CommitCovError):
    """Errors that abort attribution for the whole run."""

    @classmethod
    def authorship_failed(cls, path: str, reason: str) -> "AttributionError":
        return cls(
            code=ErrorCode.AUTHORSHIP_FAILED,
            message=f"Failed to get blame for {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def provider_unavailable(cls, source: str, reason: str) -> "AttributionError":
        return cls(
            code=ErrorCode.AUTHORSHIP_UNAVAILABLE,
            message=f"Authorship source '{source}' is unavailable: {reason}",
            details={"source": source, "reason": reason},
        )


class DeliveryError(CommitCovError):
    """Errors delivering the rendered summary."""

    @classmethod
    def failed(cls, target: str, reason: str, *, retryable: bool = False) -> "DeliveryError":
        return cls(
            code=ErrorCode.DELIVERY_FAILED,
            message=f"Failed to deliver summary to {target}: {reason}",
            retryable=retryable,
            details={"target": target, "reason": reason},
        )

    @classmethod
    def no_pull_request(cls, ref: str) -> "DeliveryError":
        return cls(
            code=ErrorCode.DELIVERY_NO_PULL_REQUEST,
            message=f"Failed to parse pull request number from ref: {ref}",
            details={"ref": ref},
        )
