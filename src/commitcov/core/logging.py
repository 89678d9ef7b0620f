"""Structured logging for commitcov runs.

Every event goes through structlog and is handed to stdlib logging, so
each configured output (stderr, stdout, or a file) gets its own handler,
level and renderer. Events emitted during a run carry ``run_id`` so the
lines of one CI job can be grouped after the fact.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from commitcov.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("commitcov_run_id", default=None)

# First file output of the active configuration
_log_file_path: Path | None = None

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Bind a run correlation ID, generating a short one when omitted."""
    value = run_id or uuid4().hex[:12]
    _run_id.set(value)
    return value


def clear_run_id() -> None:
    _run_id.set(None)


def get_log_file_path() -> Path | None:
    """Path of the file output in use, for pointing users at full logs."""
    return _log_file_path


def _inject_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    run_id = get_run_id()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def _level_number(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    name = name.upper()
    if name == "WARN":
        name = "WARNING"
    return logging.getLevelNamesMapping().get(name, fallback)


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _inject_run_id,  # type: ignore[list-item]
    ]


def _open_stream(destination: str) -> logging.Handler:
    if destination in ("stderr", "stdout"):
        return logging.StreamHandler(getattr(sys, destination))
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _renderer_for(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    on_terminal = output.destination in ("stderr", "stdout") and sys.stderr.isatty()
    return structlog.dev.ConsoleRenderer(colors=on_terminal, pad_event_to=0, pad_level=False)


def _reset_root(level: int) -> logging.Logger:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install structlog and one stdlib handler per configured output.

    When ``config`` is given it wins over ``json_format`` and ``level``,
    which only describe a single stderr output. Calling this again
    replaces the previous handlers.
    """
    global _log_file_path
    from commitcov.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    base_level = _level_number(config.level, logging.INFO)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(base_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # level changes must apply to loggers created before reconfiguring
        cache_logger_on_first_use=False,
    )

    root = _reset_root(base_level)
    _log_file_path = None

    for output in config.outputs:
        if output.destination not in ("stderr", "stdout") and _log_file_path is None:
            _log_file_path = Path(output.destination)

        handler = _open_stream(output.destination)
        handler.setLevel(_level_number(output.level, base_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer_for(output),
                foreign_pre_chain=pre_chain,
            )
        )
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, bound to ``logger=name`` when named."""
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger  # type: ignore[no-any-return]
