"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

TRACE = 5
DEFAULT_LOG_LEVEL = "info"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
HANDLER_MARKER = "_cluster_control_handler"

# Named levels accepted from configuration, mapped to minimum emitted severity
LOG_LEVELS: dict[str, int] = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

logging.addLevelName(TRACE, "TRACE")


def resolve_log_level(name: str | None) -> int:
    """Map a configured level name to a stdlib logging level.

    Unset or unrecognized names resolve to ``info``.

    Args:
        name: Level name such as ``"warn"`` or ``"trace"``.

    Returns:
        The numeric logging level.
    """
    if not name:
        return LOG_LEVELS[DEFAULT_LOG_LEVEL]
    return LOG_LEVELS.get(name.strip().lower(), LOG_LEVELS[DEFAULT_LOG_LEVEL])


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _setup_file_logging(log_file: Path) -> None:
    """Attach a rotating JSON file handler to the root logger."""
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
    )
    file_handler.setLevel(TRACE)
    setattr(file_handler, HANDLER_MARKER, True)
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    logging.getLogger().addHandler(file_handler)


def configure_logging(
    level: str | None = DEFAULT_LOG_LEVEL,
    *,
    json_output: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure structured logging for the application.

    Console output goes to stderr, keeping stdout for command output.
    When ``log_file`` is given, records are also written there as JSON with
    size-based rotation. Calling again replaces the handlers installed by
    the previous call.

    Args:
        level: Minimum level name (panic, fatal, error, warn, info, debug, trace).
        json_output: Render console logs as JSON instead of the dev renderer.
        log_file: Optional path for a rotating JSON log file.
    """
    log_level = resolve_log_level(level)
    shared_processors = _shared_processors()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    if json_output:
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=shared_processors,
        )
    else:
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=shared_processors,
        )
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()
    setattr(console_handler, HANDLER_MARKER, True)
    root_logger.setLevel(TRACE)  # Let handlers filter
    root_logger.addHandler(console_handler)

    if log_file is not None:
        _setup_file_logging(log_file)


def get_logger(
    name: str | None = None,
    level: str | None = None,
    **initial_context: Any,
) -> Any:
    """Get a logger with optional level filtering and initial context.

    When ``level`` is given the returned logger drops events below that
    level regardless of the process-wide configuration, so each component
    can carry the level it was constructed with.

    Args:
        name: Logger name.
        level: Optional minimum level name for this logger.
        **initial_context: Context variables to bind to the logger.

    Returns:
        A bound structlog logger.
    """
    if level is None:
        logger = structlog.get_logger(name)
    else:
        logger = structlog.wrap_logger(
            None,
            wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(level)),
            logger_factory_args=(name,) if name else (),
        )
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
