"""Structured logging configuration.

This module provides logging configuration for stackcapture:
- Configurable log levels and output formats (JSON/console)
- Context injection (service name and package version)

Capture never logs per call. Resolution misses are logged at debug level;
other events are one-off, such as code registration or configuration changes.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from typing import Any, cast

import structlog
from structlog.typing import WrappedLogger


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add contextual information to all log entries.

    Adds standard fields for correlation and debugging:
    - service: Always "stackcapture"
    - version: Current package version (if available)

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with added context
    """
    event_dict["service"] = "stackcapture"

    try:
        from stackcapture._version import __version__

        event_dict["version"] = __version__
    except (ImportError, RuntimeError):
        pass

    return event_dict


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.JSON,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)

    Example:
        # For development (colored console output)
        configure_logging(level="DEBUG", log_format="console")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    numeric_level = getattr(logging, level.value)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True, exception_formatter=structlog.dev.plain_traceback
            )
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[console_handler],
        force=True,
    )


def get_logger(name: str | None = None) -> WrappedLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller's module)

    Returns:
        Configured structlog logger
    """
    return cast(WrappedLogger, structlog.get_logger(name))


class LogEventNames:
    """Standard log event names for consistency."""

    # Code table
    CODE_REGISTERED = "code_registered"
    SYMBOL_NOT_FOUND = "symbol_not_found"

    # Configuration
    CAPTURE_CONFIGURED = "capture_configured"
    DEFAULTS_RESET = "defaults_reset"
