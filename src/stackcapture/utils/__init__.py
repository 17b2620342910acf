"""Utility functions and helpers.

- logging: Structured logging configuration
"""

from stackcapture.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "configure_logging",
    "get_logger",
]
