"""Process-wide capture defaults and their configuration."""

from __future__ import annotations

import threading

import structlog

from stackcapture.config.schema import StackCaptureConfig
from stackcapture.core.caching import CachingResolver
from stackcapture.core.code_table import process_table
from stackcapture.interfaces.resolver import Resolver
from stackcapture.utils.logging import LogEventNames, configure_logging

log = structlog.get_logger()

# Frames recorded per capture unless configured otherwise.
MAX_DEPTH = 32

_lock = threading.Lock()
_resolver: Resolver = process_table()
_max_depth = MAX_DEPTH


def default_resolver() -> Resolver:
    """Resolver bound to frames that are not given one explicitly."""
    return _resolver


def default_max_depth() -> int:
    return _max_depth


def set_defaults(*, max_depth: int | None = None, resolver: Resolver | None = None) -> None:
    """Replace the process-wide capture defaults.

    Args:
        max_depth: Maximum number of frames per capture
        resolver: Resolver used by frames created without one. Must
            understand addresses issued by the process code table.

    Raises:
        ValueError: If max_depth is not positive
    """
    global _resolver, _max_depth

    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be positive, got {max_depth}")

    with _lock:
        if max_depth is not None:
            _max_depth = max_depth
        if resolver is not None:
            _resolver = resolver


def reset_defaults() -> None:
    """Restore the built-in depth bound and the uncached process table."""
    global _resolver, _max_depth

    with _lock:
        _resolver = process_table()
        _max_depth = MAX_DEPTH

    log.debug(LogEventNames.DEFAULTS_RESET)


def configure(config: StackCaptureConfig, *, setup_logging: bool = True) -> None:
    """Apply a configuration to this process.

    Args:
        config: Validated configuration
        setup_logging: Also configure structlog from ``config.logging``
    """
    if setup_logging:
        configure_logging(level=config.logging.level, log_format=config.logging.format)

    resolver: Resolver = process_table()
    if config.resolver.cache_size > 0:
        resolver = CachingResolver(resolver, maxsize=config.resolver.cache_size)

    set_defaults(max_depth=config.capture.max_depth, resolver=resolver)

    log.info(
        LogEventNames.CAPTURE_CONFIGURED,
        max_depth=config.capture.max_depth,
        cache_size=config.resolver.cache_size,
    )
