"""Configuration loading and validation."""

from .loader import load_config, substitute_env_vars
from .schema import CaptureConfig, LoggingConfig, ResolverConfig, StackCaptureConfig

__all__ = [
    # Loader
    "load_config",
    "substitute_env_vars",
    # Root config
    "StackCaptureConfig",
    # Sections
    "CaptureConfig",
    "LoggingConfig",
    "ResolverConfig",
]
