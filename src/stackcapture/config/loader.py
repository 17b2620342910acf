"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from .schema import StackCaptureConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path) -> StackCaptureConfig:
    """
    Load configuration from YAML file with environment variable substitution.

    Values missing from the file fall back to ``STACKCAPTURE_*``
    environment variables, then to the built-in defaults.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated StackCaptureConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or the file is not a mapping
        ValidationError: If config doesn't match schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    yaml_with_env = substitute_env_vars(raw_yaml)

    # An empty file means "all defaults"
    config_dict = yaml.safe_load(yaml_with_env) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration must be a mapping, got {type(config_dict).__name__}")

    return StackCaptureConfig(**config_dict)
