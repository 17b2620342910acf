"""Pydantic models for configuration schema."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CaptureConfig(BaseModel):
    """Stack capture configuration."""

    max_depth: int = Field(32, ge=1, le=1024, description="Frames recorded per capture")


class ResolverConfig(BaseModel):
    """Symbol resolution configuration."""

    cache_size: int = Field(
        0, ge=0, description="LRU entries for resolved addresses; 0 disables caching"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"


class StackCaptureConfig(BaseSettings):
    """Root configuration for stackcapture."""

    capture: CaptureConfig = CaptureConfig()
    resolver: ResolverConfig = ResolverConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="STACKCAPTURE_",
        env_nested_delimiter="__",
    )
