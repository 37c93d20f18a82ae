"""Configuration system for find-unused-exports."""

from .config import (
    CONFIG_FILE_NAME,
    FinderConfig,
    LoggingConfig,
    ServerConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "FinderConfig",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
]
