"""
Configuration loading and models for find-unused-exports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from find_unused_exports.core.exceptions import ConfigurationError
from find_unused_exports.core.scanner import MODULE_GLOB

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "find-unused-exports.yaml"


@dataclass
class ServerConfig:
    """Configuration for the API server."""

    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        path: Optional log file destination path.
    """

    level: str = "WARNING"
    path: Optional[str] = None


@dataclass
class FinderConfig:
    """Project configuration for finding unused exports."""

    project_root: Path = field(default_factory=Path.cwd)
    module_glob: str = MODULE_GLOB
    resolve_file_extensions: Optional[list[str]] = None
    resolve_index_files: bool = False
    max_workers: Optional[int] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FinderConfig:
        """Build a config from parsed YAML data. Unknown keys are ignored.

        Option values are type checked later, when the analysis runs.
        """
        logging_data = data.get("logging") or {}
        server_data = data.get("server") or {}
        if not isinstance(logging_data, dict) or not isinstance(server_data, dict):
            raise ConfigurationError("Config sections `logging` and `server` must be mappings.")

        return cls(
            module_glob=data.get("module_glob", MODULE_GLOB),
            resolve_file_extensions=data.get("resolve_file_extensions"),
            resolve_index_files=data.get("resolve_index_files", False),
            max_workers=data.get("max_workers"),
            logging=LoggingConfig(
                level=logging_data.get("level", "WARNING"),
                path=logging_data.get("path"),
            ),
            server=ServerConfig(
                host=server_data.get("host", "127.0.0.1"),
                port=int(server_data.get("port", 8765)),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "module_glob": self.module_glob,
            "resolve_file_extensions": self.resolve_file_extensions,
            "resolve_index_files": self.resolve_index_files,
            "max_workers": self.max_workers,
            "logging": {"level": self.logging.level, "path": self.logging.path},
            "server": {"host": self.server.host, "port": self.server.port},
        }


def get_config_path(root_path: Path, config_file: str | Path | None = None) -> Path:
    """Return the config file path, relative paths resolving from ``root_path``."""
    if config_file:
        return root_path / config_file
    return root_path / CONFIG_FILE_NAME


def load_config(root_path: Path, config_file: str | Path | None = None) -> FinderConfig:
    """Load configuration from a YAML file.

    A missing default config file yields the default configuration, but a
    config file that was explicitly requested must exist.
    """
    config_path = get_config_path(root_path, config_file=config_file)

    if not config_path.is_file():
        if config_file:
            raise ConfigurationError(
                f"Config file `{config_path}` doesn't exist.",
                details={"path": str(config_path)},
            )
        logger.debug("No config file found at %s, using defaults.", config_path)
        return FinderConfig(project_root=root_path)

    logger.info("Loading config from %s", config_path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to load config file `{config_path}`: {e}",
            details={"path": str(config_path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file `{config_path}` must contain a mapping.",
            details={"path": str(config_path)},
        )

    try:
        config = FinderConfig.from_dict(data)
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid config file `{config_path}`: {e}", details={"path": str(config_path)}
        ) from e
    config.project_root = root_path
    return config
