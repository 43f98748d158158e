"""Configuration management for SQLite-Init."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, field_validator

from .utils import ensure_dir, expand_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "sqlite-init.toml"
DEFAULT_DATABASE = "app.db"
DEFAULT_MIGRATIONS_DIR = "migrations"


class Config(BaseModel):
    """Configuration for SQLite-Init.

    Pydantic model that validates configuration values and expands
    ``~`` and environment variables in paths.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    database: Path
    migrations_dir: Path
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("database", "migrations_dir", mode="before")
    @classmethod
    def expand_paths(cls, v: str | Path) -> Path:
        """Expand path strings with ~ and environment variables."""
        if isinstance(v, str):
            return expand_path(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    def save(self, path: Path) -> None:
        """
        Save configuration to TOML file.

        Args:
            path: Path to save config file
        """
        ensure_dir(path.parent)

        data = {
            "database": {
                "path": str(self.database),
            },
            "migrations": {
                "path": str(self.migrations_dir),
            },
            "logging": {
                "level": self.log_level,
            },
        }

        with open(path, "wb") as f:
            tomli_w.dump(data, f)


def get_config_path() -> Path:
    """
    Get configuration file path.

    Priority:
    1. SQLITE_INIT_CONFIG environment variable
    2. Default: ./sqlite-init.toml

    Returns:
        Path to config file
    """
    env_config = os.environ.get("SQLITE_INIT_CONFIG")
    if env_config:
        return expand_path(env_config)

    return Path.cwd() / DEFAULT_CONFIG_NAME


def create_default_config() -> Config:
    """
    Create default configuration.

    Returns:
        Config instance with default values
    """
    return Config(
        database=DEFAULT_DATABASE,
        migrations_dir=DEFAULT_MIGRATIONS_DIR,
    )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file using Pydantic validation.

    Args:
        config_path: Optional custom config path

    Returns:
        Config instance with validated values; defaults if the file doesn't exist

    Raises:
        ValueError: If the file can't be parsed or validation fails
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return create_default_config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    # Flatten TOML structure to match Config model fields
    flat_data = {
        "database": data.get("database", {}).get("path", DEFAULT_DATABASE),
        "migrations_dir": data.get("migrations", {}).get("path", DEFAULT_MIGRATIONS_DIR),
        "log_level": data.get("logging", {}).get("level", "INFO"),
    }

    return Config.model_validate(flat_data)
