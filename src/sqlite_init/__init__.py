"""SQLite-Init: apply numbered SQL migration folders to SQLite databases."""

from .errors import (
    DiscoveryError,
    DuplicateVersionError,
    EmptyVersionFolderError,
    MigrationError,
    MigrationPathNotFoundError,
    ScriptExecutionError,
)
from .log import LogLevel, LogSink, logger_sink, null_sink
from .migrations import MigrationRunner, init

__version__ = "0.1.0"

__all__ = [
    "DiscoveryError",
    "DuplicateVersionError",
    "EmptyVersionFolderError",
    "LogLevel",
    "LogSink",
    "MigrationError",
    "MigrationPathNotFoundError",
    "MigrationRunner",
    "ScriptExecutionError",
    "__version__",
    "init",
    "logger_sink",
    "null_sink",
]
