"""Filesystem-based migration system for SQLite databases."""

from .base import MAX_VERSION, ItemKind, MigrationItem, parse_version_prefix
from .runner import (
    MigrationRunner,
    apply_scripts,
    connect_database,
    discover_versions,
    init,
)
from .scanner import scan_directory
from .version import get_user_version, set_user_version

__all__ = [
    "MAX_VERSION",
    "ItemKind",
    "MigrationItem",
    "MigrationRunner",
    "apply_scripts",
    "connect_database",
    "discover_versions",
    "get_user_version",
    "init",
    "parse_version_prefix",
    "scan_directory",
    "set_user_version",
]
