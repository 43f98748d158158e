"""Migration runner for numbered SQL migration folders."""

import os
import sqlite3
from collections.abc import Mapping
from contextlib import closing
from pathlib import Path

from ..errors import (
    DiscoveryError,
    EmptyVersionFolderError,
    MigrationError,
    MigrationPathNotFoundError,
    ScriptExecutionError,
)
from ..log import LogLevel, LogSink, null_sink
from .base import ItemKind, MigrationItem
from .scanner import scan_directory
from .version import get_user_version, set_user_version


def connect_database(database: str | os.PathLike) -> sqlite3.Connection:
    """
    Open a SQLite connection from a path, ``:memory:`` or ``file:`` URI.

    Args:
        database: Database descriptor

    Returns:
        New connection owned by the caller
    """
    target = os.fspath(database)
    return sqlite3.connect(target, uri=target.startswith("file:"))


def discover_versions(
    migrations_path: str | Path,
    log: LogSink | None = None,
) -> dict[int, MigrationItem]:
    """
    Find the version folders under a migrations root.

    Args:
        migrations_path: Migrations root directory
        log: Optional log sink

    Returns:
        Mapping of version to folder, in ascending version order

    Raises:
        MigrationPathNotFoundError: If the root doesn't exist
        DiscoveryError: If the root can't be scanned or holds duplicate IDs
    """
    log = log or null_sink
    root = Path(migrations_path)

    if not root.is_dir():
        log(LogLevel.ERROR, f"Migrations path not found: {root}")
        raise MigrationPathNotFoundError(root)

    try:
        folders = scan_directory(root, ItemKind.FOLDER)
    except (MigrationError, OSError) as e:
        log(LogLevel.ERROR, f"Failed to identify migration folders in '{root}'. Error: {e}")
        raise DiscoveryError(root, detail=str(e)) from e

    log(LogLevel.DEBUG, f"Found {len(folders)} migration folder(s)")
    return folders


def apply_scripts(
    connection: sqlite3.Connection,
    scripts: Mapping[int, MigrationItem],
    log: LogSink | None = None,
) -> None:
    """
    Run a sequence of migration scripts in ascending ID order.

    Each script is read fully and executed as a single unit. The first
    failure stops the sequence; scripts already executed are not undone.

    Args:
        connection: Open database connection
        scripts: Mapping of script ID to script file
        log: Optional log sink

    Raises:
        ScriptExecutionError: If a script can't be read or fails to execute
    """
    log = log or null_sink

    for version in sorted(scripts):
        script = scripts[version]
        try:
            log(LogLevel.DEBUG, f"Executing migration script: {script.name}")
            contents = script.path.read_text(encoding="utf-8")
            connection.executescript(contents)
            log(LogLevel.DEBUG, f"Successfully executed migration script: {script.name}")
        except (OSError, UnicodeDecodeError, sqlite3.Error) as e:
            log(
                LogLevel.ERROR,
                f"Failed to apply migration script '{script.name}' (ID: {version}). Error: {e}",
            )
            raise ScriptExecutionError(version, script.name, script.path, str(e)) from e


class MigrationRunner:
    """Runs database migrations against an open connection."""

    def __init__(self, connection: sqlite3.Connection, log: LogSink | None = None):
        """
        Initialize migration runner.

        Args:
            connection: Open database connection, not closed by the runner
            log: Optional log sink
        """
        self.connection = connection
        self.log = log or null_sink

    def get_schema_version(self) -> int:
        """
        Get current schema version from database.

        Returns:
            Current schema version, or 0 if not set
        """
        return get_user_version(self.connection)

    def set_schema_version(self, version: int) -> None:
        """
        Set schema version in database.

        Args:
            version: Schema version to set
        """
        set_user_version(self.connection, version)

    def discover(self, migrations_path: str | Path) -> dict[int, MigrationItem]:
        """Find the version folders under a migrations root."""
        return discover_versions(migrations_path, self.log)

    def scripts_for(self, folder: MigrationItem) -> dict[int, MigrationItem]:
        """
        Find the numbered script files of a version folder.

        Args:
            folder: Version folder

        Returns:
            Mapping of script ID to script file, in ascending order

        Raises:
            DiscoveryError: If the folder can't be scanned or holds duplicate IDs
        """
        try:
            scripts = scan_directory(folder.path, ItemKind.FILE)
        except (MigrationError, OSError) as e:
            self.log(
                LogLevel.ERROR,
                f"Failed to identify migration files in folder '{folder.name}' "
                f"(Version: {folder.version})",
            )
            raise DiscoveryError(folder.path, folder.version, str(e)) from e

        self.log(
            LogLevel.DEBUG,
            f"Found {len(scripts)} migration file(s) in version {folder.version}",
        )
        return scripts

    def pending(self, folders: Mapping[int, MigrationItem]) -> list[MigrationItem]:
        """
        Select the folders newer than the current schema version.

        Args:
            folders: Discovered version folders

        Returns:
            Folders still to apply, in ascending version order
        """
        current_version = self.get_schema_version()
        return [folders[version] for version in sorted(folders) if version > current_version]

    def needs_migration(self, migrations_path: str | Path) -> bool:
        """
        Check if any migrations need to be run.

        Returns:
            True if migrations are pending
        """
        return bool(self.pending(self.discover(migrations_path)))

    def apply_version(self, folder: MigrationItem) -> None:
        """
        Apply every script of one version folder, then record its version.

        Args:
            folder: Version folder to apply

        Raises:
            DiscoveryError: If the folder can't be scanned
            EmptyVersionFolderError: If the folder has no numbered scripts
            ScriptExecutionError: If a script fails; the version is not recorded
            sqlite3.Error: If the new version can't be written or committed
        """
        self.log(
            LogLevel.INFORMATION,
            f"Applying migration version {folder.version} from folder: {folder.name}",
        )

        scripts = self.scripts_for(folder)
        if not scripts:
            self.log(
                LogLevel.ERROR,
                f"Migration folder '{folder.name}' (Version: {folder.version}) "
                "contains no migration files",
            )
            raise EmptyVersionFolderError(folder.path, folder.version)

        apply_scripts(self.connection, scripts, self.log)

        try:
            self.set_schema_version(folder.version)
            self.connection.commit()
        except sqlite3.Error as e:
            self.log(
                LogLevel.ERROR,
                f"Failed to record migration version {folder.version}. Error: {e}",
            )
            raise
        self.log(LogLevel.INFORMATION, f"Successfully applied migration version {folder.version}")

    def apply_versions(self, folders: Mapping[int, MigrationItem]) -> list[int]:
        """
        Apply all version folders newer than the current schema version.

        Args:
            folders: Discovered version folders

        Returns:
            Versions applied during this call, in order
        """
        try:
            current_version = self.get_schema_version()
        except sqlite3.Error as e:
            self.log(LogLevel.ERROR, f"Failed to read current database version. Error: {e}")
            raise
        self.log(LogLevel.INFORMATION, f"Current database version: {current_version}")

        applied = []
        for version in sorted(folders):
            if version <= current_version:
                self.log(LogLevel.DEBUG, f"Skipping version {version} (already applied)")
                continue

            self.apply_version(folders[version])
            applied.append(version)

        return applied

    def run_migrations(self, migrations_path: str | Path) -> list[int]:
        """
        Discover and apply all pending migrations.

        Args:
            migrations_path: Migrations root directory

        Returns:
            Versions applied during this call, in order
        """
        return init(self.connection, migrations_path, self.log)


def init(
    database: sqlite3.Connection | str | os.PathLike,
    migrations_path: str | Path,
    log: LogSink | None = None,
) -> list[int]:
    """
    Bring a database up to date with the migrations under a directory.

    Version folders (names starting with digits) are applied in ascending
    order if their number is above the database's PRAGMA user_version. Each
    folder's numbered scripts run in ascending order, and user_version is set
    to the folder's number once all of them succeed.

    Args:
        database: Open connection (left open) or a path/URI to open and close
        migrations_path: Migrations root directory
        log: Optional callback receiving ``(level, message)`` events

    Returns:
        Versions applied during this call, in order

    Raises:
        MigrationPathNotFoundError: If the migrations root doesn't exist
        DiscoveryError: If a directory can't be scanned or holds duplicate IDs
        EmptyVersionFolderError: If a pending version folder has no scripts
        ScriptExecutionError: If a script fails to read or execute
        sqlite3.Error: If the database can't be opened, read or updated
    """
    log = log or null_sink
    log(LogLevel.INFORMATION, f"Starting migrations for path: {migrations_path}")

    folders = discover_versions(migrations_path, log)
    if not folders:
        log(LogLevel.INFORMATION, "No migration folders found. Nothing to apply.")
        return []

    if isinstance(database, sqlite3.Connection):
        applied = MigrationRunner(database, log).apply_versions(folders)
    else:
        try:
            owned = connect_database(database)
        except sqlite3.Error as e:
            log(LogLevel.ERROR, f"Failed to open database '{database}'. Error: {e}")
            raise
        with closing(owned) as connection:
            applied = MigrationRunner(connection, log).apply_versions(folders)

    log(LogLevel.INFORMATION, "Migrations completed successfully")
    return applied
