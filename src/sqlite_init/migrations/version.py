"""Read and write the schema version stored in PRAGMA user_version."""

import sqlite3

from .base import MAX_VERSION


def get_user_version(connection: sqlite3.Connection) -> int:
    """
    Get the current schema version of a database.

    Args:
        connection: Open database connection

    Returns:
        Value of PRAGMA user_version, 0 for a database that never set it
    """
    return connection.execute("PRAGMA user_version").fetchone()[0]


def set_user_version(connection: sqlite3.Connection, version: int) -> None:
    """
    Overwrite the schema version of a database.

    PRAGMA statements don't accept bound parameters, so the value is
    validated and written as an integer literal.

    Args:
        connection: Open database connection
        version: New schema version

    Raises:
        ValueError: If version is not an int in the range 0..MAX_VERSION
    """
    if isinstance(version, bool) or not isinstance(version, int):
        raise ValueError(f"Schema version must be an integer, got {version!r}")
    if not 0 <= version <= MAX_VERSION:
        raise ValueError(f"Schema version must be between 0 and {MAX_VERSION}, got {version}")

    connection.execute(f"PRAGMA user_version = {int(version)}")
