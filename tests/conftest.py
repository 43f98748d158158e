"""Shared fixtures for SQLite-Init tests."""

import sqlite3
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from sqlite_init.log import LogLevel, LogSink


@pytest.fixture
def connection() -> Iterator[sqlite3.Connection]:
    """Provide a fresh in-memory database."""
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Provide an empty migrations root."""
    root = tmp_path / "migrations"
    root.mkdir()
    return root


@pytest.fixture
def write_migration(migrations_dir: Path) -> Callable[[str, str, str], Path]:
    """Provide a helper that writes ``<root>/<folder>/<script>`` with SQL contents."""

    def _write(folder: str, script: str, sql: str) -> Path:
        path = migrations_dir / folder / script
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(sql, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def log_messages() -> list[tuple[LogLevel, str]]:
    """Collect events passed to a log sink."""
    return []


@pytest.fixture
def log_sink(log_messages: list[tuple[LogLevel, str]]) -> LogSink:
    """Provide a log sink that records into ``log_messages``."""

    def _sink(level: LogLevel, message: str) -> None:
        log_messages.append((level, message))

    return _sink
