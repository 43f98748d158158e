"""Discovery of numbered migration folders and script files."""

import os
from pathlib import Path

from ..errors import DuplicateVersionError, MigrationPathNotFoundError
from .base import ItemKind, MigrationItem, parse_version_prefix


def _matches_kind(entry: os.DirEntry, kind: ItemKind) -> bool:
    if kind is ItemKind.FOLDER:
        return entry.is_dir()
    return entry.is_file()


def _insert_unique(
    items: dict[int, MigrationItem],
    item: MigrationItem,
    directory: Path,
) -> None:
    """Insert an item, failing if its version is already taken."""
    existing = items.get(item.version)
    if existing is not None:
        raise DuplicateVersionError(
            directory,
            item.version,
            existing.name,
            item.name,
            item.kind.value,
        )
    items[item.version] = item


def scan_directory(path: str | Path, kind: ItemKind) -> dict[int, MigrationItem]:
    """
    Find the numbered immediate children of a directory.

    Looks at folders or files (never both, never recursively) whose names
    start with digits, e.g. ``001 - Create table foo.sql``. Entries that do
    not start with digits, e.g. ``Beta - 002 - Add indexes.sql``, are skipped.

    Args:
        path: Directory to inspect
        kind: Whether to look at folders or files

    Returns:
        Mapping of version to item, in ascending version order

    Raises:
        MigrationPathNotFoundError: If path is missing, not a directory or unreadable
        DuplicateVersionError: If two entries share the same numeric prefix
    """
    directory = Path(path).absolute()
    if not directory.is_dir():
        raise MigrationPathNotFoundError(directory)

    items: dict[int, MigrationItem] = {}
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if not _matches_kind(entry, kind):
                    continue

                version = parse_version_prefix(entry.name)
                if version is None:
                    continue

                _insert_unique(items, MigrationItem(version, Path(entry.path), kind), directory)
    except OSError as e:
        raise MigrationPathNotFoundError(directory, "Migrations path is not readable") from e

    return {version: items[version] for version in sorted(items)}
