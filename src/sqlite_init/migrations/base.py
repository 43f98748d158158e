"""Core types for filesystem-discovered migrations."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# PRAGMA user_version is a signed 32-bit integer, so no version above this can be stored.
MAX_VERSION = 2**31 - 1

_VERSION_PREFIX = re.compile(r"^(\d+)", re.ASCII)


class ItemKind(Enum):
    """Kind of filesystem entry a scan looks for."""

    FOLDER = "folder"
    FILE = "file"


@dataclass(frozen=True)
class MigrationItem:
    """A numbered migration folder or script file found during a scan."""

    version: int
    path: Path
    kind: ItemKind

    @property
    def name(self) -> str:
        return self.path.name


def parse_version_prefix(name: str) -> int | None:
    """
    Extract the leading integer from an entry name.

    Only the leading run of ASCII digits is considered; the rest of the name,
    extension included, is ignored. ``"007 - add users.sql"`` parses to 7.

    Args:
        name: File or folder name

    Returns:
        Parsed version, or None if the name has no numeric prefix or the
        prefix is larger than MAX_VERSION
    """
    match = _VERSION_PREFIX.match(name)
    if match is None:
        return None

    version = int(match.group(1))
    if version > MAX_VERSION:
        return None
    return version
