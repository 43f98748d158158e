"""Exceptions raised while discovering and applying migrations."""

from pathlib import Path


class MigrationError(Exception):
    """
    Base class for all migration failures.

    Every error is fatal to the current run. Lower-level causes (OS errors,
    sqlite3 errors) are chained with ``raise ... from`` so they remain
    inspectable through ``__cause__``.
    """

    pass


class MigrationPathNotFoundError(MigrationError):
    """Raised when the migrations root or a version folder is missing or unreadable."""

    def __init__(self, path: Path, reason: str = "Migrations path not found"):
        self.path = path
        super().__init__(f"{reason}: {path}")


class DuplicateVersionError(MigrationError):
    """Raised when two sibling entries share the same numeric prefix."""

    def __init__(
        self,
        directory: Path,
        version: int,
        existing_name: str,
        conflicting_name: str,
        kind: str,
    ):
        self.directory = directory
        self.version = version
        self.existing_name = existing_name
        self.conflicting_name = conflicting_name
        self.kind = kind
        super().__init__(
            f"Duplicate migration ID {version} detected in {directory}. "
            f"Conflicting {kind}s: '{existing_name}' and '{conflicting_name}'. "
            "Each migration must have a unique numeric prefix."
        )


class EmptyVersionFolderError(MigrationError):
    """Raised when a version folder due for application has no numbered scripts."""

    def __init__(self, folder: Path, version: int):
        self.folder = folder
        self.version = version
        super().__init__(
            f"Migration folder '{folder.name}' (Version: {version}) contains no migration "
            "files starting with digits. Each version folder must contain at least one "
            "numbered migration file."
        )


class DiscoveryError(MigrationError):
    """
    Raised when scanning a directory for migrations fails.

    Wraps the underlying scanner error (duplicate IDs, unreadable directory)
    with the directory being scanned and, for version folders, the target
    version.
    """

    def __init__(self, directory: Path, version: int | None = None, detail: str = ""):
        self.directory = directory
        self.version = version
        if version is None:
            message = f"Failed to identify migration folders in '{directory}'"
        else:
            message = (
                f"Failed to identify migration files in folder '{directory.name}' "
                f"(Version: {version}, Path: {directory})"
            )
        if detail:
            message = f"{message}. Error: {detail}"
        super().__init__(message)


class ScriptExecutionError(MigrationError):
    """Raised when a migration script cannot be read or fails to execute."""

    def __init__(self, version: int, name: str, path: Path, detail: str = ""):
        self.version = version
        self.name = name
        self.path = path
        message = f"Failed to apply migration script '{name}' (ID: {version}, Path: {path})"
        if detail:
            message = f"{message}. Error: {detail}"
        super().__init__(message)
