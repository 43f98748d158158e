"""CLI interface for SQLite-Init."""

import json
import logging
import sqlite3
import sys
from contextlib import closing
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import Config, get_config_path, load_config
from .errors import MigrationError
from .log import logger_sink
from .migrations import (
    ItemKind,
    MigrationItem,
    connect_database,
    discover_versions,
    get_user_version,
    init,
    scan_directory,
)
from .utils import prompt_confirm

console = Console()


def _configure_logging(level: str) -> logging.Logger:
    """Route library logging through rich and return the migration logger."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return logging.getLogger("sqlite_init")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Custom config file path",
)
@click.option(
    "--database",
    "-d",
    type=click.Path(dir_okay=False, path_type=Path),
    help="SQLite database file (overrides config)",
)
@click.option(
    "--migrations-dir",
    "-m",
    type=click.Path(file_okay=False, path_type=Path),
    help="Migrations root directory (overrides config)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    database: Path | None,
    migrations_dir: Path | None,
    verbose: bool,
) -> None:
    """SQLite-Init: Apply numbered SQL migration folders to SQLite databases."""
    ctx.ensure_object(dict)

    # Load configuration
    try:
        loaded = load_config(config)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] Configuration: {e}")
        sys.exit(1)

    overrides: dict[str, object] = {}
    if database is not None:
        overrides["database"] = database
    if migrations_dir is not None:
        overrides["migrations_dir"] = migrations_dir
    if verbose:
        overrides["log_level"] = "DEBUG"

    ctx.obj["config"] = loaded.model_copy(update=overrides)


@cli.command()
@click.pass_context
def migrate(ctx: click.Context) -> None:
    """
    Apply pending migrations to the database.

    Every folder under the migrations directory whose name starts with a
    number is a schema version. Versions above the database's current
    user_version are applied in ascending order by running the folder's
    numbered scripts, also in ascending order.

    Examples:

        \b
        # Apply migrations using ./sqlite-init.toml (or defaults)
        sqlite-init migrate

        \b
        # Apply migrations to a specific database
        sqlite-init --database data/app.db --migrations-dir db/migrations migrate

        \b
        # Show every script as it runs
        sqlite-init -v migrate
    """
    config: Config = ctx.obj["config"]
    logger = _configure_logging(config.log_level)

    try:
        applied = init(config.database, config.migrations_dir, logger_sink(logger))
    except (MigrationError, sqlite3.Error) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if applied:
        versions = ", ".join(str(version) for version in applied)
        console.print(f"[green]✓[/green] Applied migration version(s): {versions}")
    else:
        console.print("Database is up to date.")


@cli.command()
@click.option(
    "--format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format: table (default) or json",
)
@click.pass_context
def status(ctx: click.Context, format: str) -> None:
    """
    Show the database version and which migrations are pending.

    Nothing is written; a database file that doesn't exist yet is reported
    as version 0.

    Examples:

        \b
        # Show status as a table
        sqlite-init status

        \b
        # Output as JSON for scripting
        sqlite-init status --format json
    """
    config: Config = ctx.obj["config"]

    try:
        current_version = 0
        if config.database.exists():
            with closing(connect_database(config.database)) as connection:
                current_version = get_user_version(connection)

        folders = discover_versions(config.migrations_dir)
        rows = []
        for version, folder in folders.items():
            applied = version <= current_version
            rows.append((folder, _list_scripts(folder, applied), applied))
    except (MigrationError, sqlite3.Error) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if format == "json":
        output = {
            "database": str(config.database),
            "current_version": current_version,
            "versions": [
                {
                    "version": folder.version,
                    "folder": folder.name,
                    "scripts": [script.name for script in scripts.values()],
                    "status": "applied" if applied else "pending",
                }
                for folder, scripts, applied in rows
            ],
        }
        print(json.dumps(output, indent=2))
    else:
        _display_status_table(rows, current_version)


@cli.command("init-config")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file without asking")
@click.pass_context
def init_config(ctx: click.Context, path: Path | None, force: bool) -> None:
    """
    Write the current configuration to a TOML file.

    Uses ./sqlite-init.toml (or $SQLITE_INIT_CONFIG) when no path is given.
    Values passed with --database and --migrations-dir are written too.

    Examples:

        \b
        # Write a default config file
        sqlite-init init-config

        \b
        # Write a config pointing at a custom database
        sqlite-init --database data/app.db init-config config/sqlite-init.toml
    """
    config: Config = ctx.obj["config"]
    target = path or get_config_path()

    if target.exists() and not force:
        if not prompt_confirm(f"Overwrite existing config at {target}?", default=False):
            console.print("Cancelled.")
            return

    try:
        config.save(target)
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not write config: {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Wrote configuration to {target}")


def _list_scripts(folder: MigrationItem, applied: bool) -> dict[int, MigrationItem]:
    """List a folder's scripts; only pending folders are validated."""
    if not applied:
        return scan_directory(folder.path, ItemKind.FILE)

    try:
        return scan_directory(folder.path, ItemKind.FILE)
    except MigrationError:
        return {}


def _display_status_table(
    rows: list[tuple[MigrationItem, dict[int, MigrationItem], bool]],
    current_version: int,
) -> None:
    """Display migration status in a table."""
    console.print(f"Current database version: [cyan]{current_version}[/cyan]")

    if not rows:
        console.print("No migration folders found.")
        return

    table = Table(title="Migrations")
    table.add_column("Version", style="cyan", justify="right")
    table.add_column("Folder", style="magenta")
    table.add_column("Scripts")
    table.add_column("Status")

    for folder, scripts, applied in rows:
        status_text = "[green]✓ applied[/green]" if applied else "[yellow]pending[/yellow]"
        script_names = ", ".join(script.name for script in scripts.values()) or "-"
        table.add_row(str(folder.version), folder.name, script_names, status_text)

    console.print(table)

    pending = sum(1 for _, _, applied in rows if not applied)
    console.print(f"{pending} pending version(s).")


if __name__ == "__main__":
    cli()
