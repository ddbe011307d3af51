"""Admin commands for backup and init."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from potsettle.config import Settings, create_default_config, get_config_path, load_settings
from potsettle.store.queries import get_settlements
from potsettle.store.schema import backup_database, database_exists, get_db_path, get_xdg_data_home, init_database

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def require_database() -> Path:
    """Return the database path, exiting if it has not been initialized."""
    db_path = get_db_path()
    if not database_exists(db_path):
        fail("Database not found. Run 'potsettle init' first.")
    return db_path


def require_settings() -> Settings:
    """Load settings, exiting on an invalid config file."""
    try:
        return load_settings()
    except (ValueError, OSError) as e:
        fail(f"Invalid config: {e}")


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Snapshot the ledger database and copy the config next to it."""
    db_path = require_database()
    settings = require_settings()
    config_path = get_config_path()

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = get_xdg_data_home() / "potsettle" / "backups"

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"potsettle_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)

        backup_database(db_backup, db_path)
        settled = len(get_settlements(settings.user, db_backup))
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")
        console.print(f"  [dim]{settled} settled month(s) in the snapshot[/dim]")

        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except (sqlite3.Error, OSError) as e:
        fail(f"Backup failed: {e}")


def init_command(force: bool = False) -> None:
    """Initialize potsettle database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'potsettle init --force' to overwrite[/yellow]")
            sys.exit(1)

        if force and db_exists:
            db_path.unlink()

        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database initialized")

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        console.print("\n[green]Initialization complete![/green]", style="bold")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
