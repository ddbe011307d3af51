"""Database schema initialization."""

import os
import sqlite3
from pathlib import Path


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "potsettle" / "potsettle.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def backup_database(destination: Path, db_path: Path | None = None) -> None:
    """Copy the database to a snapshot file.

    Uses the SQLite online backup API, so a settlement being committed at the
    same time is either fully in the snapshot or not at all.

    Args:
        destination: Snapshot file to write. Its directory must exist.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If the backup fails.
    """
    if db_path is None:
        db_path = get_db_path()

    source = sqlite3.connect(db_path)
    target = sqlite3.connect(destination)
    try:
        with target:
            source.backup(target)
    finally:
        target.close()
        source.close()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Every table is scoped by user_id. Balances, budgets and amounts are
    integer cents; percentage rule values are REAL.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS wallets (
                user_id TEXT NOT NULL,
                id TEXT NOT NULL,
                current_balance INTEGER NOT NULL DEFAULT 0,
                target_balance INTEGER,
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS assets (
                user_id TEXT NOT NULL,
                id TEXT NOT NULL,
                kind TEXT NOT NULL DEFAULT 'bank-account',
                current_balance INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                user_id TEXT NOT NULL,
                id TEXT NOT NULL,
                kind TEXT NOT NULL DEFAULT 'plain',
                monthly_budget INTEGER NOT NULL DEFAULT 0,
                annual_budget INTEGER,
                active INTEGER NOT NULL DEFAULT 1,
                wallet_id TEXT,
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS distribution_rules (
                user_id TEXT NOT NULL,
                wallet_id TEXT NOT NULL,
                kind TEXT NOT NULL,
                value REAL NOT NULL,
                priority INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (user_id, wallet_id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS category_expenses (
                user_id TEXT NOT NULL,
                month TEXT NOT NULL,
                category_id TEXT NOT NULL,
                amount INTEGER NOT NULL,
                wallet_id TEXT,
                PRIMARY KEY (user_id, month, category_id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS incomes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                month TEXT NOT NULL,
                amount INTEGER NOT NULL,
                asset_id TEXT,
                description TEXT
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS settlements (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                month TEXT NOT NULL,
                monthly_pot INTEGER NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                UNIQUE (user_id, month)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS wallet_transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                wallet_id TEXT NOT NULL,
                settlement_id INTEGER,
                amount INTEGER NOT NULL,
                kind TEXT NOT NULL,
                description TEXT,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS asset_transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                asset_id TEXT NOT NULL,
                settlement_id INTEGER,
                amount INTEGER NOT NULL,
                kind TEXT NOT NULL,
                description TEXT,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_incomes_user_month ON incomes(user_id, month)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_wallet_txn_settlement ON wallet_transactions(user_id, settlement_id)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_asset_txn_settlement ON asset_transactions(user_id, settlement_id)"
        )

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
