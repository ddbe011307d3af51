"""Database query functions.

Rows are mapped to the domain records here, so the settlement engine only
ever sees canonical field names. Records are identified by their name within
a user.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any

from potsettle.domain.models import (
    Asset,
    AssetId,
    Category,
    CategoryExpense,
    CategoryId,
    DistributionRule,
    Income,
    Money,
    Month,
    UserId,
    Wallet,
    WalletId,
)
from potsettle.domain.settlement import Settlement
from potsettle.store.schema import get_db_path

logger = logging.getLogger(__name__)

ASSET_INCOME_DESCRIPTION = "Monthly income"


class PeriodSettledError(ValueError):
    """Raised when changing records of a period that is already settled."""


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _ensure_draft(cursor: sqlite3.Cursor, user_id: UserId, month: Month) -> None:
    cursor.execute("SELECT 1 FROM settlements WHERE user_id = ? AND month = ?", (user_id, month))
    if cursor.fetchone():
        raise PeriodSettledError(f"{month} is already settled and cannot be changed")


def _row_to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=CategoryId(row["id"]),
        name=row["id"],
        kind=row["kind"],
        monthly_budget=Money(row["monthly_budget"]),
        annual_budget=Money(row["annual_budget"]) if row["annual_budget"] is not None else None,
        active=bool(row["active"]),
        wallet_id=WalletId(row["wallet_id"]) if row["wallet_id"] else None,
    )


# Categories


def add_category(user_id: UserId, category: Category, db_path: Path | None = None) -> None:
    """Add or replace a category.

    Args:
        user_id: Owner of the category.
        category: Category to store; its id doubles as its name.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT OR REPLACE INTO categories
                    (user_id, id, kind, monthly_budget, annual_budget, active, wallet_id)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    category.id,
                    category.kind,
                    category.monthly_budget,
                    category.annual_budget,
                    int(category.active),
                    category.wallet_id,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def get_categories(user_id: UserId, db_path: Path | None = None, active_only: bool = False) -> list[Category]:
    """Get categories ordered by name.

    Args:
        user_id: Owner of the categories.
        db_path: Path to the database file. If None, uses default location.
        active_only: If True, skip deactivated categories.

    Returns:
        List of Category records.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM categories WHERE user_id = ?"
        if active_only:
            query += " AND active = 1"
        cursor.execute(query + " ORDER BY id", (user_id,))
        return [_row_to_category(row) for row in cursor.fetchall()]


def set_category_active(user_id: UserId, category_id: CategoryId, active: bool, db_path: Path | None = None) -> bool:
    """Activate or deactivate a category.

    Returns:
        True if the category exists, False otherwise.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "UPDATE categories SET active = ? WHERE user_id = ? AND id = ?",
                (int(active), user_id, category_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


# Wallets and assets


def add_wallet(user_id: UserId, wallet: Wallet, db_path: Path | None = None) -> None:
    """Add or replace a wallet.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT OR REPLACE INTO wallets (user_id, id, current_balance, target_balance)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, wallet.id, wallet.current_balance, wallet.target_balance),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def get_wallets(user_id: UserId, db_path: Path | None = None) -> list[Wallet]:
    """Get wallets ordered by name.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM wallets WHERE user_id = ? ORDER BY id", (user_id,))
        return [
            Wallet(
                id=WalletId(row["id"]),
                name=row["id"],
                current_balance=Money(row["current_balance"]),
                target_balance=Money(row["target_balance"]) if row["target_balance"] is not None else None,
            )
            for row in cursor.fetchall()
        ]


def add_asset(user_id: UserId, asset: Asset, db_path: Path | None = None) -> None:
    """Add or replace an asset.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT OR REPLACE INTO assets (user_id, id, kind, current_balance) VALUES (?, ?, ?, ?)",
                (user_id, asset.id, asset.kind, asset.current_balance),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def get_assets(user_id: UserId, db_path: Path | None = None) -> list[Asset]:
    """Get assets ordered by name.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM assets WHERE user_id = ? ORDER BY id", (user_id,))
        return [
            Asset(
                id=AssetId(row["id"]),
                name=row["id"],
                kind=row["kind"],
                current_balance=Money(row["current_balance"]),
            )
            for row in cursor.fetchall()
        ]


# Distribution rules


def set_distribution_rule(user_id: UserId, rule: DistributionRule, db_path: Path | None = None) -> None:
    """Set the distribution rule of a wallet (one rule per wallet).

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT OR REPLACE INTO distribution_rules (user_id, wallet_id, kind, value, priority)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, rule.wallet_id, rule.kind, rule.value, rule.priority),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_distribution_rule(user_id: UserId, wallet_id: WalletId, db_path: Path | None = None) -> bool:
    """Delete the distribution rule of a wallet.

    Returns:
        True if a rule was deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "DELETE FROM distribution_rules WHERE user_id = ? AND wallet_id = ?",
                (user_id, wallet_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def get_distribution_rules(user_id: UserId, db_path: Path | None = None) -> list[DistributionRule]:
    """Get distribution rules ordered by priority.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM distribution_rules WHERE user_id = ? ORDER BY priority, rowid",
            (user_id,),
        )
        return [
            DistributionRule(
                wallet_id=WalletId(row["wallet_id"]),
                kind=row["kind"],
                value=row["value"],
                priority=row["priority"],
            )
            for row in cursor.fetchall()
        ]


# Period records


def set_expense(user_id: UserId, month: Month, expense: CategoryExpense, db_path: Path | None = None) -> None:
    """Record the expense of a category for a draft month, replacing any previous one.

    Raises:
        PeriodSettledError: If the month is already settled.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            _ensure_draft(cursor, user_id, month)
            cursor.execute(
                """
                INSERT OR REPLACE INTO category_expenses (user_id, month, category_id, amount, wallet_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, month, expense.category_id, expense.amount, expense.wallet_id),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def get_expenses(user_id: UserId, month: Month, db_path: Path | None = None) -> list[CategoryExpense]:
    """Get expenses recorded for a month.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM category_expenses WHERE user_id = ? AND month = ? ORDER BY category_id",
            (user_id, month),
        )
        return [
            CategoryExpense(
                category_id=CategoryId(row["category_id"]),
                amount=Money(row["amount"]),
                wallet_id=WalletId(row["wallet_id"]) if row["wallet_id"] else None,
            )
            for row in cursor.fetchall()
        ]


def add_income(user_id: UserId, month: Month, income: Income, db_path: Path | None = None) -> int:
    """Record an income for a draft month.

    Returns:
        ID of the new income row.

    Raises:
        PeriodSettledError: If the month is already settled.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            _ensure_draft(cursor, user_id, month)
            cursor.execute(
                "INSERT INTO incomes (user_id, month, amount, asset_id, description) VALUES (?, ?, ?, ?, ?)",
                (user_id, month, income.amount, income.asset_id, income.description),
            )
            conn.commit()
            return int(cursor.lastrowid or 0)
        except sqlite3.Error:
            conn.rollback()
            raise


def get_incomes(user_id: UserId, month: Month, db_path: Path | None = None) -> list[Income]:
    """Get incomes recorded for a month, oldest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM incomes WHERE user_id = ? AND month = ? ORDER BY id",
            (user_id, month),
        )
        return [
            Income(
                amount=Money(row["amount"]),
                asset_id=AssetId(row["asset_id"]) if row["asset_id"] else None,
                description=row["description"],
            )
            for row in cursor.fetchall()
        ]


def clear_incomes(user_id: UserId, month: Month, db_path: Path | None = None) -> int:
    """Delete every income of a draft month.

    Returns:
        Number of incomes deleted.

    Raises:
        PeriodSettledError: If the month is already settled.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            _ensure_draft(cursor, user_id, month)
            cursor.execute("DELETE FROM incomes WHERE user_id = ? AND month = ?", (user_id, month))
            conn.commit()
            return cursor.rowcount
        except sqlite3.Error:
            conn.rollback()
            raise


# Settlements


def settlement_exists(user_id: UserId, month: Month, db_path: Path | None = None) -> bool:
    """Check whether a month already has a committed settlement.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM settlements WHERE user_id = ? AND month = ?", (user_id, month))
        return cursor.fetchone() is not None


def get_settlements(user_id: UserId, db_path: Path | None = None) -> list[dict[str, Any]]:
    """Get committed settlements, newest month first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, month, monthly_pot, created_at FROM settlements WHERE user_id = ? ORDER BY month DESC",
            (user_id,),
        )
        return [dict(row) for row in cursor.fetchall()]


def commit_settlement(user_id: UserId, settlement: Settlement, db_path: Path | None = None) -> int:
    """Persist a settlement and apply its balance deltas atomically.

    The write lock taken by BEGIN IMMEDIATE serializes concurrent commits,
    and balances are updated incrementally so no concurrent update is lost.

    Args:
        user_id: Owner of the records.
        settlement: Validated settlement to commit.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new settlement row.

    Raises:
        sqlite3.IntegrityError: If the month is already settled.
        sqlite3.Error: If database operation fails (nothing is applied).
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE")
            cursor.execute(
                "INSERT INTO settlements (user_id, month, monthly_pot) VALUES (?, ?, ?)",
                (user_id, settlement.month, settlement.pot.monthly_pot),
            )
            settlement_id = int(cursor.lastrowid or 0)

            cursor.executemany(
                """
                INSERT INTO wallet_transactions (user_id, wallet_id, settlement_id, amount, kind, description)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (user_id, m.wallet_id, settlement_id, m.amount, m.kind, m.description)
                    for m in settlement.movements
                ],
            )
            cursor.executemany(
                """
                UPDATE wallets SET current_balance = current_balance + ?, updated_at = datetime('now')
                WHERE user_id = ? AND id = ?
                """,
                [(delta, user_id, wallet_id) for wallet_id, delta in settlement.wallet_deltas.items()],
            )

            cursor.executemany(
                """
                INSERT INTO asset_transactions (user_id, asset_id, settlement_id, amount, kind, description)
                VALUES (?, ?, ?, ?, 'income', ?)
                """,
                [
                    (user_id, asset_id, settlement_id, delta, ASSET_INCOME_DESCRIPTION)
                    for asset_id, delta in settlement.asset_deltas.items()
                ],
            )
            cursor.executemany(
                """
                UPDATE assets SET current_balance = current_balance + ?, updated_at = datetime('now')
                WHERE user_id = ? AND id = ?
                """,
                [(delta, user_id, asset_id) for asset_id, delta in settlement.asset_deltas.items()],
            )

            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.info(
        "Committed settlement %s for %s: %d movement(s), %d wallet(s), %d asset(s)",
        settlement.month,
        user_id,
        len(settlement.movements),
        len(settlement.wallet_deltas),
        len(settlement.asset_deltas),
    )
    return settlement_id


def get_wallet_transactions(
    user_id: UserId, month: Month | None = None, db_path: Path | None = None
) -> list[dict[str, Any]]:
    """Get the wallet movement audit trail.

    Args:
        user_id: Owner of the records.
        month: If given, only movements of that month's settlement.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of movement dictionaries in insertion order.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = """
            SELECT s.month, t.wallet_id, t.amount, t.kind, t.description
            FROM wallet_transactions t
            JOIN settlements s ON s.id = t.settlement_id
            WHERE t.user_id = ?
        """
        params: list[Any] = [user_id]
        if month is not None:
            query += " AND s.month = ?"
            params.append(month)
        cursor.execute(query + " ORDER BY t.id", params)
        return [dict(row) for row in cursor.fetchall()]
