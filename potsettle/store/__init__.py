"""Database store layer - the host-side collaborator of the settlement engine.

This module re-exports all public database functions for easy importing.
"""

from potsettle.store.queries import (
    PeriodSettledError,
    add_asset,
    add_category,
    add_income,
    add_wallet,
    clear_incomes,
    commit_settlement,
    delete_distribution_rule,
    get_assets,
    get_categories,
    get_distribution_rules,
    get_expenses,
    get_incomes,
    get_settlements,
    get_wallet_transactions,
    get_wallets,
    set_category_active,
    set_distribution_rule,
    set_expense,
    settlement_exists,
)
from potsettle.store.schema import backup_database, database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "backup_database",
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "PeriodSettledError",
    "add_asset",
    "add_category",
    "add_income",
    "add_wallet",
    "clear_incomes",
    "commit_settlement",
    "delete_distribution_rule",
    "get_assets",
    "get_categories",
    "get_distribution_rules",
    "get_expenses",
    "get_incomes",
    "get_settlements",
    "get_wallet_transactions",
    "get_wallets",
    "set_category_active",
    "set_distribution_rule",
    "set_expense",
    "settlement_exists",
]
