"""Domain models and the settlement engine for potsettle.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

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
from potsettle.domain.settlement import Settlement, SettlementInput, ValidationIssue, compute_settlement, settle

__all__ = [
    "Asset",
    "AssetId",
    "Category",
    "CategoryExpense",
    "CategoryId",
    "DistributionRule",
    "Income",
    "Money",
    "Month",
    "UserId",
    "Wallet",
    "WalletId",
    "Settlement",
    "SettlementInput",
    "ValidationIssue",
    "compute_settlement",
    "settle",
]
