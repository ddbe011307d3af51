"""Domain type definitions for potsettle.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- Month: Settlement period in YYYY-MM format
- CategoryId / WalletId / AssetId: Identifiers of the budgeting records
- UserId: Owner of a set of records

The record dataclasses below are the canonical shapes the settlement engine
consumes. Field-name aliases from other sources are resolved before records
are built.
"""

from dataclasses import dataclass
from typing import Literal, NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

CategoryId = NewType("CategoryId", str)
WalletId = NewType("WalletId", str)
AssetId = NewType("AssetId", str)
UserId = NewType("UserId", str)

CategoryKind = Literal["plain", "accumulative", "mixed", "accumulative-optional"]
RuleKind = Literal["fixed", "percentage"]
MovementKind = Literal["excess", "accumulative-surplus", "pot-distribution"]

CATEGORY_KINDS: tuple[str, ...] = ("plain", "accumulative", "mixed", "accumulative-optional")
ACCUMULATIVE_KINDS = frozenset({"accumulative", "mixed", "accumulative-optional"})
RULE_KINDS: tuple[str, ...] = ("fixed", "percentage")
ASSET_KINDS: tuple[str, ...] = ("bank-account", "cash", "investment", "property", "other")


@dataclass(frozen=True)
class Category:
    """Immutable budgeted spending bucket."""

    id: CategoryId
    name: str
    kind: CategoryKind
    monthly_budget: Money
    annual_budget: Money | None = None
    active: bool = True
    wallet_id: WalletId | None = None  # Default wallet for accumulative surplus/excess

    @property
    def is_accumulative(self) -> bool:
        return self.kind in ACCUMULATIVE_KINDS


@dataclass(frozen=True)
class CategoryExpense:
    """Immutable expense recorded for a category in one period."""

    category_id: CategoryId
    amount: Money
    wallet_id: WalletId | None = None


@dataclass(frozen=True)
class Income:
    """Immutable income recorded for one period."""

    amount: Money
    asset_id: AssetId | None = None
    description: str | None = None


@dataclass(frozen=True)
class Wallet:
    """Immutable savings fund snapshot."""

    id: WalletId
    name: str
    current_balance: Money
    target_balance: Money | None = None


@dataclass(frozen=True)
class Asset:
    """Immutable external account snapshot."""

    id: AssetId
    name: str
    kind: str = "bank-account"
    current_balance: Money = Money(0)


@dataclass(frozen=True)
class DistributionRule:
    """Immutable instruction for allocating the monthly pot.

    ``value`` is an amount in cents for fixed rules and a percentage (0-100)
    for percentage rules.
    """

    wallet_id: WalletId
    kind: RuleKind
    value: float
    priority: int = 0

    @property
    def is_active(self) -> bool:
        return self.value > 0
