"""Monthly settlement: validation and sequencing of the engine stages.

Validation is kept apart from computation so a settlement is either produced
whole or not at all. Issues are returned, never raised, and every applicable
issue is reported in one pass.

All monetary amounts are in cents (Money type).
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from potsettle.domain.analysis import CategoryStats, analyze_categories
from potsettle.domain.distribution import (
    active_rules,
    calculate_distribution,
    fixed_total,
    percentage_total,
)
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
    Wallet,
    WalletId,
)
from potsettle.domain.money import DEFAULT_CURRENCY, format_money
from potsettle.domain.movements import WalletMovement, build_movements, net_asset_deltas, net_wallet_deltas
from potsettle.domain.pot import PotSummary, calculate_pot

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = 0.01

IssueKind = Literal[
    "duplicate-period",
    "missing-wallet-assignment",
    "missing-asset-assignment",
    "incomplete-distribution",
]


@dataclass(frozen=True)
class ValidationIssue:
    """Immutable reason a settlement cannot be committed."""

    kind: IssueKind
    detail: str
    subject: str | None = None


@dataclass(frozen=True)
class SettlementInput:
    """Immutable record set for one user and one period."""

    month: Month
    categories: Sequence[Category]
    expenses: Sequence[CategoryExpense]
    incomes: Sequence[Income]
    rules: Sequence[DistributionRule]
    wallets: Sequence[Wallet] = ()
    assets: Sequence[Asset] = ()
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class Settlement:
    """Immutable result of settling a period."""

    month: Month
    pot: PotSummary
    stats: list[CategoryStats]
    distribution: dict[WalletId, Money]
    movements: list[WalletMovement]
    wallet_deltas: dict[WalletId, Money]
    asset_deltas: dict[AssetId, Money]
    warnings: list[str] = field(default_factory=list)


def check_wallet_assignments(
    categories: Sequence[Category],
    expenses: Sequence[CategoryExpense],
) -> list[ValidationIssue]:
    """Accumulative categories with spending must name a wallet."""
    by_id: dict[CategoryId, Category] = {category.id: category for category in categories}
    issues: list[ValidationIssue] = []
    for expense in expenses:
        category = by_id.get(expense.category_id)
        if category is None or not category.active or not category.is_accumulative:
            continue
        if expense.amount > 0 and not expense.wallet_id:
            issues.append(
                ValidationIssue(
                    kind="missing-wallet-assignment",
                    detail=f'Category "{category.name}" needs a wallet assigned for its spending',
                    subject=category.name,
                )
            )
    return issues


def check_asset_assignments(incomes: Sequence[Income]) -> list[ValidationIssue]:
    """Incomes with an amount must name an asset."""
    issues: list[ValidationIssue] = []
    for index, income in enumerate(incomes, start=1):
        if income.amount > 0 and not income.asset_id:
            label = income.description or f"income #{index}"
            issues.append(
                ValidationIssue(
                    kind="missing-asset-assignment",
                    detail=f"Income {label!r} needs an asset to be deposited into",
                    subject=label,
                )
            )
    return issues


def check_distribution(rules: Sequence[DistributionRule]) -> list[ValidationIssue]:
    """Active percentage rules must add up to 100%.

    Fixed-only rule sets have no such requirement; mixed sets still need the
    percentage rules to cover the whole remainder.
    """
    active = active_rules(rules)
    if not any(rule.kind == "percentage" for rule in active):
        return []

    total = percentage_total(active)
    if abs(total - 100) > PERCENTAGE_TOLERANCE:
        return [
            ValidationIssue(
                kind="incomplete-distribution",
                detail=f"Percentage distribution must add up to 100%. Currently {total:.1f}%",
                subject=f"{total:.2f}",
            )
        ]
    return []


def validate_settlement(inputs: SettlementInput, period_exists: bool) -> list[ValidationIssue]:
    """Collect every reason the period cannot be settled.

    Args:
        inputs: Records for the period.
        period_exists: Whether the period already has a committed settlement.

    Returns:
        List of issues, empty when the settlement may be committed.
    """
    issues: list[ValidationIssue] = []
    if period_exists:
        issues.append(
            ValidationIssue(
                kind="duplicate-period",
                detail=f"A settlement for {inputs.month} already exists",
                subject=inputs.month,
            )
        )
    issues.extend(check_wallet_assignments(inputs.categories, inputs.expenses))
    issues.extend(check_asset_assignments(inputs.incomes))
    issues.extend(check_distribution(inputs.rules))
    return issues


def _collect_warnings(
    inputs: SettlementInput,
    pot: PotSummary,
    wallet_deltas: dict[WalletId, Money],
    asset_deltas: dict[AssetId, Money],
) -> list[str]:
    warnings: list[str] = []
    currency = inputs.currency
    active = active_rules(inputs.rules)

    if pot.monthly_pot < 0:
        warnings.append(f"Monthly pot is negative ({format_money(pot.monthly_pot, currency)}); nothing is distributed")

    fixed = fixed_total(active)
    if pot.monthly_pot > 0 and fixed > pot.monthly_pot:
        warnings.append(
            f"Fixed rules ({format_money(fixed, currency)}) exceed the monthly pot "
            f"({format_money(pot.monthly_pot, currency)}); later rules receive less than configured"
        )

    if inputs.wallets:
        known_wallets = {wallet.id for wallet in inputs.wallets}
        for wallet_id in wallet_deltas:
            if wallet_id not in known_wallets:
                warnings.append(f"Movements target unknown wallet {wallet_id!r}")

    if inputs.assets:
        known_assets = {asset.id for asset in inputs.assets}
        for asset_id in asset_deltas:
            if asset_id not in known_assets:
                warnings.append(f"Incomes target unknown asset {asset_id!r}")

    return warnings


def compute_settlement(inputs: SettlementInput) -> Settlement:
    """Run the engine stages without validating.

    Used for live previews of a draft period. Use settle() before committing.

    Args:
        inputs: Records for the period.

    Returns:
        Settlement with totals, distribution, movements and deltas.
    """
    stats = analyze_categories(inputs.categories, inputs.expenses)
    pot = calculate_pot(inputs.categories, inputs.expenses, inputs.incomes)
    distribution = calculate_distribution(pot.monthly_pot, active_rules(inputs.rules))
    movements = build_movements(stats, distribution, inputs.currency)
    wallet_deltas = net_wallet_deltas(movements)
    asset_deltas = net_asset_deltas(inputs.incomes)

    warnings = _collect_warnings(inputs, pot, wallet_deltas, asset_deltas)
    for warning in warnings:
        logger.warning("%s: %s", inputs.month, warning)

    return Settlement(
        month=inputs.month,
        pot=pot,
        stats=stats,
        distribution=distribution,
        movements=movements,
        wallet_deltas=wallet_deltas,
        asset_deltas=asset_deltas,
        warnings=warnings,
    )


def settle(inputs: SettlementInput, period_exists: bool) -> tuple[Settlement | None, list[ValidationIssue]]:
    """Validate and compute the settlement of a period.

    Args:
        inputs: Records for the period.
        period_exists: Whether the period already has a committed settlement.

    Returns:
        Tuple of (settlement, issues). Settlement is None whenever issues is non-empty.
    """
    issues = validate_settlement(inputs, period_exists)
    if issues:
        logger.info("Settlement of %s blocked by %d issue(s)", inputs.month, len(issues))
        return None, issues
    return compute_settlement(inputs), []
