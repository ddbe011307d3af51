"""Pure functions that turn settlement figures into wallet movements.

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from potsettle.domain.analysis import CategoryStats
from potsettle.domain.models import AssetId, Income, Money, MovementKind, WalletId
from potsettle.domain.money import DEFAULT_CURRENCY, format_money

POT_CONTRIBUTION_DESCRIPTION = "Monthly pot contribution"


@dataclass(frozen=True)
class WalletMovement:
    """Immutable signed change to one wallet's balance."""

    wallet_id: WalletId
    amount: Money
    kind: MovementKind
    description: str


def build_category_movements(
    stats: Iterable[CategoryStats],
    currency: str = DEFAULT_CURRENCY,
) -> list[WalletMovement]:
    """Build excess and accumulative surplus movements.

    Excess or surplus without a wallet override produces no movement; it only
    affects the pot.

    Args:
        stats: Category analysis for the period.
        currency: Currency symbol used in descriptions.

    Returns:
        Movements in category order.
    """
    movements: list[WalletMovement] = []
    for item in stats:
        wallet_id = item.wallet_id
        if not wallet_id:
            continue
        name = item.category.name
        if item.excess > 0:
            movements.append(
                WalletMovement(
                    wallet_id=wallet_id,
                    amount=Money(-item.excess),
                    kind="excess",
                    description=f"Excess in {name}: {format_money(item.excess, currency)}",
                )
            )
        if item.surplus > 0 and item.is_accumulative:
            movements.append(
                WalletMovement(
                    wallet_id=wallet_id,
                    amount=item.surplus,
                    kind="accumulative-surplus",
                    description=f"Surplus in {name}: {format_money(item.surplus, currency)}",
                )
            )
    return movements


def build_distribution_movements(distribution: dict[WalletId, Money]) -> list[WalletMovement]:
    """Build one pot contribution movement per wallet with a non-zero share."""
    return [
        WalletMovement(
            wallet_id=wallet_id,
            amount=amount,
            kind="pot-distribution",
            description=POT_CONTRIBUTION_DESCRIPTION,
        )
        for wallet_id, amount in distribution.items()
        if amount != 0
    ]


def build_movements(
    stats: Sequence[CategoryStats],
    distribution: dict[WalletId, Money],
    currency: str = DEFAULT_CURRENCY,
) -> list[WalletMovement]:
    """Build the full movement list: category movements first, pot contributions last."""
    return build_category_movements(stats, currency) + build_distribution_movements(distribution)


def net_wallet_deltas(movements: Iterable[WalletMovement]) -> dict[WalletId, Money]:
    """Sum movements per wallet.

    Returns:
        Mapping of wallet to net change in cents, wallets netting to zero omitted.
    """
    deltas: dict[WalletId, int] = {}
    for movement in movements:
        deltas[movement.wallet_id] = deltas.get(movement.wallet_id, 0) + movement.amount
    return {wallet_id: Money(delta) for wallet_id, delta in deltas.items() if delta != 0}


def net_asset_deltas(incomes: Iterable[Income]) -> dict[AssetId, Money]:
    """Sum incomes per asset.

    Returns:
        Mapping of asset to net change in cents, incomes without an asset skipped.
    """
    deltas: dict[AssetId, int] = {}
    for income in incomes:
        if not income.asset_id:
            continue
        deltas[income.asset_id] = deltas.get(income.asset_id, 0) + income.amount
    return {asset_id: Money(delta) for asset_id, delta in deltas.items() if delta != 0}
