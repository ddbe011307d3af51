"""Pure functions for wallet progress and patrimony summaries.

All monetary amounts are in cents (Money type).
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypeVar

from potsettle.domain.models import Asset, Money, Wallet

K = TypeVar("K")


@dataclass(frozen=True)
class PatrimonySummary:
    """Immutable totals across wallets and assets."""

    total_wallets: Money
    total_assets: Money
    difference: Money  # Wallets minus assets; negative means unallocated money in assets


def wallet_progress(wallet: Wallet) -> float | None:
    """Calculate how close a wallet is to its target.

    Args:
        wallet: Wallet snapshot.

    Returns:
        Percentage of the target reached (0-100), or None without a positive target.
    """
    if not wallet.target_balance or wallet.target_balance <= 0:
        return None
    return max(0.0, min((wallet.current_balance / wallet.target_balance) * 100, 100.0))


def summarize_patrimony(wallets: Sequence[Wallet], assets: Sequence[Asset]) -> PatrimonySummary:
    """Total wallet and asset balances."""
    total_wallets = Money(sum(wallet.current_balance for wallet in wallets))
    total_assets = Money(sum(asset.current_balance for asset in assets))
    return PatrimonySummary(
        total_wallets=total_wallets,
        total_assets=total_assets,
        difference=Money(total_wallets - total_assets),
    )


def project_balances(balances: Mapping[K, Money], deltas: Mapping[K, Money]) -> dict[K, Money]:
    """Apply deltas to balances without touching the inputs.

    Args:
        balances: Current balances keyed by wallet or asset.
        deltas: Net changes keyed the same way.

    Returns:
        New balances; keys only present in deltas start from zero.
    """
    projected = {key: Money(balance) for key, balance in balances.items()}
    for key, delta in deltas.items():
        projected[key] = Money(projected.get(key, 0) + delta)
    return projected
