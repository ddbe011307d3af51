"""Pure functions for distributing the monthly pot across wallets.

Rules are applied in priority order: fixed amounts first, then percentages
over whatever is left. Percentages are normalized against their own total,
and cents are apportioned by largest remainder so the percentage pass hands
out exactly the remaining pot.

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from potsettle.domain.models import DistributionRule, Money, WalletId


def active_rules(rules: Iterable[DistributionRule]) -> list[DistributionRule]:
    """Return rules with a positive value."""
    return [rule for rule in rules if rule.is_active]


def sort_rules(rules: Iterable[DistributionRule]) -> list[DistributionRule]:
    """Sort rules by ascending priority, keeping list order on ties."""
    return sorted(rules, key=lambda rule: rule.priority)


def percentage_total(rules: Iterable[DistributionRule]) -> float:
    """Sum of the values of percentage rules."""
    return sum(rule.value for rule in rules if rule.kind == "percentage")


def fixed_total(rules: Iterable[DistributionRule]) -> Money:
    """Sum of the amounts of fixed rules in cents."""
    return Money(sum(int(rule.value) for rule in rules if rule.kind == "fixed"))


def _apportion(amount: Money, weights: Sequence[Decimal]) -> list[Money]:
    """Split an amount proportionally to weights, in whole cents.

    Each part gets the floor of its exact share; leftover cents go to the
    largest fractional remainders, earlier weights winning ties.
    """
    total = sum(weights)
    exact = [Decimal(amount) * weight / total for weight in weights]
    parts = [int(share) for share in exact]
    leftover = amount - sum(parts)

    by_remainder = sorted(range(len(exact)), key=lambda i: (-(exact[i] - parts[i]), i))
    for i in by_remainder[:leftover]:
        parts[i] += 1

    return [Money(part) for part in parts]


def calculate_distribution(
    monthly_pot: Money,
    rules: Sequence[DistributionRule],
) -> dict[WalletId, Money]:
    """Allocate the monthly pot across wallets.

    Args:
        monthly_pot: Pot in cents. Nothing is distributed when it is not positive.
        rules: Distribution rules (any order; sorted by priority here).

    Returns:
        Mapping of wallet to assigned cents, only non-zero assignments.
    """
    if monthly_pot <= 0:
        return {}

    ordered = sort_rules(rules)
    distribution: dict[WalletId, Money] = {}
    remaining = monthly_pot

    # 1. Fixed amounts
    for rule in ordered:
        if rule.kind != "fixed":
            continue
        assigned = min(Money(int(rule.value)), remaining)
        distribution[rule.wallet_id] = Money(distribution.get(rule.wallet_id, 0) + assigned)
        remaining = Money(remaining - assigned)

    # 2. Percentages over the remainder
    percentage_rules = [rule for rule in ordered if rule.kind == "percentage"]
    if remaining > 0 and percentage_total(percentage_rules) > 0:
        weights = [Decimal(str(rule.value)) for rule in percentage_rules]
        for rule, assigned in zip(percentage_rules, _apportion(remaining, weights)):
            distribution[rule.wallet_id] = Money(distribution.get(rule.wallet_id, 0) + assigned)

    return {wallet_id: amount for wallet_id, amount in distribution.items() if amount != 0}


def distribution_shares(
    distribution: dict[WalletId, Money],
    monthly_pot: Money,
) -> dict[WalletId, float]:
    """Calculate the percentage of the pot each wallet received.

    Args:
        distribution: Output of calculate_distribution.
        monthly_pot: Pot in cents.

    Returns:
        Mapping of wallet to percentage of the pot (empty when the pot is not positive).
    """
    if monthly_pot <= 0:
        return {}
    return {wallet_id: (amount / monthly_pot) * 100 for wallet_id, amount in distribution.items()}
