"""Pure functions for the monthly pot calculation.

The monthly pot is what is left (or missing) after the month's incomes and
expenses. An excess that a wallet pays for does not reduce the pot, so it is
added back on top of the raw income minus spending.

All monetary amounts are in cents (Money type).
"""

from collections.abc import Sequence
from dataclasses import dataclass

from potsettle.domain.analysis import analyze_categories
from potsettle.domain.models import Category, CategoryExpense, CategoryId, Income, Money


@dataclass(frozen=True)
class PotSummary:
    """Immutable totals for a settlement period."""

    total_budget: Money
    total_spent: Money
    total_income: Money
    monthly_pot: Money
    excesses_covered_by_wallets: Money
    excesses_absorbed_by_pot: Money = Money(0)


def calculate_pot(
    categories: Sequence[Category],
    expenses: Sequence[CategoryExpense],
    incomes: Sequence[Income],
) -> PotSummary:
    """Aggregate incomes, expenses and wallet-covered excesses.

    Args:
        categories: All categories of the user (only active ones are budgeted).
        expenses: Expenses recorded for the period.
        incomes: Incomes recorded for the period.

    Returns:
        PotSummary where monthly_pot = income - spent + covered excesses.
    """
    total_budget = Money(sum(category.monthly_budget for category in categories if category.active))
    total_spent = Money(sum(expense.amount for expense in expenses))
    total_income = Money(sum(income.amount for income in incomes))

    covered = 0
    absorbed = 0
    for stats in analyze_categories(categories, expenses):
        if stats.excess <= 0:
            continue
        if stats.wallet_id:
            covered += stats.excess
        else:
            absorbed += stats.excess

    return PotSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        total_income=total_income,
        monthly_pot=Money(total_income - total_spent + covered),
        excesses_covered_by_wallets=Money(covered),
        excesses_absorbed_by_pot=Money(absorbed),
    )


def can_pot_cover_excess(
    category_id: CategoryId,
    categories: Sequence[Category],
    expenses: Sequence[CategoryExpense],
    incomes: Sequence[Income],
) -> bool:
    """Check whether the pot could absorb a category's excess without a wallet.

    The preliminary pot ignores any wallet coverage of the category itself,
    keeping the coverage of every other category.

    Args:
        category_id: Category to check.
        categories: All categories of the user.
        expenses: Expenses recorded for the period.
        incomes: Incomes recorded for the period.

    Returns:
        True if the category has an excess and the preliminary pot is large enough.
    """
    target = None
    other_covered = 0
    for stats in analyze_categories(categories, expenses):
        if stats.category.id == category_id:
            target = stats
        elif stats.excess > 0 and stats.wallet_id:
            other_covered += stats.excess

    if target is None or target.excess == 0:
        return False

    total_income = sum(income.amount for income in incomes)
    total_spent = sum(expense.amount for expense in expenses)
    preliminary_pot = total_income - total_spent + other_covered
    return preliminary_pot >= target.excess
