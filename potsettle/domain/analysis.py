"""Pure functions for per-category excess and surplus analysis.

This module contains the functional core for category analysis:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations

All monetary amounts are in cents (Money type).
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from potsettle.domain.models import Category, CategoryExpense, CategoryId, Money, WalletId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryStats:
    """Immutable analysis of one category against its expense."""

    category: Category
    expense: CategoryExpense
    excess: Money
    surplus: Money
    is_accumulative: bool

    @property
    def wallet_id(self) -> WalletId | None:
        return self.expense.wallet_id


def calculate_excess(amount: Money, budget: Money) -> Money:
    """Amount spent beyond the budget (never negative)."""
    return Money(max(0, amount - budget))


def calculate_surplus(amount: Money, budget: Money) -> Money:
    """Amount left unspent under the budget (never negative)."""
    return Money(max(0, budget - amount))


def analyze_category(category: Category, expense: CategoryExpense) -> CategoryStats:
    """Compute excess and surplus for a category.

    Args:
        category: Budgeted category.
        expense: Expense recorded for the category this period.

    Returns:
        CategoryStats where at most one of excess/surplus is non-zero.
    """
    return CategoryStats(
        category=category,
        expense=expense,
        excess=calculate_excess(expense.amount, category.monthly_budget),
        surplus=calculate_surplus(expense.amount, category.monthly_budget),
        is_accumulative=category.is_accumulative,
    )


def pair_expenses(
    categories: Iterable[Category],
    expenses: Iterable[CategoryExpense],
) -> list[tuple[Category, CategoryExpense]]:
    """Pair every active category with its expense for the period.

    Categories without a recorded expense get a zero expense pointing at the
    category's default wallet. Expenses for unknown or inactive categories
    are not paired.

    Args:
        categories: All categories of the user.
        expenses: Expenses recorded for the period.

    Returns:
        List of (category, expense) pairs in category order.
    """
    active = [category for category in categories if category.active]
    by_category: dict[CategoryId, CategoryExpense] = {}
    for expense in expenses:
        by_category[expense.category_id] = expense

    known = {category.id for category in active}
    for category_id in by_category:
        if category_id not in known:
            logger.warning("Expense for unknown or inactive category %r left out of analysis", category_id)

    return [
        (
            category,
            by_category.get(category.id)
            or CategoryExpense(category_id=category.id, amount=Money(0), wallet_id=category.wallet_id),
        )
        for category in active
    ]


def analyze_categories(
    categories: Iterable[Category],
    expenses: Iterable[CategoryExpense],
) -> list[CategoryStats]:
    """Analyze every active category for the period."""
    return [analyze_category(category, expense) for category, expense in pair_expenses(categories, expenses)]


def budget_usage(stats: CategoryStats) -> float:
    """Calculate percentage of the monthly budget spent.

    Args:
        stats: Analysis of a category.

    Returns:
        Percentage used (0-100+), 0 when the budget is zero.
    """
    budget = stats.category.monthly_budget
    if budget <= 0:
        return 0.0
    return (stats.expense.amount / budget) * 100
