"""Tests for potsettle.domain.analysis pure functions."""

import pytest

from potsettle.domain.analysis import (
    analyze_categories,
    analyze_category,
    budget_usage,
    calculate_excess,
    calculate_surplus,
    pair_expenses,
)
from potsettle.domain.models import Category, CategoryExpense, CategoryId, Money, WalletId


def make_category(name: str, budget: int, kind: str = "plain", **kwargs) -> Category:
    return Category(id=CategoryId(name), name=name, kind=kind, monthly_budget=Money(budget), **kwargs)  # type: ignore[arg-type]


class TestExcessAndSurplus:
    """Tests for calculate_excess and calculate_surplus."""

    def test_overspend_is_excess(self) -> None:
        """Should report the amount beyond the budget as excess."""
        assert calculate_excess(Money(35000), Money(30000)) == Money(5000)
        assert calculate_surplus(Money(35000), Money(30000)) == Money(0)

    def test_underspend_is_surplus(self) -> None:
        """Should report the unspent budget as surplus."""
        assert calculate_excess(Money(5000), Money(20000)) == Money(0)
        assert calculate_surplus(Money(5000), Money(20000)) == Money(15000)

    def test_exact_budget_has_neither(self) -> None:
        """Should report zero for both when spending matches the budget."""
        assert calculate_excess(Money(30000), Money(30000)) == Money(0)
        assert calculate_surplus(Money(30000), Money(30000)) == Money(0)

    @pytest.mark.parametrize(
        "amount,budget",
        [(0, 0), (0, 100), (100, 0), (1, 1), (99999, 12345), (12345, 99999)],
    )
    def test_never_both_positive(self, amount: int, budget: int) -> None:
        """Should never report excess and surplus at once, and never negative."""
        excess = calculate_excess(Money(amount), Money(budget))
        surplus = calculate_surplus(Money(amount), Money(budget))

        assert excess >= 0
        assert surplus >= 0
        assert excess * surplus == 0


class TestAnalyzeCategory:
    """Tests for analyze_category."""

    def test_plain_category(self) -> None:
        """Should mark plain categories as not accumulative."""
        stats = analyze_category(make_category("Food", 30000), CategoryExpense(CategoryId("Food"), Money(35000)))

        assert stats.excess == Money(5000)
        assert stats.surplus == Money(0)
        assert stats.is_accumulative is False
        assert stats.wallet_id is None

    @pytest.mark.parametrize("kind", ["accumulative", "mixed", "accumulative-optional"])
    def test_accumulative_kinds(self, kind: str) -> None:
        """Should mark every non-plain kind as accumulative."""
        stats = analyze_category(
            make_category("Car", 20000, kind),
            CategoryExpense(CategoryId("Car"), Money(5000), WalletId("W3")),
        )

        assert stats.is_accumulative is True
        assert stats.surplus == Money(15000)
        assert stats.wallet_id == WalletId("W3")


class TestPairExpenses:
    """Tests for pair_expenses and analyze_categories."""

    def test_missing_expense_defaults_to_zero_with_category_wallet(self) -> None:
        """Should give categories without an expense a zero expense on their own wallet."""
        category = make_category("Car", 20000, "accumulative", wallet_id=WalletId("Car fund"))

        pairs = pair_expenses([category], [])

        assert len(pairs) == 1
        _, expense = pairs[0]
        assert expense.amount == Money(0)
        assert expense.wallet_id == WalletId("Car fund")

    def test_skips_inactive_categories(self) -> None:
        """Should leave inactive categories out of the analysis."""
        active = make_category("Food", 30000)
        inactive = make_category("Gym", 4000, active=False)

        stats = analyze_categories([active, inactive], [CategoryExpense(CategoryId("Gym"), Money(4000))])

        assert [s.category.name for s in stats] == ["Food"]

    def test_ignores_expense_for_unknown_category(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should skip and log expenses whose category is unknown."""
        stats = analyze_categories(
            [make_category("Food", 30000)],
            [CategoryExpense(CategoryId("Ghost"), Money(1000))],
        )

        assert len(stats) == 1
        assert stats[0].expense.amount == Money(0)
        assert "Ghost" in caplog.text

    def test_keeps_category_order(self) -> None:
        """Should return stats in the order categories were given."""
        categories = [make_category("Rent", 80000), make_category("Food", 30000)]
        expenses = [
            CategoryExpense(CategoryId("Food"), Money(10000)),
            CategoryExpense(CategoryId("Rent"), Money(80000)),
        ]

        stats = analyze_categories(categories, expenses)

        assert [s.category.name for s in stats] == ["Rent", "Food"]


class TestBudgetUsage:
    """Tests for budget_usage."""

    def test_percentage_of_budget(self) -> None:
        """Should calculate spending as a percentage of budget."""
        stats = analyze_category(make_category("Food", 30000), CategoryExpense(CategoryId("Food"), Money(15000)))
        assert budget_usage(stats) == pytest.approx(50.0)

    def test_zero_budget(self) -> None:
        """Should return zero for an unbudgeted category."""
        stats = analyze_category(make_category("Misc", 0), CategoryExpense(CategoryId("Misc"), Money(1500)))
        assert budget_usage(stats) == 0.0
