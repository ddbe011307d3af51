"""Tests for potsettle.domain.pot pure functions."""

from potsettle.domain.models import (
    AssetId,
    Category,
    CategoryExpense,
    CategoryId,
    Income,
    Money,
    WalletId,
)
from potsettle.domain.pot import calculate_pot, can_pot_cover_excess

FOOD = Category(id=CategoryId("Food"), name="Food", kind="plain", monthly_budget=Money(30000))
RENT = Category(id=CategoryId("Rent"), name="Rent", kind="plain", monthly_budget=Money(80000))


class TestCalculatePot:
    """Tests for calculate_pot."""

    def test_deficit_without_income(self) -> None:
        """Should produce a negative pot when spending has no income behind it."""
        pot = calculate_pot([FOOD], [CategoryExpense(FOOD.id, Money(35000))], [])

        assert pot.total_budget == Money(30000)
        assert pot.total_spent == Money(35000)
        assert pot.total_income == Money(0)
        assert pot.excesses_covered_by_wallets == Money(0)
        assert pot.excesses_absorbed_by_pot == Money(5000)
        assert pot.monthly_pot == Money(-35000)

    def test_wallet_covered_excess_is_added_back(self) -> None:
        """Should not charge the pot for an excess a wallet pays for."""
        pot = calculate_pot(
            [FOOD],
            [CategoryExpense(FOOD.id, Money(35000), WalletId("W1"))],
            [Income(Money(100000), AssetId("A1"))],
        )

        assert pot.excesses_covered_by_wallets == Money(5000)
        assert pot.excesses_absorbed_by_pot == Money(0)
        assert pot.monthly_pot == Money(70000)

    def test_budget_counts_active_categories_only(self) -> None:
        """Should leave inactive categories out of the total budget."""
        inactive = Category(
            id=CategoryId("Gym"), name="Gym", kind="plain", monthly_budget=Money(4000), active=False
        )

        pot = calculate_pot([FOOD, RENT, inactive], [], [])

        assert pot.total_budget == Money(110000)
        assert pot.monthly_pot == Money(0)

    def test_sums_every_income(self) -> None:
        """Should add up all incomes of the period."""
        incomes = [Income(Money(250000), AssetId("A1")), Income(Money(12050), AssetId("A2"))]

        pot = calculate_pot([FOOD], [CategoryExpense(FOOD.id, Money(20000))], incomes)

        assert pot.total_income == Money(262050)
        assert pot.monthly_pot == Money(242050)


class TestCanPotCoverExcess:
    """Tests for can_pot_cover_excess."""

    def test_enough_income(self) -> None:
        """Should allow the pot to absorb an excess when income leaves room."""
        expenses = [CategoryExpense(FOOD.id, Money(35000))]
        incomes = [Income(Money(100000), AssetId("A1"))]

        assert can_pot_cover_excess(FOOD.id, [FOOD], expenses, incomes) is True

    def test_not_enough_income(self) -> None:
        """Should refuse when the preliminary pot is smaller than the excess."""
        expenses = [CategoryExpense(FOOD.id, Money(35000))]
        incomes = [Income(Money(36000), AssetId("A1"))]

        assert can_pot_cover_excess(FOOD.id, [FOOD], expenses, incomes) is False

    def test_ignores_own_wallet_coverage(self) -> None:
        """Should judge the category as if its own wallet did not pay for the excess."""
        expenses = [CategoryExpense(FOOD.id, Money(35000), WalletId("W1"))]
        incomes = [Income(Money(36000), AssetId("A1"))]

        assert can_pot_cover_excess(FOOD.id, [FOOD], expenses, incomes) is False

    def test_counts_other_wallet_coverage(self) -> None:
        """Should keep excesses of other categories that wallets cover."""
        expenses = [
            CategoryExpense(FOOD.id, Money(35000)),
            CategoryExpense(RENT.id, Money(90000), WalletId("W1")),
        ]
        incomes = [Income(Money(130000), AssetId("A1"))]

        # 130000 - 125000 + 10000 = 15000 >= 5000
        assert can_pot_cover_excess(FOOD.id, [FOOD, RENT], expenses, incomes) is True

    def test_no_excess(self) -> None:
        """Should return False when the category is within budget."""
        expenses = [CategoryExpense(FOOD.id, Money(10000))]

        assert can_pot_cover_excess(FOOD.id, [FOOD], expenses, []) is False

    def test_unknown_category(self) -> None:
        """Should return False for a category that is not budgeted."""
        assert can_pot_cover_excess(CategoryId("Ghost"), [FOOD], [], []) is False
