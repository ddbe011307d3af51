"""Tests for potsettle.domain.movements pure functions."""

from potsettle.domain.analysis import analyze_categories
from potsettle.domain.models import (
    AssetId,
    Category,
    CategoryExpense,
    CategoryId,
    Income,
    Money,
    WalletId,
)
from potsettle.domain.movements import (
    POT_CONTRIBUTION_DESCRIPTION,
    WalletMovement,
    build_category_movements,
    build_distribution_movements,
    build_movements,
    net_asset_deltas,
    net_wallet_deltas,
)

FOOD = Category(id=CategoryId("Food"), name="Food", kind="plain", monthly_budget=Money(30000))
CAR = Category(id=CategoryId("Car"), name="Car", kind="accumulative", monthly_budget=Money(20000))


class TestBuildCategoryMovements:
    """Tests for build_category_movements."""

    def test_excess_with_wallet(self) -> None:
        """Should take a wallet-covered excess out of that wallet."""
        stats = analyze_categories([FOOD], [CategoryExpense(FOOD.id, Money(35000), WalletId("W1"))])

        movements = build_category_movements(stats)

        assert movements == [
            WalletMovement(
                wallet_id=WalletId("W1"),
                amount=Money(-5000),
                kind="excess",
                description="Excess in Food: €50.00",
            )
        ]

    def test_excess_without_wallet(self) -> None:
        """Should not move money for an excess the pot absorbs."""
        stats = analyze_categories([FOOD], [CategoryExpense(FOOD.id, Money(35000))])

        assert build_category_movements(stats) == []

    def test_accumulative_surplus(self) -> None:
        """Should move the surplus of an accumulative category into its wallet."""
        stats = analyze_categories([CAR], [CategoryExpense(CAR.id, Money(5000), WalletId("W3"))])

        movements = build_category_movements(stats)

        assert len(movements) == 1
        assert movements[0].wallet_id == WalletId("W3")
        assert movements[0].amount == Money(15000)
        assert movements[0].kind == "accumulative-surplus"
        assert movements[0].description == "Surplus in Car: €150.00"

    def test_plain_surplus_is_not_moved(self) -> None:
        """Should leave the surplus of a plain category in the pot."""
        stats = analyze_categories([FOOD], [CategoryExpense(FOOD.id, Money(10000), WalletId("W1"))])

        assert build_category_movements(stats) == []

    def test_uses_category_wallet_when_nothing_spent(self) -> None:
        """Should move an untouched budget into the category's default wallet."""
        car = Category(
            id=CategoryId("Car"),
            name="Car",
            kind="accumulative",
            monthly_budget=Money(20000),
            wallet_id=WalletId("Car fund"),
        )

        movements = build_category_movements(analyze_categories([car], []))

        assert [(m.wallet_id, m.amount) for m in movements] == [(WalletId("Car fund"), Money(20000))]

    def test_currency_in_description(self) -> None:
        """Should format descriptions with the given currency."""
        stats = analyze_categories([FOOD], [CategoryExpense(FOOD.id, Money(35000), WalletId("W1"))])

        movements = build_category_movements(stats, currency="$")

        assert movements[0].description == "Excess in Food: $50.00"


class TestBuildMovements:
    """Tests for build_distribution_movements and build_movements."""

    def test_distribution_movements(self) -> None:
        """Should create one pot contribution per wallet."""
        movements = build_distribution_movements({WalletId("W1"): Money(42000), WalletId("W2"): Money(28000)})

        assert [(m.wallet_id, m.amount, m.kind) for m in movements] == [
            (WalletId("W1"), Money(42000), "pot-distribution"),
            (WalletId("W2"), Money(28000), "pot-distribution"),
        ]
        assert all(m.description == POT_CONTRIBUTION_DESCRIPTION for m in movements)

    def test_category_movements_come_first(self) -> None:
        """Should list category movements before pot contributions."""
        stats = analyze_categories([FOOD], [CategoryExpense(FOOD.id, Money(35000), WalletId("W1"))])

        movements = build_movements(stats, {WalletId("W2"): Money(1000)})

        assert [m.kind for m in movements] == ["excess", "pot-distribution"]


class TestNetDeltas:
    """Tests for net_wallet_deltas and net_asset_deltas."""

    def test_nets_per_wallet(self) -> None:
        """Should sum movements of the same wallet."""
        movements = [
            WalletMovement(WalletId("W1"), Money(-5000), "excess", "Excess in Food: €50.00"),
            WalletMovement(WalletId("W1"), Money(42000), "pot-distribution", POT_CONTRIBUTION_DESCRIPTION),
            WalletMovement(WalletId("W2"), Money(28000), "pot-distribution", POT_CONTRIBUTION_DESCRIPTION),
        ]

        assert net_wallet_deltas(movements) == {WalletId("W1"): Money(37000), WalletId("W2"): Money(28000)}

    def test_drops_wallets_netting_to_zero(self) -> None:
        """Should omit wallets whose movements cancel out."""
        movements = [
            WalletMovement(WalletId("W1"), Money(-5000), "excess", "Excess in Food: €50.00"),
            WalletMovement(WalletId("W1"), Money(5000), "pot-distribution", POT_CONTRIBUTION_DESCRIPTION),
        ]

        assert net_wallet_deltas(movements) == {}

    def test_asset_deltas(self) -> None:
        """Should sum incomes per asset and skip incomes without one."""
        incomes = [
            Income(Money(100000), AssetId("A1")),
            Income(Money(5000), AssetId("A1")),
            Income(Money(2000), AssetId("A2")),
            Income(Money(700)),
        ]

        assert net_asset_deltas(incomes) == {AssetId("A1"): Money(105000), AssetId("A2"): Money(2000)}
