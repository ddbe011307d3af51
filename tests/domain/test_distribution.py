"""Tests for potsettle.domain.distribution pure functions."""

import pytest

from potsettle.domain.distribution import (
    active_rules,
    calculate_distribution,
    distribution_shares,
    fixed_total,
    percentage_total,
    sort_rules,
)
from potsettle.domain.models import DistributionRule, Money, WalletId

W1 = WalletId("W1")
W2 = WalletId("W2")
W3 = WalletId("W3")


def percentage(wallet_id: WalletId, value: float, priority: int = 0) -> DistributionRule:
    return DistributionRule(wallet_id=wallet_id, kind="percentage", value=value, priority=priority)


def fixed(wallet_id: WalletId, cents: int, priority: int = 0) -> DistributionRule:
    return DistributionRule(wallet_id=wallet_id, kind="fixed", value=cents, priority=priority)


class TestRuleHelpers:
    """Tests for rule filtering, ordering and totals."""

    def test_active_rules_drop_zero_values(self) -> None:
        """Should ignore rules with a zero value."""
        rules = [percentage(W1, 100), percentage(W2, 0), fixed(W3, 0)]
        assert active_rules(rules) == [percentage(W1, 100)]

    def test_sort_rules_is_stable(self) -> None:
        """Should order by priority and keep list order on ties."""
        rules = [percentage(W1, 10, 2), percentage(W2, 20, 1), percentage(W3, 30, 2)]
        assert [rule.wallet_id for rule in sort_rules(rules)] == [W2, W1, W3]

    def test_totals(self) -> None:
        """Should total percentage and fixed rules separately."""
        rules = [percentage(W1, 60), percentage(W2, 40), fixed(W3, 5000), fixed(W1, 2500)]

        assert percentage_total(rules) == pytest.approx(100.0)
        assert fixed_total(rules) == Money(7500)


class TestCalculateDistribution:
    """Tests for calculate_distribution."""

    def test_percentage_rules(self) -> None:
        """Should split the pot by percentage."""
        rules = [percentage(W1, 60, 1), percentage(W2, 40, 2)]

        assert calculate_distribution(Money(70000), rules) == {W1: Money(42000), W2: Money(28000)}

    def test_fixed_then_percentage(self) -> None:
        """Should apply percentages to what is left after fixed amounts."""
        rules = [percentage(W2, 100, 2), fixed(W1, 10000, 1)]

        assert calculate_distribution(Money(70000), rules) == {W1: Money(10000), W2: Money(60000)}

    def test_fixed_rules_run_before_percentages_regardless_of_priority(self) -> None:
        """Should apply fixed amounts first even when a percentage rule has a lower priority."""
        rules = [percentage(W1, 100, 1), fixed(W2, 20000, 5)]

        assert calculate_distribution(Money(50000), rules) == {W1: Money(30000), W2: Money(20000)}

    @pytest.mark.parametrize("pot", [0, -1, -35000])
    def test_no_distribution_without_positive_pot(self, pot: int) -> None:
        """Should distribute nothing when the pot is zero or negative."""
        assert calculate_distribution(Money(pot), [percentage(W1, 100)]) == {}

    def test_fixed_rules_capped_by_remaining(self) -> None:
        """Should give later fixed rules only what is left."""
        rules = [fixed(W1, 30000, 1), fixed(W2, 30000, 2), percentage(W3, 100, 3)]

        assert calculate_distribution(Money(50000), rules) == {W1: Money(30000), W2: Money(20000)}

    def test_percentages_are_normalized(self) -> None:
        """Should normalize percentages against their own total."""
        rules = [percentage(W1, 30), percentage(W2, 30)]

        assert calculate_distribution(Money(10000), rules) == {W1: Money(5000), W2: Money(5000)}

    def test_rounding_hands_out_every_cent(self) -> None:
        """Should assign leftover cents so the percentage pass sums to the pot."""
        rules = [percentage(W1, 33.33), percentage(W2, 33.33), percentage(W3, 33.34)]

        distribution = calculate_distribution(Money(10000), rules)

        assert sum(distribution.values()) == 10000
        assert distribution == {W1: Money(3333), W2: Money(3333), W3: Money(3334)}

    def test_leftover_cent_goes_to_earlier_rule_on_tie(self) -> None:
        """Should break equal remainders in rule order."""
        rules = [percentage(W1, 50, 1), percentage(W2, 50, 2)]

        assert calculate_distribution(Money(101), rules) == {W1: Money(51), W2: Money(50)}

    def test_rules_for_same_wallet_accumulate(self) -> None:
        """Should add up several rules that target one wallet."""
        rules = [fixed(W1, 1000, 1), percentage(W1, 50, 2), percentage(W2, 50, 3)]

        assert calculate_distribution(Money(11000), rules) == {W1: Money(6000), W2: Money(5000)}

    def test_omits_zero_assignments(self) -> None:
        """Should leave out wallets that receive nothing."""
        rules = [fixed(W1, 50000, 1), percentage(W2, 100, 2)]

        assert calculate_distribution(Money(50000), rules) == {W1: Money(50000)}

    def test_fixed_only_leaves_remainder_undistributed(self) -> None:
        """Should keep the remainder out of the distribution with no percentage rules."""
        distribution = calculate_distribution(Money(50000), [fixed(W1, 10000)])

        assert distribution == {W1: Money(10000)}

    def test_deterministic(self) -> None:
        """Should return the same result for the same inputs."""
        rules = [percentage(W1, 12.5, 2), fixed(W2, 777, 1), percentage(W3, 87.5, 3)]

        assert calculate_distribution(Money(99999), rules) == calculate_distribution(Money(99999), rules)

    @pytest.mark.parametrize("pot", [1, 7, 100, 9999, 70000, 123457])
    @pytest.mark.parametrize(
        "values",
        [(60, 40), (33.33, 33.33, 33.34), (10, 20, 70), (1, 99), (12.5, 12.5, 75)],
    )
    def test_percentage_pass_sums_to_pot(self, pot: int, values: tuple[float, ...]) -> None:
        """Should never lose or create cents when percentages sum to 100."""
        wallets = [WalletId(f"W{i}") for i in range(len(values))]
        rules = [percentage(wallet_id, value, i) for i, (wallet_id, value) in enumerate(zip(wallets, values))]

        distribution = calculate_distribution(Money(pot), rules)

        assert sum(distribution.values()) == pot
        assert all(amount > 0 for amount in distribution.values())


class TestDistributionShares:
    """Tests for distribution_shares."""

    def test_shares(self) -> None:
        """Should express each assignment as a percentage of the pot."""
        shares = distribution_shares({W1: Money(42000), W2: Money(28000)}, Money(70000))

        assert shares[W1] == pytest.approx(60.0)
        assert shares[W2] == pytest.approx(40.0)

    def test_no_pot(self) -> None:
        """Should return no shares when the pot is not positive."""
        assert distribution_shares({}, Money(0)) == {}
