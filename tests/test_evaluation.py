"""Tests for the market evaluation engine."""

import math
from datetime import date, timedelta

import pytest

from predictarb.arb.evaluation import (
    breakeven_days,
    expected_profit,
    guaranteed_profit,
    guaranteed_profit_alert,
    sell_advantage_alert,
    sell_shares_advantage,
    worth_purchasing_by,
    yes_probabilities,
)
from predictarb.core.errors import BreakevenDomainError


class TestGuaranteedProfit:
    """Tests for guaranteed_profit."""

    def test_three_leg_example(self, make_market):
        """Test the worked example: No prices 0.40/0.45/0.50."""
        market = make_market(1, [(None, 0.40), (None, 0.45), (None, 0.50)])

        assert guaranteed_profit(market) == pytest.approx(0.535)

    def test_unsorted_input_gives_same_result(self, make_market):
        """Test that contract order does not matter."""
        market = make_market(1, [(None, 0.50), (None, 0.40), (None, 0.45)])

        assert guaranteed_profit(market) == pytest.approx(0.535)

    def test_fewer_than_two_quotes_is_absent(self, make_market):
        """Test that one No quote cannot lock a profit."""
        market = make_market(1, [(0.6, 0.45), (0.5, None)])

        assert guaranteed_profit(market) is None

    def test_no_quotes_is_absent(self, make_market):
        market = make_market(1, [(0.6, None), (0.5, None)])

        assert guaranteed_profit(market) is None

    def test_can_be_negative(self, make_market):
        """Test that a computed value is not necessarily a profit."""
        market = make_market(1, [(None, 0.45), (None, 0.60)])

        # 0.40 + 0.9 * 0.55 - 1
        assert guaranteed_profit(market) == pytest.approx(-0.105)

    def test_custom_fee_factor(self, make_market):
        market = make_market(1, [(None, 0.40), (None, 0.50)])

        assert guaranteed_profit(market, fee_factor=1.0) == pytest.approx(0.1)

    def test_monotonic_in_each_price(self, make_market):
        """Test that raising any No price never raises the guaranteed profit."""
        base = [0.30, 0.55, 0.70]
        steps = [i / 20 for i in range(21)]

        for leg in range(len(base)):
            previous = math.inf
            for price in steps:
                prices = list(base)
                prices[leg] = price
                market = make_market(1, [(None, p) for p in prices])
                profit = guaranteed_profit(market)
                assert profit <= previous + 1e-12
                previous = profit


class TestGuaranteedProfitAlert:
    """Tests for the guaranteed profit alert request."""

    def test_alert_at_threshold(self, make_market, config):
        market = make_market(1, [(None, 0.5)])

        assert guaranteed_profit_alert(market, 0.01, config) is True

    def test_no_alert_below_threshold(self, make_market, config):
        market = make_market(1, [(None, 0.5)])

        assert guaranteed_profit_alert(market, 0.0099, config) is False

    def test_no_alert_for_fully_invested(self, make_market, config):
        market = make_market(6653, [(None, 0.5)])

        assert guaranteed_profit_alert(market, 0.5, config) is False

    def test_no_alert_when_absent(self, make_market, config):
        market = make_market(1, [(None, 0.5)])

        assert guaranteed_profit_alert(market, None, config) is False


class TestYesProbabilities:
    """Tests for yes_probabilities."""

    def test_midpoint_of_yes_signals(self, make_market):
        market = make_market(1, [(0.60, 0.45), (0.45, 0.60)])

        probabilities = yes_probabilities(market)

        assert probabilities[0] == pytest.approx(0.575)
        assert probabilities[1] == pytest.approx(0.425)

    def test_missing_no_quote_is_certain_no(self, make_market):
        market = make_market(1, [(0.60, 0.45), (0.45, 0.60), (0.10, None)])

        probabilities = yes_probabilities(market)

        assert probabilities[2] == 0.0

    def test_missing_yes_quote_is_certain_yes(self, make_market):
        market = make_market(1, [(None, 0.40), (0.20, 0.55)])

        probabilities = yes_probabilities(market)

        # raw 1.0 and 0.325
        assert probabilities[0] == pytest.approx(1.0 / 1.325)
        assert probabilities[1] == pytest.approx(0.325 / 1.325)

    def test_all_zero_becomes_uniform(self, make_market):
        """Test that a market with no usable signal still sums to one."""
        market = make_market(1, [(0.0, 1.0), (0.0, 1.0), (None, None)])

        assert yes_probabilities(market) == pytest.approx([1 / 3, 1 / 3, 1 / 3])

    @pytest.mark.parametrize(
        "quotes",
        [
            [(0.60, 0.45), (0.45, 0.60)],
            [(None, 0.40), (0.20, 0.55), (0.05, None)],
            [(0.01, 0.99), (0.02, 0.98), (0.97, 0.04), (None, None)],
            [(None, 0.10), (None, 0.20)],
            [(0.30, None), (None, None)],
            [(0.33, 0.70), (0.33, 0.70), (0.33, 0.70)],
        ],
    )
    def test_sum_to_one(self, make_market, quotes):
        """Test that normalized probabilities always sum to one."""
        market = make_market(1, quotes)

        assert math.fsum(yes_probabilities(market)) == pytest.approx(1.0, abs=1e-9)


class TestExpectedProfit:
    """Tests for expected_profit."""

    def test_two_leg_market(self, make_market):
        market = make_market(1, [(0.60, 0.45), (0.45, 0.60)])

        # 0.9*0.425*0.55 - 0.575*0.45 + 0.9*0.575*0.4 - 0.425*0.6
        assert expected_profit(market) == pytest.approx(-0.096375)

    def test_leg_without_no_quote_contributes_nothing(self, make_market):
        with_leg = make_market(1, [(0.60, 0.45), (0.45, 0.60), (0.30, None)])
        without_leg = make_market(2, [(0.60, 0.45), (0.45, 0.60)])

        assert expected_profit(with_leg) == pytest.approx(expected_profit(without_leg))

    def test_positive_expectation(self, make_market):
        market = make_market(1, [(None, 0.40), (0.20, 0.55)])

        assert expected_profit(market) == pytest.approx(0.0013207547, abs=1e-9)

    def test_symmetric_market_matches_guaranteed(self, make_market):
        """Test that equal quotes give the same expected and guaranteed profit."""
        market = make_market(1, [(0.25, 0.70)] * 3)

        assert expected_profit(market) == pytest.approx(guaranteed_profit(market))


class TestSellSharesAdvantage:
    """Tests for sell_shares_advantage."""

    def test_three_leg_example(self, make_market):
        """Test the worked example: sell-No prices 0.30/0.30/0.50."""
        market = make_market(6653, [(None, None, 0.30), (None, None, 0.30), (None, None, 0.50)])

        assert sell_shares_advantage(market) == pytest.approx(-0.90)

    def test_two_legs_at_half_break_even(self, make_market):
        market = make_market(6653, [(None, None, 0.5), (None, None, 0.5)])

        assert sell_shares_advantage(market) == 0.0

    @pytest.mark.parametrize("legs", [2, 3, 4, 7])
    def test_break_even_when_proceeds_match_payout(self, make_market, legs):
        """Test that selling for the N - 1 resolution payout is neutral."""
        price = (legs - 1) / legs
        market = make_market(6653, [(None, None, price)] * legs)

        assert sell_shares_advantage(market) == pytest.approx(0.0, abs=1e-12)

    def test_missing_sell_quotes_are_excluded(self, make_market):
        market = make_market(6653, [(None, None, 0.6), (None, None, None)])

        assert sell_shares_advantage(market) == pytest.approx(-0.4)

    def test_positive_advantage(self, make_market):
        market = make_market(6653, [(None, None, 0.6), (None, None, 0.5)])

        assert sell_shares_advantage(market) == pytest.approx(0.1)

    def test_alert_is_strictly_above_threshold(self, config):
        assert sell_advantage_alert(0.02, config) is True
        assert sell_advantage_alert(0.01, config) is False


class TestBreakeven:
    """Tests for the breakeven horizon."""

    def test_breakeven_days(self):
        # ln(2.5) / 0.4 * 365 = 836.1
        assert breakeven_days(-2.0, 3.0, 0.4) == 836

    def test_negative_days_are_not_clamped(self):
        # ln(0.5) / 0.4 * 365 = -632.5
        assert breakeven_days(2.0, 1.0, 0.4) == -632

    def test_zero_guaranteed_raises(self):
        with pytest.raises(BreakevenDomainError) as exc_info:
            breakeven_days(0.0, 3.0, 0.4)

        assert exc_info.value.code == "DOMAIN_ERROR"
        assert exc_info.value.details["guaranteed_pct"] == 0.0

    def test_non_positive_ratio_raises(self):
        with pytest.raises(BreakevenDomainError):
            breakeven_days(2.0, 5.0, 0.4)

        with pytest.raises(BreakevenDomainError):
            breakeven_days(3.0, 3.0, 0.4)

    def test_non_positive_rate_raises(self):
        with pytest.raises(BreakevenDomainError):
            breakeven_days(-2.0, 3.0, 0.0)

    def test_worth_purchasing_by(self):
        start = date(2024, 1, 1)

        result = worth_purchasing_by(start, -2.0, 3.0, 0.4)

        assert result == start + timedelta(days=836)
        assert result == date(2026, 4, 16)
