"""
Market Evaluation Engine.

Pure functions over a single market's quoted prices. Nothing here
touches the network, the clock or shared state: every threshold and
rate comes in through AnalyzerConfig or explicit arguments.

Fee model: winnings on a position are reduced by 10% (fee_factor 0.9),
except on the position that pays for the others in a guaranteed lock.
"""

import math
from datetime import date
from typing import Optional

from predictarb.core.config import AnalyzerConfig
from predictarb.core.errors import BreakevenDomainError
from predictarb.core.timeutil import add_days
from predictarb.domain.models import Market

DEFAULT_FEE_FACTOR = 0.9
DAYS_PER_YEAR = 365


def guaranteed_profit(
    market: Market,
    fee_factor: float = DEFAULT_FEE_FACTOR,
) -> Optional[float]:
    """
    Calculate the fee-adjusted return locked in by buying No everywhere.

    Holding one No share on every quoted contract pays out on all but
    the contract that resolves Yes. The most expensive No position is
    funded first and kept fee-free; every other position contributes
    its winnings net of fees.

    Args:
        market: Market to evaluate
        fee_factor: Share of winnings kept after fees

    Returns:
        Net return fraction on one unit of capital (may be negative),
        or None when fewer than two No prices are quoted.
    """
    prices = sorted(p for p in market.buy_no_prices() if p is not None)
    if len(prices) < 2:
        return None

    top_price = prices.pop()
    profit = 1.0 - top_price
    for price in prices:
        profit += fee_factor * (1.0 - price)

    return profit - 1.0


def guaranteed_profit_alert(
    market: Market,
    profit: Optional[float],
    config: AnalyzerConfig,
) -> bool:
    """A locked profit asks for the alert unless the market is already maxed."""
    if profit is None:
        return False
    return profit >= config.alert_threshold and not config.is_fully_invested(market.market_id)


def yes_probabilities(market: Market) -> list[float]:
    """
    Derive a normalized Yes probability for each contract.

    A contract without a No quote counts as certain No, one with a No
    quote but no Yes quote as certain Yes; otherwise the midpoint of the
    Yes price and the Yes price implied by the No price is used.

    Returns:
        Probabilities aligned with market.contracts, summing to 1.
    """
    raw = []
    for contract in market.contracts:
        if contract.best_buy_no_cost is None:
            raw.append(0.0)
        elif contract.best_buy_yes_cost is None:
            raw.append(1.0)
        else:
            raw.append((contract.best_buy_yes_cost + (1.0 - contract.best_buy_no_cost)) / 2.0)

    if not raw:
        return []

    total = math.fsum(raw)
    if total <= 0:
        # No usable signal on any leg
        return [1.0 / len(raw)] * len(raw)

    return [p / total for p in raw]


def expected_profit(
    market: Market,
    fee_factor: float = DEFAULT_FEE_FACTOR,
) -> float:
    """
    Calculate the probability-weighted return of buying No on every quoted contract.

    Args:
        market: Market to evaluate
        fee_factor: Share of winnings kept after fees

    Returns:
        Expected profit fraction; contracts without a No quote add nothing.
    """
    probabilities = yes_probabilities(market)

    profit = 0.0
    for loss_if_yes, yes_probability in zip(market.buy_no_prices(), probabilities):
        if loss_if_yes is None:
            continue

        no_probability = 1.0 - yes_probability
        gain_if_no = 1.0 - loss_if_yes
        profit += fee_factor * no_probability * gain_if_no - yes_probability * loss_if_yes

    return profit


def sell_shares_advantage(market: Market) -> float:
    """
    Compare selling every held No share now against holding to resolution.

    Holding one No share per contract pays N - 1 at resolution; the
    advantage is what the best sell prices fetch above that.

    Returns:
        Positive when liquidating now beats waiting.
    """
    proceeds = math.fsum(p for p in market.sell_no_prices() if p is not None)
    return -len(market.contracts) + 1.0 + proceeds


def sell_advantage_alert(advantage: float, config: AnalyzerConfig) -> bool:
    return advantage > config.alert_threshold


def breakeven_days(
    guaranteed_pct: float,
    expected_pct: float,
    annual_return_rate: float,
) -> int:
    """
    Estimate how long a positive-expectation position may be held.

    Treats the gap between the current guaranteed loss and the expected
    gain as compounding continuously at the required annual return and
    solves for the holding period where the opportunity cost eats the edge.

    Args:
        guaranteed_pct: Guaranteed profit in percent (normally negative)
        expected_pct: Expected profit in percent
        annual_return_rate: Required return per year, e.g. 0.4

    Returns:
        Days until breakeven, unclamped (negative means already too late).

    Raises:
        BreakevenDomainError: guaranteed_pct is zero, the log argument is
            not positive, or the rate is not positive.
    """
    if annual_return_rate <= 0:
        raise BreakevenDomainError(
            f"Annual return rate must be positive, got {annual_return_rate}",
            guaranteed_pct=guaranteed_pct,
            expected_pct=expected_pct,
            annual_return_rate=annual_return_rate,
        )

    if guaranteed_pct == 0:
        raise BreakevenDomainError(
            "Breakeven undefined: guaranteed profit is zero",
            guaranteed_pct=guaranteed_pct,
            expected_pct=expected_pct,
            annual_return_rate=annual_return_rate,
        )

    ratio = (guaranteed_pct - expected_pct) / guaranteed_pct
    if ratio <= 0:
        raise BreakevenDomainError(
            f"Breakeven undefined: log of non-positive ratio {ratio:.6f}",
            guaranteed_pct=guaranteed_pct,
            expected_pct=expected_pct,
            annual_return_rate=annual_return_rate,
        )

    return round(math.log(ratio) / annual_return_rate * DAYS_PER_YEAR)


def worth_purchasing_by(
    today: date,
    guaranteed_pct: float,
    expected_pct: float,
    annual_return_rate: float,
) -> date:
    """Last date on which buying still clears the required return."""
    days = breakeven_days(guaranteed_pct, expected_pct, annual_return_rate)
    return add_days(today, days)
