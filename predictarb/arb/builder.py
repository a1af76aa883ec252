"""
Result Builder.

Applies the evaluation engine to every market of a snapshot, drops
markets without an arbitrage signal and assembles one AnalysisResult
per remaining market.
"""

from datetime import date
from typing import Iterable, Optional

from predictarb.arb.evaluation import (
    expected_profit,
    guaranteed_profit,
    guaranteed_profit_alert,
    sell_advantage_alert,
    sell_shares_advantage,
    worth_purchasing_by,
)
from predictarb.core.config import AnalyzerConfig
from predictarb.core.errors import BreakevenDomainError
from predictarb.core.logging import get_logger
from predictarb.domain.models import AnalysisResult, Market, MarketEvaluation

logger = get_logger("arb.builder")


def to_pct(value: float) -> float:
    """Fraction to percent, 2 decimal places."""
    return round(value * 100, 2)


def to_cents(prices: Iterable[Optional[float]]) -> tuple[int, ...]:
    """Present prices as whole cents, skipping missing quotes."""
    return tuple(round(p * 100) for p in prices if p is not None)


def evaluate_market(
    market: Market,
    config: AnalyzerConfig,
    today: date,
) -> Optional[MarketEvaluation]:
    """
    Build the result for one market.

    Args:
        market: Market to evaluate
        config: Analyzer rules
        today: Date the breakeven horizon counts from

    Returns:
        MarketEvaluation, or None when the market has no guaranteed
        profit signal (fewer than two No quotes).
    """
    guaranteed = guaranteed_profit(market, config.fee_factor)
    if guaranteed is None:
        logger.debug(f"Market {market.market_id}: fewer than two No quotes, skipped")
        return None

    alert_requested = guaranteed_profit_alert(market, guaranteed, config)

    guaranteed_pct = to_pct(guaranteed)
    expected_pct = to_pct(expected_profit(market, config.fee_factor))

    sell_advantage_pct = None
    sell_prices_cents = None
    purchase_by = None
    breakeven_error = None
    error = None

    if config.is_fully_invested(market.market_id):
        advantage = sell_shares_advantage(market)
        alert_requested = alert_requested or sell_advantage_alert(advantage, config)
        sell_advantage_pct = to_pct(advantage)
        if sell_advantage_pct > 0:
            sell_prices_cents = to_cents(market.sell_no_prices())
    elif expected_pct > 0 and guaranteed_pct < 0:
        try:
            purchase_by = worth_purchasing_by(
                today,
                guaranteed_pct,
                expected_pct,
                config.annual_return_rate,
            )
        except BreakevenDomainError as e:
            logger.warning(f"Market {market.market_id}: {e.message}")
            breakeven_error = e.message
            error = {**e.to_dict(), "market_id": market.market_id}

    result = AnalysisResult(
        market_id=market.market_id,
        market_name=market.name,
        current_buy_no_prices_cents=to_cents(market.buy_no_prices()),
        expected_profit_pct=expected_pct,
        guaranteed_profit_pct=guaranteed_pct,
        sell_shares_advantage_pct=sell_advantage_pct,
        current_sell_no_prices_cents=sell_prices_cents,
        worth_purchasing_by=purchase_by,
        breakeven_error=breakeven_error,
    )

    return MarketEvaluation(result=result, alert_requested=alert_requested, error=error)


def build_results(
    markets: Iterable[Market],
    config: AnalyzerConfig,
    today: date,
) -> list[MarketEvaluation]:
    """
    Evaluate every market, keeping only those with a guaranteed profit signal.

    Snapshot order is preserved; ranking happens later.
    """
    evaluations = []
    for market in markets:
        evaluation = evaluate_market(market, config, today)
        if evaluation is not None:
            evaluations.append(evaluation)
    return evaluations
