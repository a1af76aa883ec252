"""
Priority classifier and batch alert decision.

Both are deterministic rules over built results; labels only affect
how a result is shown.
"""

from typing import Iterable

from predictarb.core.config import AnalyzerConfig
from predictarb.domain.models import AnalysisResult, MarketEvaluation
from predictarb.domain.priority import Priority


def classify(result: AnalysisResult, config: AnalyzerConfig) -> Priority:
    """
    Map a result to its display priority. First matching rule wins.

    Thresholds compare against the percent-scaled fields of the result.
    """
    threshold = config.priority_threshold

    if config.is_fully_invested(result.market_id):
        return Priority.HELD

    if result.guaranteed_profit_pct is not None and result.guaranteed_profit_pct > threshold:
        return Priority.ARBITRAGE

    if result.sell_shares_advantage_pct is not None and result.sell_shares_advantage_pct > threshold:
        return Priority.LIQUIDATE_NOW

    if result.expected_profit_pct > threshold:
        return Priority.POSITIVE_EXPECTATION

    return Priority.NONE


def should_alert(evaluations: Iterable[MarketEvaluation]) -> bool:
    """The cycle alerts when any single market asked for it."""
    return any(e.alert_requested for e in evaluations)
