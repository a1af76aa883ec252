"""
predictarb Arbitrage Module.

PredictIt multi-contract No-side arbitrage detection.

Components:
- evaluation: Guaranteed/expected profit, sell advantage, breakeven horizon
- builder: Per-market result assembly and filtering
- ranker: Ordering by a chosen field
- classifier: Priority labels and the cycle alert
- engine: Main cycle orchestrator
"""

from predictarb.arb.engine import ArbEngine
from predictarb.arb.builder import build_results, evaluate_market
from predictarb.arb.ranker import rank_results
from predictarb.arb.classifier import classify, should_alert

__all__ = [
    "ArbEngine",
    "build_results",
    "evaluate_market",
    "rank_results",
    "classify",
    "should_alert",
]
