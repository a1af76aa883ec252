"""
Priority labels used to highlight results.

Labels drive presentation only; they never change ranking or alerting.
"""

from enum import Enum


class Priority(str, Enum):
    """Display priority of an analysed market."""
    HELD = "held"
    ARBITRAGE = "arbitrage"
    LIQUIDATE_NOW = "liquidate_now"
    POSITIVE_EXPECTATION = "positive_expectation"
    NONE = "none"
