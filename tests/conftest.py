"""Shared fixtures for market-building tests."""

from datetime import date

import pytest

from predictarb.core.config import AnalyzerConfig
from predictarb.domain.models import Contract, Market


def build_market(market_id, quotes, name="Test market"):
    """
    Build a market from (yes, no, sell_no) tuples.

    Shorter tuples leave the remaining prices unquoted.
    """
    contracts = []
    for i, quote in enumerate(quotes):
        yes, no, sell_no = (tuple(quote) + (None, None, None))[:3]
        contracts.append(
            Contract(
                contract_id=market_id * 100 + i,
                name=f"Contract {i}",
                best_buy_yes_cost=yes,
                best_buy_no_cost=no,
                best_sell_no_cost=sell_no,
            )
        )
    return Market(market_id=market_id, name=name, contracts=tuple(contracts))


@pytest.fixture
def make_market():
    """Factory fixture wrapping build_market."""
    return build_market


@pytest.fixture
def config():
    """Default rules with one known fully invested market."""
    return AnalyzerConfig(fully_invested_market_ids=frozenset({6653}))


@pytest.fixture
def today():
    return date(2024, 1, 1)
