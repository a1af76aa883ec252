"""Tests for the cycle engine."""

from unittest.mock import Mock

import pytest

from predictarb.arb.engine import ArbEngine
from predictarb.core.errors import ProviderError
from predictarb.domain.models import MarketSnapshot
from predictarb.domain.priority import Priority


@pytest.fixture
def snapshot(make_market):
    """A snapshot exercising every branch of the builder."""
    return MarketSnapshot(
        markets=(
            # locked arbitrage
            make_market(1, [(None, 0.40), (None, 0.45), (None, 0.50)]),
            # single No quote, excluded
            make_market(2, [(0.10, 0.45), (0.90, None)]),
            # positive expectation without a lock
            make_market(3, [(None, 0.40), (0.20, 0.55)]),
            # fully invested, worth liquidating
            make_market(6653, [(None, 0.45, 0.60), (None, 0.55, 0.50)]),
            # nothing interesting
            make_market(5, [(0.60, 0.45), (0.45, 0.60)]),
        ),
        fetched_at="2024-01-01T12:00:00Z",
    )


@pytest.fixture
def quiet_snapshot(make_market):
    """A snapshot where nothing crosses an alert threshold."""
    return MarketSnapshot(
        markets=(
            make_market(3, [(None, 0.40), (0.20, 0.55)]),
            make_market(5, [(0.60, 0.45), (0.45, 0.60)]),
            make_market(6653, [(None, 0.70, 0.30), (None, 0.70, 0.30), (None, 0.50, 0.50)]),
        ),
    )


class TestArbEngine:
    """Tests for ArbEngine."""

    @pytest.fixture
    def provider(self, snapshot):
        provider = Mock()
        provider.get_snapshot.return_value = snapshot
        return provider

    def test_evaluate_snapshot_ranks_and_classifies(self, provider, config, snapshot, today):
        engine = ArbEngine(provider=provider, config=config)

        report = engine.evaluate_snapshot(snapshot, today=today)

        assert report.markets_seen == 5
        assert report.sort_field == "expected_profit_pct"
        assert [r.result.market_id for r in report.results] == [5, 3, 1, 6653]
        assert [r.priority for r in report.results] == [
            Priority.NONE,
            Priority.POSITIVE_EXPECTATION,
            Priority.ARBITRAGE,
            Priority.HELD,
        ]
        assert report.alert is True
        assert report.errors == []

    def test_breakeven_date_uses_given_day(self, provider, config, snapshot, today):
        engine = ArbEngine(provider=provider, config=config)

        report = engine.evaluate_snapshot(snapshot, today=today)

        by_id = {r.result.market_id: r.result for r in report.results}
        assert by_id[3].worth_purchasing_by is not None
        assert by_id[3].worth_purchasing_by > today

    def test_sort_field_override(self, provider, config, snapshot, today):
        engine = ArbEngine(provider=provider, config=config)

        report = engine.evaluate_snapshot(
            snapshot, today=today, sort_field="guaranteed_profit_pct"
        )

        assert report.sort_field == "guaranteed_profit_pct"
        assert [r.result.market_id for r in report.results] == [5, 3, 1, 6653]

    def test_quiet_cycle_does_not_alert(self, provider, config, quiet_snapshot, today):
        """Test that a maxed market's locked profit alone never alerts."""
        engine = ArbEngine(provider=provider, config=config)

        report = engine.evaluate_snapshot(quiet_snapshot, today=today)

        assert len(report.results) == 3
        assert report.alert is False

    def test_empty_snapshot(self, provider, config, today):
        engine = ArbEngine(provider=provider, config=config)

        report = engine.evaluate_snapshot(MarketSnapshot(), today=today)

        assert report.results == []
        assert report.alert is False

    def test_run_cycle_fetches_snapshot(self, provider, config, today):
        engine = ArbEngine(provider=provider, config=config)

        report = engine.run_cycle(today=today)

        provider.get_snapshot.assert_called_once_with()
        assert len(report.results) == 4

    def test_run_cycle_propagates_fetch_failure(self, config, today):
        provider = Mock()
        provider.get_snapshot.side_effect = ProviderError("down", provider="predictit")
        engine = ArbEngine(provider=provider, config=config)

        with pytest.raises(ProviderError):
            engine.run_cycle(today=today)

    def test_cycles_are_independent(self, provider, config, snapshot, quiet_snapshot, today):
        """Test that an alerting cycle does not leak into the next one."""
        engine = ArbEngine(provider=provider, config=config)

        first = engine.evaluate_snapshot(snapshot, today=today)
        second = engine.evaluate_snapshot(quiet_snapshot, today=today)

        assert first.alert is True
        assert second.alert is False

    def test_report_to_dict(self, provider, config, snapshot, today):
        engine = ArbEngine(provider=provider, config=config)

        data = engine.evaluate_snapshot(snapshot, today=today).to_dict()

        assert data["alert"] is True
        assert data["results"][0]["priority"] == "none"
        assert data["results"][1]["worth_purchasing_by"].startswith("2024-")
