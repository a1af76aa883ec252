"""
Arbitrage Engine.

Main orchestrator for one polling cycle.

Flow:
1. Fetch: Pull the current snapshot from the provider
2. Build: Evaluate every market, drop those without a signal
3. Rank: Order results by the configured field
4. Classify: Label each result and decide the cycle alert
"""

from datetime import date
from typing import Optional

from predictarb.arb.builder import build_results
from predictarb.arb.classifier import classify, should_alert
from predictarb.arb.ranker import rank_results
from predictarb.core.config import AnalyzerConfig, load_analyzer_config
from predictarb.core.logging import LoggerMixin
from predictarb.core.timeutil import format_timestamp, generate_run_id, now_utc, today_local
from predictarb.domain.models import ClassifiedResult, CycleReport, MarketSnapshot
from predictarb.providers.base import BaseProvider
from predictarb.providers.predictit import PredictItProvider


class ArbEngine(LoggerMixin):
    """
    Market evaluation engine.

    evaluate_snapshot() is a pure function of (snapshot, config, today);
    run_cycle() adds the fetch in front of it.
    """

    def __init__(
        self,
        provider: Optional[BaseProvider] = None,
        config: Optional[AnalyzerConfig] = None,
    ):
        """
        Initialize engine.

        Args:
            provider: Snapshot provider (PredictIt by default)
            config: Analyzer rules (or load from yaml)
        """
        self.config = config or load_analyzer_config()

        self.provider = provider or PredictItProvider()

    def evaluate_snapshot(
        self,
        snapshot: MarketSnapshot,
        today: Optional[date] = None,
        sort_field: Optional[str] = None,
    ) -> CycleReport:
        """
        Evaluate, rank and classify one snapshot.

        Args:
            snapshot: Markets of the current cycle
            today: Date for breakeven horizons (configured-timezone today if omitted)
            sort_field: Ranking field override

        Returns:
            CycleReport with ranked, classified results and the alert flag
        """
        today = today or today_local()
        sort_field = sort_field or self.config.default_sort_field

        evaluations = build_results(snapshot.markets, self.config, today)
        ranked = rank_results([e.result for e in evaluations], sort_field)

        report = CycleReport(
            run_id=generate_run_id(),
            timestamp=format_timestamp(now_utc()),
            markets_seen=len(snapshot.markets),
            results=[ClassifiedResult(r, classify(r, self.config)) for r in ranked],
            alert=should_alert(evaluations),
            sort_field=sort_field,
            errors=[e.error for e in evaluations if e.error],
        )

        self.logger.info(
            f"Cycle {report.run_id}: {report.markets_seen} markets, "
            f"{len(report.results)} with signal, alert={report.alert}, "
            f"errors={len(report.errors)}"
        )
        return report

    def run_cycle(
        self,
        today: Optional[date] = None,
        sort_field: Optional[str] = None,
    ) -> CycleReport:
        """
        Fetch the current snapshot and evaluate it.

        Raises:
            ProviderError: Fetch failed; the caller decides whether to wait
                for the next cycle
        """
        self.logger.info("Starting evaluation cycle...")
        snapshot = self.provider.get_snapshot()
        return self.evaluate_snapshot(snapshot, today=today, sort_field=sort_field)
