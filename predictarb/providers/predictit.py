"""
PredictIt provider for full market snapshots.

Uses the public marketdata endpoint, which returns every open market
with best quotes per contract and refreshes about once a minute.
"""

import time
from typing import Any, Optional

from predictarb.core.errors import ProviderError, SnapshotFormatError
from predictarb.core.logging import get_logger
from predictarb.core.timeutil import format_timestamp, now_utc
from predictarb.domain.models import Contract, Market, MarketSnapshot
from predictarb.providers.base import (
    BaseProvider,
    HealthCheckResult,
    ProviderStatus,
)

logger = get_logger("providers.predictit")

SNAPSHOT_CACHE_KEY = "marketdata_all"


def _price(raw: dict[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    return float(value)


def parse_contract(raw: dict[str, Any]) -> Contract:
    """Parse one contract object of the marketdata payload."""
    return Contract(
        contract_id=int(raw["id"]),
        name=raw.get("shortName") or raw.get("name") or "",
        best_buy_yes_cost=_price(raw, "bestBuyYesCost"),
        best_buy_no_cost=_price(raw, "bestBuyNoCost"),
        best_sell_no_cost=_price(raw, "bestSellNoCost"),
    )


def parse_market(raw: dict[str, Any]) -> Market:
    """Parse one market object of the marketdata payload."""
    contracts = tuple(parse_contract(c) for c in raw.get("contracts") or [])
    return Market(
        market_id=int(raw["id"]),
        name=raw.get("name") or "",
        contracts=contracts,
        short_name=raw.get("shortName") or "",
        url=raw.get("url") or "",
        status=raw.get("status") or "",
    )


def parse_snapshot(payload: dict[str, Any], fetched_at: str = "") -> MarketSnapshot:
    """
    Turn a marketdata/all payload into a MarketSnapshot.

    Markets that fail to parse are skipped with a warning so a single
    bad record never hides the rest of the feed.

    Raises:
        SnapshotFormatError: Payload has no markets list
    """
    raw_markets = payload.get("markets") if isinstance(payload, dict) else None
    if not isinstance(raw_markets, list):
        raise SnapshotFormatError(
            "Snapshot payload has no 'markets' list",
            provider=PredictItProvider.name,
        )

    markets = []
    for index, raw in enumerate(raw_markets):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping market entry {index}: expected an object, got {type(raw).__name__}")
            continue
        try:
            markets.append(parse_market(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed market {raw.get('id')}: {e}")

    return MarketSnapshot(
        markets=tuple(markets),
        fetched_at=fetched_at or format_timestamp(now_utc()),
    )


class PredictItProvider(BaseProvider):
    """
    PredictIt market data provider.

    Provides:
    - The full snapshot of open markets with best quotes
    """

    name = "predictit"

    @property
    def url(self) -> str:
        return self.settings.predictit_api_url

    def healthcheck(self) -> HealthCheckResult:
        """Check PredictIt API health."""
        start = time.time()
        try:
            snapshot = self.get_snapshot(use_cache=False)
        except ProviderError as e:
            return HealthCheckResult(
                status=ProviderStatus.UNAVAILABLE,
                message=e.message,
                details=e.details,
            )

        latency = (time.time() - start) * 1000
        if not snapshot.markets:
            return HealthCheckResult(
                status=ProviderStatus.DEGRADED,
                message="Snapshot contains no markets",
                latency_ms=latency,
            )

        return HealthCheckResult(
            status=ProviderStatus.HEALTHY,
            message=f"{len(snapshot)} markets",
            latency_ms=latency,
        )

    def get_snapshot(self, use_cache: bool = True) -> MarketSnapshot:
        """
        Fetch and parse the current market snapshot.

        Args:
            use_cache: Reuse a payload fetched within the cache TTL

        Returns:
            MarketSnapshot

        Raises:
            ProviderError: Fetch failed or payload is unusable
        """
        cached = self._get_cached(SNAPSHOT_CACHE_KEY) if use_cache else None
        if cached is not None:
            return cached

        payload = self._fetch_json(self.url)
        snapshot = parse_snapshot(payload)

        self.logger.info(f"Fetched snapshot with {len(snapshot)} markets")
        self._set_cached(SNAPSHOT_CACHE_KEY, snapshot)
        return snapshot
