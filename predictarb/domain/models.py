"""
Core data models for predictarb.

All models are frozen dataclasses and provide to_dict() for JSON serialization.
These models represent the domain objects without external API dependencies.
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Optional

from predictarb.domain.priority import Priority


def _check_price(name: str, value: Optional[float]) -> None:
    if value is not None and not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


@dataclass(frozen=True)
class Contract:
    """
    One outcome leg of a market.

    Prices are fractions of a dollar; None means nobody is quoting that side.
    """
    contract_id: int
    name: str = ""
    best_buy_yes_cost: Optional[float] = None
    best_buy_no_cost: Optional[float] = None
    best_sell_no_cost: Optional[float] = None

    def __post_init__(self):
        _check_price("best_buy_yes_cost", self.best_buy_yes_cost)
        _check_price("best_buy_no_cost", self.best_buy_no_cost)
        _check_price("best_sell_no_cost", self.best_sell_no_cost)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Market:
    """
    A question with mutually exclusive, collectively exhaustive contracts.

    Contract order is kept as delivered; prices and derived probabilities
    are aligned index for index.
    """
    market_id: int
    name: str
    contracts: tuple[Contract, ...] = ()
    short_name: str = ""
    url: str = ""
    status: str = ""

    def buy_no_prices(self) -> list[Optional[float]]:
        return [c.best_buy_no_cost for c in self.contracts]

    def sell_no_prices(self) -> list[Optional[float]]:
        return [c.best_sell_no_cost for c in self.contracts]

    def to_dict(self) -> dict[str, Any]:
        return {
            "market_id": self.market_id,
            "name": self.name,
            "contracts": [c.to_dict() for c in self.contracts],
            "short_name": self.short_name,
            "url": self.url,
            "status": self.status,
        }


@dataclass(frozen=True)
class MarketSnapshot:
    """One polling cycle's full set of markets."""
    markets: tuple[Market, ...] = ()
    fetched_at: str = ""    # ISO timestamp

    def __len__(self) -> int:
        return len(self.markets)

    def to_dict(self) -> dict[str, Any]:
        return {
            "markets": [m.to_dict() for m in self.markets],
            "fetched_at": self.fetched_at,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Evaluation output for one market.

    Percent fields are scaled by 100 and rounded to 2 places, price
    fields are in cents.
    """
    market_id: int
    market_name: str
    current_buy_no_prices_cents: tuple[int, ...]
    expected_profit_pct: float
    guaranteed_profit_pct: Optional[float] = None

    # Only for fully invested markets
    sell_shares_advantage_pct: Optional[float] = None
    current_sell_no_prices_cents: Optional[tuple[int, ...]] = None

    # Only for positive expectation without a guaranteed lock
    worth_purchasing_by: Optional[date] = None
    breakeven_error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["current_buy_no_prices_cents"] = list(self.current_buy_no_prices_cents)
        if self.current_sell_no_prices_cents is not None:
            data["current_sell_no_prices_cents"] = list(self.current_sell_no_prices_cents)
        if self.worth_purchasing_by is not None:
            data["worth_purchasing_by"] = self.worth_purchasing_by.isoformat()
        return data


@dataclass(frozen=True)
class MarketEvaluation:
    """A built result plus whether it asked for the operator alert."""
    result: AnalysisResult
    alert_requested: bool = False
    error: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class ClassifiedResult:
    result: AnalysisResult
    priority: Priority

    def to_dict(self) -> dict[str, Any]:
        return {**self.result.to_dict(), "priority": self.priority.value}


@dataclass
class CycleReport:
    """
    Everything the presentation layer needs for one polling cycle.

    Results are already ranked; `alert` is the OR of every market's
    alert request.
    """
    run_id: str
    timestamp: str
    markets_seen: int = 0
    results: list[ClassifiedResult] = field(default_factory=list)
    alert: bool = False
    sort_field: str = ""
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "markets_seen": self.markets_seen,
            "results": [r.to_dict() for r in self.results],
            "alert": self.alert,
            "sort_field": self.sort_field,
            "errors": self.errors,
        }
