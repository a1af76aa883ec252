"""
Providers module - Snapshot sources

Each provider turns an external feed into a MarketSnapshot.
"""

from predictarb.providers.base import BaseProvider, HealthCheckResult, ProviderStatus
from predictarb.providers.predictit import PredictItProvider, parse_snapshot

__all__ = [
    "BaseProvider",
    "HealthCheckResult",
    "ProviderStatus",
    "PredictItProvider",
    "parse_snapshot",
]
