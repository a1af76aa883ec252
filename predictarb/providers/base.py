"""
Shared plumbing for snapshot sources.

A provider owns one feed: it fetches the raw document through the shared
HttpClient, turns it into a MarketSnapshot and keeps the parsed snapshot
in a TTL cache for as long as the feed itself would not change.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from predictarb.core.cache import CacheManager, get_provider_cache
from predictarb.core.config import Settings, get_settings
from predictarb.core.errors import ProviderError
from predictarb.core.http import HttpClient, get_http_client
from predictarb.core.logging import LoggerMixin
from predictarb.domain.models import MarketSnapshot


class ProviderStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"      # reachable, but the snapshot is empty
    UNAVAILABLE = "unavailable"


@dataclass
class HealthCheckResult:
    """Outcome of one live fetch, shown by `predictarb --status`."""
    status: ProviderStatus
    message: str
    latency_ms: Optional[float] = None
    details: Optional[dict[str, Any]] = None


class BaseProvider(ABC, LoggerMixin):
    """Snapshot source backed by a JSON feed."""

    name: str = "base"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
        cache: Optional[CacheManager] = None,
    ):
        self.settings = settings or get_settings()
        self.http = http_client or get_http_client()
        self.cache = cache or get_provider_cache(self.name)

    @abstractmethod
    def healthcheck(self) -> HealthCheckResult:
        """Fetch live, bypassing the cache, and report how it went."""

    @abstractmethod
    def get_snapshot(self, use_cache: bool = True) -> MarketSnapshot:
        """
        Return the current snapshot.

        Raises:
            ProviderError: Fetch failed or the document is unusable
        """

    def _get_cached(self, key: str) -> Optional[Any]:
        return self.cache.get(f"{self.name}:{key}")

    def _set_cached(self, key: str, value: Any) -> None:
        self.cache.set(f"{self.name}:{key}", value)

    def _fetch_json(self, url: str) -> Any:
        """
        GET url and decode it, with every failure as a ProviderError.

        Raises:
            ProviderError: On any failure, including unexpected client errors
        """
        try:
            return self.http.get_json(url, provider_name=self.name)
        except ProviderError:
            raise
        except Exception as e:
            self.logger.exception(f"Unexpected error fetching {url}")
            raise ProviderError(f"Request failed: {e}", provider=self.name) from e
