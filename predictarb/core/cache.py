"""
Snapshot caching.

PredictIt refreshes marketdata/all about once a minute, so a parsed
snapshot stays valid for cache_ttl seconds and is shared between a
polling cycle and a `--status` health check that land inside the same
refresh window.
"""

from typing import Any, Optional

from cachetools import TTLCache

from predictarb.core.config import get_settings
from predictarb.core.logging import get_logger

logger = get_logger("cache")


class CacheManager:
    """TTLCache wrapper; a ttl of 0 disables caching."""

    def __init__(self, maxsize: int = 16, ttl: Optional[int] = None):
        self.ttl = get_settings().cache_ttl if ttl is None else ttl
        self._cache = TTLCache(maxsize=maxsize, ttl=max(self.ttl, 1))

    def get(self, key: str) -> Optional[Any]:
        value = self._cache.get(key)
        logger.debug(f"Cache {'hit' if value is not None else 'miss'}: {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        if self.ttl > 0:
            self._cache[key] = value


_provider_caches: dict[str, CacheManager] = {}


def get_provider_cache(provider_name: str) -> CacheManager:
    """One cache per provider, created on first use."""
    if provider_name not in _provider_caches:
        _provider_caches[provider_name] = CacheManager()
    return _provider_caches[provider_name]
