"""
JSON-over-HTTP fetching for snapshot feeds.

Transport failures are retried with exponential backoff; every failure
that survives the retries leaves this module as a ProviderError.
"""

from typing import Any, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from predictarb.core.config import get_settings
from predictarb.core.errors import ProviderError, RateLimitError, SnapshotFormatError
from predictarb.core.logging import get_logger

logger = get_logger("http")

TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


def _retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("Retry-After", "")
    return int(value) if value.isdigit() else None


class HttpClient:
    """Fetches JSON documents for providers."""

    def __init__(self, timeout: Optional[int] = None):
        self.timeout = timeout or get_settings().http_timeout
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    def close(self) -> None:
        """Release pooled connections; the next request reopens them."""
        if self._client is not None:
            self._client.close()
            self._client = None

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _fetch(self, url: str) -> httpx.Response:
        logger.debug(f"GET {url}")
        return self.client.get(url)

    def get_json(self, url: str, *, provider_name: str) -> Any:
        """
        Fetch url and decode its JSON body.

        Args:
            url: Absolute feed URL
            provider_name: Provider name attached to raised errors

        Returns:
            Decoded JSON document

        Raises:
            RateLimitError: HTTP 429
            ProviderError: Transport failure after retries, or HTTP error status
            SnapshotFormatError: Body is not JSON (maintenance pages and the like)
        """
        try:
            response = self._fetch(url)
        except TRANSIENT_ERRORS as e:
            logger.warning(f"GET {url} failed after retries: {e}")
            raise ProviderError(
                f"{type(e).__name__} fetching {url}",
                provider=provider_name,
            ) from e

        status = response.status_code
        if status == 429:
            raise RateLimitError(
                "Rate limit exceeded",
                provider=provider_name,
                retry_after=_retry_after(response),
            )
        if status >= 400:
            logger.error(f"HTTP {status} from {url}: {response.text[:200]}")
            raise ProviderError(
                f"HTTP {status}: {response.reason_phrase}",
                provider=provider_name,
                recoverable=status >= 500,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SnapshotFormatError(
                f"Response from {url} is not JSON",
                provider=provider_name,
                details={"content_type": response.headers.get("Content-Type"), "body": response.text[:200]},
            ) from e


_shared_client: Optional[HttpClient] = None


def get_http_client() -> HttpClient:
    """Process-wide client shared by providers."""
    global _shared_client
    if _shared_client is None:
        _shared_client = HttpClient()
    return _shared_client
