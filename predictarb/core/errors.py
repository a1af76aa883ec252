"""
Exceptions raised by predictarb.

Every error carries a short machine-readable code and a details dict so
the cycle report and the JSON log lines can carry it unchanged.
"""

from typing import Any, Optional


class PredictArbError(Exception):
    """Base exception; catch this to survive any single failed cycle."""

    code = "PREDICTARB_ERROR"

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class ConfigurationError(PredictArbError):
    """Invalid analyzer settings or a missing config file."""

    code = "CONFIG_ERROR"


class ProviderError(PredictArbError):
    """
    The snapshot could not be fetched.

    recoverable tells the polling loop whether the next cycle is likely
    to succeed without operator action.
    """

    code = "PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        recoverable: bool = True,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            details={**(details or {}), "provider": provider, "recoverable": recoverable},
        )
        self.provider = provider
        self.recoverable = recoverable


class RateLimitError(ProviderError):
    """HTTP 429 from the feed."""

    code = "RATE_LIMIT"

    def __init__(self, message: str, *, provider: str, retry_after: Optional[int] = None):
        super().__init__(message, provider=provider, details={"retry_after": retry_after})
        self.retry_after = retry_after


class SnapshotFormatError(ProviderError):
    """The feed answered, but not with a usable marketdata document."""

    code = "SNAPSHOT_FORMAT"

    def __init__(self, message: str, *, provider: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, provider=provider, recoverable=False, details=details)


class BreakevenDomainError(PredictArbError):
    """
    Breakeven horizon is undefined for the given inputs.

    Raised instead of letting a zero division or the logarithm of a
    non-positive number leak NaN/inf into a result.
    """

    code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        guaranteed_pct: float,
        expected_pct: float,
        annual_return_rate: float,
    ):
        super().__init__(
            message,
            details={
                "guaranteed_pct": guaranteed_pct,
                "expected_pct": expected_pct,
                "annual_return_rate": annual_return_rate,
            },
        )
        self.guaranteed_pct = guaranteed_pct
        self.expected_pct = expected_pct
        self.annual_return_rate = annual_return_rate
