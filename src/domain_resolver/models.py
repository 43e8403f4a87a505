"""
Data models for the domain resolver.

This module defines the availability result handed back to callers, and the
bookkeeping records kept by the quota tracker and the result cache.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .enums import ErrorKind, ProviderName


ALL_PROVIDERS_FAILED_MESSAGE = "All availability checking services failed"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Outcome of resolving one domain.

    Either ``available`` is meaningful (``error_kind`` is None), or
    ``error_kind`` is set and ``available`` is False as a safe default.
    """

    domain: str
    available: bool
    provider: Optional[ProviderName]
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    checked_at: str = field(default_factory=_utc_now)

    @classmethod
    def definitive(
        cls, domain: str, available: bool, provider: ProviderName
    ) -> "AvailabilityResult":
        """Build an available/taken result reported by a provider."""
        return cls(domain=domain, available=available, provider=provider)

    @classmethod
    def all_providers_failed(cls, domain: str) -> "AvailabilityResult":
        """Build the synthetic result for an exhausted cascade."""
        return cls(
            domain=domain,
            available=False,
            provider=None,
            error_kind=ErrorKind.ALL_PROVIDERS_FAILED,
            error=ALL_PROVIDERS_FAILED_MESSAGE,
        )

    @property
    def failed(self) -> bool:
        return self.error_kind is not None

    def to_record(self) -> dict:
        """Boundary shape consumed by presentation and HTTP layers."""
        return {
            "domain": self.domain,
            "available": self.available,
            "error": self.error,
            "provider": self.provider.value if self.provider else None,
        }


@dataclass
class ProviderQuota:
    """Usage counter for one provider within a rolling window."""

    limit: int
    window_seconds: float
    window_reset_at: float
    used: int = 0
    reserved: int = 0  # calls in flight holding a slot

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used - self.reserved)


@dataclass
class CacheEntry:
    """A cached result and the monotonic time it was stored."""

    result: AvailabilityResult
    stored_at: float
