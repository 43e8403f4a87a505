"""
Quota tracking for lookup providers.

This module keeps one usage counter per provider with:
- A fixed limit per rolling window
- Lazy window reset on the first consultation after the window expires
- Atomic check-and-reserve so concurrent lookups cannot overshoot a limit
"""

import threading
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from typing import AsyncIterator, Callable, Optional

from .config import ProviderConfig
from .enums import ProviderName
from .exceptions import ConfigurationError
from .models import ProviderQuota


@dataclass
class QuotaReservation:
    """A slot held while a provider call is in flight."""

    provider: ProviderName
    granted: bool
    consumed: bool = False

    def consume(self) -> None:
        """Mark the call as completed so it counts against the quota."""
        self.consumed = True


class QuotaTracker:
    """
    Per-provider usage counters with rolling windows.

    ``can_use`` and ``record_use`` are the plain bookkeeping calls. Concurrent
    callers should go through ``acquire`` instead: it reserves a slot while the
    call is in flight, so N simultaneous lookups against a limit of L can never
    record more than L uses.
    """

    def __init__(
        self,
        quotas: dict[ProviderName, tuple[int, float]],
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            quotas: Mapping of provider to (limit, window_seconds)
            clock: Monotonic time source, defaults to time.monotonic
        """
        self._clock = clock or time.monotonic
        # Critical sections never await, so a plain lock serializes them
        # for asyncio tasks and threads alike.
        self._lock = threading.Lock()
        now = self._clock()
        self._quotas: dict[ProviderName, ProviderQuota] = {
            provider: ProviderQuota(
                limit=limit,
                window_seconds=window,
                window_reset_at=now + window,
            )
            for provider, (limit, window) in quotas.items()
        }

    @classmethod
    def from_provider_configs(
        cls,
        provider_configs: list[ProviderConfig],
        clock: Optional[Callable[[], float]] = None,
    ) -> "QuotaTracker":
        return cls(
            {pc.name: (pc.quota_limit, pc.quota_window_seconds) for pc in provider_configs},
            clock=clock,
        )

    def _quota(self, provider: ProviderName) -> ProviderQuota:
        try:
            return self._quotas[provider]
        except KeyError:
            raise ConfigurationError(
                code="unknown_provider",
                message=f"No quota registered for provider: {provider.value}",
                details={"provider": provider.value},
            )

    def _refresh(self, quota: ProviderQuota) -> None:
        now = self._clock()
        if now > quota.window_reset_at:
            quota.used = 0
            quota.window_reset_at = now + quota.window_seconds

    def can_use(self, provider: ProviderName) -> bool:
        """
        Check whether the provider may be called now.

        Resets the window first if it has expired.
        """
        with self._lock:
            quota = self._quota(provider)
            self._refresh(quota)
            return quota.remaining > 0

    def record_use(self, provider: ProviderName) -> None:
        """Count one completed call. Only call after an actual invocation."""
        with self._lock:
            self._quota(provider).used += 1

    def try_reserve(self, provider: ProviderName) -> bool:
        """Atomically check the quota and hold a slot if one is free."""
        with self._lock:
            quota = self._quota(provider)
            self._refresh(quota)
            if quota.remaining == 0:
                return False
            quota.reserved += 1
            return True

    def settle(self, provider: ProviderName, consumed: bool) -> None:
        """Release a reserved slot, counting it as used if the call completed."""
        with self._lock:
            quota = self._quota(provider)
            quota.reserved = max(0, quota.reserved - 1)
            if consumed:
                quota.used += 1

    @asynccontextmanager
    async def acquire(self, provider: ProviderName) -> AsyncIterator[QuotaReservation]:
        """
        Reserve a slot for the duration of a provider call.

        Usage:
            async with tracker.acquire(provider) as reservation:
                if reservation.granted:
                    result = await provider.check(domain)
                    reservation.consume()

        Yields:
            QuotaReservation whose ``granted`` flag says whether to proceed
        """
        reservation = QuotaReservation(provider=provider, granted=self.try_reserve(provider))
        try:
            yield reservation
        finally:
            if reservation.granted:
                self.settle(provider, reservation.consumed)

    def snapshot(self) -> dict[ProviderName, ProviderQuota]:
        """Return copies of all quota records."""
        with self._lock:
            return {provider: replace(quota) for provider, quota in self._quotas.items()}
