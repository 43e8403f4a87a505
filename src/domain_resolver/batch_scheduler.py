"""
Batch scheduling for availability lookups.

Splits a list of domains into fixed-size groups, resolves each group
concurrently and waits a fixed pacing interval between groups so bursts of
lookups do not drain shared provider quotas.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from .audit_logger import AuditLogger
from .models import AvailabilityResult
from .resolver import FallbackResolver


class BatchScheduler:
    """Drives many domains through a FallbackResolver."""

    def __init__(
        self,
        resolver: FallbackResolver,
        batch_size: int = 3,
        delay_seconds: float = 2.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            resolver: Resolver used for each domain
            batch_size: Number of domains resolved concurrently per group
            delay_seconds: Pause between consecutive groups
            sleep: Delay primitive, defaults to asyncio.sleep
            logger: Optional audit logger
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._resolver = resolver
        self._batch_size = batch_size
        self._delay_seconds = delay_seconds
        self._sleep = sleep or asyncio.sleep
        self._logger = logger

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def batches(self, domains: Sequence[str]) -> list[list[str]]:
        """Partition ``domains`` into consecutive groups of ``batch_size``."""
        return [
            list(domains[i:i + self._batch_size])
            for i in range(0, len(domains), self._batch_size)
        ]

    async def resolve_all(self, domains: Sequence[str]) -> list[AvailabilityResult]:
        """
        Resolve every domain key, preserving input order.

        Args:
            domains: Normalized domain keys

        Returns:
            One result per input, in input order
        """
        results: list[AvailabilityResult] = []
        groups = self.batches(domains)

        for index, group in enumerate(groups):
            if index > 0 and self._delay_seconds > 0:
                await self._sleep(self._delay_seconds)

            if self._logger:
                self._logger.debug(
                    "BatchScheduler",
                    f"Resolving group {index + 1}/{len(groups)}",
                    {"domains": group},
                )

            # gather returns results in argument order, whatever the completion order
            results.extend(await asyncio.gather(
                *(self._resolver.resolve(domain) for domain in group)
            ))

        return results
