"""
Time-bounded cache of availability results.

Entries expire lazily: a stale entry is treated as absent on lookup and is
superseded in place by the next write. Nothing is evicted in the background.
"""

import threading
import time
from typing import Callable, Optional

from .models import AvailabilityResult, CacheEntry


DEFAULT_TTL_SECONDS = 5 * 60


class ResultCache:
    """Maps a domain key to its last known result."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, domain: str) -> Optional[AvailabilityResult]:
        """Return the cached result for ``domain`` if it is still fresh."""
        with self._lock:
            entry = self._entries.get(domain)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self._ttl:
                return None
            return entry.result

    def put(self, domain: str, result: AvailabilityResult) -> None:
        """Store ``result``, overwriting any previous entry (error results included)."""
        with self._lock:
            self._entries[domain] = CacheEntry(result=result, stored_at=self._clock())

    def purge_expired(self) -> int:
        """
        Drop stale entries and return how many were removed.

        Never called automatically; the cache otherwise grows with the number
        of distinct domains looked up.
        """
        with self._lock:
            now = self._clock()
            stale = [
                domain for domain, entry in self._entries.items()
                if now - entry.stored_at >= self._ttl
            ]
            for domain in stale:
                del self._entries[domain]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, domain: str) -> bool:
        return self.get(domain) is not None
