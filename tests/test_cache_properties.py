"""
Property-based tests for the result cache.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_resolver.cache import DEFAULT_TTL_SECONDS, ResultCache
from domain_resolver.enums import ProviderName
from domain_resolver.models import AvailabilityResult

from fakes import FakeClock


def taken(domain: str) -> AvailabilityResult:
    return AvailabilityResult.definitive(domain, False, ProviderName.RDAP)


class TestCacheFreshness:

    @given(
        ttl=st.floats(min_value=1.0, max_value=3600.0),
        fraction=st.floats(min_value=0.0, max_value=0.99),
    )
    @settings(max_examples=100)
    def test_fresh_entry_is_returned(self, ttl: float, fraction: float) -> None:
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=ttl, clock=clock)
        result = taken("example.com")
        cache.put("example.com", result)

        clock.advance(ttl * fraction)
        assert cache.get("example.com") is result

    @given(
        ttl=st.floats(min_value=1.0, max_value=3600.0),
        extra=st.floats(min_value=0.0, max_value=3600.0),
    )
    @settings(max_examples=100)
    def test_stale_entry_is_absent(self, ttl: float, extra: float) -> None:
        clock = FakeClock(start=0.0)
        cache = ResultCache(ttl_seconds=ttl, clock=clock)
        cache.put("example.com", taken("example.com"))

        clock.advance(ttl + extra)
        assert cache.get("example.com") is None
        # Lazy expiry: the entry is still stored until purged or overwritten
        assert len(cache) == 1

    def test_default_ttl_is_five_minutes(self) -> None:
        assert DEFAULT_TTL_SECONDS == 300
        assert ResultCache().ttl_seconds == 300

    def test_missing_entry(self) -> None:
        assert ResultCache().get("nothing.com") is None


class TestCacheWrites:

    def test_put_overwrites(self) -> None:
        cache = ResultCache()
        first = taken("example.com")
        second = AvailabilityResult.definitive("example.com", True, ProviderName.WHOIS)
        cache.put("example.com", first)
        cache.put("example.com", second)
        assert cache.get("example.com") is second
        assert len(cache) == 1

    def test_error_results_are_cached(self) -> None:
        cache = ResultCache()
        failure = AvailabilityResult.all_providers_failed("example.com")
        cache.put("example.com", failure)
        assert cache.get("example.com") is failure

    def test_overwrite_refreshes_age(self) -> None:
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=10.0, clock=clock)
        cache.put("example.com", taken("example.com"))
        clock.advance(8.0)
        cache.put("example.com", taken("example.com"))
        clock.advance(8.0)
        assert cache.get("example.com") is not None

    def test_purge_expired(self) -> None:
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=10.0, clock=clock)
        cache.put("old.com", taken("old.com"))
        clock.advance(11.0)
        cache.put("new.com", taken("new.com"))

        assert cache.purge_expired() == 1
        assert len(cache) == 1
        assert "new.com" in cache
        assert "old.com" not in cache
