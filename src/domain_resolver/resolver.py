"""
Fallback resolver for the domain resolver.

Resolves one domain key through an ordered list of providers:
1. A fresh cached result is returned without any provider call
2. Providers are tried in order; unconfigured or quota-exhausted ones are skipped
3. The first definitive answer (available or taken) wins and is cached
4. A rate-limited call does not count against the quota, other failures do
5. When nothing answers, a synthetic failure result is cached and returned
"""

from typing import Optional, Sequence

from .audit_logger import AuditLogger
from .cache import ResultCache
from .enums import LogLevel, ProviderErrorCode
from .exceptions import ConfigurationMissingError, ProviderError, RateLimitedError
from .models import AvailabilityResult
from .provider import Provider
from .quota import QuotaTracker


class FallbackResolver:
    """Runs the provider cascade for a single domain."""

    def __init__(
        self,
        providers: Sequence[Provider],
        quota_tracker: QuotaTracker,
        cache: ResultCache,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            providers: Providers in cascade order
            quota_tracker: Tracker with a quota registered for every provider
            cache: Result cache shared by all resolutions
            logger: Optional audit logger
        """
        self._providers = list(providers)
        self._quota_tracker = quota_tracker
        self._cache = cache
        self._logger = logger

    @property
    def providers(self) -> list[Provider]:
        return list(self._providers)

    async def resolve(self, domain: str) -> AvailabilityResult:
        """
        Resolve a normalized domain key.

        Never raises for provider failures; an exhausted cascade is reported
        as a result with ``error_kind`` ALL_PROVIDERS_FAILED.
        """
        cached = self._cache.get(domain)
        if cached is not None:
            self._log(LogLevel.DEBUG, f"Cache hit for {domain}", {"domain": domain})
            return cached

        for provider in self._providers:
            result = await self._attempt(provider, domain)
            if result is not None:
                self._cache.put(domain, result)
                self._log(
                    LogLevel.INFO,
                    f"{domain}: {'available' if result.available else 'taken'}",
                    {"domain": domain, "provider": provider.name.value},
                )
                return result

        result = AvailabilityResult.all_providers_failed(domain)
        self._cache.put(domain, result)
        if self._logger:
            self._logger.warn(
                "FallbackResolver",
                f"All providers failed for {domain}",
                {"domain": domain, "providers": [p.name.value for p in self._providers]},
            )
        return result

    async def _attempt(self, provider: Provider, domain: str) -> Optional[AvailabilityResult]:
        """Try one provider; return its definitive result or None to move on."""
        name = provider.name.value

        if not provider.is_configured:
            self._log(LogLevel.DEBUG, f"Skipping unconfigured provider {name}", {"provider": name})
            return None

        async with self._quota_tracker.acquire(provider.name) as reservation:
            if not reservation.granted:
                self._log(
                    LogLevel.INFO,
                    f"Quota exhausted for {name}, skipping",
                    {"provider": name, "domain": domain},
                )
                return None

            try:
                result = await provider.check(domain)
            except ConfigurationMissingError as e:
                self._log_failure(provider, domain, e)
                return None
            except RateLimitedError as e:
                self._log_failure(provider, domain, e)
                return None
            except ProviderError as e:
                reservation.consume()
                self._log_failure(provider, domain, e)
                return None
            except Exception as e:
                reservation.consume()
                self._log_failure(
                    provider,
                    domain,
                    ProviderError(
                        provider=name,
                        code=ProviderErrorCode.NETWORK_ERROR.value,
                        message=f"Unexpected error: {e}",
                        details={"error_type": type(e).__name__},
                    ),
                )
                return None

            reservation.consume()
            return result

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "FallbackResolver", message, data)

    def _log_failure(self, provider: Provider, domain: str, error: ProviderError) -> None:
        if self._logger:
            self._logger.log_error(
                "FallbackResolver",
                f"{provider.name.value} failed for {domain}: {error.message}",
                error=error,
                additional_data={
                    "domain": domain,
                    "provider": provider.name.value,
                    "kind": error.kind.value,
                },
                level=LogLevel.WARN,
            )
