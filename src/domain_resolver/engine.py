"""
Availability engine.

Owns every piece of mutable state (quota tracker, result cache, provider
connections) for one resolver instance and wires the components together:

    raw names → normalize → BatchScheduler → FallbackResolver → results
"""

import asyncio
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from .audit_logger import AuditLogger
from .batch_scheduler import BatchScheduler
from .cache import ResultCache
from .config import ProviderConfig, ResolverConfig, load_config_from_env
from .domainr_provider import DomainrProvider
from .enums import ProviderName
from .models import AvailabilityResult
from .normalizer import normalize
from .provider import Provider
from .quota import QuotaTracker
from .rdap_provider import RDAPProvider
from .resolver import FallbackResolver
from .whois_provider import WHOISProvider
from .whoisxml_provider import WhoisXMLProvider


PROVIDER_CLASSES: dict[ProviderName, type[Provider]] = {
    ProviderName.RDAP: RDAPProvider,
    ProviderName.WHOIS: WHOISProvider,
    ProviderName.DOMAINR: DomainrProvider,
    ProviderName.WHOISXML: WhoisXMLProvider,
}


def build_provider(config: ProviderConfig, logger: Optional[AuditLogger] = None) -> Provider:
    """Instantiate the provider class registered for ``config.name``."""
    return PROVIDER_CLASSES[config.name](config, logger)


class AvailabilityEngine:
    """
    Explicitly constructed resolver instance.

    Each engine has its own quotas and cache, so two engines never share
    state. Use as an async context manager to close provider connections.
    """

    def __init__(
        self,
        config: ResolverConfig,
        providers: Optional[Sequence[Provider]] = None,
        logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Resolver configuration
            providers: Provider instances in cascade order; built from
                       ``config.providers`` when omitted
            logger: Optional audit logger
            clock: Monotonic time source for quotas and cache
            sleep: Delay primitive used between batches
        """
        config.validate()
        self._config = config
        self._logger = logger
        clock = clock or time.monotonic

        if providers is None:
            providers = [build_provider(pc, logger) for pc in config.providers]
        self._providers = list(providers)

        self.quota_tracker = QuotaTracker.from_provider_configs(
            [config.provider(p.name) or p.config for p in self._providers],
            clock=clock,
        )
        self.cache = ResultCache(ttl_seconds=config.cache.ttl_seconds, clock=clock)
        self.resolver = FallbackResolver(
            providers=self._providers,
            quota_tracker=self.quota_tracker,
            cache=self.cache,
            logger=logger,
        )
        self.scheduler = BatchScheduler(
            resolver=self.resolver,
            batch_size=config.batch.batch_size,
            delay_seconds=config.batch.delay_seconds,
            sleep=sleep or asyncio.sleep,
            logger=logger,
        )

        if logger:
            unusable = [p.name.value for p in self._providers if not p.is_configured]
            logger.info(
                "AvailabilityEngine",
                "Engine ready",
                {
                    "providers": [p.name.value for p in self._providers],
                    "unconfigured": unusable,
                },
            )

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Path] = None,
        logger: Optional[AuditLogger] = None,
    ) -> "AvailabilityEngine":
        """Build an engine from environment configuration (``.env`` supported)."""
        config = load_config_from_env(env_file)
        if logger is None:
            logger = AuditLogger.from_config(config.logging.level, config.logging.output_format)
        return cls(config, logger=logger)

    async def __aenter__(self) -> "AvailabilityEngine":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def providers(self) -> list[Provider]:
        return list(self._providers)

    def normalize(self, raw: str) -> str:
        return normalize(raw, self._config.extension, self._config.encode_idn)

    async def check_domains(self, raw_names: Sequence[str]) -> list[AvailabilityResult]:
        """
        Resolve raw candidate names.

        Returns:
            One result per input name, in input order; empty input gives an
            empty list
        """
        if not raw_names:
            return []
        keys = [self.normalize(raw) for raw in raw_names]
        return await self.scheduler.resolve_all(keys)

    async def check_domain(self, raw_name: str) -> AvailabilityResult:
        return await self.resolver.resolve(self.normalize(raw_name))

    async def close(self) -> None:
        for provider in self._providers:
            await provider.close()
