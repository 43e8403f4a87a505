"""
Provider interface shared by every lookup backend.

A provider answers one question for one domain: available or taken. Any
answer it cannot give with confidence is raised as a ProviderError (or its
RateLimitedError subclass) so the resolver can move on to the next provider.
"""

import time
from typing import Optional

import httpx

from .audit_logger import AuditLogger
from .config import ProviderConfig
from .enums import ProviderErrorCode, ProviderName
from .exceptions import ConfigurationMissingError, ProviderError, RateLimitedError
from .models import AvailabilityResult


class Provider:
    """Base class for lookup providers."""

    name: ProviderName

    def __init__(self, config: ProviderConfig, logger: Optional[AuditLogger] = None) -> None:
        self._config = config
        self._timeout = config.timeout_seconds
        self._logger = logger

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        """False when the provider can never be used (disabled or missing credentials)."""
        return self._config.enabled

    async def check(self, domain: str) -> AvailabilityResult:
        """
        Look up ``domain`` and classify it as available or taken.

        Raises:
            RateLimitedError: The upstream rejected the call
            ProviderError: The outcome is indeterminate
            ConfigurationMissingError: The provider lacks its credentials
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources."""

    async def __aenter__(self) -> "Provider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _available(self, domain: str) -> AvailabilityResult:
        return AvailabilityResult.definitive(domain, True, self.name)

    def _taken(self, domain: str) -> AvailabilityResult:
        return AvailabilityResult.definitive(domain, False, self.name)

    def _error(
        self,
        code: ProviderErrorCode,
        message: str,
        details: Optional[dict] = None,
    ) -> ProviderError:
        return ProviderError(
            provider=self.name.value,
            code=code.value,
            message=message,
            details=details,
        )

    def _rate_limited(self, message: str, details: Optional[dict] = None) -> RateLimitedError:
        return RateLimitedError(provider=self.name.value, message=message, details=details)

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(self.__class__.__name__, message, data)


class HTTPProvider(Provider):
    """
    Provider backed by an HTTPS API.

    Holds one lazily created httpx.AsyncClient with TLS verification and a
    per-request timeout. Subclasses implement ``_lookup`` and classify the
    response; transport failures are translated into ProviderError here.
    """

    # Credential required by the provider, if any
    credential_setting: Optional[str] = None

    def __init__(
        self,
        config: ProviderConfig,
        logger: Optional[AuditLogger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config, logger)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        if not self._config.enabled:
            return False
        if self.credential_setting and not self._config.api_key:
            return False
        return True

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=True,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def check(self, domain: str) -> AvailabilityResult:
        if self.credential_setting and not self._config.api_key:
            raise ConfigurationMissingError(self.name.value, self.credential_setting)

        start_time = time.perf_counter()
        try:
            result = await self._lookup(self._get_client(), domain)
        except httpx.TimeoutException:
            raise self._error(
                ProviderErrorCode.TIMEOUT,
                f"{self.name.value} request timed out after {self._timeout}s",
                {"domain": domain},
            )
        except httpx.HTTPError as e:
            raise self._error(
                ProviderErrorCode.NETWORK_ERROR,
                f"Connection error: {e}",
                {"domain": domain},
            )

        self._log_debug(
            f"{domain}: {'available' if result.available else 'taken'}",
            {"domain": domain, "response_time_ms": (time.perf_counter() - start_time) * 1000},
        )
        return result

    async def _lookup(self, client: httpx.AsyncClient, domain: str) -> AvailabilityResult:
        raise NotImplementedError

    def _check_status(self, response: httpx.Response, domain: str) -> None:
        """Raise for rate limiting and server-side failures."""
        if response.status_code == 429:
            raise self._rate_limited(
                f"Rate limited by {self.name.value}",
                {"domain": domain, "http_status_code": 429},
            )
        if response.status_code >= 500:
            raise self._error(
                ProviderErrorCode.SERVER_ERROR,
                f"{self.name.value} server error: {response.status_code}",
                {"domain": domain, "http_status_code": response.status_code},
            )

    def _json(self, response: httpx.Response, domain: str):
        try:
            return response.json()
        except ValueError as e:
            raise self._error(
                ProviderErrorCode.PARSE_ERROR,
                f"Failed to parse {self.name.value} response: {e}",
                {"domain": domain, "http_status_code": response.status_code},
            )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
