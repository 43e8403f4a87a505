"""
WHOIS protocol lookup provider.

Sends a plain-text query to the registry's WHOIS server on port 43 and
infers availability from the free-text answer:
- A "no match" style phrase → available
- A response missing the domain name or registrar field → available
- A rate-limit phrase → rate limited
- An empty response → indeterminate
- Anything else → taken
"""

import asyncio
from typing import Optional

from .audit_logger import AuditLogger
from .config import ProviderConfig
from .enums import ProviderErrorCode, ProviderName
from .models import AvailabilityResult
from .normalizer import extension_of
from .provider import Provider


WHOIS_PORT = 43


class WHOISProvider(Provider):
    """Protocol lookup over raw WHOIS."""

    name = ProviderName.WHOIS

    # Phrases (lowercase) that registries use for an unregistered name
    NO_MATCH_SIGNALS = [
        "no match",
        "not found",
        "no entries found",
        "no data found",
        "status: free",
        "status: available",
    ]

    # Phrases (lowercase) that registries use to refuse a query
    RATE_LIMIT_SIGNALS = [
        "limit exceeded",
        "too many requests",
        "query rate",
        "queried interval is too short",
    ]

    DOMAIN_NAME_FIELDS = ("domain name", "domain")
    REGISTRAR_FIELDS = ("registrar", "sponsoring registrar")

    def __init__(
        self,
        config: ProviderConfig,
        logger: Optional[AuditLogger] = None,
        port: int = WHOIS_PORT,
    ) -> None:
        super().__init__(config, logger)
        self._port = port

    def get_server(self, domain: str) -> Optional[str]:
        """Return the WHOIS server configured for the domain's extension."""
        return self._config.endpoints.get(extension_of(domain))

    async def check(self, domain: str) -> AvailabilityResult:
        server = self.get_server(domain)
        if not server:
            raise self._error(
                ProviderErrorCode.NO_ENDPOINT,
                f"No WHOIS server configured for extension: {extension_of(domain)}",
                {"domain": domain},
            )

        try:
            raw_response = await asyncio.wait_for(
                self._execute_query(domain, server),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise self._error(
                ProviderErrorCode.TIMEOUT,
                f"WHOIS query timed out after {self._timeout}s",
                {"domain": domain, "server": server},
            )
        except OSError as e:
            raise self._error(
                ProviderErrorCode.NETWORK_ERROR,
                f"Socket error: {e}",
                {"domain": domain, "server": server},
            )

        result = self.classify(domain, raw_response)
        self._log_debug(
            f"{domain}: {'available' if result.available else 'taken'}",
            {"domain": domain, "server": server},
        )
        return result

    async def _execute_query(self, domain: str, server: str) -> str:
        """Send the query and read until the server closes the connection."""
        reader, writer = await asyncio.open_connection(server, self._port)
        try:
            writer.write(f"{domain}\r\n".encode("utf-8"))
            await writer.drain()
            data = await reader.read()
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass
        return data.decode("utf-8", errors="replace")

    def classify(self, domain: str, raw_response: str) -> AvailabilityResult:
        """
        Classify a raw WHOIS response.

        Raises:
            RateLimitedError: The server refused the query
            ProviderError: The response is empty
        """
        if not raw_response or not raw_response.strip():
            raise self._error(
                ProviderErrorCode.PARSE_ERROR,
                "Empty WHOIS response",
                {"domain": domain},
            )

        text = raw_response.lower()

        if any(signal in text for signal in self.RATE_LIMIT_SIGNALS):
            raise self._rate_limited(
                "Rate limited by WHOIS server",
                {"domain": domain},
            )

        if any(signal in text for signal in self.NO_MATCH_SIGNALS):
            return self._available(domain)

        fields = self.parse_fields(raw_response)
        has_domain_name = any(fields.get(key) for key in self.DOMAIN_NAME_FIELDS)
        has_registrar = any(fields.get(key) for key in self.REGISTRAR_FIELDS)
        if not has_domain_name or not has_registrar:
            return self._available(domain)

        return self._taken(domain)

    @staticmethod
    def parse_fields(raw_response: str) -> dict[str, str]:
        """
        Extract ``key: value`` lines, keyed by lowercase key.

        The first non-empty value wins for repeated keys.
        """
        fields: dict[str, str] = {}
        for line in raw_response.splitlines():
            if ":" not in line:
                continue
            key, _, value = line.partition(":")
            key = key.strip().lower()
            value = value.strip()
            if key and value and key not in fields:
                fields[key] = value
        return fields
