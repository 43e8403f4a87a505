"""
RDAP registry lookup provider.

Queries the registry's RDAP endpoint for the domain's extension:
- HTTP 404 means the registry has no such object → available
- HTTP 200 with a JSON body means a registration exists → taken
- HTTP 429 → rate limited; anything else → indeterminate
"""

from typing import Optional
from urllib.parse import urlparse

import httpx

from .enums import ProviderErrorCode, ProviderName
from .models import AvailabilityResult
from .normalizer import extension_of
from .provider import HTTPProvider


class RDAPProvider(HTTPProvider):
    """Registry lookup over RDAP with HTTPS-only endpoints."""

    name = ProviderName.RDAP

    def get_endpoint(self, domain: str) -> Optional[str]:
        """Return the RDAP base URL configured for the domain's extension."""
        return self._config.endpoints.get(extension_of(domain))

    def _endpoint_url(self, domain: str) -> str:
        endpoint = self.get_endpoint(domain)
        if endpoint is None:
            raise self._error(
                ProviderErrorCode.NO_ENDPOINT,
                f"No RDAP endpoint configured for extension: {extension_of(domain)}",
                {"domain": domain},
            )
        if urlparse(endpoint).scheme.lower() != "https":
            raise self._error(
                ProviderErrorCode.NETWORK_ERROR,
                f"RDAP endpoint must use HTTPS: {endpoint}",
                {"domain": domain, "endpoint": endpoint},
            )
        return f"{endpoint.rstrip('/')}/domain/{domain}"

    async def _lookup(self, client: httpx.AsyncClient, domain: str) -> AvailabilityResult:
        url = self._endpoint_url(domain)
        response = await client.get(
            url,
            headers={"Accept": "application/rdap+json, application/json"},
        )

        if response.status_code == 404:
            return self._available(domain)

        self._check_status(response, domain)

        if response.status_code == 200:
            # Body must parse; its fields are not inspected
            self._json(response, domain)
            return self._taken(domain)

        raise self._error(
            ProviderErrorCode.UNEXPECTED_STATUS,
            f"Unexpected HTTP status: {response.status_code}",
            {"domain": domain, "http_status_code": response.status_code, "url": url},
        )
