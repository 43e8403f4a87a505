"""
WhoisXML API provider.

Queries the WhoisService JSON endpoint. A record without a registry creation
date is reported as available.
"""

import httpx

from .enums import ProviderErrorCode, ProviderName
from .models import AvailabilityResult
from .provider import HTTPProvider


class WhoisXMLProvider(HTTPProvider):
    """WHOIS lookup through the WhoisXML JSON API."""

    name = ProviderName.WHOISXML
    credential_setting = "WHOIS_API_KEY"

    async def _lookup(self, client: httpx.AsyncClient, domain: str) -> AvailabilityResult:
        response = await client.get(
            self._config.base_url,
            params={
                "apiKey": self._config.api_key,
                "domainName": domain,
                "outputFormat": "JSON",
            },
        )

        self._check_status(response, domain)
        if response.status_code != 200:
            raise self._error(
                ProviderErrorCode.UNEXPECTED_STATUS,
                f"Unexpected HTTP status: {response.status_code}",
                {"domain": domain, "http_status_code": response.status_code},
            )

        data = self._json(response, domain)
        if not isinstance(data, dict):
            raise self._error(
                ProviderErrorCode.PARSE_ERROR,
                "Invalid response from WhoisXML API",
                {"domain": domain},
            )
        if "ErrorMessage" in data:
            raise self._error(
                ProviderErrorCode.SERVER_ERROR,
                f"WhoisXML API error: {data['ErrorMessage']}",
                {"domain": domain},
            )

        record = data.get("WhoisRecord")
        registry_data = record.get("registryData") if isinstance(record, dict) else None
        if isinstance(registry_data, dict) and registry_data.get("createdDate"):
            return self._taken(domain)
        return self._available(domain)
