"""
Domainr commercial status provider (via RapidAPI).

Domainr reports coarse, space-separated status words per domain, e.g.
``"active"``, ``"undelegated inactive"`` or ``"unknown"``. A name whose
status includes ``inactive`` or ``unknown`` is reported as available.
"""

import httpx

from .enums import ProviderErrorCode, ProviderName
from .models import AvailabilityResult
from .provider import HTTPProvider


RAPIDAPI_HOST = "domainr.p.rapidapi.com"


class DomainrProvider(HTTPProvider):
    """Commercial status lookup."""

    name = ProviderName.DOMAINR
    credential_setting = "DOMAINR_API_KEY"

    AVAILABLE_STATUSES = frozenset({"inactive", "unknown"})

    async def _lookup(self, client: httpx.AsyncClient, domain: str) -> AvailabilityResult:
        response = await client.get(
            f"{self._config.base_url.rstrip('/')}/v2/status",
            params={"domain": domain},
            headers={
                "X-RapidAPI-Key": self._config.api_key,
                "X-RapidAPI-Host": RAPIDAPI_HOST,
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
        statuses = data.get("status") if isinstance(data, dict) else None
        if not isinstance(statuses, list) or not statuses or not isinstance(statuses[0], dict):
            raise self._error(
                ProviderErrorCode.PARSE_ERROR,
                "Invalid response from Domainr API",
                {"domain": domain},
            )

        status = str(statuses[0].get("status", ""))
        if self.AVAILABLE_STATUSES.intersection(status.lower().split()):
            return self._available(domain)
        return self._taken(domain)
