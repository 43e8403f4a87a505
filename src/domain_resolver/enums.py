"""
Enumeration types for the domain resolver.

These enums provide type-safe constants for provider names, error kinds,
provider error codes and log levels.
"""

from enum import Enum


class ProviderName(Enum):
    """Lookup providers known to the resolver, in default cascade order."""

    RDAP = "rdap"
    WHOIS = "whois"
    DOMAINR = "domainr"
    WHOISXML = "whoisxml"


class ErrorKind(Enum):
    """Classification of a failed lookup."""

    RATE_LIMITED = "rate_limited"
    PROVIDER_ERROR = "provider_error"
    ALL_PROVIDERS_FAILED = "all_providers_failed"
    CONFIGURATION_MISSING = "configuration_missing"


class ProviderErrorCode(Enum):
    """Detail codes carried by ProviderError."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"
    SERVER_ERROR = "server_error"
    UNEXPECTED_STATUS = "unexpected_status"
    NO_ENDPOINT = "no_endpoint"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}
