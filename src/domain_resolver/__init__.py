"""
Domain Resolver - multi-provider domain availability engine.

This package resolves batches of candidate names to available/taken using
RDAP, WHOIS and commercial status providers, with per-provider quotas, a
short-lived result cache and paced concurrent batches.
"""

__version__ = "0.1.0"

from domain_resolver.exceptions import (
    DomainResolverError,
    ValidationError,
    ConfigurationError,
    ProviderError,
    RateLimitedError,
    ConfigurationMissingError,
)
from domain_resolver.enums import (
    ProviderName,
    ErrorKind,
    ProviderErrorCode,
    LogLevel,
)
from domain_resolver.config import (
    ProviderConfig,
    CacheConfig,
    BatchConfig,
    LoggingConfig,
    ResolverConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from domain_resolver.models import (
    AvailabilityResult,
    ProviderQuota,
    CacheEntry,
)
from domain_resolver.normalizer import normalize, is_blank
from domain_resolver.quota import QuotaTracker, QuotaReservation
from domain_resolver.cache import ResultCache
from domain_resolver.audit_logger import AuditLogger, LogEntry
from domain_resolver.provider import Provider, HTTPProvider
from domain_resolver.rdap_provider import RDAPProvider
from domain_resolver.whois_provider import WHOISProvider
from domain_resolver.domainr_provider import DomainrProvider
from domain_resolver.whoisxml_provider import WhoisXMLProvider
from domain_resolver.resolver import FallbackResolver
from domain_resolver.batch_scheduler import BatchScheduler
from domain_resolver.engine import AvailabilityEngine, build_provider

__all__ = [
    # Exceptions
    "DomainResolverError",
    "ValidationError",
    "ConfigurationError",
    "ProviderError",
    "RateLimitedError",
    "ConfigurationMissingError",
    # Enums
    "ProviderName",
    "ErrorKind",
    "ProviderErrorCode",
    "LogLevel",
    # Configuration
    "ProviderConfig",
    "CacheConfig",
    "BatchConfig",
    "LoggingConfig",
    "ResolverConfig",
    "create_default_config",
    "load_config_from_env",
    "load_config_from_file",
    "save_config_to_file",
    # Models
    "AvailabilityResult",
    "ProviderQuota",
    "CacheEntry",
    # Normalizer
    "normalize",
    "is_blank",
    # Quotas and cache
    "QuotaTracker",
    "QuotaReservation",
    "ResultCache",
    # Logging
    "AuditLogger",
    "LogEntry",
    # Providers
    "Provider",
    "HTTPProvider",
    "RDAPProvider",
    "WHOISProvider",
    "DomainrProvider",
    "WhoisXMLProvider",
    # Resolution
    "FallbackResolver",
    "BatchScheduler",
    "AvailabilityEngine",
    "build_provider",
]
