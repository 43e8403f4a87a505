"""
Configuration dataclasses for the domain resolver.

This module defines the configuration structures used throughout the
resolver (providers, quotas, cache, batching and logging) and the loaders that
build them from the environment (``.env`` supported) or from a JSON file.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .enums import LogLevel, ProviderName
from .exceptions import ConfigurationError


DEFAULT_EXTENSION = "com"
DEFAULT_TIMEOUT_SECONDS = 5.0

HOUR = 60 * 60
DAY = 24 * HOUR

DEFAULT_RDAP_ENDPOINTS: dict[str, str] = {
    "com": "https://rdap.verisign.com/com/v1",
    "net": "https://rdap.verisign.com/net/v1",
    "org": "https://rdap.publicinterestregistry.org/rdap",
    "de": "https://rdap.denic.de",
    "eu": "https://rdap.eurid.eu",
}

DEFAULT_WHOIS_SERVERS: dict[str, str] = {
    "com": "whois.verisign-grs.com",
    "net": "whois.verisign-grs.com",
    "org": "whois.pir.org",
    "de": "whois.denic.de",
    "eu": "whois.eu",
    "io": "whois.nic.io",
    "co": "whois.nic.co",
}

DOMAINR_BASE_URL = "https://domainr.p.rapidapi.com"
WHOISXML_BASE_URL = "https://www.whoisxmlapi.com/whoisserver/WhoisService"

# Environment variables holding provider credentials
CREDENTIAL_ENV: dict[ProviderName, str] = {
    ProviderName.DOMAINR: "DOMAINR_API_KEY",
    ProviderName.WHOISXML: "WHOIS_API_KEY",
}

# (limit, window) per provider: cheap registry lookups get the most headroom,
# paid aggregators the least.
DEFAULT_QUOTAS: dict[ProviderName, tuple[int, float]] = {
    ProviderName.RDAP: (1000, HOUR),
    ProviderName.WHOIS: (500, DAY),
    ProviderName.DOMAINR: (100, DAY),
    ProviderName.WHOISXML: (50, DAY),
}

DEFAULT_PROVIDER_ORDER = [
    ProviderName.RDAP,
    ProviderName.WHOIS,
    ProviderName.DOMAINR,
    ProviderName.WHOISXML,
]

LOG_FORMATS = ("json", "text", "both")


@dataclass
class ProviderConfig:
    """Configuration for a single lookup provider."""

    name: ProviderName
    quota_limit: int
    quota_window_seconds: float
    enabled: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    endpoints: dict[str, str] = field(default_factory=dict)  # extension -> URL or host


@dataclass
class CacheConfig:
    """Result cache configuration."""

    ttl_seconds: float = 300.0


@dataclass
class BatchConfig:
    """Batch scheduling configuration."""

    batch_size: int = 3
    delay_seconds: float = 2.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class ResolverConfig:
    """Main configuration combining all sub-configurations."""

    providers: list[ProviderConfig]
    cache: CacheConfig = field(default_factory=CacheConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extension: str = DEFAULT_EXTENSION
    encode_idn: bool = False

    def provider(self, name: ProviderName) -> Optional[ProviderConfig]:
        """Return the configuration for ``name`` if present."""
        for provider_config in self.providers:
            if provider_config.name == name:
                return provider_config
        return None

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigurationError: If any value is out of range
        """
        seen: set[ProviderName] = set()
        for provider_config in self.providers:
            name = provider_config.name.value
            if provider_config.name in seen:
                raise ConfigurationError(
                    code="duplicate_provider",
                    message=f"Provider configured twice: {name}",
                    details={"provider": name},
                )
            seen.add(provider_config.name)
            if provider_config.quota_limit < 0:
                raise ConfigurationError(
                    code="invalid_quota",
                    message=f"Quota limit for {name} must not be negative",
                    details={"provider": name, "quota_limit": provider_config.quota_limit},
                )
            if provider_config.quota_window_seconds <= 0:
                raise ConfigurationError(
                    code="invalid_window",
                    message=f"Quota window for {name} must be positive",
                    details={
                        "provider": name,
                        "quota_window_seconds": provider_config.quota_window_seconds,
                    },
                )
            if provider_config.timeout_seconds <= 0:
                raise ConfigurationError(
                    code="invalid_timeout",
                    message=f"Timeout for {name} must be positive",
                    details={"provider": name, "timeout_seconds": provider_config.timeout_seconds},
                )

        if self.batch.batch_size < 1:
            raise ConfigurationError(
                code="invalid_batch_size",
                message="Batch size must be at least 1",
                details={"batch_size": self.batch.batch_size},
            )
        if self.batch.delay_seconds < 0:
            raise ConfigurationError(
                code="invalid_batch_delay",
                message="Batch delay must not be negative",
                details={"delay_seconds": self.batch.delay_seconds},
            )
        if self.cache.ttl_seconds < 0:
            raise ConfigurationError(
                code="invalid_ttl",
                message="Cache TTL must not be negative",
                details={"ttl_seconds": self.cache.ttl_seconds},
            )
        if not self.extension or not self.extension.isalnum():
            raise ConfigurationError(
                code="invalid_extension",
                message=f"Invalid domain extension: {self.extension!r}",
                details={"extension": self.extension},
            )
        if str(self.logging.level).lower() not in {level.value for level in LogLevel}:
            raise ConfigurationError(
                code="invalid_log_level",
                message=f"Unknown log level: {self.logging.level!r}",
                details={"level": self.logging.level},
            )
        if self.logging.output_format not in LOG_FORMATS:
            raise ConfigurationError(
                code="invalid_log_format",
                message=f"Unknown log format: {self.logging.output_format!r}",
                details={"output_format": self.logging.output_format},
            )


def default_provider_config(name: ProviderName) -> ProviderConfig:
    """Build the default configuration for one provider."""
    limit, window = DEFAULT_QUOTAS[name]
    provider_config = ProviderConfig(
        name=name,
        quota_limit=limit,
        quota_window_seconds=window,
    )
    if name == ProviderName.RDAP:
        provider_config.endpoints = dict(DEFAULT_RDAP_ENDPOINTS)
    elif name == ProviderName.WHOIS:
        provider_config.endpoints = dict(DEFAULT_WHOIS_SERVERS)
    elif name == ProviderName.DOMAINR:
        provider_config.base_url = DOMAINR_BASE_URL
    elif name == ProviderName.WHOISXML:
        provider_config.base_url = WHOISXML_BASE_URL
    return provider_config


def create_default_config() -> ResolverConfig:
    """
    Create a default configuration.

    Credentialed providers are included without keys, which leaves them
    permanently skipped until a key is supplied.
    """
    return ResolverConfig(
        providers=[default_provider_config(name) for name in DEFAULT_PROVIDER_ORDER],
    )


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_provider_order(value: str) -> list[ProviderName]:
    order: list[ProviderName] = []
    for chunk in value.replace(";", ",").split(","):
        token = chunk.strip().lower()
        if not token:
            continue
        try:
            name = ProviderName(token)
        except ValueError:
            raise ConfigurationError(
                code="unknown_provider",
                message=f"Unknown provider in RESOLVER_PROVIDERS: {token}",
                details={"provider": token},
            )
        if name not in order:
            order.append(name)
    return order


def load_config_from_env(env_file: Optional[Path] = None) -> ResolverConfig:
    """
    Build a configuration from environment variables.

    A ``.env`` file is loaded first, ``env_file`` or else the nearest one
    above the working directory (existing variables win). Recognised
    variables: ``RESOLVER_PROVIDERS``, ``RESOLVER_EXTENSION``,
    ``RESOLVER_ENCODE_IDN``, ``RESOLVER_CACHE_TTL``, ``RESOLVER_BATCH_SIZE``,
    ``RESOLVER_BATCH_DELAY``, ``LOG_LEVEL``, ``LOG_FORMAT``, the provider
    credentials ``DOMAINR_API_KEY`` and ``WHOIS_API_KEY``, and per provider
    ``<NAME>_ENABLED``, ``<NAME>_QUOTA_LIMIT``, ``<NAME>_QUOTA_WINDOW``,
    ``<NAME>_TIMEOUT`` (e.g. ``RDAP_QUOTA_LIMIT``).

    Args:
        env_file: Optional explicit path to a .env file

    Returns:
        ResolverConfig built from the environment

    Raises:
        ConfigurationError: If the resulting configuration is invalid
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    order_value = os.getenv("RESOLVER_PROVIDERS", "")
    order = _parse_provider_order(order_value) if order_value.strip() else list(DEFAULT_PROVIDER_ORDER)

    providers: list[ProviderConfig] = []
    for name in order:
        provider_config = default_provider_config(name)
        prefix = name.value.upper()
        provider_config.enabled = _bool_env(f"{prefix}_ENABLED", True)
        provider_config.quota_limit = _int_env(f"{prefix}_QUOTA_LIMIT", provider_config.quota_limit)
        provider_config.quota_window_seconds = _float_env(
            f"{prefix}_QUOTA_WINDOW", provider_config.quota_window_seconds
        )
        provider_config.timeout_seconds = _float_env(
            f"{prefix}_TIMEOUT", provider_config.timeout_seconds
        )
        if name in CREDENTIAL_ENV:
            provider_config.api_key = os.getenv(CREDENTIAL_ENV[name], "").strip() or None
        providers.append(provider_config)

    config = ResolverConfig(
        providers=providers,
        cache=CacheConfig(ttl_seconds=_float_env("RESOLVER_CACHE_TTL", 300.0)),
        batch=BatchConfig(
            batch_size=_int_env("RESOLVER_BATCH_SIZE", 3),
            delay_seconds=_float_env("RESOLVER_BATCH_DELAY", 2.0),
        ),
        logging=LoggingConfig(
            level=(os.getenv("LOG_LEVEL", "info") or "info").lower(),
            output_format=(os.getenv("LOG_FORMAT", "text") or "text").lower(),
        ),
        extension=(os.getenv("RESOLVER_EXTENSION", DEFAULT_EXTENSION) or DEFAULT_EXTENSION)
        .strip()
        .lstrip(".")
        .lower(),
        encode_idn=_bool_env("RESOLVER_ENCODE_IDN", False),
    )
    config.validate()
    return config


def config_to_dict(config: ResolverConfig) -> dict:
    """
    Serialize a configuration to plain JSON types.

    API keys are never written; credentials come from the environment.
    """
    return {
        "providers": [
            {
                "name": provider_config.name.value,
                "enabled": provider_config.enabled,
                "quota_limit": provider_config.quota_limit,
                "quota_window_seconds": provider_config.quota_window_seconds,
                "timeout_seconds": provider_config.timeout_seconds,
                "base_url": provider_config.base_url,
                "endpoints": dict(provider_config.endpoints),
            }
            for provider_config in config.providers
        ],
        "cache": {"ttl_seconds": config.cache.ttl_seconds},
        "batch": {
            "batch_size": config.batch.batch_size,
            "delay_seconds": config.batch.delay_seconds,
        },
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
        "extension": config.extension,
        "encode_idn": config.encode_idn,
    }


def config_from_dict(data: dict) -> ResolverConfig:
    """
    Build a configuration from the structure written by ``config_to_dict``.

    Missing provider fields fall back to that provider's defaults; missing
    API keys are read from the environment.

    Raises:
        ConfigurationError: If the data is malformed or out of range
    """
    try:
        providers: list[ProviderConfig] = []
        for provider_data in data.get("providers", []):
            name = ProviderName(provider_data["name"])
            defaults = default_provider_config(name)
            api_key = provider_data.get("api_key")
            if api_key is None and name in CREDENTIAL_ENV:
                api_key = os.getenv(CREDENTIAL_ENV[name], "").strip() or None
            providers.append(ProviderConfig(
                name=name,
                quota_limit=int(provider_data.get("quota_limit", defaults.quota_limit)),
                quota_window_seconds=float(
                    provider_data.get("quota_window_seconds", defaults.quota_window_seconds)
                ),
                enabled=bool(provider_data.get("enabled", True)),
                timeout_seconds=float(
                    provider_data.get("timeout_seconds", defaults.timeout_seconds)
                ),
                api_key=api_key,
                base_url=provider_data.get("base_url", defaults.base_url),
                endpoints=dict(provider_data.get("endpoints") or defaults.endpoints),
            ))

        if not providers:
            providers = create_default_config().providers

        cache_data = data.get("cache", {})
        batch_data = data.get("batch", {})
        logging_data = data.get("logging", {})

        config = ResolverConfig(
            providers=providers,
            cache=CacheConfig(ttl_seconds=float(cache_data.get("ttl_seconds", 300.0))),
            batch=BatchConfig(
                batch_size=int(batch_data.get("batch_size", 3)),
                delay_seconds=float(batch_data.get("delay_seconds", 2.0)),
            ),
            logging=LoggingConfig(
                level=logging_data.get("level", "info"),
                output_format=logging_data.get("output_format", "text"),
            ),
            extension=data.get("extension", DEFAULT_EXTENSION),
            encode_idn=bool(data.get("encode_idn", False)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(
            code="malformed_config",
            message=f"Malformed configuration: {e}",
            details={"error": str(e)},
        )

    config.validate()
    return config


def load_config_from_file(config_path: Path) -> Optional[ResolverConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        ResolverConfig, or None if the file does not exist

    Raises:
        ConfigurationError: If the file is not valid JSON or not a valid config
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            code="invalid_json",
            message=f"Configuration file is not valid JSON: {e}",
            details={"path": str(config_path)},
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            code="malformed_config",
            message="Configuration file must contain a JSON object",
            details={"path": str(config_path)},
        )
    return config_from_dict(data)


def save_config_to_file(config: ResolverConfig, config_path: Path) -> None:
    """
    Save configuration to a JSON file, creating parent directories.

    Raises:
        OSError: If the file cannot be written
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_to_dict(config), f, indent=2, ensure_ascii=False)
