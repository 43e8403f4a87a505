"""
Exception classes for the domain resolver.

All exceptions inherit from DomainResolverError and carry a machine-readable
code, a human-readable message and optional structured details.
"""

from typing import Optional

from .enums import ErrorKind


class DomainResolverError(Exception):
    """Base exception for all domain resolver errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainResolverError):
    """Raised when caller input cannot be used."""

    pass


class ConfigurationError(DomainResolverError):
    """Raised when configuration values are invalid or incomplete."""

    pass


class ProviderError(DomainResolverError):
    """
    Raised by a provider whose answer is indeterminate.

    Covers timeouts, connection failures, unexpected status codes and
    responses that cannot be parsed. The resolver counts the attempt against
    the provider's quota and moves on to the next provider.
    """

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(
        self,
        provider: str,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.provider = provider
        super().__init__(code=code, message=message, details=details)


class RateLimitedError(ProviderError):
    """Raised when the upstream explicitly rejected the call (HTTP 429 and friends)."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, provider: str, message: str, details: Optional[dict] = None) -> None:
        super().__init__(
            provider=provider,
            code=ErrorKind.RATE_LIMITED.value,
            message=message,
            details=details,
        )


class ConfigurationMissingError(ProviderError):
    """Raised when a provider is asked to run without its credentials."""

    kind = ErrorKind.CONFIGURATION_MISSING

    def __init__(self, provider: str, setting: str) -> None:
        super().__init__(
            provider=provider,
            code=ErrorKind.CONFIGURATION_MISSING.value,
            message=f"{provider} is not configured: {setting} is missing",
            details={"setting": setting},
        )
