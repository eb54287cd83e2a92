"""
Core Exceptions - Custom exception classes for AniSource.

This module defines the typed errors raised by the fetch, parse and
extraction layers. Provider entry points convert them into empty results
unless a provider is configured as strict.
"""

from typing import Optional, Any, List


class AniSourceError(Exception):
    """Base exception class for all AniSource-specific errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize AniSource error.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AniSourceError):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_path: Path to the problematic configuration file
            details: Additional error context
        """
        super().__init__(message, details)
        self.config_path = config_path


class ProviderError(AniSourceError):
    """Raised when a provider cannot complete an operation."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.provider_name = provider_name


class NetworkError(AniSourceError):
    """Raised when network-related errors occur."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Any] = None):
        """
        Initialize network error.

        Args:
            message: Error description
            url: URL that caused the error
            status_code: HTTP status code if applicable
            details: Additional error context
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class AllDomainsFailedError(NetworkError):
    """Raised when the primary domain and every fallback domain failed."""

    def __init__(self, endpoint: str, attempted: List[str], details: Optional[Any] = None):
        super().__init__(
            f"All domains failed for {endpoint}",
            url=endpoint,
            details=details
        )
        self.endpoint = endpoint
        self.attempted = list(attempted)


class ExtractionError(ProviderError):
    """Raised when no playable video source can be found on a page."""

    def __init__(self, message: str, url: Optional[str] = None, provider_name: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, provider_name, details)
        self.url = url


# Export all exception classes
__all__ = [
    "AniSourceError",
    "ConfigurationError",
    "ProviderError",
    "NetworkError",
    "AllDomainsFailedError",
    "ExtractionError",
]
