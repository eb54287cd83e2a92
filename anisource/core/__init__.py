"""
Core Layer - Host contract, configuration and shared services.

This module contains the data models, error hierarchy, cache and
configuration handling used by every provider. The provider registry lives
in ``anisource.core.plugin_manager``.
"""

from anisource.core.cache import TTLCache
from anisource.core.config_manager import ConfigManager
from anisource.core.config_schemas import ProviderConfig, SourceConfig, SourcesConfig
from anisource.core.exceptions import (
    AllDomainsFailedError,
    AniSourceError,
    ConfigurationError,
    ExtractionError,
    NetworkError,
    ProviderError,
)
from anisource.core.models import (
    EpisodeDetails,
    EpisodeServer,
    MediaInfo,
    SearchOptions,
    SearchResult,
    Settings,
    SubOrDub,
    VideoSource,
    VideoSourceType,
    VideoSubtitle,
)

__all__ = [
    # Data Models
    "EpisodeDetails",
    "EpisodeServer",
    "MediaInfo",
    "SearchOptions",
    "SearchResult",
    "Settings",
    "SubOrDub",
    "VideoSource",
    "VideoSourceType",
    "VideoSubtitle",
    # Configuration Management
    "ConfigManager",
    "ProviderConfig",
    "SourceConfig",
    "SourcesConfig",
    # Caching
    "TTLCache",
    # Exceptions
    "AniSourceError",
    "AllDomainsFailedError",
    "ConfigurationError",
    "ExtractionError",
    "NetworkError",
    "ProviderError",
]
