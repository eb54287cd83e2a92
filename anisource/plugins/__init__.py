"""
Provider Layer - Scraping providers for anime streaming sites.

This package contains the host-facing provider interface, the shared
scraping machinery and the individual site implementations.
"""

from anisource.plugins.base import AnimeProvider, BaseProvider, FetchResult, ProviderMetadata
from anisource.plugins.common import (
    ExtractedVideo,
    HTMLParser,
    VideoSourceExtractor,
    detect_quality,
    detect_video_type,
    resolve_url,
)

__all__ = [
    # Provider Architecture
    "AnimeProvider",
    "BaseProvider",
    "FetchResult",
    "ProviderMetadata",
    # Provider Development Utilities
    "ExtractedVideo",
    "HTMLParser",
    "VideoSourceExtractor",
    "detect_quality",
    "detect_video_type",
    "resolve_url",
]
