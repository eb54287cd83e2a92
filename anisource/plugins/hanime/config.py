"""
Hanime Configuration - Provider-specific defaults.

This module holds the domain list, endpoint templates and configuration
model for the hanime1.me provider.
"""

from typing import List

from pydantic import Field

from anisource.core.config_schemas import ProviderConfig


HANIME_BASE_URL = "https://hanime1.me"
HANIME_FALLBACK_URLS = ["https://hanime.tv", "https://hanime1.tv"]

HANIME_SERVERS = ["default", "backup"]

# Guessed JSON endpoints; {id} is the episode slug.
HANIME_API_ENDPOINTS = [
    "/api/video/{id}",
    "/api/v1/videos/{id}",
    "/video/{id}/sources",
]


class HanimeConfig(ProviderConfig):
    """Configuration model for the hanime provider."""

    base_url: str = Field(default=HANIME_BASE_URL, description="Primary site URL")
    fallback_urls: List[str] = Field(
        default_factory=lambda: list(HANIME_FALLBACK_URLS),
        description="Mirror domains tried in order when the primary fails"
    )
    accept_language: str = Field(default="en-US,en;q=0.5", description="Accept-Language header")
    api_endpoints: List[str] = Field(
        default_factory=lambda: list(HANIME_API_ENDPOINTS),
        description="Guessed source API endpoint templates"
    )

__all__ = [
    "HanimeConfig",
    "HANIME_BASE_URL",
    "HANIME_FALLBACK_URLS",
    "HANIME_SERVERS",
    "HANIME_API_ENDPOINTS",
]
