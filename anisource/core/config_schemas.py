"""
Configuration Schemas - Pydantic models for configuration validation.

This module defines the data structures and validation rules for provider
settings and the on-disk sources file.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _normalize_base_url(value: str) -> str:
    value = value.strip()
    if not value.startswith(('http://', 'https://')):
        raise ValueError(f"URL must start with http:// or https://: {value}")
    return value.rstrip('/')


class ProviderConfig(BaseModel):
    """Settings shared by every scraping provider."""

    enabled: bool = Field(default=True, description="Whether the provider is enabled")
    base_url: str = Field(..., description="Primary site URL")
    fallback_urls: List[str] = Field(
        default_factory=list,
        description="Mirror domains tried in order when the primary fails"
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User agent string for requests")
    accept_language: str = Field(default="en-US,en;q=0.5", description="Accept-Language header")
    timeout: float = Field(default=10, gt=0, le=120, description="Page request timeout in seconds")
    server_timeout: float = Field(default=15, gt=0, le=120, description="Episode page timeout in seconds")
    api_timeout: float = Field(default=5, gt=0, le=60, description="Guessed API endpoint timeout in seconds")
    cache_ttl: float = Field(default=300, ge=0, le=3600, description="Result cache lifetime in seconds")
    search_limit: int = Field(default=20, ge=1, le=200, description="Maximum search results to return")
    max_iframe_depth: int = Field(default=2, ge=0, le=5, description="Nested iframe levels to follow")
    strict: bool = Field(
        default=False,
        description="Raise typed errors instead of returning empty results"
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL without trailing slash."""
        return _normalize_base_url(v)

    @field_validator('fallback_urls')
    @classmethod
    def validate_fallback_urls(cls, v: List[str]) -> List[str]:
        """Normalize mirrors and drop duplicates."""
        return list(dict.fromkeys(_normalize_base_url(url) for url in v))

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Validate user agent string."""
        if not v or len(v.strip()) < 10:
            raise ValueError("User agent must be a valid browser string")
        return v.strip()


class SourceConfig(BaseModel):
    """Configuration entry for one provider in sources.json."""

    enabled: bool = Field(default=True, description="Whether the source is enabled")
    name: Optional[str] = Field(default=None, description="Display name for the source")
    config: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific overrides merged over its defaults"
    )

    @field_validator('config')
    @classmethod
    def validate_config(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Reject obviously wrong common keys early."""
        for key in ('timeout', 'server_timeout', 'api_timeout', 'cache_ttl'):
            if key in v and not isinstance(v[key], (int, float)):
                raise ValueError(f"{key} must be a number")
        if 'fallback_urls' in v and not isinstance(v['fallback_urls'], list):
            raise ValueError("fallback_urls must be a list")
        return v


class SourcesConfig(BaseModel):
    """Sources configuration container."""

    sources: Dict[str, SourceConfig] = Field(
        default_factory=dict,
        description="Individual source configurations"
    )

    def get_enabled_sources(self) -> Dict[str, SourceConfig]:
        """Get all enabled sources."""
        return {name: config for name, config in self.sources.items() if config.enabled}

    def get_source(self, name: str) -> Optional[SourceConfig]:
        """Get configuration for a specific source."""
        return self.sources.get(name)


# Export all configuration models
__all__ = [
    "DEFAULT_USER_AGENT",
    "ProviderConfig",
    "SourceConfig",
    "SourcesConfig",
]
