"""
Yhdm Configuration - Provider-specific defaults for yhdm.one
"""

from typing import List

from pydantic import Field

from anisource.core.config_schemas import ProviderConfig


YHDM_BASE_URL = "https://yhdm.one"

YHDM_SERVERS = ["默认播放器", "备用播放器"]

# Results returned from the latest-updates page when search finds nothing
CATEGORY_FALLBACK_LIMIT = 5


class YhdmConfig(ProviderConfig):
    """Configuration model for the yhdm provider."""

    base_url: str = Field(default=YHDM_BASE_URL, description="Primary site URL")
    fallback_urls: List[str] = Field(
        default_factory=list,
        description="Mirror domains tried in order when the primary fails"
    )
    accept_language: str = Field(
        default="zh-CN,zh;q=0.8,en-US;q=0.5,en;q=0.3",
        description="Accept-Language header"
    )
    category_limit: int = Field(
        default=CATEGORY_FALLBACK_LIMIT,
        ge=1,
        le=50,
        description="Results taken from the latest page when search is empty"
    )

__all__ = [
    "YhdmConfig",
    "YHDM_BASE_URL",
    "YHDM_SERVERS",
    "CATEGORY_FALLBACK_LIMIT",
]
