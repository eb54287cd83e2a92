"""
Base Provider Interface - Host contract and shared scraping machinery.

``AnimeProvider`` is the Python rendering of the host application's provider
interface. ``BaseProvider`` adds what both scrapers share: an aiohttp
session with spoofed browser headers, the multi-domain fallback fetcher, a
short-lived result cache and the policy that turns failures into empty
results at the public boundary.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Type, TypeVar
from urllib.parse import urljoin, urlparse

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from anisource.core.cache import TTLCache
from anisource.core.config_schemas import ProviderConfig
from anisource.core.exceptions import (
    AllDomainsFailedError,
    AniSourceError,
    ConfigurationError,
    NetworkError,
)
from anisource.core.models import EpisodeDetails, EpisodeServer, SearchOptions, SearchResult, Settings
from anisource.plugins.common.utils import resolve_url


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderMetadata(BaseModel):
    """Metadata information for a provider."""

    name: str = Field(..., description="Provider display name")
    version: str = Field(default="1.0.0", description="Provider version")
    author: str = Field(default="AniSource Team", description="Provider author")
    description: str = Field(default="", description="Provider description")
    website: Optional[str] = Field(None, description="Source website URL")
    supported_formats: List[str] = Field(
        default_factory=lambda: ["m3u8", "mp4"],
        description="Stream formats the provider can return"
    )


class FetchResult(NamedTuple):
    """Status and body of a single GET request."""

    status: int
    text: str
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class AnimeProvider(ABC):
    """Interface every provider exposes to the host application."""

    @abstractmethod
    def get_settings(self) -> Settings:
        """Static capabilities: server names and dub support."""

    @abstractmethod
    async def search(self, opts: SearchOptions) -> List[SearchResult]:
        """Find shows matching the host's search options."""

    @abstractmethod
    async def find_episodes(self, id: str) -> List[EpisodeDetails]:
        """List the episodes of a show."""

    @abstractmethod
    async def find_episode_server(self, episode: EpisodeDetails, server: str) -> EpisodeServer:
        """Resolve playable sources for one episode on one server."""


class BaseProvider(AnimeProvider):
    """
    Shared implementation for HTML-scraping providers.

    Subclasses set ``config_class`` and ``metadata`` and implement the four
    host operations using the fetch, cache and degrade helpers below.
    """

    config_class: Type[ProviderConfig] = ProviderConfig
    metadata: ProviderMetadata

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the provider with configuration.

        Args:
            config: Overrides merged over the provider's defaults

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        try:
            self.config = self.config_class(**(config or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {self.__class__.__name__} configuration: {e}")

        self.base_url = self.config.base_url
        self.cache = TTLCache(ttl=self.config.cache_ttl)
        self._session: Optional[aiohttp.ClientSession] = None

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def headers(self) -> Dict[str, str]:
        """Browser-like headers sent with every page request."""
        return {
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
            'Accept-Language': self.config.accept_language,
            'Referer': self.base_url,
        }

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def resolve_url(self, url: Optional[str]) -> str:
        """Make a scraped URL absolute against the working base URL."""
        return resolve_url(url, self.base_url)

    async def _fetch(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> FetchResult:
        """
        Issue one GET request.

        Raises:
            NetworkError: On transport failure or timeout
        """
        request_headers = {**self.headers, **(headers or {})}
        client_timeout = aiohttp.ClientTimeout(total=timeout or self.config.timeout)

        self.logger.debug(f"GET {url}")
        try:
            async with self.session.get(url, headers=request_headers, timeout=client_timeout) as response:
                text = await response.text(errors='replace')
                return FetchResult(response.status, text, str(response.url))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Request to {url} failed: {e!r}", url=url, details=str(e))

    async def request_with_fallback(self, endpoint: str, timeout: Optional[float] = None) -> str:
        """
        GET ``endpoint`` from the working domain, then each fallback domain.

        The first 2xx response wins and its domain becomes the working base
        URL. There are no retries beyond walking the domain list.

        Raises:
            AllDomainsFailedError: If every domain failed
        """
        candidates = list(dict.fromkeys([self.base_url, self.config.base_url, *self.config.fallback_urls]))

        for domain in candidates:
            url = f"{domain}{endpoint}"
            try:
                result = await self._fetch(url, headers={'Referer': domain}, timeout=timeout)
            except NetworkError as e:
                self.logger.warning(f"Failed to connect to {domain}, trying next... ({e})")
                continue

            if result.ok:
                if domain != self.base_url:
                    self.logger.info(f"Switching working domain to {domain}")
                self.base_url = domain
                return result.text

            self.logger.warning(f"{domain} returned HTTP {result.status}, trying next...")

        raise AllDomainsFailedError(endpoint, candidates)

    async def fetch_text(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        GET a single URL and return its body.

        Raises:
            NetworkError: On transport failure or a non-2xx status
        """
        if not urlparse(url).netloc:
            url = urljoin(self.base_url + '/', url.lstrip('/'))

        result = await self._fetch(url, headers=headers, timeout=timeout)
        if not result.ok:
            raise NetworkError(
                f"HTTP {result.status} error for {url}",
                url=url,
                status_code=result.status,
            )
        return result.text

    async def fetch_json(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """GET a single URL and decode it as JSON."""
        json_headers = {'Accept': 'application/json, text/plain, */*', **(headers or {})}
        text = await self.fetch_text(url, headers=json_headers, timeout=timeout)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise NetworkError(f"Invalid JSON from {url}: {e}", url=url, details=text[:200])

    async def cached(self, key: str, fetcher: Callable[[], Awaitable[T]]) -> T:
        """Serve ``key`` from the cache or compute and store it."""
        return await self.cache.get_or_fetch(key, fetcher)

    async def degrade(
        self,
        operation: str,
        work: Callable[[], Awaitable[T]],
        fallback: Callable[[], T],
        **context: Any,
    ) -> T:
        """
        Run ``work`` and turn failures into ``fallback()``.

        Failures are logged with ``context``. In strict mode the typed error
        propagates instead.
        """
        try:
            return await work()
        except AniSourceError as e:
            if self.config.strict:
                raise
            details = ", ".join(f"{key}={value!r}" for key, value in context.items())
            self.logger.error(f"[{self.name}] {operation} failed ({details}): {e}")
            return fallback()

    def clear_cache(self) -> None:
        """Drop all cached results."""
        self.cache.clear()

    def get_provider_info(self) -> Dict[str, Any]:
        """Describe the provider and its current state."""
        return {
            "name": self.metadata.name,
            "version": self.metadata.version,
            "base_url": self.base_url,
            "cache_size": len(self.cache),
            "supported_formats": list(self.metadata.supported_formats),
        }

    async def cleanup(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self.logger.debug("HTTP session closed")
        self._session = None

    async def __aenter__(self) -> "BaseProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.cleanup()

    def __str__(self) -> str:
        return f"{self.metadata.name} v{self.metadata.version}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url='{self.base_url}')"


# Export base provider classes and metadata
__all__ = ["AnimeProvider", "BaseProvider", "ProviderMetadata", "FetchResult"]
