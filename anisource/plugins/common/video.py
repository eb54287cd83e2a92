"""
Video Source Extraction - Heuristic stream URL discovery for episode pages.

Runs an ordered chain of best-effort strategies against an episode page:
inline video tags, inline script patterns, JSON-LD structured data, guessed
JSON API endpoints and finally embedded iframes, which are fetched and
re-scanned with the same strategies. The first strategy that produces a URL
wins.
"""

import json
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Pattern, Sequence, Set

from bs4 import BeautifulSoup

from anisource.core.exceptions import AniSourceError
from anisource.core.models import VideoSubtitle
from anisource.plugins.common.utils import HTMLParser, detect_quality, resolve_url


logger = logging.getLogger(__name__)


TextFetcher = Callable[..., Awaitable[str]]
JsonFetcher = Callable[..., Awaitable[Any]]

MEDIA_EXTENSIONS = ('.m3u8', '.mp4', '.mkv', '.webm', '.flv')

VIDEO_TAG_SELECTORS = [
    'video source[type*="mpegurl"]',
    'video source[src*="m3u8"]',
    'video source[src]',
    'video[src]',
]

# Bare <source> tags also appear in <picture> and <audio>, so only media URLs count.
BARE_SOURCE_SELECTOR = 'source[src]'

# Raw attribute scan for direct media links anywhere in the markup.
ATTRIBUTE_PATTERN = re.compile(
    r'(?:src|source)=["\']([^"\']+\.(?:mp4|m3u8|flv)[^"\']*)["\']',
    re.IGNORECASE
)

DEFAULT_SCRIPT_PATTERNS: List[Pattern[str]] = [
    re.compile(r'["\']([^"\'\s]*\.m3u8[^"\'\s]*)["\']'),
    re.compile(r'videoUrl["\s]*[:=]["\s]*["\']([^"\']+)["\']'),
    re.compile(r'src["\s]*:["\s]*["\']([^"\']+\.(?:m3u8|mp4)[^"\']*)["\']'),
    re.compile(r'(?:url|source|file)["\']?\s*:\s*["\']([^"\']+\.(?:mp4|m3u8|flv)[^"\']*)["\']', re.IGNORECASE),
    re.compile(r'file["\s]*:["\s]*["\']([^"\']+)["\']'),
    re.compile(r'config\s*=\s*\{[^}]*(?:url|src|source|file)["\']?\s*:\s*["\']([^"\']+)["\']', re.IGNORECASE),
]

API_URL_KEYS = ('videoUrl', 'src', 'url', 'source')


@dataclass
class ExtractedVideo:
    """A stream URL found on a page, with whatever metadata came along."""

    url: str
    quality: str = "auto"
    method: str = ""
    subtitles: List[VideoSubtitle] = field(default_factory=list)


def _looks_like_media(url: str) -> bool:
    lowered = url.lower().split('?')[0]
    return lowered.endswith(MEDIA_EXTENSIONS) or 'm3u8' in url.lower()


class VideoSourceExtractor:
    """Resolve a playable stream URL from an episode page."""

    def __init__(
        self,
        fetch_text: TextFetcher,
        fetch_json: Optional[JsonFetcher] = None,
        api_endpoints: Sequence[str] = (),
        script_patterns: Sequence[Pattern[str]] = tuple(DEFAULT_SCRIPT_PATTERNS),
        max_iframe_depth: int = 2,
        api_timeout: float = 5,
    ):
        """
        Initialize the extractor.

        Args:
            fetch_text: Coroutine ``(url, headers=None, timeout=None) -> str``
                used to load iframe pages
            fetch_json: Coroutine with the same signature returning parsed
                JSON, used for guessed API endpoints
            api_endpoints: URL templates with an ``{id}`` placeholder
            script_patterns: Ordered regexes applied to inline scripts;
                group 1 must capture the URL
            max_iframe_depth: How many nested iframe levels to follow
            api_timeout: Timeout for each guessed API request
        """
        self.fetch_text = fetch_text
        self.fetch_json = fetch_json
        self.api_endpoints = list(api_endpoints)
        self.script_patterns = list(script_patterns)
        self.max_iframe_depth = max_iframe_depth
        self.api_timeout = api_timeout

    async def extract(
        self,
        html: str,
        page_url: str,
        episode_id: Optional[str] = None,
    ) -> Optional[ExtractedVideo]:
        """
        Run the full strategy chain against an episode page.

        Args:
            html: Episode page HTML
            page_url: URL the HTML was loaded from
            episode_id: Identifier substituted into API endpoint templates

        Returns:
            The first video found, or None
        """
        parser = HTMLParser(html)
        subtitles = self.extract_subtitles(parser.soup, page_url)

        found = self._scan_static(parser.soup, html, page_url)

        if found is None and episode_id and self.api_endpoints:
            found = await self._from_api(episode_id, page_url)

        if found is None:
            found = await self._from_iframes(parser.soup, page_url, depth=1, visited={page_url})

        if found is None:
            logger.debug(f"No video source found on {page_url}")
            return None

        if not found.subtitles:
            found.subtitles = subtitles
        logger.debug(f"Resolved video via {found.method}: {found.url}")
        return found

    def _scan_static(self, soup: BeautifulSoup, html: str, page_url: str) -> Optional[ExtractedVideo]:
        """Strategies that need nothing but the page itself."""
        for method, strategy in (
            ("video_tag", lambda: self.from_video_tags(soup, html)),
            ("script", lambda: self.from_scripts(soup)),
            ("json_ld", lambda: self.from_json_ld(soup)),
        ):
            raw_url = strategy()
            if raw_url:
                url = resolve_url(raw_url, page_url)
                return ExtractedVideo(url=url, quality=detect_quality(url), method=method)
        return None

    def from_video_tags(self, soup: BeautifulSoup, html: str = "") -> str:
        """Inline ``<video>`` / ``<source>`` tags, then raw media attributes."""
        for selector in VIDEO_TAG_SELECTORS:
            for element in soup.select(selector):
                src = HTMLParser.attr(element, 'src')
                if src:
                    return src

        for element in soup.select(BARE_SOURCE_SELECTOR):
            src = HTMLParser.attr(element, 'src')
            if src and _looks_like_media(src):
                return src

        match = ATTRIBUTE_PATTERN.search(html)
        if match:
            return match.group(1)
        return ""

    def from_scripts(self, soup: BeautifulSoup) -> str:
        """Regex scan of inline scripts in document order, patterns tried in priority order per script."""
        contents = [
            script.string or script.get_text()
            for script in soup.find_all('script')
            if HTMLParser.attr(script, 'type') != 'application/ld+json'
        ]
        contents = [content for content in contents if content]

        for content in contents:
            for pattern in self.script_patterns:
                match = pattern.search(content)
                if match and match.group(1).strip():
                    return match.group(1).strip()
        return ""

    def from_json_ld(self, soup: BeautifulSoup) -> str:
        """Structured ``application/ld+json`` video metadata."""
        for script in soup.select('script[type="application/ld+json"]'):
            content = script.string or script.get_text()
            if not content:
                continue
            try:
                data = json.loads(content)
            except json.JSONDecodeError:
                logger.debug("Failed to parse JSON-LD")
                continue

            url = self._url_from_json_ld(data)
            if url:
                return url
        return ""

    def _url_from_json_ld(self, data: Any) -> str:
        if isinstance(data, list):
            for item in data:
                url = self._url_from_json_ld(item)
                if url:
                    return url
            return ""
        if not isinstance(data, dict):
            return ""
        if '@graph' in data:
            return self._url_from_json_ld(data['@graph'])

        video = data.get('video')
        if isinstance(video, list):
            video = video[0] if video else None
        if isinstance(video, dict) and video.get('contentUrl'):
            return video['contentUrl']

        for key in ('contentUrl', 'embedUrl'):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]

        url = data.get('url')
        if isinstance(url, str) and _looks_like_media(url):
            return url
        return ""

    async def _from_api(self, episode_id: str, page_url: str) -> Optional[ExtractedVideo]:
        """Try guessed JSON endpoints that might expose the stream."""
        if self.fetch_json is None:
            return None

        for template in self.api_endpoints:
            endpoint = template.format(id=episode_id)
            try:
                data = await self.fetch_json(endpoint, timeout=self.api_timeout)
            except AniSourceError as e:
                logger.debug(f"API endpoint {endpoint} failed: {e}")
                continue

            if not isinstance(data, dict):
                continue

            raw_url = next((data[key] for key in API_URL_KEYS if isinstance(data.get(key), str) and data[key]), "")
            if not raw_url:
                continue

            url = resolve_url(raw_url, page_url)
            quality = str(data['quality']) if data.get('quality') else detect_quality(url)
            return ExtractedVideo(url=url, quality=quality, method="api")

        return None

    async def _from_iframes(
        self,
        soup: BeautifulSoup,
        page_url: str,
        depth: int,
        visited: Set[str],
    ) -> Optional[ExtractedVideo]:
        """Fetch embedded players and re-scan them."""
        if depth > self.max_iframe_depth:
            return None

        for iframe in soup.find_all('iframe'):
            src = HTMLParser.attr(iframe, 'src') or HTMLParser.attr(iframe, 'data-src')
            if not src or src.startswith(('about:', 'javascript:')):
                continue

            iframe_url = resolve_url(src, page_url)
            if iframe_url in visited:
                continue
            visited.add(iframe_url)

            try:
                iframe_html = await self.fetch_text(iframe_url, headers={'Referer': page_url})
            except AniSourceError as e:
                logger.warning(f"Could not load iframe {iframe_url}: {e}")
                continue

            iframe_soup = BeautifulSoup(iframe_html or "", 'html.parser')
            found = self._scan_static(iframe_soup, iframe_html or "", iframe_url)
            if found is None:
                found = await self._from_iframes(iframe_soup, iframe_url, depth + 1, visited)

            if found is not None:
                found.method = f"iframe:{found.method}"
                if not found.subtitles:
                    found.subtitles = self.extract_subtitles(iframe_soup, iframe_url)
                return found

        return None

    def extract_subtitles(self, soup: BeautifulSoup, page_url: str) -> List[VideoSubtitle]:
        """Collect subtitle tracks declared on the page."""
        subtitles: List[VideoSubtitle] = []
        seen: Set[str] = set()

        for element in soup.select('track[kind="subtitles"], .subtitle-track'):
            src = HTMLParser.attr(element, 'src')
            if not src:
                continue
            url = resolve_url(src, page_url)
            if url in seen:
                continue
            seen.add(url)

            language = HTMLParser.attr(element, 'srclang') or HTMLParser.attr(element, 'data-lang') or 'en'
            subtitles.append(VideoSubtitle(
                url=url,
                language=language,
                label=HTMLParser.attr(element, 'label') or language.upper(),
                is_default=element.has_attr('default'),
            ))

        return subtitles


__all__ = [
    "ExtractedVideo",
    "VideoSourceExtractor",
    "DEFAULT_SCRIPT_PATTERNS",
    "VIDEO_TAG_SELECTORS",
]
