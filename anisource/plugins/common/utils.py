"""
Plugin Utilities - Common helpers for provider development.

HTML access, URL resolution, video type and quality detection and the title
matching helpers shared by the providers.
"""

import re
from typing import Any, Iterable, List, Optional, Sequence
from urllib.parse import urljoin, urlparse, parse_qs

from bs4 import BeautifulSoup, Tag

from anisource.core.models import VideoSourceType


class HTMLParser:
    """Utility class for HTML parsing operations."""

    def __init__(self, html_content: str):
        """
        Initialize HTML parser.

        Args:
            html_content: HTML content to parse
        """
        self.soup = BeautifulSoup(html_content or "", 'html.parser')

    @staticmethod
    def attr(element: Tag, name: str) -> str:
        """Read an attribute as a string, flattening BeautifulSoup list values."""
        value = element.get(name)
        if isinstance(value, list):
            value = value[0] if value else ""
        return value or ""

    @staticmethod
    def first_text(element: Tag, selectors: Sequence[str]) -> str:
        """Return stripped text of the first selector that yields non-empty text."""
        for selector in selectors:
            found = element.select_one(selector)
            if found:
                text = found.get_text(strip=True)
                if text:
                    return text
        return ""

    @classmethod
    def first_attr(cls, element: Tag, selectors: Sequence[str], attrs: Sequence[str]) -> str:
        """Return the first non-empty attribute among matching elements."""
        for selector in selectors:
            found = element.select_one(selector)
            if not found:
                continue
            for name in attrs:
                value = cls.attr(found, name)
                if value:
                    return value
        return ""

def resolve_url(url: Optional[str], base_url: str) -> str:
    """
    Make a scraped URL absolute.

    Protocol-relative URLs get https, root-relative URLs use the origin of
    ``base_url`` and anything else is joined against it.
    """
    if not url:
        return ""
    url = url.strip()
    if url.startswith(('http://', 'https://')):
        return url
    if url.startswith('//'):
        return 'https:' + url
    if url.startswith('/'):
        parsed = urlparse(base_url)
        if parsed.scheme and parsed.netloc:
            return f"{parsed.scheme}://{parsed.netloc}{url}"
        return base_url.rstrip('/') + url
    if not urlparse(base_url).path:
        base_url = base_url.rstrip('/') + '/'
    return urljoin(base_url, url)


def detect_video_type(url: str, default: VideoSourceType = VideoSourceType.AUTO) -> VideoSourceType:
    """Guess the stream format from the URL."""
    lowered = (url or "").lower()
    if 'm3u8' in lowered:
        return VideoSourceType.M3U8
    for extension, video_type in (
        ('.mp4', VideoSourceType.MP4),
        ('.mkv', VideoSourceType.MKV),
        ('.webm', VideoSourceType.WEBM),
        ('.flv', VideoSourceType.FLV),
    ):
        if extension in lowered:
            return video_type
    return default


_QUALITY_RE = re.compile(r'(?<!\d)(2160|1440|1080|720|480|360)(?:p|(?!\d))', re.IGNORECASE)


def detect_quality(url: str, default: str = "auto") -> str:
    """Extract a resolution label such as ``720p`` from a URL."""
    match = _QUALITY_RE.search(url or "")
    if match:
        return f"{match.group(1)}p"
    return default


def extract_slug(link: str) -> str:
    """
    Extract a hanime video identifier from a link.

    Supports ``/videos/hentai/<slug>``, ``/watch/<slug>`` and
    ``/watch?v=<id>`` forms.
    """
    if not link:
        return ""

    for marker in ('/videos/hentai/', '/watch/'):
        if marker in link:
            tail = link.split(marker, 1)[1]
            return tail.split('?')[0].split('#')[0].split('/')[0]

    parsed = urlparse(link)
    if parsed.path.rstrip('/').endswith('/watch') or parsed.path == 'watch':
        return parse_qs(parsed.query).get('v', [""])[0]
    return ""


_NON_WORD_RE = re.compile(r"[^a-z0-9\u4e00-\u9fff]+")


def normalize_title(value: Any) -> str:
    """Lowercase and strip everything except ASCII alphanumerics and CJK."""
    if not isinstance(value, str):
        return ""
    return _NON_WORD_RE.sub('', value.lower())


def normalize_season_parts(value: Any) -> str:
    """Normalize a title and remove season / part markers."""
    normalized = normalize_title(value)
    normalized = re.sub(r'第.*?季', '', normalized)
    normalized = re.sub(r'第.*?部', '', normalized)
    return re.sub(r'season|cour|part', '', normalized)


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings."""
    rows, cols = len(a) + 1, len(b) + 1
    dp = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        dp[i][0] = i
    for j in range(cols):
        dp[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j], dp[i][j - 1], dp[i - 1][j - 1])

    return dp[-1][-1]


def contains_either_way(a: str, b: str) -> bool:
    """True when one non-empty string contains the other."""
    if not a or not b:
        return False
    return a in b or b in a


def dedupe_by(items: Iterable[dict], key: str) -> List[dict]:
    """Keep the first item for each value of ``key``."""
    seen = set()
    unique = []
    for item in items:
        value = item.get(key)
        if value in seen:
            continue
        seen.add(value)
        unique.append(item)
    return unique


# Export utility classes and functions
__all__ = [
    "HTMLParser",
    "resolve_url",
    "detect_video_type",
    "detect_quality",
    "extract_slug",
    "normalize_title",
    "normalize_season_parts",
    "levenshtein",
    "contains_either_way",
    "dedupe_by",
]
