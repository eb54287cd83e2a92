"""
Hanime Parser - HTML parsing utilities for hanime1.me

Listing pages are read with an ordered list of CSS selectors; the first
selector that yields results wins. When none match, a regex pass over the
raw markup is used instead.
"""

import re
import logging
from typing import Any, Dict, List

from bs4 import Tag

from anisource.plugins.common.utils import HTMLParser, dedupe_by, extract_slug, resolve_url


logger = logging.getLogger(__name__)


SEARCH_SELECTORS = [
    '.row .col a.card-mobile',
    '.search-results .item a',
    '.video-grid .video-item a',
    '[data-video-id] a',
]

SEARCH_TITLE_SELECTORS = [
    '.card-mobile-title span',
    '.card-mobile-title',
    '.video-title',
    '.title',
    'h3',
    'h4',
]

COVER_SELECTORS = ['img', '.thumbnail img', '.cover img']

RELATED_SELECTORS = [
    '#related-videos .row .col a',
    '.related-videos a',
    '.episode-list a',
    '.series-episodes a',
]

EPISODE_TITLE_SELECTORS = ['.card-mobile-title span', '.episode-title', '.title']

CARD_RE = re.compile(r'<a[^>]*class="[^"]*card-mobile[^"]*"[\s\S]*?</a>')
CARD_TITLE_RE = re.compile(r'<span[^>]*class="[^"]*card-mobile-title[^"]*"[^>]*>([^<]*)</span>')
HREF_RE = re.compile(r'href="([^"]*)"')
IMG_RE = re.compile(r'<img[^>]*src="([^"]*)"')
RELATED_LINK_RE = re.compile(r'<a[^>]*href="([^"]*(?:/videos/hentai/|/watch)[^"]*)"[^>]*>([^<]*)</a>')


def is_video_link(link: str) -> bool:
    """True for links that point at a video page."""
    return bool(link) and ('/videos/hentai/' in link or '/watch/' in link or 'watch?v=' in link)


class HanimeParser:
    """Specialized parser for hanime1.me content."""

    def __init__(self, html_content: str, base_url: str):
        """
        Initialize hanime parser.

        Args:
            html_content: HTML content to parse
            base_url: Working base URL for resolving relative links
        """
        self.html = html_content or ""
        self.parser = HTMLParser(self.html)
        self.base_url = base_url

    def parse_search_results(self) -> List[Dict[str, Any]]:
        """
        Parse search result cards.

        Returns:
            List of dicts with id, title, url and image
        """
        for selector in SEARCH_SELECTORS:
            results = [self._parse_card(anchor) for anchor in self.parser.soup.select(selector)]
            results = dedupe_by([r for r in results if r], 'id')
            if results:
                logger.debug(f"Search selector '{selector}' yielded {len(results)} results")
                return results

        results = self._parse_cards_with_regex()
        if results:
            logger.debug(f"Regex fallback yielded {len(results)} search results")
        return results

    def _parse_card(self, anchor: Tag) -> Dict[str, Any]:
        link = HTMLParser.attr(anchor, 'href')
        if not is_video_link(link):
            return {}

        slug = extract_slug(link)
        if not slug:
            return {}

        title = (
            HTMLParser.first_text(anchor, SEARCH_TITLE_SELECTORS)
            or HTMLParser.attr(anchor, 'title').strip()
            or slug.replace('-', ' ')
        )
        cover = HTMLParser.first_attr(anchor, COVER_SELECTORS, ['src', 'data-src'])

        return {
            'id': slug,
            'title': title,
            'url': resolve_url(link, self.base_url),
            'image': resolve_url(cover, self.base_url) or None,
        }

    def _parse_cards_with_regex(self) -> List[Dict[str, Any]]:
        results = []
        for match in CARD_RE.finditer(self.html):
            card = match.group(0)
            title_match = CARD_TITLE_RE.search(card)
            link_match = HREF_RE.search(card)
            if not title_match or not link_match or not is_video_link(link_match.group(1)):
                continue

            slug = extract_slug(link_match.group(1))
            if not slug:
                continue

            img_match = IMG_RE.search(card)
            results.append({
                'id': slug,
                'title': title_match.group(1).strip() or slug.replace('-', ' '),
                'url': resolve_url(link_match.group(1), self.base_url),
                'image': resolve_url(img_match.group(1), self.base_url) if img_match else None,
            })
        return dedupe_by(results, 'id')

    def parse_related_episodes(self) -> List[Dict[str, Any]]:
        """
        Parse the related-videos block of a video page into episodes.

        Episodes are numbered in page order starting at 1.
        """
        for selector in RELATED_SELECTORS:
            episodes = self._number_episodes(
                self._parse_related_anchor(anchor)
                for anchor in self.parser.soup.select(selector)
            )
            if episodes:
                logger.debug(f"Related selector '{selector}' yielded {len(episodes)} episodes")
                return episodes

        return self._number_episodes(
            {
                'id': extract_slug(link),
                'url': resolve_url(link, self.base_url),
                'title': text.strip(),
            }
            for link, text in RELATED_LINK_RE.findall(self.html)
            if is_video_link(link)
        )

    def _parse_related_anchor(self, anchor: Tag) -> Dict[str, Any]:
        link = HTMLParser.attr(anchor, 'href')
        if not is_video_link(link):
            return {}
        return {
            'id': extract_slug(link),
            'url': resolve_url(link, self.base_url),
            'title': HTMLParser.first_text(anchor, EPISODE_TITLE_SELECTORS),
        }

    @staticmethod
    def _number_episodes(items) -> List[Dict[str, Any]]:
        episodes: List[Dict[str, Any]] = []
        seen = set()
        for item in items:
            if not item or not item.get('id') or item['id'] in seen:
                continue
            seen.add(item['id'])
            number = len(episodes) + 1
            episodes.append({**item, 'number': number, 'title': item.get('title') or f"Episode {number}"})
        return episodes


# Export parser class
__all__ = ["HanimeParser", "is_video_link"]
