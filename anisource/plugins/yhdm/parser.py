"""
Yhdm Parser - HTML parsing for yhdm.one listing and detail pages.
"""

import re
import logging
from typing import Any, Dict, List

from anisource.plugins.common.utils import HTMLParser, dedupe_by, resolve_url


logger = logging.getLogger(__name__)


VOD_HREF_RE = re.compile(r'^(?:https?://[^/]+)?/vod/(\d+)\.html$')
VOD_HEADING_RE = re.compile(r'<h3[^>]*><a[^>]+href="/vod/(\d+)\.html"[^>]*>([^<]+)</a></h3>')

PLAY_HREF_RE = re.compile(r'/vod-play/(\d+)/ep(\d+)\.html$')
PLAY_TEXT_RE = re.compile(r'第(\d+)[集话]')
PLAY_PATH_RE = re.compile(r'/vod-play/([^"\s?#]+)')
EP_NUMBER_RE = re.compile(r'ep(\d+)')


class YhdmParser:
    """Specialized parser for yhdm.one content."""

    def __init__(self, html_content: str, base_url: str):
        self.html = html_content or ""
        self.parser = HTMLParser(self.html)
        self.base_url = base_url

    def parse_search_results(self) -> List[Dict[str, Any]]:
        """
        Parse show links from a search or listing page.

        Returns:
            List of dicts with id, title and url, de-duplicated by id
        """
        results = []
        for anchor in self.parser.soup.find_all('a', href=True):
            match = VOD_HREF_RE.match(HTMLParser.attr(anchor, 'href').strip())
            title = anchor.get_text(strip=True)
            if match and title:
                results.append(self._show(match.group(1), title))

        if not results:
            results = [
                self._show(show_id, title.strip())
                for show_id, title in VOD_HEADING_RE.findall(self.html)
                if title.strip()
            ]
            if results:
                logger.debug(f"Heading fallback yielded {len(results)} results")

        return dedupe_by(results, 'id')

    def _show(self, show_id: str, title: str) -> Dict[str, Any]:
        return {
            'id': show_id,
            'title': title,
            'url': f"{self.base_url}/vod/{show_id}.html",
        }

    def parse_episodes(self) -> List[Dict[str, Any]]:
        """
        Parse the play links of a show page.

        Links labelled ``第N集`` / ``第N话`` are preferred; otherwise any play
        link carrying an ``epN`` marker is used. Sorted by episode number.
        """
        episodes = []
        anchors = self.parser.soup.find_all('a', href=True)

        for anchor in anchors:
            href = HTMLParser.attr(anchor, 'href')
            match = PLAY_HREF_RE.search(href)
            text = anchor.get_text(strip=True)
            if not match or not PLAY_TEXT_RE.search(text):
                continue
            show_id, number = match.group(1), int(match.group(2))
            episodes.append({
                'id': f"{show_id}/ep{number}",
                'number': number,
                'title': text,
                'url': f"{self.base_url}/vod-play/{show_id}/ep{number}.html",
            })

        if not episodes:
            for anchor in anchors:
                path_match = PLAY_PATH_RE.search(HTMLParser.attr(anchor, 'href'))
                if not path_match:
                    continue
                play_path = path_match.group(1)
                ep_match = EP_NUMBER_RE.search(play_path)
                if not ep_match:
                    continue
                number = int(ep_match.group(1))
                episodes.append({
                    'id': play_path,
                    'number': number,
                    'title': anchor.get_text(strip=True) or f"第{number}集",
                    'url': resolve_url(f"/vod-play/{play_path}", self.base_url),
                })
            if episodes:
                logger.debug(f"Play-path fallback yielded {len(episodes)} episodes")

        return sorted(dedupe_by(episodes, 'id'), key=lambda episode: episode['number'])


__all__ = ["YhdmParser"]
