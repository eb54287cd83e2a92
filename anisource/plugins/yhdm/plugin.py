"""
Yhdm Plugin - Provider implementation for yhdm.one (樱花动漫)

Chinese-subtitled donghua and anime. Search returns the single result that
best matches the host's media titles.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from anisource.core.exceptions import ExtractionError
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
)
from anisource.plugins.base import BaseProvider, ProviderMetadata
from anisource.plugins.common.utils import (
    contains_either_way,
    detect_video_type,
    levenshtein,
    normalize_season_parts,
    normalize_title,
)
from anisource.plugins.common.video import VideoSourceExtractor

from .config import YHDM_SERVERS, YhdmConfig
from .parser import YhdmParser


logger = logging.getLogger(__name__)


provider_metadata = ProviderMetadata(
    name="樱花动漫",
    version="1.0.0",
    description="Provider for yhdm.one with title matching against host media",
    website="https://yhdm.one",
    supported_formats=["m3u8", "mp4", "flv"],
)


def pick_best_match(candidates: List[Dict[str, Any]], media: MediaInfo, query: str) -> Optional[Dict[str, Any]]:
    """
    Choose the candidate whose title best matches the media.

    Containment against the romaji title is tried first, then the english
    title, then both sides with season markers stripped. The smallest edit
    distance to the romaji title decides when nothing contains the other.
    """
    if not candidates:
        return None

    target = normalize_title(media.romaji_title) or normalize_title(query)
    target_en = normalize_title(media.english_title) or target

    for wanted in (target, target_en):
        for candidate in candidates:
            if contains_either_way(normalize_title(candidate['title']), wanted):
                return candidate

    target_base = normalize_season_parts(media.romaji_title) or normalize_season_parts(query)
    for candidate in candidates:
        if contains_either_way(normalize_season_parts(candidate['title']), target_base):
            return candidate

    return min(candidates, key=lambda candidate: levenshtein(normalize_title(candidate['title']), target))


class YhdmProvider(BaseProvider):
    """Provider for yhdm.one."""

    config_class = YhdmConfig
    metadata = provider_metadata

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.extractor = VideoSourceExtractor(
            fetch_text=self.fetch_text,
            max_iframe_depth=self.config.max_iframe_depth,
            api_timeout=self.config.api_timeout,
        )

    def get_settings(self) -> Settings:
        return Settings(episode_servers=list(YHDM_SERVERS), supports_dub=False)

    async def search(self, opts: SearchOptions) -> List[SearchResult]:
        """
        Search yhdm.one and return the best match for the host's media.

        Falls back to filtering the latest-updates page when the search
        page lists nothing.
        """
        query = opts.query.strip()
        # The best match depends on the media titles, not only on the query.
        key = f"search_{query}_{normalize_title(opts.media.romaji_title)}_{normalize_title(opts.media.english_title)}"

        async def work() -> List[SearchResult]:
            return await self.cached(key, lambda: self._search(query, opts.media))

        return await self.degrade("search", work, list, query=query)

    async def _search(self, query: str, media: MediaInfo) -> List[SearchResult]:
        self.logger.debug(f"Searching yhdm with query: '{query}'")
        html = await self.request_with_fallback(f"/search?q={quote(query)}")
        candidates = YhdmParser(html, self.base_url).parse_search_results()

        if not candidates:
            self.logger.info(f"No search results for '{query}', trying latest updates")
            return await self._search_latest(query)

        best = pick_best_match(candidates, media, query)
        self.logger.info(f"Best of {len(candidates)} results for '{query}': {best['title']}")
        return self._to_results([best])

    async def _search_latest(self, query: str) -> List[SearchResult]:
        html = await self.request_with_fallback("/latest/")
        lowered = query.lower()
        matches = [
            candidate for candidate in YhdmParser(html, self.base_url).parse_search_results()
            if contains_either_way(candidate['title'].lower(), lowered)
        ]
        return self._to_results(matches[:self.config.category_limit])

    def _to_results(self, items: List[Dict[str, Any]]) -> List[SearchResult]:
        results = []
        for item in items:
            try:
                results.append(SearchResult(sub_or_dub=SubOrDub.SUB, **item))
            except ValidationError as e:
                self.logger.warning(f"Skipping malformed search result {item.get('id')!r}: {e}")
        return results

    async def find_episodes(self, id: str) -> List[EpisodeDetails]:
        """List the episodes of a show, sorted by number."""

        async def work() -> List[EpisodeDetails]:
            return await self.cached(f"episodes_{id}", lambda: self._find_episodes(id))

        return await self.degrade("find_episodes", work, list, id=id)

    async def _find_episodes(self, anime_id: str) -> List[EpisodeDetails]:
        html = await self.request_with_fallback(f"/vod/{anime_id}.html")

        episodes = []
        for item in YhdmParser(html, self.base_url).parse_episodes():
            try:
                episodes.append(EpisodeDetails(**item))
            except ValidationError as e:
                self.logger.warning(f"Skipping malformed episode {item.get('id')!r}: {e}")

        self.logger.info(f"Found {len(episodes)} episodes for {anime_id}")
        return episodes

    async def find_episode_server(self, episode: EpisodeDetails, server: str) -> EpisodeServer:
        """Resolve the stream behind an episode's play page."""
        server_name = server or YHDM_SERVERS[0]

        async def work() -> EpisodeServer:
            return await self.cached(
                f"server_{episode.id}_{server_name}",
                lambda: self._find_episode_server(episode, server_name),
            )

        return await self.degrade(
            "find_episode_server",
            work,
            lambda: EpisodeServer.empty(server_name),
            id=episode.id,
            url=episode.url,
            server=server_name,
        )

    async def _find_episode_server(self, episode: EpisodeDetails, server_name: str) -> EpisodeServer:
        html = await self.fetch_text(
            episode.url,
            headers={'Referer': self.base_url},
            timeout=self.config.server_timeout,
        )

        video = await self.extractor.extract(html, episode.url)
        if video is None:
            raise ExtractionError(
                f"无法提取视频播放地址: {episode.url}",
                url=episode.url,
                provider_name=self.name,
            )

        return EpisodeServer(
            server=server_name,
            headers={
                'User-Agent': self.config.user_agent,
                'Referer': episode.url,
                'Accept': '*/*',
            },
            video_sources=[VideoSource(
                url=video.url,
                type=detect_video_type(video.url, VideoSourceType.MP4),
                quality="auto",
                subtitles=video.subtitles,
            )],
        )


# Export plugin class and metadata
__all__ = ["YhdmProvider", "provider_metadata", "pick_best_match"]
