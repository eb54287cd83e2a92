"""
Hanime Plugin - Provider implementation for hanime1.me

Search, episode listing and stream resolution for hanime1.me and its
mirror domains.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from anisource.core.exceptions import ExtractionError, ProviderError
from anisource.core.models import (
    EpisodeDetails,
    EpisodeServer,
    SearchOptions,
    SearchResult,
    Settings,
    SubOrDub,
    VideoSource,
    VideoSourceType,
)
from anisource.plugins.base import BaseProvider, ProviderMetadata
from anisource.plugins.common.utils import detect_video_type
from anisource.plugins.common.video import VideoSourceExtractor

from .config import HANIME_SERVERS, HanimeConfig
from .parser import HanimeParser


logger = logging.getLogger(__name__)


provider_metadata = ProviderMetadata(
    name="Hanime1",
    version="1.1.0",
    description="Provider for hanime1.me with mirror domain failover",
    website="https://hanime1.me",
    supported_formats=["m3u8", "mp4", "mkv", "webm"],
)


class HanimeProvider(BaseProvider):
    """
    Provider for hanime1.me.

    Every video page is its own show; the related-videos block on that page
    stands in for the episode list.
    """

    config_class = HanimeConfig
    metadata = provider_metadata

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.extractor = VideoSourceExtractor(
            fetch_text=self.fetch_text,
            fetch_json=self.fetch_json,
            api_endpoints=self.config.api_endpoints,
            max_iframe_depth=self.config.max_iframe_depth,
            api_timeout=self.config.api_timeout,
        )

    def get_settings(self) -> Settings:
        return Settings(episode_servers=list(HANIME_SERVERS), supports_dub=False)

    def video_page_path(self, video_id: str) -> str:
        """Numeric ids use the watch page, slugs the legacy video path."""
        if video_id.isdigit():
            return f"/watch?v={video_id}"
        return f"/videos/hentai/{video_id}"

    async def search(self, opts: SearchOptions) -> List[SearchResult]:
        """
        Search hanime1.me.

        Args:
            opts: Host search options; only ``query`` is used

        Returns:
            Up to ``search_limit`` results, empty on failure
        """
        query = opts.query.strip()

        async def work() -> List[SearchResult]:
            if not query:
                raise ProviderError("Search query cannot be empty", provider_name=self.name)
            return await self.cached(f"search_{query}", lambda: self._search(query))

        return await self.degrade("search", work, list, query=query)

    async def _search(self, query: str) -> List[SearchResult]:
        self.logger.debug(f"Searching hanime with query: '{query}'")
        html = await self.request_with_fallback(f"/search?query={quote(query)}")

        results: List[SearchResult] = []
        for item in HanimeParser(html, self.base_url).parse_search_results():
            try:
                results.append(SearchResult(sub_or_dub=SubOrDub.SUB, **item))
            except ValidationError as e:
                self.logger.warning(f"Skipping malformed search result {item.get('id')!r}: {e}")
            if len(results) >= self.config.search_limit:
                break

        self.logger.info(f"Found {len(results)} results for '{query}'")
        return results

    async def find_episodes(self, id: str) -> List[EpisodeDetails]:
        """
        List the episodes related to a video.

        Falls back to a single episode pointing at the video itself when the
        page has no related videos or cannot be loaded.
        """
        fallback_url = self.resolve_url(self.video_page_path(id))

        def single_episode() -> List[EpisodeDetails]:
            return [EpisodeDetails(id=id, number=1, url=fallback_url, title="Episode 1")]

        async def work() -> List[EpisodeDetails]:
            return await self.cached(f"episodes_{id}", lambda: self._find_episodes(id))

        episodes = await self.degrade("find_episodes", work, single_episode, id=id)
        if not episodes:
            self.logger.info(f"No related episodes for {id}, using the video itself")
            return single_episode()
        return episodes

    async def _find_episodes(self, video_id: str) -> List[EpisodeDetails]:
        html = await self.request_with_fallback(self.video_page_path(video_id))

        episodes = []
        for item in HanimeParser(html, self.base_url).parse_related_episodes():
            try:
                episodes.append(EpisodeDetails(**item))
            except ValidationError as e:
                self.logger.warning(f"Skipping malformed episode {item.get('id')!r}: {e}")

        self.logger.info(f"Found {len(episodes)} related episodes for {video_id}")
        return episodes

    async def find_episode_server(self, episode: EpisodeDetails, server: str) -> EpisodeServer:
        """
        Resolve the stream for an episode.

        Returns:
            A server with one video source, or with none on failure
        """
        server_name = server or HANIME_SERVERS[0]

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
        html = await self.fetch_text(episode.url, timeout=self.config.server_timeout)

        video = await self.extractor.extract(html, episode.url, episode_id=episode.id)
        if video is None:
            raise ExtractionError(
                f"No video source found for episode {episode.id}",
                url=episode.url,
                provider_name=self.name,
            )

        return EpisodeServer(
            server=server_name,
            headers=self.headers,
            video_sources=[VideoSource(
                url=video.url,
                type=detect_video_type(video.url, VideoSourceType.AUTO),
                quality=video.quality,
                subtitles=video.subtitles,
            )],
        )


# Export plugin class and metadata
__all__ = ["HanimeProvider", "provider_metadata"]
