"""Tests for the yhdm.one provider."""

from urllib.parse import quote

import pytest

from anisource.core.models import EpisodeDetails, MediaInfo, SearchOptions, VideoSourceType
from anisource.plugins.yhdm import YhdmParser, YhdmProvider, pick_best_match


BASE = "https://yhdm.one"

SEARCH_HTML = """
<ul class="vod-list">
  <li><a href="/vod/1001.html">斗罗大陆</a></li>
  <li><a href="/vod/1002.html">斗罗大陆 第二季</a></li>
  <li><a href="/vod/1003.html"><img src="/cover/1003.jpg"></a></li>
  <li><a href="/vod/1001.html">斗罗大陆</a></li>
  <li><a href="/vod-play/1001/ep1.html">第1集</a></li>
</ul>
"""

DETAIL_HTML = """
<div class="playlist">
  <a href="/vod-play/1001/ep2.html">第2集</a>
  <a href="/vod-play/1001/ep1.html">第1集</a>
  <a href="/vod-play/1001/ep3.html">第3话 大结局</a>
  <a href="/vod-play/1001/ep1.html">第1集</a>
  <a href="/vod/1002.html">斗罗大陆 第二季</a>
</div>
"""

ALT_DETAIL_HTML = """
<div class="playlist">
  <a href="/vod-play/abc-def/ep12.html">HD</a>
  <a href="/vod-play/abc-def/ep3.html"></a>
  <a href="/vod-play/abc-def/trailer.html">预告</a>
</div>
"""

EPISODE_URL = f"{BASE}/vod-play/1001/ep1.html"


def candidates(*titles):
    return [{"id": str(i), "title": title, "url": f"{BASE}/vod/{i}.html"} for i, title in enumerate(titles)]


def episode() -> EpisodeDetails:
    return EpisodeDetails(id="1001/ep1", number=1, url=EPISODE_URL)


class TestYhdmParser:
    def test_search_results(self) -> None:
        results = YhdmParser(SEARCH_HTML, BASE).parse_search_results()

        assert [(r["id"], r["title"]) for r in results] == [("1001", "斗罗大陆"), ("1002", "斗罗大陆 第二季")]
        assert results[0]["url"] == "https://yhdm.one/vod/1001.html"

    def test_episodes_with_labels(self) -> None:
        episodes = YhdmParser(DETAIL_HTML, BASE).parse_episodes()

        assert [(e["id"], e["number"], e["title"]) for e in episodes] == [
            ("1001/ep1", 1, "第1集"),
            ("1001/ep2", 2, "第2集"),
            ("1001/ep3", 3, "第3话 大结局"),
        ]
        assert episodes[0]["url"] == "https://yhdm.one/vod-play/1001/ep1.html"

    def test_episodes_from_play_paths(self) -> None:
        episodes = YhdmParser(ALT_DETAIL_HTML, BASE).parse_episodes()

        assert [(e["id"], e["number"], e["title"]) for e in episodes] == [
            ("abc-def/ep3.html", 3, "第3集"),
            ("abc-def/ep12.html", 12, "HD"),
        ]
        assert episodes[0]["url"] == "https://yhdm.one/vod-play/abc-def/ep3.html"


class TestPickBestMatch:
    def test_romaji_containment(self) -> None:
        media = MediaInfo(romaji_title="Soul Land")
        assert pick_best_match(candidates("Other Show", "Soul Land"), media, "")["title"] == "Soul Land"

    def test_english_containment(self) -> None:
        media = MediaInfo(romaji_title="Douluo Dalu", english_title="Soul Land")
        best = pick_best_match(candidates("Something Else", "Soul Land 2"), media, "")
        assert best["title"] == "Soul Land 2"

    def test_season_markers_ignored_before_edit_distance(self) -> None:
        media = MediaInfo(romaji_title="Douluo Dalu Season 2")
        best = pick_best_match(candidates("Douluo Dalu Seasin 2", "Douluo Dalu Cour 2"), media, "")
        assert best["title"] == "Douluo Dalu Cour 2"

    def test_edit_distance_fallback(self) -> None:
        media = MediaInfo(romaji_title="Naruto")
        assert pick_best_match(candidates("Bleach", "Nartuo"), media, "")["title"] == "Nartuo"

    def test_query_used_without_romaji_title(self) -> None:
        best = pick_best_match(candidates("Other", "Soul Land"), MediaInfo(), "Soul Land")
        assert best["title"] == "Soul Land"

    def test_no_candidates(self) -> None:
        assert pick_best_match([], MediaInfo(romaji_title="x"), "x") is None


class TestYhdmSearch:
    @pytest.mark.asyncio
    async def test_returns_single_best_match(self, routes) -> None:
        provider = YhdmProvider()
        routes(provider, {f"{BASE}/search?q={quote('斗罗')}": SEARCH_HTML})

        results = await provider.search(SearchOptions(
            query="斗罗",
            media=MediaInfo(romaji_title="斗罗大陆 第二季"),
        ))

        assert len(results) == 1
        assert results[0].id == "1001"
        assert results[0].to_host()["subOrDub"] == "sub"

    @pytest.mark.asyncio
    async def test_same_query_different_media_cached_separately(self, routes) -> None:
        html = SEARCH_HTML + '<a href="/vod/1004.html">凡人修仙传</a>'
        provider = YhdmProvider()
        fetch = routes(provider, {f"{BASE}/search?q=x": html})

        first = await provider.search(SearchOptions(query="x", media=MediaInfo(romaji_title="斗罗大陆")))
        second = await provider.search(SearchOptions(query="x", media=MediaInfo(romaji_title="凡人修仙传")))
        again = await provider.search(SearchOptions(query="x", media=MediaInfo(romaji_title="斗罗大陆")))

        assert [r.title for r in first] == ["斗罗大陆"]
        assert [r.title for r in second] == ["凡人修仙传"]
        assert [r.title for r in again] == ["斗罗大陆"]
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_latest_page_fallback(self, routes) -> None:
        latest = "".join(f'<h3><a href="/vod/{2000 + i}.html">凡人修仙传 {i}</a></h3>' for i in range(7))
        latest += '<h3><a href="/vod/3000.html">斗破苍穹</a></h3>'
        provider = YhdmProvider()
        routes(provider, {
            f"{BASE}/search?q={quote('凡人')}": "<html><body>没有找到结果</body></html>",
            f"{BASE}/latest/": latest,
        })

        results = await provider.search(SearchOptions(query="凡人"))

        assert [r.id for r in results] == ["2000", "2001", "2002", "2003", "2004"]

    @pytest.mark.asyncio
    async def test_failure_returns_empty(self, routes) -> None:
        provider = YhdmProvider()
        routes(provider, {})

        assert await provider.search(SearchOptions(query="x")) == []


class TestYhdmEpisodes:
    @pytest.mark.asyncio
    async def test_find_episodes(self, routes) -> None:
        provider = YhdmProvider()
        fetch = routes(provider, {f"{BASE}/vod/1001.html": DETAIL_HTML})

        episodes = await provider.find_episodes("1001")

        assert [e.number for e in episodes] == [1, 2, 3]
        assert episodes[2].title == "第3话 大结局"

        await provider.find_episodes("1001")
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_failure_returns_empty(self, routes) -> None:
        provider = YhdmProvider()
        routes(provider, {})

        assert await provider.find_episodes("1001") == []


class TestYhdmEpisodeServer:
    @pytest.mark.asyncio
    async def test_script_source(self, routes) -> None:
        provider = YhdmProvider()
        fetch = routes(provider, {
            EPISODE_URL: '<script>var config = {url: "https://cdn.yhdm.one/v/1080/index.m3u8"};</script>',
        })

        server = await provider.find_episode_server(episode(), "默认播放器")

        assert server.server == "默认播放器"
        assert server.headers == {
            "User-Agent": provider.config.user_agent,
            "Referer": EPISODE_URL,
            "Accept": "*/*",
        }
        source = server.video_sources[0]
        assert source.url == "https://cdn.yhdm.one/v/1080/index.m3u8"
        assert source.type is VideoSourceType.M3U8
        assert source.quality == "auto"
        assert source.subtitles == []
        assert fetch.await_args.kwargs["headers"] == {"Referer": BASE}
        assert fetch.await_args.kwargs["timeout"] == 15

    @pytest.mark.asyncio
    async def test_defaults_to_mp4(self, routes) -> None:
        provider = YhdmProvider()
        routes(provider, {EPISODE_URL: '<script>player.setup({file: "https://cdn.yhdm.one/play?id=1"});</script>'})

        server = await provider.find_episode_server(episode(), "备用播放器")

        assert server.video_sources[0].type is VideoSourceType.MP4

    @pytest.mark.asyncio
    async def test_iframe_player(self, routes) -> None:
        provider = YhdmProvider()
        fetch = routes(provider, {
            EPISODE_URL: '<div class="player"><iframe src="https://player.yhdm.one/?url=abc"></iframe></div>',
            "https://player.yhdm.one/?url=abc": '<video src="/v/ep1.mp4"></video>',
        })

        server = await provider.find_episode_server(episode(), "默认播放器")

        assert server.video_sources[0].url == "https://player.yhdm.one/v/ep1.mp4"
        assert fetch.await_args.kwargs["headers"] == {"Referer": EPISODE_URL}

    @pytest.mark.asyncio
    async def test_failure_degrades(self, routes) -> None:
        provider = YhdmProvider()
        routes(provider, {})

        server = await provider.find_episode_server(episode(), "")

        assert server.is_empty
        assert server.server == "默认播放器"


class TestYhdmSettings:
    def test_settings(self) -> None:
        settings = YhdmProvider().get_settings()
        assert settings.episode_servers == ["默认播放器", "备用播放器"]
        assert settings.supports_dub is False
