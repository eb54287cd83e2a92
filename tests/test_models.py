"""Tests for the host contract models."""

import pytest
from pydantic import ValidationError

from anisource.core.models import (
    EpisodeDetails,
    EpisodeServer,
    SearchOptions,
    SearchResult,
    Settings,
    SubOrDub,
    VideoSource,
    VideoSourceType,
    VideoSubtitle,
)


class TestHostSerialization:
    def test_search_result_uses_camel_case(self) -> None:
        result = SearchResult(id="1001", title="  斗罗大陆 ", url="https://yhdm.one/vod/1001.html")

        assert result.to_host() == {
            "id": "1001",
            "title": "斗罗大陆",
            "url": "https://yhdm.one/vod/1001.html",
            "subOrDub": "sub",
            "image": None,
        }

    def test_accepts_aliases_and_field_names(self) -> None:
        assert Settings(episodeServers=["a"], supportsDub=True).supports_dub is True
        assert Settings(episode_servers=["a"], supports_dub=False).episode_servers == ["a"]

    def test_search_options_media_aliases(self) -> None:
        opts = SearchOptions.model_validate({
            "query": "Soul Land",
            "media": {"romajiTitle": "Douluo Dalu", "englishTitle": "Soul Land"},
        })
        assert opts.media.romaji_title == "Douluo Dalu"
        assert opts.media.english_title == "Soul Land"
        assert opts.dub is False

    def test_episode_server_shape(self) -> None:
        server = EpisodeServer(
            server="default",
            headers={"Referer": "https://hanime1.me"},
            video_sources=[VideoSource(
                url="https://cdn.x/v.m3u8",
                type=VideoSourceType.M3U8,
                subtitles=[VideoSubtitle(url="https://cdn.x/en.vtt", is_default=True)],
            )],
        )

        payload = server.to_host()
        source = payload["videoSources"][0]
        assert source["type"] == "m3u8"
        assert source["quality"] == "auto"
        assert source["subtitles"][0]["isDefault"] is True
        assert source["subtitles"][0]["language"] == "en"


class TestValidation:
    def test_episode_number_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            EpisodeDetails(id="1001/ep0", number=0, url="https://yhdm.one/vod-play/1001/ep0.html")

    def test_search_result_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            SearchResult(id="", title="x", url="https://hanime1.me")

    def test_empty_server(self) -> None:
        server = EpisodeServer.empty("默认播放器")
        assert server.is_empty
        assert server.headers == {}
        assert server.to_host() == {"server": "默认播放器", "headers": {}, "videoSources": []}

    def test_enum_string_values(self) -> None:
        assert str(SubOrDub.SUB) == "sub"
        assert str(VideoSourceType.AUTO) == "auto"
