"""
Core Data Models - Pydantic models mirroring the host provider contract.

The host application owns these shapes. Fields use Python names internally
and serialize to the host's camelCase names via aliases, so
``model_dump(by_alias=True)`` produces exactly what the host expects.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubOrDub(str, Enum):
    """Audio/subtitle flavour of a search result."""

    SUB = "sub"
    DUB = "dub"
    BOTH = "both"

    def __str__(self) -> str:
        return self.value


class VideoSourceType(str, Enum):
    """Container or streaming format of a resolved video URL."""

    M3U8 = "m3u8"
    MP4 = "mp4"
    MKV = "mkv"
    WEBM = "webm"
    FLV = "flv"
    AUTO = "auto"

    def __str__(self) -> str:
        return self.value


class HostModel(BaseModel):
    """Base for host DTOs: accept both field names and camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_host(self) -> Dict:
        """Serialize using the host's field names."""
        return self.model_dump(by_alias=True, mode="json")


class Settings(HostModel):
    """Static provider capabilities reported to the host."""

    episode_servers: List[str] = Field(..., alias="episodeServers", description="Selectable server names")
    supports_dub: bool = Field(False, alias="supportsDub", description="Whether dubbed audio is offered")


class MediaInfo(HostModel):
    """Media metadata the host passes along with a search."""

    id: Optional[int] = Field(None, description="Host media identifier")
    romaji_title: str = Field("", alias="romajiTitle", description="Romanized title")
    english_title: Optional[str] = Field(None, alias="englishTitle", description="English title")
    synonyms: List[str] = Field(default_factory=list, description="Alternative titles")


class SearchOptions(HostModel):
    """Arguments of a host search request."""

    media: MediaInfo = Field(default_factory=MediaInfo, description="Media being searched for")
    query: str = Field(..., description="Free-text query")
    dub: bool = Field(False, description="Whether the host wants dubbed results")
    year: Optional[int] = Field(None, description="Release year hint")


class SearchResult(HostModel):
    """A show found on the provider site."""

    id: str = Field(..., min_length=1, description="Provider-local identifier")
    title: str = Field(..., description="Display title")
    url: str = Field(..., description="Absolute URL of the show page")
    sub_or_dub: SubOrDub = Field(SubOrDub.SUB, alias="subOrDub")
    image: Optional[str] = Field(None, description="Cover image URL")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Ensure title is properly formatted."""
        return v.strip()

    def __str__(self) -> str:
        return f"{self.title} ({self.id})"


class EpisodeDetails(HostModel):
    """One playable episode of a show."""

    id: str = Field(..., min_length=1, description="Provider-local episode identifier")
    number: int = Field(..., ge=1, description="Episode number")
    url: str = Field(..., description="Absolute URL of the episode page")
    title: Optional[str] = Field(None, description="Episode title")

    def __str__(self) -> str:
        return f"Episode {self.number}: {self.title or self.id}"


class VideoSubtitle(HostModel):
    """Subtitle track attached to a video source."""

    url: str
    language: str = "en"
    label: Optional[str] = None
    is_default: bool = Field(False, alias="isDefault")


class VideoSource(HostModel):
    """A playable stream URL."""

    url: str = Field(..., min_length=1, description="Absolute stream URL")
    type: VideoSourceType = Field(VideoSourceType.AUTO, description="Stream format")
    quality: str = Field("auto", description="Quality label such as 720p")
    subtitles: List[VideoSubtitle] = Field(default_factory=list)


class EpisodeServer(HostModel):
    """Resolved video sources for one episode on one server."""

    server: str = Field(..., description="Server name as listed in Settings")
    headers: Dict[str, str] = Field(default_factory=dict, description="Headers the player must send")
    video_sources: List[VideoSource] = Field(default_factory=list, alias="videoSources")

    @property
    def is_empty(self) -> bool:
        """True when no playable source was resolved."""
        return not self.video_sources

    @classmethod
    def empty(cls, server: str) -> "EpisodeServer":
        """Build the degraded result returned when resolution fails."""
        return cls(server=server, headers={}, video_sources=[])


# Export all models and types
__all__ = [
    "SubOrDub",
    "VideoSourceType",
    "HostModel",
    "Settings",
    "MediaInfo",
    "SearchOptions",
    "SearchResult",
    "EpisodeDetails",
    "VideoSubtitle",
    "VideoSource",
    "EpisodeServer",
]
