"""
Common utilities for provider development.

This package contains the HTML helpers and the video source extractor
shared by the providers.
"""

from .utils import (
    HTMLParser,
    contains_either_way,
    dedupe_by,
    detect_quality,
    detect_video_type,
    extract_slug,
    levenshtein,
    normalize_season_parts,
    normalize_title,
    resolve_url,
)
from .video import ExtractedVideo, VideoSourceExtractor

__all__ = [
    "HTMLParser",
    "contains_either_way",
    "dedupe_by",
    "detect_quality",
    "detect_video_type",
    "extract_slug",
    "levenshtein",
    "normalize_season_parts",
    "normalize_title",
    "resolve_url",
    "ExtractedVideo",
    "VideoSourceExtractor",
]
