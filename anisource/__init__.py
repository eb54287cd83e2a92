"""
AniSource - Scraping providers for anime streaming sites.

Search, episode listing and video source resolution for hanime1.me and
yhdm.one, exposed through the host application's provider interface and a
small Typer/Rich debugging CLI.
"""

__version__ = "0.1.0"
__author__ = "AniSource Team"

# Package metadata
__title__ = "anisource"
__description__ = "Scraping providers for anime streaming sites"
__license__ = "MIT"

# Export main components for easy importing
from anisource.core.models import EpisodeDetails, EpisodeServer, SearchOptions, SearchResult, Settings
from anisource.core.plugin_manager import ProviderRegistry
from anisource.cli.main import cli_main

__all__ = [
    "__version__",
    "__author__",
    "EpisodeDetails",
    "EpisodeServer",
    "SearchOptions",
    "SearchResult",
    "Settings",
    "ProviderRegistry",
    "cli_main",
]
