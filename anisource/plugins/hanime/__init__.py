"""
Hanime Plugin Package

Provider for hanime1.me and its mirror domains.
"""

from .plugin import HanimeProvider, provider_metadata
from .config import HanimeConfig
from .parser import HanimeParser

__all__ = ["HanimeProvider", "provider_metadata", "HanimeConfig", "HanimeParser"]
