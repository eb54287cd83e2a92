"""
Yhdm Plugin Package

Provider for yhdm.one (樱花动漫).
"""

from .plugin import YhdmProvider, pick_best_match, provider_metadata
from .config import YhdmConfig
from .parser import YhdmParser

__all__ = ["YhdmProvider", "provider_metadata", "pick_best_match", "YhdmConfig", "YhdmParser"]
