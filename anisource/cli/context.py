"""
CLI Context - Global application state shared by commands.

The registry is built lazily so commands that never touch a provider do not
create a configuration directory.
"""

from pathlib import Path
from typing import Optional

from anisource.core import ConfigManager
from anisource.core.plugin_manager import ProviderRegistry


# Global application state
_config_dir: Path = Path("config")
_registry: Optional[ProviderRegistry] = None


def set_config_dir(config_dir: Optional[Path]) -> None:
    """Set the configuration directory and drop any existing registry."""
    global _config_dir, _registry
    _config_dir = config_dir or Path("config")
    _registry = None


def get_registry() -> ProviderRegistry:
    """Get the global provider registry, loading configuration on first use."""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry(ConfigManager(_config_dir))
    return _registry


# Export context functions
__all__ = ["set_config_dir", "get_registry"]
