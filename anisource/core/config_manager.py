"""
Configuration Manager - JSON-based provider configuration management.

Reads ``sources.json`` from a configuration directory, validates it with
Pydantic and hands provider-specific overrides to the registry.
"""

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from anisource.core.config_schemas import SourceConfig, SourcesConfig
from anisource.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


DEFAULT_SOURCES = {
    "hanime": SourceConfig(name="Hanime1"),
    "yhdm": SourceConfig(name="樱花动漫"),
}


class ConfigManager:
    """
    Manages provider configuration with JSON persistence and validation.

    A missing sources file is created with defaults; a corrupt one is moved
    aside to ``sources.json.backup`` and replaced.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to './config' if not specified.
        """
        self.config_dir = Path(config_dir or "config")
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._sources_file = self.config_dir / "sources.json"

        self._lock = Lock()
        self._sources: Optional[SourcesConfig] = None

        try:
            self._sources = self._load_sources()
            logger.info("Configuration loaded successfully")
        except OSError as e:
            raise ConfigurationError(f"Configuration loading failed: {e}", str(self._sources_file))

    def _load_sources(self) -> SourcesConfig:
        """Load and validate sources configuration."""
        if not self._sources_file.exists():
            logger.info("Sources file not found, creating default configuration")
            sources = SourcesConfig(sources=dict(DEFAULT_SOURCES))
            self._save_sources(sources)
            return sources

        try:
            with open(self._sources_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return SourcesConfig.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid sources file, using defaults: {e}")
            backup_path = self._sources_file.with_suffix('.json.backup')
            self._sources_file.replace(backup_path)
            logger.info(f"Corrupted sources backed up to {backup_path}")

            sources = SourcesConfig(sources=dict(DEFAULT_SOURCES))
            self._save_sources(sources)
            return sources

    def _save_sources(self, sources: SourcesConfig) -> None:
        """Save sources configuration to file with atomic write."""
        temp_file = self._sources_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(sources.model_dump(), f, indent=2, ensure_ascii=False)
            temp_file.replace(self._sources_file)
            logger.debug("Sources configuration saved successfully")
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(f"Failed to save sources: {e}", str(self._sources_file))

    @property
    def sources(self) -> SourcesConfig:
        """Get current sources configuration (thread-safe)."""
        with self._lock:
            if self._sources is None:
                self._sources = self._load_sources()
            return self._sources

    def get_provider_config(self, name: str) -> Dict[str, Any]:
        """Return the override dict for a provider (empty when unconfigured)."""
        source = self.sources.get_source(name)
        if source is None:
            return {}
        return {"enabled": source.enabled, **source.config}

    def update_source_config(self, source_name: str, values: Dict[str, Any]) -> None:
        """
        Update configuration for a specific source.

        Args:
            source_name: Name of the provider
            values: Keys of SourceConfig to replace

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        with self._lock:
            if self._sources is None:
                raise ConfigurationError("Sources configuration not loaded")

            sources_dict = self._sources.model_dump()
            sources_dict['sources'].setdefault(source_name, {}).update(values)

            try:
                updated_sources = SourcesConfig.model_validate(sources_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid source configuration: {e}", str(self._sources_file))

            self._sources = updated_sources
            self._save_sources(updated_sources)
            logger.info(f"Source configuration updated: {source_name}")


__all__ = ["ConfigManager", "DEFAULT_SOURCES"]
