"""
Provider Registry - Name-based construction and lifetime of providers.

Providers are registered statically by name. The registry merges the
on-disk source configuration with caller overrides, memoises one instance
per name and closes their HTTP sessions on cleanup.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Type

from anisource.core.config_manager import ConfigManager
from anisource.core.exceptions import ProviderError
from anisource.plugins.base import BaseProvider
from anisource.plugins.hanime import HanimeProvider
from anisource.plugins.yhdm import YhdmProvider


logger = logging.getLogger(__name__)


PROVIDERS: Dict[str, Type[BaseProvider]] = {
    "hanime": HanimeProvider,
    "yhdm": YhdmProvider,
}


class ProviderRegistry:
    """
    Creates and caches provider instances.

    Configuration is read from ``ConfigManager`` when one is given; explicit
    overrides passed to ``create`` win over the file.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.config_manager = config_manager
        self._instances: Dict[str, BaseProvider] = {}

    @staticmethod
    def available() -> List[str]:
        """Names of all registered providers."""
        return sorted(PROVIDERS)

    @staticmethod
    def provider_class(name: str) -> Type[BaseProvider]:
        """
        Look up the class registered under ``name``.

        Raises:
            ProviderError: If the name is not registered
        """
        provider_class = PROVIDERS.get(name)
        if provider_class is None:
            raise ProviderError(
                f"Unknown provider: {name}",
                provider_name=name,
                details=f"Available providers: {', '.join(sorted(PROVIDERS))}"
            )
        return provider_class

    def create(self, name: str, config: Optional[Dict[str, Any]] = None) -> BaseProvider:
        """
        Build a new provider instance.

        Args:
            name: Registered provider name
            config: Overrides merged over the configured values

        Raises:
            ProviderError: If the name is not registered
            ConfigurationError: If the merged configuration is invalid
        """
        provider_class = self.provider_class(name)

        merged: Dict[str, Any] = {}
        if self.config_manager is not None:
            merged.update(self.config_manager.get_provider_config(name))
        merged.update(config or {})

        provider = provider_class(merged)
        logger.debug(f"Created provider {name}: {provider!r}")
        return provider

    def get(self, name: str) -> BaseProvider:
        """
        Return the shared instance for ``name``, creating it on first use.

        Raises:
            ProviderError: If the provider is unknown or disabled
        """
        if name not in self._instances:
            provider = self.create(name)
            if not provider.config.enabled:
                raise ProviderError(f"Provider is disabled: {name}", provider_name=name)
            self._instances[name] = provider
            logger.info(f"Loaded provider: {name}")
        return self._instances[name]

    async def cleanup(self) -> None:
        """Close every cached provider's HTTP session."""
        logger.debug("Cleaning up providers")

        results = await asyncio.gather(
            *(provider.cleanup() for provider in self._instances.values()),
            return_exceptions=True
        )
        for name, result in zip(list(self._instances), results):
            if isinstance(result, Exception):
                logger.warning(f"Cleanup failed for provider {name}: {result}")

        self._instances.clear()


__all__ = ["ProviderRegistry", "PROVIDERS"]
