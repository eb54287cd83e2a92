"""Tests for the provider registry."""

import pytest

from anisource.core.config_manager import ConfigManager
from anisource.core.exceptions import ConfigurationError, ProviderError
from anisource.core.plugin_manager import ProviderRegistry
from anisource.plugins.hanime import HanimeProvider
from anisource.plugins.yhdm import YhdmProvider


class TestProviderRegistry:
    def test_available(self) -> None:
        assert ProviderRegistry.available() == ["hanime", "yhdm"]

    def test_create_without_config_manager(self) -> None:
        registry = ProviderRegistry()

        assert isinstance(registry.create("hanime"), HanimeProvider)
        assert isinstance(registry.create("yhdm"), YhdmProvider)

    def test_unknown_provider(self) -> None:
        with pytest.raises(ProviderError) as exc_info:
            ProviderRegistry().create("gogoanime")
        assert exc_info.value.provider_name == "gogoanime"

    def test_overrides_win_over_file(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path)
        manager.update_source_config("yhdm", {"config": {"base_url": "https://yhdm.example", "timeout": 30}})
        registry = ProviderRegistry(manager)

        provider = registry.create("yhdm", {"timeout": 5})

        assert provider.base_url == "https://yhdm.example"
        assert provider.config.timeout == 5

    def test_invalid_file_config(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path)
        manager.update_source_config("hanime", {"config": {"base_url": "not-a-url"}})

        with pytest.raises(ConfigurationError):
            ProviderRegistry(manager).create("hanime")

    def test_get_is_memoised(self) -> None:
        registry = ProviderRegistry()
        assert registry.get("hanime") is registry.get("hanime")

    def test_disabled_provider(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path)
        manager.update_source_config("hanime", {"enabled": False})

        with pytest.raises(ProviderError):
            ProviderRegistry(manager).get("hanime")

    @pytest.mark.asyncio
    async def test_cleanup_forgets_instances(self) -> None:
        registry = ProviderRegistry()
        first = registry.get("yhdm")

        await registry.cleanup()

        assert registry.get("yhdm") is not first
