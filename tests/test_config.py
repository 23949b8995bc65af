"""Unit tests for ConfigManager."""

import pytest

from scoreline.config import DEFAULT_CONFIG, ConfigManager, RenderConfig
from scoreline.errors import ConfigError


def test_defaults() -> None:
    config = ConfigManager().get_config()
    assert config == DEFAULT_CONFIG
    assert config.width == 800
    assert config.font_family == "Arial, sans-serif"


def test_user_values_override_defaults() -> None:
    config = ConfigManager({"theme": "dark", "width": 1024}).get_config()
    assert config.theme == "dark"
    assert config.width == 1024
    assert config.height == DEFAULT_CONFIG.height


def test_update_and_reset() -> None:
    manager = ConfigManager()
    manager.update_config(font_size=20)
    assert manager.get_config().font_size == 20
    assert manager.reset_config() == DEFAULT_CONFIG


def test_unknown_key_is_rejected() -> None:
    with pytest.raises(ConfigError, match="colour"):
        ConfigManager({"colour": "red"})
    with pytest.raises(ConfigError):
        ConfigManager().update_config(colour="red")


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ConfigError, match="theme"):
        RenderConfig(theme="neon")
    with pytest.raises(ConfigError, match="width"):
        ConfigManager({"width": 0})


def test_to_dict() -> None:
    assert RenderConfig().to_dict()["theme"] == "default"
