"""Render configuration for the diagram plugin."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Final

from scoreline.errors import ConfigError

SUPPORTED_THEMES: Final[frozenset[str]] = frozenset({"default", "dark", "forest", "neutral"})


@dataclass(frozen=True)
class RenderConfig:
    """
    Visual settings handed to the renderers.

    Attributes:
        theme:       Colour theme name.
        width:       Target drawing width in pixels.
        height:      Target drawing height in pixels.
        font_size:   Text size in points.
        font_family: CSS font stack for titles and labels.
    """

    theme: str = "default"
    width: int = 800
    height: int = 600
    font_size: int = 14
    font_family: str = "Arial, sans-serif"

    def __post_init__(self) -> None:
        if self.theme not in SUPPORTED_THEMES:
            supported = ", ".join(sorted(SUPPORTED_THEMES))
            raise ConfigError(f"Unsupported theme '{self.theme}'. Use one of: {supported}.")
        for name in ("width", "height", "font_size"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}.")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG: Final = RenderConfig()

_FIELD_NAMES: Final[frozenset[str]] = frozenset(f.name for f in fields(RenderConfig))


def _check_keys(values: dict[str, Any]) -> None:
    unknown = sorted(set(values) - _FIELD_NAMES)
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")


class ConfigManager:
    """Holds the active RenderConfig; user values are merged over the defaults."""

    def __init__(self, user_config: dict[str, Any] | None = None) -> None:
        values = dict(user_config or {})
        _check_keys(values)
        self._config = replace(DEFAULT_CONFIG, **values)

    def get_config(self) -> RenderConfig:
        return self._config

    def update_config(self, **changes: Any) -> RenderConfig:
        _check_keys(changes)
        self._config = replace(self._config, **changes)
        return self._config

    def reset_config(self) -> RenderConfig:
        self._config = DEFAULT_CONFIG
        return self._config
