"""Configuration system for LinkOS using pydantic-settings.

Supports layered configuration:
1. Built-in defaults (lowest priority)
2. ./linkos.toml (project-level)
3. The file named by LINKOS_CONFIG_FILE
4. Environment variables (highest priority)

Environment variables use the LINKOS_ prefix with nested delimiter __.
Example: LINKOS_MANAGER__MAX_WINDOWS=10, LINKOS_SHORTCUTS__CYCLE_WINDOWS="ctrl+tab"
"""

from __future__ import annotations

import logging
import os
import tomllib

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


log = logging.getLogger(__name__)


def _find_config_files() -> list[Path]:
    """Find all configuration files in order of precedence (lowest first)."""
    files = []

    linkos_toml = Path("linkos.toml")
    if linkos_toml.exists():
        files.append(linkos_toml)

    env_config = os.environ.get("LINKOS_CONFIG_FILE")
    if env_config:
        env_path = Path(env_config)
        if env_path.exists():
            files.append(env_path)
        else:
            log.warning("LINKOS_CONFIG_FILE points to a missing file: %s", env_path)

    return files


def _load_toml_config() -> dict[str, Any]:
    """Load and merge all TOML configuration files."""
    merged: dict[str, Any] = {}

    for config_file in _find_config_files():
        try:
            data = tomllib.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            log.warning("Ignoring unreadable config file %s: %s", config_file, exc)
            continue
        merged = _deep_merge(merged, data)

    return merged


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _TomlSettingsSource(PydanticBaseSettingsSource):
    """Values from the TOML files, ranked below environment variables."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        # Unused: __call__ returns the whole merged mapping at once.
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return _load_toml_config()


class WindowSettings(BaseSettings):
    """Defaults applied to every new window.

    Environment prefix: LINKOS_WINDOW__
    Example: LINKOS_WINDOW__ANIMATION_DURATION=150
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKOS_WINDOW__",
        extra="ignore",
    )

    title: str = "Untitled"
    width: int = Field(default=800, ge=1, description="Default window width")
    height: int = Field(default=600, ge=1, description="Default window height")
    min_width: int = Field(default=300, ge=1, description="Minimum window width")
    min_height: int = Field(default=200, ge=1, description="Minimum window height")

    titlebar_height: int = Field(default=28, ge=0, description="Height of the draggable title bar")
    animation_duration: int = Field(
        default=300, ge=0, description="Length of show/hide/minimize/close animations (ms)"
    )
    start_maximized_delay: int = Field(default=50, ge=0, description="Delay before start-maximized (ms)")


class ManagerSettings(BaseSettings):
    """Window manager policy.

    Environment prefix: LINKOS_MANAGER__
    Example: LINKOS_MANAGER__MAX_WINDOWS=10
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKOS_MANAGER__",
        extra="ignore",
    )

    max_windows: int = Field(default=20, ge=1, description="Capacity of the window manager")
    stack_spacing: int = Field(default=30, ge=0, description="Offset between windows of one app")
    default_x: int = 100
    default_y: int = 100
    edge_padding: int = Field(default=20, ge=0)
    dock_reserve: int = Field(default=60, ge=0, description="Space kept free above the dock")
    default_window_width: int = Field(default=800, ge=1)
    default_window_height: int = Field(default=600, ge=1)
    mobile_breakpoint: int = Field(default=768, ge=0)
    keyboard_shortcuts: bool = Field(default=True, description="Enable global shortcuts")


class DockSettings(BaseSettings):
    """Dock layout.

    Environment prefix: LINKOS_DOCK__
    Example: LINKOS_DOCK__POSITION=left
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKOS_DOCK__",
        extra="ignore",
    )

    position: Literal["bottom", "left", "right"] = "bottom"
    icon_size: Literal["small", "medium", "large"] = "medium"
    max_recent_apps: int = Field(default=5, ge=0)
    margin: int = Field(default=8, ge=0, description="Gap between dock and screen edge")
    apps: list[str] = Field(
        default_factory=lambda: [
            "finder", "terminal", "portfolio", "about", "contact", "preferences",
        ]
    )


class ShortcutSettings(BaseSettings):
    """Key combo per command.

    Environment prefix: LINKOS_SHORTCUTS__
    Example: LINKOS_SHORTCUTS__HIDE_ALL="ctrl+alt+h"
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKOS_SHORTCUTS__",
        extra="ignore",
    )

    minimize_window: str = "meta+m"
    close_window: str = "meta+w"
    cycle_windows: str = "meta+tab"
    cycle_app_windows: str = "meta+backquote"
    close_all: str = "meta+shift+w"
    hide_all: str = "meta+alt+h"

    @field_validator("*", mode="after")
    @classmethod
    def _validate_combo(cls, v: str) -> str:
        from linkos.core.combo_parser import ComboParseError, parse_combo

        try:
            parse_combo(v)
        except ComboParseError as exc:
            raise ValueError(str(exc)) from exc
        return v

    def global_bindings(self) -> dict[str, str]:
        """Command name -> combo for the manager-scoped shortcuts."""
        return {
            "cycle_windows": self.cycle_windows,
            "cycle_app_windows": self.cycle_app_windows,
            "close_all": self.close_all,
            "hide_all": self.hide_all,
        }


class LogSettings(BaseSettings):
    """Logging settings.

    Environment prefix: LINKOS_LOG__
    Example: LINKOS_LOG__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKOS_LOG__",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    datefmt: str = "%H:%M:%S"


class LinkOSSettings(BaseSettings):
    """Main settings aggregating all configuration sections.

    Environment prefix: LINKOS_

    Configuration sources (in order of precedence):
    1. Built-in defaults
    2. ./linkos.toml
    3. $LINKOS_CONFIG_FILE
    4. Environment variables (highest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKOS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    window: WindowSettings = Field(default_factory=WindowSettings)
    manager: ManagerSettings = Field(default_factory=ManagerSettings)
    dock: DockSettings = Field(default_factory=DockSettings)
    shortcuts: ShortcutSettings = Field(default_factory=ShortcutSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    viewport_width: int = Field(default=1920, ge=1, description="Headless viewport width")
    viewport_height: int = Field(default=1080, ge=1, description="Headless viewport height")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Explicit arguments > environment > TOML files > defaults
        return (
            init_settings,
            env_settings,
            _TomlSettingsSource(settings_cls),
        )

    def show(self) -> str:
        """Human-readable dump of every section."""
        lines: list[str] = []
        for section, values in self.model_dump().items():
            if isinstance(values, dict):
                lines.append(f"[{section}]")
                for key, value in values.items():
                    lines.append(f"  {key} = {value!r}")
            else:
                lines.append(f"{section} = {values!r}")
        return "\n".join(lines)


@lru_cache(maxsize=1)
def get_settings() -> LinkOSSettings:
    """Get the global settings instance (cached).

    Call clear_settings() to reload configuration.
    """
    return LinkOSSettings()


def clear_settings() -> None:
    """Clear the cached settings to force reload."""
    get_settings.cache_clear()


def reload_settings() -> LinkOSSettings:
    """Reload settings from all sources."""
    clear_settings()
    return get_settings()
