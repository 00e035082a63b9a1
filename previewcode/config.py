"""Persistent JSON preferences.

Stores font, theme slots, display mode, line spacing and the fallback
language. All access is defensive: malformed or missing config falls back
to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .constants import (
    APP_NAME,
    BASE_PREVIEW_FONT_SIZE,
    DEFAULT_FONT,
    DEFAULT_LANGUAGE,
    DEFAULT_LINE_SPACING,
    DEFAULT_THEME_DARK,
    DEFAULT_THEME_LIGHT,
    FONT_SIZE_OPTIONS,
)
from .theme import DisplayMode

CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

THEME_SLOTS = ("light_theme", "dark_theme")


@dataclass(frozen=True)
class Preferences:
    """User preferences as read from config, already sanitized."""

    font_name: str = DEFAULT_FONT
    font_size: float = BASE_PREVIEW_FONT_SIZE
    light_theme: str = DEFAULT_THEME_LIGHT
    dark_theme: str = DEFAULT_THEME_DARK
    theme_mode: DisplayMode = DisplayMode.AUTO
    line_spacing: float = DEFAULT_LINE_SPACING
    default_language: str = DEFAULT_LANGUAGE
    debug: bool = False


def load_config() -> dict[str, object]:
    """Read preferences JSON from ``CONFIG_PATH``.

    Anything other than a readable JSON object counts as "no preferences
    saved" and yields ``{}``.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Write preferences back to ``CONFIG_PATH``.

    Preferences are best effort: a read-only or missing config directory must
    not fail a render, so write errors are dropped.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError):
        pass


def normalize_font_size(value: object) -> float:
    """Clamp a preview font size to the offered range.

    Values outside ``FONT_SIZE_OPTIONS`` (including ``0`` from an unset key)
    become the base preview size.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return BASE_PREVIEW_FONT_SIZE
    if value < FONT_SIZE_OPTIONS[0] or value > FONT_SIZE_OPTIONS[-1]:
        return BASE_PREVIEW_FONT_SIZE
    return float(value)


def _load_str(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _load_line_spacing(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_LINE_SPACING
    return float(value) if value >= 1.0 else DEFAULT_LINE_SPACING


def load_preferences() -> Preferences:
    """Build ``Preferences`` from config, sanitizing every field."""
    data = load_config()
    debug = data.get("debug")
    return Preferences(
        font_name=_load_str(data, "font_name", DEFAULT_FONT),
        font_size=normalize_font_size(data.get("font_size")),
        light_theme=_load_str(data, "light_theme", DEFAULT_THEME_LIGHT),
        dark_theme=_load_str(data, "dark_theme", DEFAULT_THEME_DARK),
        theme_mode=DisplayMode.parse(data.get("theme_mode")),
        line_spacing=_load_line_spacing(data.get("line_spacing")),
        default_language=_load_str(data, "default_language", DEFAULT_LANGUAGE),
        debug=debug if isinstance(debug, bool) else False,
    )


def save_theme_descriptor(slot: str, descriptor: str) -> None:
    """Persist a theme descriptor into ``light_theme`` or ``dark_theme``."""
    if slot not in THEME_SLOTS:
        raise ValueError(f"unknown theme slot: {slot!r}")
    stripped = str(descriptor).strip()
    if not stripped:
        return
    config = load_config()
    config[slot] = stripped
    save_config(config)


def save_theme_mode(mode: DisplayMode | str) -> None:
    config = load_config()
    config["theme_mode"] = DisplayMode.parse(mode).value
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "Preferences",
    "load_config",
    "save_config",
    "normalize_font_size",
    "load_preferences",
    "save_theme_descriptor",
    "save_theme_mode",
]
