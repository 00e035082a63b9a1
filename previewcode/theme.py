"""Theme descriptor decoding and light/dark theme selection.

Themes are stored as ``"<mode>.<name>"`` strings (``dark.agate``). The mode
prefix is the single source of truth for darkness. Thumbnails ignore user
preference and always use a fixed dark theme.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from .constants import (
    DARK_MODE_LITERAL,
    DEFAULT_THEME_DARK,
    DEFAULT_THEME_LIGHT,
    FALLBACK_THEME_DESCRIPTOR,
    THUMBNAIL_THEME,
)

logger = logging.getLogger(__name__)


class DisplayMode(str, Enum):
    """User preference for which stored theme the preview uses."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: object) -> "DisplayMode":
        """Coerce a persisted value, treating anything unknown as ``AUTO``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.AUTO


@dataclass(frozen=True)
class ThemeDescriptor:
    """Decoded ``"<mode>.<name>"`` record."""

    name: str
    is_dark: bool

    @property
    def descriptor(self) -> str:
        mode = DARK_MODE_LITERAL if self.is_dark else "light"
        return f"{mode}.{self.name}"


class ResolvedTheme(NamedTuple):
    """Theme chosen for one rendering session."""

    name: str
    is_dark: bool


def parse_theme_descriptor(stored: str | None) -> ThemeDescriptor:
    """Decode a stored descriptor, substituting the fallback when malformed.

    Anything that does not split on ``.`` into exactly two parts is replaced by
    ``dark.agate``.
    """
    parts = (stored or "").split(".")
    if len(parts) != 2:
        logger.debug("Malformed theme descriptor %r, using %s", stored, FALLBACK_THEME_DESCRIPTOR)
        parts = FALLBACK_THEME_DESCRIPTOR.split(".")
    mode, name = parts
    return ThemeDescriptor(name=name, is_dark=(mode == DARK_MODE_LITERAL))


def resolve_theme(
    stored_descriptor: str | None,
    display_mode: DisplayMode | str = DisplayMode.AUTO,
    is_system_light: bool = True,
    is_thumbnail: bool = False,
    *,
    dark_descriptor: str | None = None,
) -> ResolvedTheme:
    """Pick the active theme name and darkness flag.

    ``stored_descriptor`` is the light-slot theme; ``dark_descriptor`` the
    dark-slot one (defaults to ``stored_descriptor`` when only one theme is
    stored). ``AUTO`` mode consults ``is_system_light``.
    """
    if is_thumbnail:
        chosen = parse_theme_descriptor(THUMBNAIL_THEME)
        return ResolvedTheme(chosen.name, chosen.is_dark)

    light_slot = stored_descriptor
    dark_slot = dark_descriptor if dark_descriptor is not None else stored_descriptor

    mode = DisplayMode.parse(display_mode)
    if mode is DisplayMode.LIGHT:
        chosen = parse_theme_descriptor(light_slot)
    elif mode is DisplayMode.DARK:
        chosen = parse_theme_descriptor(dark_slot)
    else:
        chosen = parse_theme_descriptor(light_slot if is_system_light else dark_slot)
    return ResolvedTheme(chosen.name, chosen.is_dark)


__all__ = [
    "DisplayMode",
    "ThemeDescriptor",
    "ResolvedTheme",
    "DEFAULT_THEME_LIGHT",
    "DEFAULT_THEME_DARK",
    "parse_theme_descriptor",
    "resolve_theme",
]
