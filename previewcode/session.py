"""Render sessions: options, resolved theme, and a configured highlighter.

A session resolves its theme exactly once, at construction, before any
render. The only mutation afterwards is ``update_theme``. Renders hold the
session's read side for their whole duration and ``update_theme`` holds the
write side, so one document never mixes two themes. Thumbnail requests build
a fresh session each; a preview host may share one across renders.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from .appearance import system_is_light
from .colors import RGB
from .config import Preferences, normalize_font_size
from .constants import (
    BASE_PREVIEW_FONT_SIZE,
    BASE_THUMBNAIL_FONT_SIZE,
    DEFAULT_FONT,
    DEFAULT_LANGUAGE,
    DEFAULT_LINE_SPACING,
)
from .errors import HighlighterUnavailable
from .grammars import BUNDLED_GRAMMARS, load_grammar_script
from .highlighter import Highlighter, PygmentsHighlighter
from .theme import DisplayMode, ResolvedTheme, parse_theme_descriptor, resolve_theme

logger = logging.getLogger(__name__)

HighlighterFactory = Callable[[], Highlighter]


@dataclass(frozen=True)
class RenderOptions:
    """Per-session rendering options."""

    font_name: str = DEFAULT_FONT
    font_size: float = BASE_PREVIEW_FONT_SIZE
    line_spacing: float = DEFAULT_LINE_SPACING
    is_thumbnail: bool = False
    default_language: str = DEFAULT_LANGUAGE
    debug: bool = False

    @property
    def extra_line_spacing(self) -> float:
        """Pixels added between lines; thumbnails never add spacing."""
        if self.is_thumbnail:
            return 0.0
        return max(0.0, (self.line_spacing - 1.0) * self.font_size)

    @classmethod
    def from_preferences(cls, preferences: Preferences, *, is_thumbnail: bool = False) -> "RenderOptions":
        if is_thumbnail:
            return cls(
                font_name=preferences.font_name,
                font_size=BASE_THUMBNAIL_FONT_SIZE,
                is_thumbnail=True,
                default_language=preferences.default_language,
                debug=preferences.debug,
            )
        return cls(
            font_name=preferences.font_name,
            font_size=normalize_font_size(preferences.font_size),
            line_spacing=preferences.line_spacing,
            is_thumbnail=False,
            default_language=preferences.default_language,
            debug=preferences.debug,
        )


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Readers may nest, and a waiting writer does not block new readers.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def reading(self) -> Iterator[None]:
        with self._condition:
            while self._writing:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def writing(self) -> Iterator[None]:
        with self._condition:
            while self._writing or self._readers:
                self._condition.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


def _register_bundled_grammars(highlighter: Highlighter) -> None:
    for name in BUNDLED_GRAMMARS:
        try:
            script = load_grammar_script(name)
        except (OSError, UnicodeDecodeError) as exc:
            raise HighlighterUnavailable(f"bundled grammar {name!r} is missing or damaged: {exc}") from exc
        registered = highlighter.register_language(name, script)
        logger.debug("Language %r registered: %s", name, registered)


class RenderSession:
    """Theme and highlighter state for a sequence of render calls."""

    def __init__(
        self,
        options: RenderOptions,
        theme: ResolvedTheme,
        highlighter: Highlighter,
    ) -> None:
        self.options = options
        self._lock = ReadWriteLock()
        self._theme = theme
        self.highlighter = highlighter
        self._background = highlighter.background_color

    @classmethod
    def create(
        cls,
        preferences: Preferences | None = None,
        *,
        is_thumbnail: bool = False,
        is_system_light: bool | None = None,
        highlighter_factory: HighlighterFactory = PygmentsHighlighter,
        register_grammars: bool = True,
    ) -> "RenderSession":
        """Resolve the theme once and configure a fresh highlighter.

        Raises ``HighlighterUnavailable`` when the engine or a bundled grammar
        cannot be loaded.
        """
        preferences = preferences or Preferences()
        options = RenderOptions.from_preferences(preferences, is_thumbnail=is_thumbnail)
        if is_system_light is None and not is_thumbnail and preferences.theme_mode is DisplayMode.AUTO:
            is_system_light = system_is_light()
        theme = resolve_theme(
            preferences.light_theme,
            preferences.theme_mode,
            True if is_system_light is None else is_system_light,
            is_thumbnail,
            dark_descriptor=preferences.dark_theme,
        )

        highlighter = highlighter_factory()
        highlighter.set_theme(theme.name)
        highlighter.set_code_font(options.font_name, options.font_size)
        highlighter.line_spacing = options.extra_line_spacing
        if register_grammars:
            _register_bundled_grammars(highlighter)

        logger.debug("Session theme %s (dark=%s), thumbnail=%s", theme.name, theme.is_dark, is_thumbnail)
        return cls(options, theme, highlighter)

    def reading(self):
        """Context manager held by renders; excludes ``update_theme``."""
        return self._lock.reading()

    @property
    def theme(self) -> ResolvedTheme:
        with self._lock.reading():
            return self._theme

    @property
    def background_color(self) -> RGB:
        with self._lock.reading():
            return self._background

    def snapshot(self) -> tuple[ResolvedTheme, RGB]:
        """Theme and background read together, consistent with each other."""
        with self._lock.reading():
            return self._theme, self._background

    def update_theme(self, descriptor: str) -> ResolvedTheme:
        """Switch to ``descriptor`` and refresh the cached background.

        Waits for in-flight renders to finish first.
        """
        decoded = parse_theme_descriptor(descriptor)
        with self._lock.writing():
            self.highlighter.set_theme(decoded.name)
            self._theme = ResolvedTheme(decoded.name, decoded.is_dark)
            self._background = self.highlighter.background_color
            return self._theme


__all__ = [
    "ReadWriteLock",
    "RenderOptions",
    "RenderSession",
]
