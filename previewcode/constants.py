"""Fixed values shared across resolution, rendering, and thumbnail layout."""

from __future__ import annotations

APP_NAME = "previewcode"

DEFAULT_FONT = "DejaVuSansMono.ttf"
BASE_PREVIEW_FONT_SIZE = 16.0
BASE_THUMBNAIL_FONT_SIZE = 22.0
FONT_SIZE_OPTIONS: tuple[float, ...] = (10.0, 12.0, 14.0, 16.0, 18.0, 24.0, 28.0)
DEFAULT_LINE_SPACING = 1.0

DARK_MODE_LITERAL = "dark"
FALLBACK_THEME_DESCRIPTOR = "dark.agate"
DEFAULT_THEME_LIGHT = "light.atom-one-light"
DEFAULT_THEME_DARK = "dark.atom-one-dark"
THUMBNAIL_THEME = "dark.agate"

DEFAULT_LANGUAGE = "swift"
TABULAR_TOKENS = frozenset({"csv-data", "ssv-data"})
UNDEFINED_SENTINEL = "undefined"

# Thumbnail geometry, in body-bitmap pixels.
THUMBNAIL_ASPECT = 0.75
THUMBNAIL_WIDTH = 768
THUMBNAIL_HEIGHT = 1024
THUMBNAIL_TAG_HEIGHT = 205
THUMBNAIL_TAG_FRACTION = 0.2
THUMBNAIL_LINE_COUNT = 38
THUMBNAIL_PADDING = 16
TAG_TEXT_SIZE = 180.0
TAG_TEXT_MIN_SIZE = 118.0
TAG_TEXT_MARGIN = 20
TAG_TEXT_COLOR: tuple[int, int, int] = (0, 84, 135)
HOST_LABEL_MIN_MACOS = 12

TAB_STOP = 4
