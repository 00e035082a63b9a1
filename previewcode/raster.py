"""Draw styled documents and type tags into Pillow bitmaps.

Bitmaps are allocated at fixed body/tag frame sizes and scaled later by the
compositor. Allocation and drawing errors surface as the graphics failures
of the error taxonomy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from PIL import Image, ImageDraw, ImageFont

from .colors import RGB, parse_hex_color, to_rgb255
from .constants import (
    TAB_STOP,
    TAG_TEXT_COLOR,
    TAG_TEXT_MARGIN,
    TAG_TEXT_MIN_SIZE,
    TAG_TEXT_SIZE,
    THUMBNAIL_HEIGHT,
    THUMBNAIL_PADDING,
    THUMBNAIL_TAG_HEIGHT,
    THUMBNAIL_WIDTH,
)
from .document import StyledDocument
from .errors import GraphicsAllocationFailure, GraphicsDrawFailure

logger = logging.getLogger(__name__)

DEFAULT_TAG_FONT = "DejaVuSans.ttf"
LINE_HEIGHT_FACTOR = 1.2
ELLIPSIS = "…"

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def load_font(font_name: str, size: float) -> Font:
    """Load ``font_name`` at ``size`` px, falling back to Pillow's default font."""
    pixel_size = max(1, int(round(size)))
    try:
        return ImageFont.truetype(font_name, pixel_size)
    except OSError:
        logger.debug("Font %r unavailable, using default font", font_name)
        return ImageFont.load_default(size=pixel_size)


def line_height(font_size: float, extra_spacing: float = 0.0) -> int:
    return max(1, int(round(font_size * LINE_HEIGHT_FACTOR + extra_spacing)))


def allocate_bitmap(size: tuple[int, int], mode: str = "RGB", color: object = 0) -> Image.Image:
    try:
        return Image.new(mode, size, color)
    except (ValueError, MemoryError) as exc:
        raise GraphicsAllocationFailure(f"cannot allocate {mode} bitmap of {size}") from exc


def render_body_bitmap(
    document: StyledDocument,
    background: RGB,
    foreground: str,
    size: tuple[int, int] = (THUMBNAIL_WIDTH, THUMBNAIL_HEIGHT),
    padding: int = THUMBNAIL_PADDING,
) -> Image.Image:
    """Draw ``document`` line by line onto a ``size`` bitmap.

    Lines and spans that fall outside the frame are clipped.
    """
    width, height = size
    image = allocate_bitmap(size, "RGB", to_rgb255(background))
    try:
        draw = ImageDraw.Draw(image)
        font = load_font(document.font_name, document.font_size)
        row_height = line_height(document.font_size, document.line_spacing)
        default_fill = to_rgb255(parse_hex_color(foreground))

        y = padding
        for line in document.lines():
            if y >= height:
                break
            x = float(padding)
            for span in line:
                if x >= width:
                    break
                text = span.text.expandtabs(TAB_STOP)
                advance = draw.textlength(text, font=font)
                if span.background:
                    draw.rectangle(
                        (x, y, x + advance, y + row_height),
                        fill=to_rgb255(parse_hex_color(span.background)),
                    )
                fill = to_rgb255(parse_hex_color(span.color)) if span.color else default_fill
                draw.text((x, y), text, font=font, fill=fill)
                if span.bold:
                    draw.text((x + 1, y), text, font=font, fill=fill)
                if span.underline:
                    underline_y = y + document.font_size
                    draw.line((x, underline_y, x + advance, underline_y), fill=fill)
                x += advance
            y += row_height
    except (OSError, ValueError, TypeError) as exc:
        image.close()
        raise GraphicsDrawFailure(f"cannot draw document: {exc}") from exc
    return image


def tag_font_size(
    rendered_width: float,
    frame_width: int = THUMBNAIL_WIDTH,
    base_size: float = TAG_TEXT_SIZE,
    minimum_size: float = TAG_TEXT_MIN_SIZE,
) -> float:
    """Shrink ``base_size`` proportionally when the tag is too wide.

    The tag must fit ``frame_width - 20`` px; the result never drops below
    ``minimum_size``.
    """
    available = frame_width - TAG_TEXT_MARGIN
    if rendered_width <= available:
        return base_size
    return max(base_size * available / rendered_width, minimum_size)


def truncate_middle(text: str, fits: Callable[[str], bool]) -> str:
    """Remove characters from the middle of ``text`` until ``fits`` accepts it."""
    if fits(text):
        return text
    keep = len(text) - 1
    while keep > 0:
        head = (keep + 1) // 2
        tail = keep - head
        candidate = text[:head] + ELLIPSIS + (text[-tail:] if tail else "")
        if fits(candidate):
            return candidate
        keep -= 1
    return ELLIPSIS


def render_tag_bitmap(
    tag: str,
    font_name: str = DEFAULT_TAG_FONT,
    size: tuple[int, int] = (THUMBNAIL_WIDTH, THUMBNAIL_TAG_HEIGHT),
) -> Image.Image:
    """Draw the upper-cased ``tag`` centred on a transparent bitmap."""
    width, height = size
    label = tag.upper()
    image = allocate_bitmap(size, "RGBA", (0, 0, 0, 0))
    try:
        base_font = load_font(font_name, TAG_TEXT_SIZE)
        font_size = tag_font_size(base_font.getlength(label), frame_width=width)
        font = base_font if font_size == TAG_TEXT_SIZE else load_font(font_name, font_size)
        available = width - TAG_TEXT_MARGIN
        label = truncate_middle(label, lambda candidate: font.getlength(candidate) <= available)

        draw = ImageDraw.Draw(image)
        left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
        origin = ((width - (right - left)) / 2 - left, (height - (bottom - top)) / 2 - top)
        draw.text(origin, label, font=font, fill=(*TAG_TEXT_COLOR, 255))
    except (OSError, ValueError, TypeError) as exc:
        image.close()
        raise GraphicsDrawFailure(f"cannot draw tag {tag!r}: {exc}") from exc
    return image


__all__ = [
    "DEFAULT_TAG_FONT",
    "load_font",
    "line_height",
    "allocate_bitmap",
    "render_body_bitmap",
    "tag_font_size",
    "truncate_middle",
    "render_tag_bitmap",
]
