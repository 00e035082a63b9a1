"""RGB colour conversions shared by table styling, terminal and bitmap output.

Colours travel as ``(r, g, b)`` float tuples in ``[0, 1]`` for arithmetic and
as ``#rrggbb`` strings on styled spans.
"""

from __future__ import annotations

RGB = tuple[float, float, float]

WHITE: RGB = (1.0, 1.0, 1.0)
BLACK: RGB = (0.0, 0.0, 0.0)


def clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def parse_hex_color(value: str | None, default: RGB = WHITE) -> RGB:
    """Parse ``#rgb``/``#rrggbb`` (leading ``#`` optional) into unit floats."""
    if not value:
        return default
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        return default
    try:
        channels = [int(digits[idx : idx + 2], 16) for idx in (0, 2, 4)]
    except ValueError:
        return default
    return (channels[0] / 255.0, channels[1] / 255.0, channels[2] / 255.0)


def to_rgb255(color: RGB) -> tuple[int, int, int]:
    r, g, b = (int(round(clamp_unit(channel) * 255)) for channel in color)
    return r, g, b


def to_hex(color: RGB) -> str:
    r, g, b = to_rgb255(color)
    return f"#{r:02x}{g:02x}{b:02x}"


def css_rgb(color: RGB) -> str:
    """Format as a CSS ``rgb(r, g, b)`` string."""
    r, g, b = to_rgb255(color)
    return f"rgb({r}, {g}, {b})"


def adjust_channels(color: RGB, delta: float) -> RGB:
    """Shift every channel by ``delta``, clamped to ``[0, 1]``."""
    r, g, b = color
    return (clamp_unit(r + delta), clamp_unit(g + delta), clamp_unit(b + delta))


def relative_luminance(color: RGB) -> float:
    r, g, b = color
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


__all__ = [
    "RGB",
    "WHITE",
    "BLACK",
    "clamp_unit",
    "parse_hex_color",
    "to_rgb255",
    "to_hex",
    "css_rgb",
    "adjust_channels",
    "relative_luminance",
]
