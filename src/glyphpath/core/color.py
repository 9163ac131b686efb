"""Palette colour values and their textual formats."""

import colorsys
from typing import NamedTuple

from glyphpath.config import ColorFormat

CURRENT_COLOR = "currentColor"

# CPAL palette entry index meaning "use the text foreground colour".
FOREGROUND_PALETTE_INDEX = 0xFFFF


class RGBA(NamedTuple):
    """An 8-bit-per-channel colour."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def to_bgra_int(self) -> int:
        """Pack into a CPAL-ordered 32-bit integer (blue in the high byte)."""
        return (self.blue << 24) | (self.green << 16) | (self.red << 8) | self.alpha


def _alpha_fraction(alpha: int) -> str:
    return f"{alpha / 255:.3f}".rstrip("0").rstrip(".")


def format_color(color: RGBA, fmt: ColorFormat | str = ColorFormat.RGBA) -> str:
    """Format a colour for use as a fill value.

    Args:
        color: Colour to format
        fmt: One of raw, hex, hexa, rgb, rgba, hsl, hsla

    Returns:
        Formatted colour string

    Raises:
        ValueError: If the format is unknown
    """
    fmt = ColorFormat(fmt)
    r, g, b, a = color

    if fmt is ColorFormat.RAW:
        return str(color.to_bgra_int())
    if fmt is ColorFormat.HEX:
        return f"#{r:02x}{g:02x}{b:02x}"
    if fmt is ColorFormat.HEXA:
        return f"#{r:02x}{g:02x}{b:02x}{a:02x}"
    if fmt is ColorFormat.RGB:
        return f"rgb({r}, {g}, {b})"
    if fmt is ColorFormat.RGBA:
        return f"rgba({r}, {g}, {b}, {_alpha_fraction(a)})"

    hue, lightness, saturation = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    hsl = f"{round(hue * 360)}, {round(saturation * 100)}%, {round(lightness * 100)}%"
    if fmt is ColorFormat.HSL:
        return f"hsl({hsl})"
    return f"hsla({hsl}, {_alpha_fraction(a)})"
