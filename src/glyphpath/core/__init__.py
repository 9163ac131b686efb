"""Outline model: paths, glyphs, glyph sets and font capabilities."""

from glyphpath.core.capabilities import (
    ColorLayer,
    EmbeddedImage,
    FontContext,
    GlyphSource,
    HintingEngine,
    ImageSource,
    LayerSource,
    Palette,
    VariationSource,
)
from glyphpath.core.color import CURRENT_COLOR, FOREGROUND_PALETTE_INDEX, RGBA, format_color
from glyphpath.core.glyph import Glyph, GlyphMetrics
from glyphpath.core.glyphset import GlyphSet
from glyphpath.core.path import DrawingSink, Path, PathImage

__all__ = [
    "CURRENT_COLOR",
    "FOREGROUND_PALETTE_INDEX",
    "RGBA",
    "ColorLayer",
    "DrawingSink",
    "EmbeddedImage",
    "FontContext",
    "Glyph",
    "GlyphMetrics",
    "GlyphSet",
    "GlyphSource",
    "HintingEngine",
    "ImageSource",
    "LayerSource",
    "Palette",
    "Path",
    "PathImage",
    "VariationSource",
    "format_color",
]
