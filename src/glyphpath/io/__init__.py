"""Font I/O layer for glyphpath.

fontTools decodes the binary tables; this package adapts it to the outline
model.

Key responsibilities:
- Load TTF/OTF fonts (eagerly or in low-memory streaming mode)
- Convert fontTools outlines and points to Path / GlyphPoint
- Expose COLR, CPAL, SVG and fvar tables as font capabilities
- Export glyphs as SVG files

Key classes:
- FontReader: Load fonts and build glyph sets
- GlyphExporter: Write per-glyph SVG files
"""

from glyphpath.io.converter import PathPen, glyph_bounds, glyph_points, path_from_glyph_set
from glyphpath.io.exporter import GlyphExporter
from glyphpath.io.reader import FontReader, FontToolsGlyphSource
from glyphpath.io.tables import ColorLayerTable, CPALPalette, FontToolsVariation, SVGImageTable

__all__ = [
    "CPALPalette",
    "ColorLayerTable",
    "FontReader",
    "FontToolsGlyphSource",
    "FontToolsVariation",
    "GlyphExporter",
    "PathPen",
    "SVGImageTable",
    "glyph_bounds",
    "glyph_points",
    "path_from_glyph_set",
]
