"""glyphpath - Glyph outline resolution and SVG path geometry.

glyphpath turns decoded font outline data into vector paths that can be
measured, serialized to SVG path data and rendered at any size. It owns the
drawing-command model, exact Bezier bounding boxes, the SVG path codec and the
glyph rendering pipeline (scaling, variations, hinting, colour layers and
embedded images).

Example:
    >>> from glyphpath import Path, PathDataOptions
    >>> p = Path()
    >>> p.move_to(0, 0); p.line_to(100, 0); p.line_to(100, 100); p.close()
    >>> p.to_path_data(PathDataOptions(optimize=False, flip_y=False))
    'M0 0L100 0L100 100Z'
"""

__version__ = "0.1.0"

from glyphpath.config import PathDataOptions, RenderOptions, SVGParseOptions
from glyphpath.core import FontContext, Glyph, GlyphSet, Path
from glyphpath.domain import BoundingBox

__all__ = [
    "BoundingBox",
    "FontContext",
    "Glyph",
    "GlyphSet",
    "Path",
    "PathDataOptions",
    "RenderOptions",
    "SVGParseOptions",
    "__version__",
]
