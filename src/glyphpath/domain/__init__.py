"""Domain value types for glyphpath.

This module contains the leaf types the rest of the package is built on. They
have no dependencies on fonttools or on the SVG codec.

Key classes:
- MoveTo, LineTo, QuadTo, CurveTo, Close: Drawing command variants
- BoundingBox: Incremental bounds with exact Bezier extrema
- GlyphPoint: A raw TrueType contour point
- Deferred: Compute-once slot for lazily produced values
"""

from glyphpath.domain.bbox import BoundingBox, cubic_extrema
from glyphpath.domain.commands import (
    Close,
    CurveTo,
    LineTo,
    MoveTo,
    PathCommand,
    QuadTo,
    command_from_dict,
)
from glyphpath.domain.deferred import Deferred, Resolved, Unresolved
from glyphpath.domain.point import GlyphPoint

__all__: list[str] = [
    # Commands
    "Close",
    "CurveTo",
    "LineTo",
    "MoveTo",
    "PathCommand",
    "QuadTo",
    "command_from_dict",
    # Geometry
    "BoundingBox",
    "cubic_extrema",
    "GlyphPoint",
    # Lazy values
    "Deferred",
    "Resolved",
    "Unresolved",
]
