"""Converters from fontTools glyph representations to glyphpath models.

fontTools does the binary decoding; these helpers translate its pen and
table views into Path commands and raw GlyphPoint lists.
"""

from typing import Any

from fontTools.pens.basePen import BasePen
from fontTools.pens.boundsPen import BoundsPen
from fontTools.ttLib import TTFont

from glyphpath.core.path import Path
from glyphpath.domain.point import GlyphPoint

# glyf flag bit marking an on-curve point.
ON_CURVE = 0x01


class PathPen(BasePen):
    """Segment pen recording into a glyphpath Path.

    BasePen expands TrueType implied on-curve points, so every quadratic
    segment arrives as a single QuadTo.

    Example:
        pen = PathPen(font.getGlyphSet())
        font.getGlyphSet()["A"].draw(pen)
        pen.path.commands
    """

    def __init__(self, glyph_set: Any = None, path: Path | None = None) -> None:
        super().__init__(glyph_set)
        self.path = path if path is not None else Path()

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self.path.move_to(*pt)

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self.path.line_to(*pt)

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self.path.curve_to(*pt1, *pt2, *pt3)

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        self.path.quad_to(*pt1, *pt2)

    def _closePath(self) -> None:
        self.path.close()

    def _endPath(self) -> None:
        pass


def path_from_glyph_set(glyph_set: Any, name: str, units_per_em: int | None = None) -> Path:
    """Draw one glyph of a fontTools glyph set into a new Path.

    Args:
        glyph_set: Result of ``TTFont.getGlyphSet()``
        name: Glyph name
        units_per_em: Value stamped on the resulting path

    Returns:
        Path with the glyph outline in font units (Y up)
    """
    pen = PathPen(glyph_set)
    glyph_set[name].draw(pen)
    pen.path.units_per_em = units_per_em
    return pen.path


def glyph_bounds(glyph_set: Any, name: str) -> tuple[float, float, float, float] | None:
    """Control-point bounds (x_min, y_min, x_max, y_max) of a glyph, None if empty."""
    pen = BoundsPen(glyph_set)
    glyph_set[name].draw(pen)
    return pen.bounds


def glyph_points(font: TTFont, name: str) -> list[GlyphPoint]:
    """Raw TrueType contour points of a glyph.

    Composite glyphs are flattened by fontTools. CFF fonts have no point list.

    Args:
        font: Loaded font
        name: Glyph name

    Returns:
        Points with on-curve and end-of-contour flags (empty for CFF fonts)
    """
    if "glyf" not in font:
        return []

    glyf = font["glyf"]
    glyph = glyf[name]
    if glyph.numberOfContours == 0:
        return []

    coordinates, end_points, flags = glyph.getCoordinates(glyf)
    ends = set(end_points)
    return [
        GlyphPoint(
            x=x,
            y=y,
            on_curve=bool(flags[i] & ON_CURVE),
            last_point_of_contour=i in ends,
        )
        for i, (x, y) in enumerate(coordinates)
    ]


def reverse_cmap(font: TTFont) -> dict[str, list[int]]:
    """Map glyph names to their code points, lowest first.

    Args:
        font: Loaded font

    Returns:
        Dictionary of glyph name to sorted code points
    """
    cmap = font.getBestCmap() or {}
    reverse: dict[str, list[int]] = {}
    for code_point in sorted(cmap):
        reverse.setdefault(cmap[code_point], []).append(code_point)
    return reverse
