"""Shared fixtures: small fonts built with fontTools.fontBuilder."""

from pathlib import Path

import pytest
from fontTools.colorLib.builder import buildCOLR, buildCPAL
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib.tables.S_V_G_ import SVGDocument, table_S_V_G_
from fontTools.ttLib.tables.TupleVariation import TupleVariation

UNITS_PER_EM = 1000
ASCENT = 800
DESCENT = -200

SVG_DOCUMENT = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 -800 1000 1000">'
    '<rect x="100" y="-700" width="400" height="700" fill="red"/>'
    "</svg>"
)


def _rect(x0: int, y0: int, x1: int, y1: int):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x1, y0))
    pen.lineTo((x1, y1))
    pen.lineTo((x0, y1))
    pen.closePath()
    return pen.glyph()


def _arch():
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.qCurveTo((250, 500), (500, 0))
    pen.closePath()
    return pen.glyph()


def _empty():
    return TTGlyphPen(None).glyph()


def build_test_font(
    path: Path,
    *,
    color: bool = False,
    svg: bool = False,
    variable: bool = False,
) -> Path:
    """Build a TrueType font with a square, an arch and a space.

    Glyph order: .notdef, square (U+0041, U+0061), arch (U+0042), space
    (U+0020), then the colour layer glyphs when ``color`` is set.
    """
    glyphs = {
        ".notdef": _empty(),
        "square": _rect(100, 0, 500, 700),
        "arch": _arch(),
        "space": _empty(),
    }
    metrics = {
        ".notdef": (500, 0),
        "square": (600, 100),
        "arch": (500, 0),
        "space": (250, 0),
    }
    if color:
        glyphs["square.layer1"] = _rect(100, 0, 300, 700)
        glyphs["square.layer2"] = _rect(300, 0, 500, 700)
        metrics["square.layer1"] = (600, 100)
        metrics["square.layer2"] = (600, 300)

    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(list(glyphs))
    fb.setupCharacterMap({0x41: "square", 0x61: "square", 0x42: "arch", 0x20: "space"})
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    fb.setupNameTable({"familyName": "Glyphpath Test", "styleName": "Regular"})
    fb.setupPost()
    fb.setupMaxp()

    if color:
        fb.font["CPAL"] = buildCPAL([[(1.0, 0.0, 0.0, 1.0)]])
        fb.font["COLR"] = buildCOLR(
            {"square": [("square.layer1", 0), ("square.layer2", 0xFFFF)]},
            version=0,
            glyphMap=fb.font.getReverseGlyphMap(),
        )

    if svg:
        svg_table = table_S_V_G_()
        svg_table.docList = [SVGDocument(SVG_DOCUMENT, 1, 1, False)]
        fb.font["SVG "] = svg_table

    if variable:
        fb.setupFvar(axes=[("wght", 100, 400, 900, "Weight")], instances=[])
        # Four outline points followed by the four phantom points; the right
        # edge and the advance move by 100 units at full weight.
        deltas = [(0, 0), (100, 0), (100, 0), (0, 0), (0, 0), (100, 0), (0, 0), (0, 0)]
        fb.setupGvar({"square": [TupleVariation({"wght": (0, 1.0, 1.0)}, deltas)]})

    fb.save(str(path))
    return path


@pytest.fixture
def font_path(tmp_path: Path) -> Path:
    """Plain TrueType test font."""
    return build_test_font(tmp_path / "plain.ttf")


@pytest.fixture
def color_font_path(tmp_path: Path) -> Path:
    """Test font with COLR/CPAL layers on the square glyph."""
    return build_test_font(tmp_path / "color.ttf", color=True)


@pytest.fixture
def svg_font_path(tmp_path: Path) -> Path:
    """Test font with an SVG document for the square glyph."""
    return build_test_font(tmp_path / "svg.ttf", svg=True)


@pytest.fixture
def variable_font_path(tmp_path: Path) -> Path:
    """Test font with a weight axis moving the square's right edge."""
    return build_test_font(tmp_path / "variable.ttf", variable=True)
