"""Font capabilities backed by fontTools tables.

Each class adapts one OpenType table to the protocol the outline pipeline
consumes (see glyphpath.core.capabilities).
"""

import xml.etree.ElementTree as ET
from collections.abc import Callable
from typing import Any

from fontTools.ttLib import TTFont

from glyphpath.core.capabilities import ColorLayer, EmbeddedImage
from glyphpath.core.color import CURRENT_COLOR, FOREGROUND_PALETTE_INDEX, RGBA
from glyphpath.core.glyph import Glyph
from glyphpath.io.converter import PathPen


class ColorLayerTable:
    """COLR version 0 layer lookup.

    Layer glyphs are fetched through ``glyph_lookup`` so they share the
    memoized glyphs of the owning glyph set.
    """

    def __init__(self, font: TTFont, glyph_lookup: Callable[[int], Glyph | None]) -> None:
        self._font = font
        self._glyph_lookup = glyph_lookup
        self._records: dict[str, Any] = getattr(font["COLR"], "ColorLayers", None) or {}

    def __len__(self) -> int:
        return len(self._records)

    def get(self, glyph_index: int) -> list[ColorLayer] | None:
        name = self._font.getGlyphName(glyph_index)
        records = self._records.get(name)
        if not records:
            return None

        layers = []
        for record in records:
            glyph = self._glyph_lookup(self._font.getGlyphID(record.name))
            if glyph is not None:
                layers.append(ColorLayer(glyph=glyph, palette_index=record.colorID))
        return layers


class CPALPalette:
    """CPAL colour lookup. Entry 0xFFFF stands for the foreground colour."""

    def __init__(self, font: TTFont) -> None:
        self._palettes = font["CPAL"].palettes

    @property
    def palette_count(self) -> int:
        return len(self._palettes)

    def get_color(self, palette_index: int, palette: int = 0) -> RGBA | str:
        if palette_index == FOREGROUND_PALETTE_INDEX:
            return CURRENT_COLOR
        color = self._palettes[palette][palette_index]
        return RGBA(color.red, color.green, color.blue, color.alpha)


def _view_box(root: ET.Element) -> tuple[float, float, float, float] | None:
    value = root.get("viewBox")
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    min_x, min_y, width, height = (float(p) for p in parts)
    return min_x, min_y, width, height


def _length(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value.strip().removesuffix("px"))
    except ValueError:
        return None


class SVGImageTable:
    """``SVG `` table lookup.

    The image geometry comes from the document's root element: the viewBox
    origin gives the left side bearing and the baseline (documents draw
    above the baseline at negative y), its size gives the image size.
    Without a viewBox the width/height attributes are used, falling back to
    one em, and the image is assumed to sit on the baseline.
    """

    def __init__(self, font: TTFont, units_per_em: int) -> None:
        self._documents = font["SVG "].docList
        self._units_per_em = units_per_em
        self._cache: dict[int, EmbeddedImage | None] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def _document_for(self, glyph_index: int) -> Any:
        for doc in self._documents:
            if doc.startGlyphID <= glyph_index <= doc.endGlyphID:
                return doc
        return None

    def get(self, glyph_index: int) -> EmbeddedImage | None:
        if glyph_index in self._cache:
            return self._cache[glyph_index]

        doc = self._document_for(glyph_index)
        image = self._build(doc.data) if doc is not None else None
        self._cache[glyph_index] = image
        return image

    def _build(self, data: str | bytes) -> EmbeddedImage:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        root = ET.fromstring(data)

        view_box = _view_box(root)
        if view_box is not None:
            min_x, min_y, width, height = view_box
            return EmbeddedImage(
                image=data,
                width=width,
                height=height,
                left_side_bearing=min_x,
                baseline=-min_y,
            )

        width = _length(root.get("width")) or self._units_per_em
        height = _length(root.get("height")) or self._units_per_em
        return EmbeddedImage(image=data, width=width, height=height, baseline=height)


class FontToolsVariation:
    """Variable-font instancer using ``TTFont.getGlyphSet(location=...)``.

    Locations are given in user-space axis values, e.g. ``{"wght": 700}``.
    """

    def __init__(self, font: TTFont) -> None:
        self._font = font
        self._units_per_em = font["head"].unitsPerEm
        self._glyph_sets: dict[tuple[tuple[str, float], ...], Any] = {}

    @property
    def axes(self) -> list[str]:
        return [axis.axisTag for axis in self._font["fvar"].axes]

    def _glyph_set(self, variation: dict[str, float]) -> Any:
        key = tuple(sorted(variation.items()))
        glyph_set = self._glyph_sets.get(key)
        if glyph_set is None:
            glyph_set = self._font.getGlyphSet(location=dict(variation))
            self._glyph_sets[key] = glyph_set
        return glyph_set

    def get_transform(self, glyph: Glyph, variation: dict[str, float] | None) -> Glyph:
        if not variation:
            return glyph

        glyph_set = self._glyph_set(variation)
        name = glyph.name or self._font.getGlyphName(glyph.index)

        # The instanced advance is only known once the phantom points are applied,
        # which fontTools does while drawing.
        instance = glyph_set[name]
        pen = PathPen(glyph_set)
        instance.draw(pen)
        pen.path.units_per_em = self._units_per_em

        return Glyph(
            index=glyph.index,
            name=name,
            unicode=glyph.unicode,
            unicodes=glyph.unicodes,
            path=pen.path,
            advance_width=instance.width,
            left_side_bearing=glyph.left_side_bearing,
        )
