"""Font reader for loading TTF/OTF fonts.

This module provides the FontReader class for loading font files and
exposing their glyphs and capabilities to the outline pipeline.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from fontTools.ttLib import TTFont

from glyphpath.config import GlyphPathSettings, get_default_settings
from glyphpath.core.capabilities import FontContext
from glyphpath.core.glyph import NULL, Glyph
from glyphpath.core.glyphset import GlyphSet
from glyphpath.io.converter import glyph_bounds, glyph_points, path_from_glyph_set, reverse_cmap
from glyphpath.io.tables import (
    ColorLayerTable,
    CPALPalette,
    FontToolsVariation,
    SVGImageTable,
)

logger = logging.getLogger(__name__)

_NOT_LOADED = "Font not loaded. Call load() first."


def _code_points(name: str, code_points: list[int]) -> list[int]:
    # U+0000 is reserved for the .null glyph
    return [cp for cp in code_points if cp or name == NULL]


class FontToolsGlyphSource:
    """Builds glyphs from a loaded font's tables.

    Used directly by streaming glyph sets, and by eager loading to create one
    glyph producer per index.
    """

    def __init__(self, font: TTFont, units_per_em: int) -> None:
        self._font = font
        self._units_per_em = units_per_em
        self._glyph_order = font.getGlyphOrder()
        self._glyph_set = font.getGlyphSet()
        self._reverse_cmap: dict[str, list[int]] | None = None
        self._hmtx = font["hmtx"] if "hmtx" in font else None

    def load(self, index: int) -> Glyph:
        """Create the glyph at ``index`` with a deferred outline.

        Resolving the outline also fills in the glyph's raw TrueType points
        and its bounds.
        """
        name = self._glyph_order[index]
        glyph: Glyph

        def produce_path():
            glyph.points = glyph_points(self._font, name)
            bounds = glyph_bounds(self._glyph_set, name)
            if bounds is not None:
                glyph.x_min, glyph.y_min, glyph.x_max, glyph.y_max = bounds
            return path_from_glyph_set(self._glyph_set, name, self._units_per_em)

        glyph = Glyph(index=index, name=name, path=produce_path)
        return glyph

    def glyph_loader(self, index: int) -> Callable[[], Glyph]:
        """Producer creating the fully identified glyph at ``index``."""

        def produce_glyph() -> Glyph:
            glyph = self.load(index)
            for unicode in self.unicodes(index):
                glyph.add_unicode(unicode)
            metrics = self.horizontal_metrics(index)
            if metrics is not None:
                glyph.advance_width, glyph.left_side_bearing = metrics
            return glyph

        return produce_glyph

    def glyph_name(self, index: int) -> str | None:
        return self._glyph_order[index]

    def unicodes(self, index: int) -> list[int]:
        if self._reverse_cmap is None:
            self._reverse_cmap = reverse_cmap(self._font)
        name = self._glyph_order[index]
        return _code_points(name, self._reverse_cmap.get(name, []))

    def horizontal_metrics(self, index: int) -> tuple[float, float] | None:
        if self._hmtx is None:
            return None
        name = self._glyph_order[index]
        if name not in self._hmtx.metrics:
            return None
        return self._hmtx[name]


class FontReader:
    """Loads TTF/OTF fonts and exposes their glyphs and capabilities.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            glyphs = reader.load_glyphs()
            path = glyphs.get(36).get_path(0, 100, 72, font=reader.context)
    """

    def __init__(self, font_path: Path, settings: GlyphPathSettings | None = None) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
            settings: Application settings (defaults if None)
        """
        self._font_path = Path(font_path)
        self._settings = settings or get_default_settings()
        self._font: TTFont | None = None
        self._glyphs: GlyphSet | None = None
        self._context: FontContext | None = None

    def load(self) -> None:
        """Load the font file.

        In low-memory mode tables are decompiled lazily by fontTools.

        Raises:
            FileNotFoundError: If font file does not exist
            Exception: If font file is invalid or cannot be loaded
        """
        if not self._font_path.exists():
            raise FileNotFoundError(f"Font file not found: {self._font_path}")

        low_memory = self._settings.loading.low_memory
        self._font = TTFont(str(self._font_path), lazy=True if low_memory else None)
        self._glyphs = None
        self._context = None
        logger.debug(
            "Font loaded",
            extra={
                "path": str(self._font_path),
                "format": self.format,
                "glyphs": self.glyph_count,
                "low_memory": low_memory,
            },
        )

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError(_NOT_LOADED)
        return self._font

    @property
    def font(self) -> TTFont:
        """The underlying fontTools font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()

    @property
    def format(self) -> str:
        """Return font format.

        Returns:
            'TrueType' for TTF fonts, 'OpenType' for OTF fonts

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        font = self._require_font()
        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["maxp"].numGlyphs

    @property
    def is_variable(self) -> bool:
        return "fvar" in self._require_font()

    @property
    def has_color_layers(self) -> bool:
        font = self._require_font()
        return "COLR" in font and bool(getattr(font["COLR"], "ColorLayers", None))

    @property
    def has_svg_images(self) -> bool:
        return "SVG " in self._require_font()

    def load_glyphs(self) -> GlyphSet:
        """Build (once) the glyph set of the loaded font.

        Eager mode registers one glyph producer per index up front. Low-memory
        mode returns an empty streaming set that builds glyphs on first access.

        Returns:
            GlyphSet indexed by glyph ID

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        if self._glyphs is not None:
            return self._glyphs

        font = self._require_font()
        units_per_em = self.units_per_em
        source = FontToolsGlyphSource(font, units_per_em)

        if self._settings.loading.low_memory:
            glyphs = GlyphSet(units_per_em=units_per_em, source=source, length=self.glyph_count)
        else:
            glyphs = GlyphSet(units_per_em=units_per_em)
            for index in range(len(font.getGlyphOrder())):
                glyphs.push(index, source.glyph_loader(index))

        logger.debug(
            "Glyph set created", extra={"glyphs": len(glyphs), "streaming": glyphs.streaming}
        )
        self._glyphs = glyphs
        return glyphs

    def get_glyph(self, key: str | int) -> Glyph | None:
        """Find a glyph by name, single character, or index.

        Args:
            key: Glyph name, a one-character string, or a glyph index

        Returns:
            Glyph, or None if not found

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        font = self._require_font()
        glyphs = self.load_glyphs()

        if isinstance(key, int):
            return glyphs.get(key)

        glyph_order = font.getGlyphOrder()
        if key in glyph_order:
            return glyphs.get(font.getGlyphID(key))

        if len(key) == 1:
            name = (font.getBestCmap() or {}).get(ord(key))
            if name is not None:
                return glyphs.get(font.getGlyphID(name))
        return None

    @property
    def context(self) -> FontContext:
        """Capabilities of the loaded font for Glyph.get_path.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        if self._context is not None:
            return self._context

        font = self._require_font()
        glyphs = self.load_glyphs()
        units_per_em = self.units_per_em

        self._context = FontContext(
            units_per_em=units_per_em,
            variation=FontToolsVariation(font) if "fvar" in font else None,
            layers=ColorLayerTable(font, glyphs.get) if "COLR" in font else None,
            images=SVGImageTable(font, units_per_em) if "SVG " in font else None,
            palette=CPALPalette(font) if "CPAL" in font else None,
            default_render_options=self._settings.render,
        )
        return self._context

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None
            self._glyphs = None
            self._context = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
