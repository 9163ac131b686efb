"""Glyph identity, metrics and the outline resolution pipeline.

A glyph owns a deferred path: either a ready Path or a zero-argument producer
that builds it on first access. ``get_path`` resolves the glyph's final
outline for a given position and size by composing, in order:

1. variable-font instancing (FontContext.variation)
2. hinting (FontContext.hinting), which replaces the scale step with
   pre-rounded device coordinates
3. embedded images (FontContext.images)
4. colour layers (FontContext.layers + FontContext.palette)
5. plain outline scaling with a Y-up to Y-down flip
"""

import logging
import math
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from glyphpath.config import PathDataOptions, RenderOptions, SVGParseOptions
from glyphpath.core.capabilities import ColorLayer, EmbeddedImage, FontContext
from glyphpath.core.color import CURRENT_COLOR, format_color
from glyphpath.core.path import DrawingSink, Path, PathImage
from glyphpath.domain.bbox import BoundingBox
from glyphpath.domain.commands import Close, CurveTo, PathCommand, QuadTo
from glyphpath.domain.deferred import Deferred
from glyphpath.domain.point import GlyphPoint
from glyphpath.exceptions import (
    ContourConsistencyError,
    GlyphConstructionError,
    MissingFontContextError,
)

logger = logging.getLogger(__name__)

NOTDEF = ".notdef"
NULL = ".null"


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def _dependent(name: str) -> property:
    """Attribute filled in as a side effect of building the glyph's path.

    Reading it while unset resolves the deferred path first.
    """
    internal = f"_{name}"

    def getter(self: "Glyph") -> Any:
        if getattr(self, internal) is None and not self._path.is_resolved:
            self._path.resolve()
        return getattr(self, internal)

    def setter(self: "Glyph", value: Any) -> None:
        setattr(self, internal, value)

    return property(getter, setter)


@dataclass(frozen=True)
class GlyphMetrics:
    """Horizontal metrics derived from a glyph's unscaled outline."""

    x_min: float
    y_min: float
    x_max: float
    y_max: float
    left_side_bearing: float | None
    right_side_bearing: float


class Glyph:
    """A single glyph: identity, metrics and a deferred outline.

    Attributes:
        index: Position in the owning glyph set (immutable)
        name: Glyph name, if known
        unicode: Primary code point, if any
        unicodes: All code points mapped to the glyph, in insertion order
        advance_width: Horizontal advance in font units
        left_side_bearing: Left side bearing in font units
    """

    points = _dependent("points")
    x_min = _dependent("x_min")
    y_min = _dependent("y_min")
    x_max = _dependent("x_max")
    y_max = _dependent("y_max")

    def __init__(
        self,
        index: int = 0,
        name: str | None = None,
        unicode: int | None = None,
        unicodes: Iterable[int] | None = None,
        path: "Path | Callable[[], Path] | None" = None,
        x_min: float | None = None,
        y_min: float | None = None,
        x_max: float | None = None,
        y_max: float | None = None,
        advance_width: float | None = None,
        left_side_bearing: float | None = None,
        points: Sequence[GlyphPoint] | None = None,
    ) -> None:
        """Initialize the glyph.

        Args:
            index: Position in the owning glyph set
            name: Glyph name; ".notdef" never has a code point and ".null"
                always maps to code point 0
            unicode: Primary code point
            unicodes: All code points (defaults to [unicode] when given)
            path: Ready Path, or a zero-argument producer invoked on first access
            x_min, y_min, x_max, y_max: Authoritative bounds from the font
            advance_width: Horizontal advance
            left_side_bearing: Left side bearing
            points: Raw TrueType contour points

        Raises:
            GlyphConstructionError: If code point 0 is given to a glyph not named ".null"
        """
        self._index = index

        if name == NOTDEF:
            self.name: str | None = NOTDEF
            self.unicode: int | None = None
        elif name == NULL:
            self.name = NULL
            self.unicode = 0
        else:
            self.name = name or None
            self.unicode = unicode

        if self.unicode == 0 and self.name != NULL:
            raise GlyphConstructionError(self.name, 0)

        if unicodes is not None:
            self.unicodes: list[int] = list(dict.fromkeys(unicodes))
        else:
            self.unicodes = [self.unicode] if self.unicode is not None else []

        self._x_min = x_min
        self._y_min = y_min
        self._x_max = x_max
        self._y_max = y_max
        self.advance_width = advance_width
        self.left_side_bearing = left_side_bearing
        self._points: list[GlyphPoint] | None = list(points) if points is not None else None
        self._path: Deferred[Path] = Deferred(path if path is not None else Path())

    def __repr__(self) -> str:
        return f"Glyph(index={self._index}, name={self.name!r}, unicode={self.unicode!r})"

    @property
    def index(self) -> int:
        return self._index

    @property
    def path(self) -> Path:
        """The glyph's outline, produced on first access."""
        return self.resolve_path()

    @path.setter
    def path(self, value: Path) -> None:
        self._path.set(value)

    def resolve_path(self) -> Path:
        """Return the outline, invoking the deferred producer at most once."""
        if not self._path.is_resolved:
            logger.debug("Resolving deferred path", extra={"glyph": self._index})
        return self._path.resolve()

    def add_unicode(self, unicode: int) -> None:
        """Map an additional code point to this glyph.

        The first code point added becomes the primary one when none is set.
        """
        if not self.unicodes:
            self.unicode = unicode
        if unicode not in self.unicodes:
            self.unicodes.append(unicode)

    # Geometry

    def get_bounding_box(self) -> BoundingBox:
        """Exact bounds of the unscaled outline."""
        return self.path.get_bounding_box()

    def get_metrics(self) -> GlyphMetrics:
        """Derive bounds and side bearings from the raw outline.

        Every on-curve point and every control point counts. Without any
        coordinates the bounds fall back to 0 (x_max to the advance width).

        Returns:
            GlyphMetrics
        """
        xs: list[float] = []
        ys: list[float] = []
        for cmd in self.path.commands:
            if isinstance(cmd, Close):
                continue
            xs.append(cmd.x)
            ys.append(cmd.y)
            if isinstance(cmd, (QuadTo, CurveTo)):
                xs.append(cmd.x1)
                ys.append(cmd.y1)
            if isinstance(cmd, CurveTo):
                xs.append(cmd.x2)
                ys.append(cmd.y2)

        finite_xs = [v for v in xs if math.isfinite(v)]
        finite_ys = [v for v in ys if math.isfinite(v)]
        x_min = min(finite_xs) if finite_xs else 0
        x_max = max(finite_xs) if finite_xs else (self.advance_width or 0)
        y_min = min(finite_ys) if finite_ys else 0
        y_max = max(finite_ys) if finite_ys else 0

        rsb = (self.advance_width or 0) - (self.left_side_bearing or 0) - (x_max - x_min)
        return GlyphMetrics(
            x_min=x_min,
            y_min=y_min,
            x_max=x_max,
            y_max=y_max,
            left_side_bearing=self.left_side_bearing,
            right_side_bearing=rsb,
        )

    def get_contours(
        self, transformed_points: Sequence[GlyphPoint] | None = None
    ) -> list[list[GlyphPoint]]:
        """Group raw points into contours.

        Args:
            transformed_points: Points to group instead of the glyph's own

        Returns:
            List of contours, each a list of points

        Raises:
            ContourConsistencyError: If the last contour is not terminated
        """
        points = transformed_points if transformed_points is not None else self.points
        if points is None:
            return []

        contours: list[list[GlyphPoint]] = []
        current: list[GlyphPoint] = []
        for point in points:
            current.append(point)
            if point.last_point_of_contour:
                contours.append(current)
                current = []

        if current:
            raise ContourConsistencyError(len(current))
        return contours

    # Font-backed accessors

    def get_layers(self, font: FontContext | None) -> Sequence[ColorLayer] | None:
        """Colour layers of this glyph.

        Raises:
            MissingFontContextError: If no font context is given
        """
        if font is None:
            raise MissingFontContextError("get_layers", "COLR/CPAL")
        if font.layers is None:
            return None
        return font.layers.get(self._index)

    def get_svg_image(self, font: FontContext | None) -> EmbeddedImage | None:
        """Embedded SVG image of this glyph.

        Raises:
            MissingFontContextError: If no font context is given
        """
        if font is None:
            raise MissingFontContextError("get_svg_image", "SVG")
        if font.images is None:
            return None
        return font.images.get(self._index)

    # Outline resolution

    def _units_per_em(self, font: FontContext | None) -> int:
        return self.path.units_per_em or (font.units_per_em if font else None) or 1000

    def get_path(
        self,
        x: float = 0,
        y: float = 0,
        font_size: float = 72,
        options: RenderOptions | None = None,
        font: FontContext | None = None,
    ) -> Path:
        """Resolve the outline at a position and size.

        The result is in a Y-down coordinate space: (x, y) is the pen position
        on the baseline and outline y values grow upwards on screen.

        Args:
            x: Horizontal pen position
            y: Baseline position
            font_size: Size in output units per em
            options: Rendering options, layered over the font's defaults
            font: Font capabilities; layers and images are only drawn with one

        Returns:
            New Path with transformed commands, layers or an image
        """
        render = (options or RenderOptions()).merged_over(
            font.default_render_options if font else None
        )
        scale = font_size / self._units_per_em(font)

        use_glyph = self
        if font is not None and font.variation is not None and render.variation is not None:
            use_glyph = font.variation.get_transform(self, render.variation)

        hinted = None
        if render.hinting and font is not None and font.hinting is not None:
            hinted = font.hinting.exec(use_glyph, font_size, render)

        commands: Sequence[PathCommand]
        if hinted:
            commands = font.hinting.get_commands(hinted)  # type: ignore[union-attr]
            x = _round_half_up(x)
            y = _round_half_up(y)
            x_scale = y_scale = 1.0
        else:
            commands = use_glyph.path.commands
            x_scale = render.x_scale if render.x_scale is not None else scale
            y_scale = render.y_scale if render.y_scale is not None else scale

        result = Path()
        if render.draw_svg and font is not None:
            svg_image = self.get_svg_image(font)
            if svg_image is not None:
                result.image = PathImage(
                    image=svg_image.image,
                    x=x + svg_image.left_side_bearing * scale,
                    y=y - svg_image.baseline * scale,
                    width=svg_image.width * scale,
                    height=svg_image.height * scale,
                )
                return result

        if render.draw_layers and font is not None:
            layers = self.get_layers(font)
            if layers:
                result.layers = [
                    self._render_layer(layer, x, y, font_size, render, font)  # type: ignore[arg-type]
                    for layer in layers
                ]
                return result

        result.fill = render.fill or self.path.fill
        result.stroke = self.path.stroke
        result.stroke_width = self.path.stroke_width * scale

        def fx(v: float) -> float:
            return x + v * x_scale

        def fy(v: float) -> float:
            return y + -v * y_scale

        result.commands = [cmd.map(fx, fy) for cmd in commands]
        return result

    def _render_layer(
        self,
        layer: ColorLayer,
        x: float,
        y: float,
        font_size: float,
        render: RenderOptions,
        font: FontContext,
    ) -> Path:
        color: Any = CURRENT_COLOR
        if font.palette is not None:
            color = font.palette.get_color(layer.palette_index, render.use_palette)

        if color == CURRENT_COLOR:
            fill = render.fill or "black"
        else:
            fill = format_color(color, render.color_format)

        update: dict[str, Any] = {"fill": fill}
        if layer.glyph is self or layer.glyph.index == self._index:
            update["draw_layers"] = False
        return layer.glyph.get_path(x, y, font_size, render.model_copy(update=update), font)

    def draw(
        self,
        sink: DrawingSink,
        x: float = 0,
        y: float = 0,
        font_size: float = 72,
        options: RenderOptions | None = None,
        font: FontContext | None = None,
    ) -> None:
        """Resolve the outline and replay it onto a drawing sink."""
        self.get_path(x, y, font_size, options, font).draw(sink)

    # SVG codec

    def _transformed_path(
        self,
        options: PathDataOptions,
        font: FontContext | None,
        points_transform: Callable[[list[GlyphPoint]], Path] | None,
        path_transform: Callable[[Path], Path] | None,
    ) -> Path:
        variation = options.variation
        if variation is None and font is not None and font.default_render_options is not None:
            variation = font.default_render_options.variation

        use_glyph = self
        if font is not None and font.variation is not None and variation is not None:
            use_glyph = font.variation.get_transform(self, variation)

        if use_glyph.points and points_transform is not None:
            use_path = points_transform(use_glyph.points)
        else:
            use_path = use_glyph.path
        if path_transform is not None:
            use_path = path_transform(use_path)
        return use_path

    def to_path_data(
        self,
        options: int | PathDataOptions | None = None,
        font: FontContext | None = None,
        points_transform: Callable[[list[GlyphPoint]], Path] | None = None,
        path_transform: Callable[[Path], Path] | None = None,
    ) -> str:
        """Serialize the (optionally instanced and transformed) outline.

        Args:
            options: Serialization options or integer decimal places
            font: Font capabilities used for variation instancing
            points_transform: Builds a path from the glyph's raw points
            path_transform: Rewrites the path before serialization

        Returns:
            SVG path data
        """
        opts = PathDataOptions.coerce(options)
        path = self._transformed_path(opts, font, points_transform, path_transform)
        return path.to_path_data(opts)

    def to_svg(
        self,
        options: int | PathDataOptions | None = None,
        font: FontContext | None = None,
        points_transform: Callable[[list[GlyphPoint]], Path] | None = None,
        path_transform: Callable[[Path], Path] | None = None,
    ) -> str:
        """Render the outline as an SVG ``<path>`` element string."""
        path_data = self.to_path_data(options, font, points_transform, path_transform)
        return self.path.to_svg(options, path_data)

    def to_svg_element(
        self,
        options: int | PathDataOptions | None = None,
        font: FontContext | None = None,
        points_transform: Callable[[list[GlyphPoint]], Path] | None = None,
        path_transform: Callable[[Path], Path] | None = None,
    ) -> ET.Element:
        """Build an SVG ``<path>`` element for the outline."""
        path_data = self.to_path_data(options, font, points_transform, path_transform)
        return self.path.to_svg_element(options, path_data)

    def from_svg(
        self,
        path_data: "str | ET.Element",
        options: SVGParseOptions | None = None,
    ) -> None:
        """Replace the outline's commands with parsed SVG path data."""
        self.path.from_svg(path_data, options)

    def to_dict(self) -> dict[str, Any]:
        """Serialize identity, metrics and outline to a dictionary."""
        return {
            "index": self._index,
            "name": self.name,
            "unicode": self.unicode,
            "unicodes": list(self.unicodes),
            "advance_width": self.advance_width,
            "left_side_bearing": self.left_side_bearing,
            "path": self.path.to_dict(),
        }
