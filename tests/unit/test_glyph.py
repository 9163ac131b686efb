"""Unit tests for Glyph identity, metrics and outline resolution."""

from unittest.mock import MagicMock

import pytest

from glyphpath.config import ColorFormat, PathDataOptions, RenderOptions, SVGParseOptions
from glyphpath.core import (
    CURRENT_COLOR,
    FOREGROUND_PALETTE_INDEX,
    RGBA,
    ColorLayer,
    EmbeddedImage,
    FontContext,
    Glyph,
    Path,
)
from glyphpath.domain import Close, GlyphPoint, LineTo, MoveTo, QuadTo
from glyphpath.exceptions import (
    ContourConsistencyError,
    GlyphConstructionError,
    MissingFontContextError,
)


def _rect_path() -> Path:
    return Path([MoveTo(0, 0), LineTo(500, 0), LineTo(500, 700), Close()])


class FakeLayers:
    """Layer lookup keyed by glyph index."""

    def __init__(self, layers: dict[int, list[ColorLayer]]) -> None:
        self.layers = layers

    def get(self, glyph_index: int) -> list[ColorLayer] | None:
        return self.layers.get(glyph_index)


class FakePalette:
    """Palette returning red for entry 0 and the foreground colour otherwise."""

    def get_color(self, palette_index: int, palette: int = 0) -> RGBA | str:
        if palette_index == FOREGROUND_PALETTE_INDEX:
            return CURRENT_COLOR
        return RGBA(255, 0, 0) if palette == 0 else RGBA(0, 0, 255)


class FakeImages:
    def __init__(self, image: EmbeddedImage | None) -> None:
        self.image = image

    def get(self, glyph_index: int) -> EmbeddedImage | None:
        return self.image


class TestGlyphIdentity:
    """Tests for glyph construction and code point mapping."""

    def test_basic_construction(self) -> None:
        """Test a plain glyph keeps its index, name and code point."""
        glyph = Glyph(3, "A", unicode=65)
        assert glyph.index == 3
        assert glyph.name == "A"
        assert glyph.unicode == 65
        assert glyph.unicodes == [65]

    def test_index_is_read_only(self) -> None:
        """Test the index cannot be reassigned."""
        glyph = Glyph(3, "A")
        with pytest.raises(AttributeError):
            glyph.index = 4  # type: ignore[misc]

    def test_notdef_has_no_code_point(self) -> None:
        """Test .notdef drops any code point it is given."""
        glyph = Glyph(0, ".notdef", unicode=65)
        assert glyph.unicode is None
        assert glyph.unicodes == []

    def test_null_maps_to_zero(self) -> None:
        """Test .null always maps to code point 0."""
        glyph = Glyph(1, ".null")
        assert glyph.unicode == 0
        assert glyph.unicodes == [0]

    def test_zero_reserved_for_null(self) -> None:
        """Test code point 0 on another glyph is rejected."""
        with pytest.raises(GlyphConstructionError) as exc_info:
            Glyph(2, "space", unicode=0)
        assert exc_info.value.name == "space"
        assert ".null" in str(exc_info.value)

    def test_unicodes_deduplicated(self) -> None:
        """Test repeated code points are kept once in first-seen order."""
        glyph = Glyph(2, "A", unicode=65, unicodes=[65, 97, 65])
        assert glyph.unicodes == [65, 97]

    def test_add_unicode(self) -> None:
        """Test the first added code point becomes primary."""
        glyph = Glyph(2, "A")
        glyph.add_unicode(65)
        glyph.add_unicode(97)
        glyph.add_unicode(65)
        assert glyph.unicode == 65
        assert glyph.unicodes == [65, 97]


class TestDeferredPath:
    """Tests for lazy outline production."""

    def test_default_path_is_empty(self) -> None:
        """Test a glyph without a path has an empty one."""
        assert len(Glyph(0).path) == 0

    def test_producer_runs_once(self) -> None:
        """Test the path producer is invoked on first access only."""
        calls = []

        def produce() -> Path:
            calls.append(1)
            return _rect_path()

        glyph = Glyph(1, "A", path=produce)
        assert calls == []
        first = glyph.path
        assert glyph.path is first
        assert len(calls) == 1

    def test_dependent_attributes_resolve_path(self) -> None:
        """Test reading points or bounds triggers the producer."""
        glyph: Glyph

        def produce() -> Path:
            glyph.points = [GlyphPoint(0, 0, last_point_of_contour=True)]
            glyph.x_max = 500
            return _rect_path()

        glyph = Glyph(1, "A", path=produce)
        assert glyph.x_max == 500
        assert glyph.points == [GlyphPoint(0, 0, last_point_of_contour=True)]

    def test_producer_reading_unset_bound_fails(self) -> None:
        """Test a producer reading its own glyph's unset bounds raises."""
        glyph: Glyph

        def produce() -> Path:
            glyph.x_min  # noqa: B018
            return _rect_path()

        glyph = Glyph(1, "A", path=produce)
        with pytest.raises(RuntimeError, match="its own producer"):
            glyph.path  # noqa: B018

    def test_given_bounds_do_not_resolve_path(self) -> None:
        """Test bounds passed to the constructor are returned without the producer."""
        glyph = Glyph(1, "A", path=lambda: pytest.fail("producer must not run"), x_min=5)
        assert glyph.x_min == 5

    def test_path_setter(self) -> None:
        """Test assigning a path replaces a pending producer."""
        glyph = Glyph(1, "A", path=lambda: pytest.fail("producer must not run"))
        replacement = _rect_path()
        glyph.path = replacement
        assert glyph.path is replacement


class TestGlyphMetrics:
    """Tests for metrics and contours."""

    def test_bounding_box_is_exact(self) -> None:
        """Test the box follows the curve, not its control point."""
        glyph = Glyph(1, "o", path=Path([MoveTo(0, 0), QuadTo(50, 100, 100, 0), Close()]))
        assert glyph.get_bounding_box().y2 == pytest.approx(50)

    def test_metrics_include_control_points(self) -> None:
        """Test metrics count control points and derive the right side bearing."""
        glyph = Glyph(
            1,
            "o",
            path=Path([MoveTo(10, 0), QuadTo(50, 120, 90, 0), Close()]),
            advance_width=100,
            left_side_bearing=10,
        )
        metrics = glyph.get_metrics()
        assert (metrics.x_min, metrics.y_min, metrics.x_max, metrics.y_max) == (10, 0, 90, 120)
        assert metrics.left_side_bearing == 10
        assert metrics.right_side_bearing == 10

    def test_metrics_without_outline(self) -> None:
        """Test an empty outline falls back to zero and the advance width."""
        metrics = Glyph(1, "space", advance_width=250).get_metrics()
        assert metrics.x_min == 0
        assert metrics.x_max == 250
        assert metrics.right_side_bearing == 0

    def test_metrics_skip_non_finite(self) -> None:
        """Test NaN coordinates are ignored."""
        glyph = Glyph(1, "x", path=Path([MoveTo(float("nan"), 5), LineTo(20, 10)]))
        metrics = glyph.get_metrics()
        assert metrics.x_min == 20
        assert metrics.y_min == 5

    def test_get_contours(self) -> None:
        """Test points are grouped by contour end markers."""
        points = [
            GlyphPoint(0, 0),
            GlyphPoint(10, 0),
            GlyphPoint(10, 10, last_point_of_contour=True),
            GlyphPoint(20, 20, last_point_of_contour=True),
        ]
        glyph = Glyph(1, "A", points=points)
        contours = glyph.get_contours()
        assert [len(c) for c in contours] == [3, 1]

    def test_get_contours_without_points(self) -> None:
        """Test a glyph with no point data has no contours."""
        assert Glyph(1, "A").get_contours() == []

    def test_unterminated_contour(self) -> None:
        """Test a trailing partial contour is reported."""
        glyph = Glyph(1, "A")
        with pytest.raises(ContourConsistencyError) as exc_info:
            glyph.get_contours([GlyphPoint(0, 0, last_point_of_contour=True), GlyphPoint(1, 1)])
        assert exc_info.value.remaining == 1


class TestGetPath:
    """Tests for outline resolution."""

    def test_scaled_and_flipped(self) -> None:
        """Test coordinates are scaled to the font size and flipped to Y-down."""
        glyph = Glyph(1, "A", path=_rect_path())
        result = glyph.get_path(10, 100, 72)
        assert result is not glyph.path
        assert result.commands[0] == MoveTo(10, 100)
        assert isinstance(result.commands[1], LineTo)
        assert result.commands[1].x == pytest.approx(46)
        assert result.commands[1].y == pytest.approx(100)
        x, y = result.commands[2].x, result.commands[2].y
        assert x == pytest.approx(46)
        assert y == pytest.approx(100 - 50.4)
        assert isinstance(result.commands[3], Close)

    def test_units_per_em_from_path(self) -> None:
        """Test the path's units per em sets the scale."""
        path = _rect_path()
        path.units_per_em = 2000
        result = Glyph(1, "A", path=path).get_path(0, 0, 2000)
        assert result.commands[1].x == pytest.approx(500)

    def test_units_per_em_from_font(self) -> None:
        """Test the font context's units per em is used when the path has none."""
        font = FontContext(units_per_em=500)
        result = Glyph(1, "A", path=_rect_path()).get_path(0, 0, 500, font=font)
        assert result.commands[2].y == pytest.approx(-700)

    def test_axis_scale_overrides(self) -> None:
        """Test explicit x and y scales replace the computed scale."""
        options = RenderOptions(x_scale=1, y_scale=2)
        result = Glyph(1, "A", path=_rect_path()).get_path(0, 0, 72, options)
        assert result.commands[2] == LineTo(500, -1400)

    def test_fill_and_stroke(self) -> None:
        """Test fill override and scaled stroke width."""
        path = _rect_path()
        path.stroke = "red"
        path.stroke_width = 10
        result = Glyph(1, "A", path=path).get_path(0, 0, 500, RenderOptions(fill="green"))
        assert result.fill == "green"
        assert result.stroke == "red"
        assert result.stroke_width == pytest.approx(5)

    def test_font_defaults_apply(self) -> None:
        """Test font-level render options are the base for each call."""
        font = FontContext(default_render_options=RenderOptions(fill="purple"))
        result = Glyph(1, "A", path=_rect_path()).get_path(font=font)
        assert result.fill == "purple"

    def test_variation_used_when_requested(self) -> None:
        """Test the variation source supplies the instanced glyph."""
        variation = MagicMock()
        variation.get_transform.return_value = Glyph(1, "A", path=Path([MoveTo(1000, 0)]))
        font = FontContext(variation=variation)
        glyph = Glyph(1, "A", path=_rect_path())

        result = glyph.get_path(0, 0, 1000, RenderOptions(variation={"wght": 700}), font)

        variation.get_transform.assert_called_once_with(glyph, {"wght": 700})
        assert result.commands == [MoveTo(1000, 0)]

    def test_variation_skipped_without_location(self) -> None:
        """Test no variation is applied when none is requested."""
        variation = MagicMock()
        font = FontContext(variation=variation)
        Glyph(1, "A", path=_rect_path()).get_path(font=font)
        variation.get_transform.assert_not_called()

    def test_hinting_rounds_position(self) -> None:
        """Test hinted commands are used unscaled at a rounded position."""
        hinting = MagicMock()
        hinting.exec.return_value = ["hinted"]
        hinting.get_commands.return_value = [MoveTo(3, 4)]
        font = FontContext(hinting=hinting)

        result = Glyph(1, "A", path=_rect_path()).get_path(
            10.4, 20.5, 72, RenderOptions(hinting=True), font
        )

        hinting.get_commands.assert_called_once_with(["hinted"])
        assert result.commands == [MoveTo(13, 17)]

    def test_hinting_failure_falls_back(self) -> None:
        """Test an empty hinting result uses the scaled outline."""
        hinting = MagicMock()
        hinting.exec.return_value = None
        font = FontContext(hinting=hinting)
        result = Glyph(1, "A", path=_rect_path()).get_path(
            0, 0, 1000, RenderOptions(hinting=True), font
        )
        hinting.get_commands.assert_not_called()
        assert result.commands[1] == LineTo(500, 0)

    def test_image_takes_precedence(self) -> None:
        """Test an embedded image replaces the outline."""
        image = EmbeddedImage("<svg/>", width=1000, height=1000, baseline=800)
        font = FontContext(images=FakeImages(image))
        result = Glyph(1, "A", path=_rect_path()).get_path(10, 100, 72, font=font)
        assert result.commands == []
        assert result.image is not None
        assert result.image.image == "<svg/>"
        assert result.image.x == pytest.approx(10)
        assert result.image.y == pytest.approx(100 - 57.6)
        assert result.image.width == pytest.approx(72)

    def test_image_disabled(self) -> None:
        """Test draw_svg=False ignores embedded images."""
        image = EmbeddedImage("<svg/>", width=1000, height=1000)
        font = FontContext(images=FakeImages(image))
        result = Glyph(1, "A", path=_rect_path()).get_path(
            options=RenderOptions(draw_svg=False), font=font
        )
        assert result.image is None
        assert len(result.commands) == 4

    def test_layers_with_palette(self) -> None:
        """Test each layer is rendered with its palette colour."""
        red = Glyph(2, "A.red", path=_rect_path())
        fg = Glyph(3, "A.fg", path=Path([MoveTo(0, 0), LineTo(100, 100)]))
        font = FontContext(
            layers=FakeLayers({1: [ColorLayer(red, 0), ColorLayer(fg, FOREGROUND_PALETTE_INDEX)]}),
            palette=FakePalette(),
        )
        result = Glyph(1, "A", path=_rect_path()).get_path(0, 0, 1000, font=font)

        assert result.commands == []
        assert result.layers is not None
        assert [layer.fill for layer in result.layers] == ["rgba(255, 0, 0, 1)", "black"]
        assert result.layers[1].commands == [MoveTo(0, 0), LineTo(100, -100)]

    def test_layers_color_options(self) -> None:
        """Test palette selection, colour format and foreground fill."""
        red = Glyph(2, "A.red", path=_rect_path())
        fg = Glyph(3, "A.fg", path=_rect_path())
        font = FontContext(
            layers=FakeLayers({1: [ColorLayer(red, 0), ColorLayer(fg, FOREGROUND_PALETTE_INDEX)]}),
            palette=FakePalette(),
        )
        options = RenderOptions(use_palette=1, color_format=ColorFormat.HEX, fill="orange")
        result = Glyph(1, "A", path=_rect_path()).get_path(options=options, font=font)
        assert [layer.fill for layer in result.layers] == ["#0000ff", "orange"]

    def test_layers_without_palette(self) -> None:
        """Test layers use the foreground colour when the font has no palette."""
        font = FontContext(layers=FakeLayers({1: [ColorLayer(Glyph(2, "x", path=_rect_path()), 0)]}))
        result = Glyph(1, "A", path=_rect_path()).get_path(font=font)
        assert result.layers[0].fill == "black"

    def test_layer_referencing_itself(self) -> None:
        """Test a layer pointing back at its glyph renders the plain outline."""
        glyph = Glyph(1, "A", path=_rect_path())
        font = FontContext(layers=FakeLayers({1: [ColorLayer(glyph, 0)]}), palette=FakePalette())
        result = glyph.get_path(0, 0, 1000, font=font)
        assert len(result.layers) == 1
        assert result.layers[0].layers is None
        assert len(result.layers[0].commands) == 4

    def test_layers_disabled(self) -> None:
        """Test draw_layers=False renders the glyph's own outline."""
        font = FontContext(layers=FakeLayers({1: [ColorLayer(Glyph(2, "x"), 0)]}))
        result = Glyph(1, "A", path=_rect_path()).get_path(
            options=RenderOptions(draw_layers=False), font=font
        )
        assert result.layers is None
        assert len(result.commands) == 4

    def test_draw(self) -> None:
        """Test draw resolves the outline and replays it."""
        sink = MagicMock()
        Glyph(1, "A", path=_rect_path()).draw(sink, 0, 0, 1000)
        sink.move_to.assert_called_once_with(0, 0)
        sink.fill.assert_called_once_with("black")


class TestFontBackedAccessors:
    """Tests for accessors that need a font context."""

    def test_layers_require_font(self) -> None:
        """Test get_layers without a font raises."""
        with pytest.raises(MissingFontContextError) as exc_info:
            Glyph(1, "A").get_layers(None)
        assert exc_info.value.accessor == "get_layers"

    def test_svg_image_requires_font(self) -> None:
        """Test get_svg_image without a font raises."""
        with pytest.raises(MissingFontContextError):
            Glyph(1, "A").get_svg_image(None)

    def test_missing_tables_return_none(self) -> None:
        """Test a font without the tables yields None."""
        font = FontContext()
        assert Glyph(1, "A").get_layers(font) is None
        assert Glyph(1, "A").get_svg_image(font) is None


class TestGlyphSVG:
    """Tests for glyph-level SVG serialization."""

    def test_to_path_data(self) -> None:
        """Test the unscaled outline is serialized."""
        glyph = Glyph(1, "A", path=_rect_path())
        assert glyph.to_path_data(0) == "M0 0L500 0L500 700Z"

    def test_path_transform(self) -> None:
        """Test a path transform rewrites the outline before serialization."""
        glyph = Glyph(1, "A", path=_rect_path())
        data = glyph.to_path_data(0, path_transform=lambda p: Path(p.commands[:2]))
        assert data == "M0 0L500 0"

    def test_points_transform(self) -> None:
        """Test a points transform builds the outline from raw points."""
        points = [GlyphPoint(1, 2, last_point_of_contour=True)]
        glyph = Glyph(1, "A", path=_rect_path(), points=points)
        seen = []

        def from_points(pts: list[GlyphPoint]) -> Path:
            seen.append(pts)
            return Path([MoveTo(pts[0].x, pts[0].y)])

        assert glyph.to_path_data(0, points_transform=from_points) == "M1 2"
        assert seen == [points]

    def test_variation_from_options(self) -> None:
        """Test the options' variation location is passed to the font."""
        variation = MagicMock()
        variation.get_transform.return_value = Glyph(1, "A", path=Path([MoveTo(7, 7)]))
        font = FontContext(variation=variation)
        glyph = Glyph(1, "A", path=_rect_path())

        options = PathDataOptions(flip_y=False, variation={"wdth": 80})
        assert glyph.to_path_data(options, font) == "M7 7"
        variation.get_transform.assert_called_once_with(glyph, {"wdth": 80})

    def test_to_svg(self) -> None:
        """Test the path element carries the glyph's paint."""
        path = _rect_path()
        path.fill = "red"
        assert Glyph(1, "A", path=path).to_svg(0) == '<path d="M0 0L500 0L500 700Z" fill="red"/>'

    def test_to_svg_element(self) -> None:
        """Test the element form matches the string form."""
        element = Glyph(1, "A", path=_rect_path()).to_svg_element(0)
        assert element.get("d") == "M0 0L500 0L500 700Z"

    def test_from_svg(self) -> None:
        """Test parsing replaces the outline's commands."""
        glyph = Glyph(1, "A", path=_rect_path())
        glyph.from_svg("M0 0L10 10", SVGParseOptions(flip_y=False))
        assert glyph.path.commands == [MoveTo(0, 0), LineTo(10, 10)]

    def test_to_dict(self) -> None:
        """Test dictionary serialization."""
        data = Glyph(1, "A", unicode=65, path=_rect_path(), advance_width=600).to_dict()
        assert data["name"] == "A"
        assert data["unicodes"] == [65]
        assert data["advance_width"] == 600
        assert len(data["path"]["commands"]) == 4
