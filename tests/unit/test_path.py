"""Unit tests for the Path command buffer."""

import xml.etree.ElementTree as ET
from unittest.mock import MagicMock, call

import pytest
from fontTools.pens.recordingPen import RecordingPen

from glyphpath.config import PathDataOptions, SVGParseOptions
from glyphpath.core import Path, PathImage
from glyphpath.core.path import SVG_NAMESPACE
from glyphpath.domain import BoundingBox, Close, CurveTo, LineTo, MoveTo, QuadTo
from glyphpath.exceptions import PathParseError


def _square() -> Path:
    path = Path()
    path.move_to(0, 0)
    path.line_to(100, 0)
    path.line_to(100, 100)
    path.close()
    return path


class TestPathBuilding:
    """Tests for command mutators."""

    def test_defaults(self) -> None:
        """Test a new path is empty with black fill."""
        path = Path()
        assert len(path) == 0
        assert path.fill == "black"
        assert path.stroke is None
        assert path.stroke_width == 1
        assert path.layers is None
        assert path.image is None

    def test_mutators_append_in_order(self) -> None:
        """Test each mutator appends one command."""
        path = Path()
        path.move_to(1, 2)
        path.line_to(3, 4)
        path.curve_to(1, 1, 2, 2, 3, 3)
        path.bezier_curve_to(4, 4, 5, 5, 6, 6)
        path.quad_to(7, 7, 8, 8)
        path.quadratic_curve_to(9, 9, 10, 10)
        path.close_path()
        assert list(path) == [
            MoveTo(1, 2),
            LineTo(3, 4),
            CurveTo(1, 1, 2, 2, 3, 3),
            CurveTo(4, 4, 5, 5, 6, 6),
            QuadTo(7, 7, 8, 8),
            QuadTo(9, 9, 10, 10),
            Close(),
        ]

    def test_curve_without_move_accepted(self) -> None:
        """Test commands are not validated."""
        path = Path()
        path.quad_to(1, 1, 2, 2)
        assert path.commands == [QuadTo(1, 1, 2, 2)]

    def test_extend_with_path(self) -> None:
        """Test extending with another path copies its commands."""
        path = Path([MoveTo(0, 0)])
        path.extend(_square())
        assert len(path) == 5

    def test_extend_with_commands(self) -> None:
        """Test extending with a plain command list."""
        path = Path()
        path.extend([MoveTo(0, 0), LineTo(1, 1)])
        assert path.commands == [MoveTo(0, 0), LineTo(1, 1)]

    def test_extend_with_bounding_box(self) -> None:
        """Test a bounding box becomes a closed rectangle."""
        box = BoundingBox()
        box.add_point(10, 20)
        box.add_point(30, 50)
        path = Path()
        path.extend(box)
        assert path.commands == [
            MoveTo(10, 20),
            LineTo(30, 20),
            LineTo(30, 50),
            LineTo(10, 50),
            Close(),
        ]

    def test_bounding_box(self) -> None:
        """Test path bounds include curve extrema."""
        path = Path([MoveTo(0, 0), QuadTo(50, 100, 100, 0)])
        box = path.get_bounding_box()
        assert box.to_tuple() == (0, 0, 100, pytest.approx(50))

    def test_empty_bounding_box_is_origin(self) -> None:
        """Test an empty path bounds to the origin."""
        assert Path().get_bounding_box().to_tuple() == (0, 0, 0, 0)


class TestPathDrawing:
    """Tests for replaying paths onto sinks and pens."""

    def test_draw_commands_then_fill(self) -> None:
        """Test commands are replayed in order and filled."""
        sink = MagicMock()
        path = Path([MoveTo(0, 0), LineTo(1, 0), CurveTo(1, 1, 2, 2, 3, 3), QuadTo(4, 4, 5, 5), Close()])
        path.draw(sink)
        assert sink.mock_calls == [
            call.begin_path(),
            call.move_to(0, 0),
            call.line_to(1, 0),
            call.bezier_curve_to(1, 1, 2, 2, 3, 3),
            call.quadratic_curve_to(4, 4, 5, 5),
            call.close_path(),
            call.fill("black"),
        ]

    def test_draw_fill_before_stroke(self) -> None:
        """Test fill is applied before stroke."""
        sink = MagicMock()
        path = _square()
        path.fill = "red"
        path.stroke = "blue"
        path.stroke_width = 2
        path.draw(sink)
        assert sink.mock_calls[-2:] == [call.fill("red"), call.stroke("blue", 2)]

    def test_draw_no_fill(self) -> None:
        """Test a None fill issues no fill call."""
        sink = MagicMock()
        path = _square()
        path.fill = None
        path.draw(sink)
        sink.fill.assert_not_called()
        sink.stroke.assert_not_called()

    def test_draw_layers_only(self) -> None:
        """Test a layered path draws its layers and not its own commands."""
        sink = MagicMock()
        red = _square()
        red.fill = "red"
        green = Path([MoveTo(5, 5), LineTo(6, 6)])
        green.fill = "green"
        parent = Path([MoveTo(999, 999)])
        parent.layers = [red, green]
        parent.draw(sink)
        fills = [c for c in sink.mock_calls if c[0] == "fill"]
        assert fills == [call.fill("red"), call.fill("green")]
        assert call.move_to(999, 999) not in sink.mock_calls

    def test_draw_image(self) -> None:
        """Test an image path issues a single draw_image call."""
        sink = MagicMock()
        path = Path()
        path.image = PathImage("<svg/>", 1, 2, 30, 40)
        path.draw(sink)
        assert sink.mock_calls == [call.draw_image("<svg/>", 1, 2, 30, 40)]

    def test_draw_pen(self) -> None:
        """Test replaying into a fontTools pen."""
        pen = RecordingPen()
        path = Path(
            [
                MoveTo(0, 0),
                LineTo(10, 0),
                QuadTo(15, 5, 10, 10),
                CurveTo(8, 12, 2, 12, 0, 10),
                Close(),
                MoveTo(20, 20),
                LineTo(30, 30),
            ]
        )
        path.draw_pen(pen)
        assert pen.value == [
            ("moveTo", ((0, 0),)),
            ("lineTo", ((10, 0),)),
            ("qCurveTo", ((15, 5), (10, 10))),
            ("curveTo", ((8, 12), (2, 12), (0, 10))),
            ("closePath", ()),
            ("moveTo", ((20, 20),)),
            ("lineTo", ((30, 30),)),
            ("endPath", ()),
        ]


class TestPathSVG:
    """Tests for SVG output and input on Path."""

    def test_to_path_data(self) -> None:
        """Test serialization uses the given options."""
        assert _square().to_path_data(PathDataOptions(flip_y=False)) == "M0 0L100 0L100 100Z"
        assert _square().to_path_data(0) == "M0 0L100 0L100 100Z"

    def test_to_svg_default_fill_omitted(self) -> None:
        """Test a black fill writes no attribute."""
        assert _square().to_svg(0) == '<path d="M0 0L100 0L100 100Z"/>'

    def test_to_svg_paint_attributes(self) -> None:
        """Test fill and stroke attributes are written."""
        path = _square()
        path.fill = None
        path.stroke = "red"
        path.stroke_width = 1.5
        svg = path.to_svg(path_data="M0 0Z")
        assert svg == '<path d="M0 0Z" fill="none" stroke="red" stroke-width="1.5"/>'

    def test_to_svg_element(self) -> None:
        """Test the element is namespaced and carries the path data."""
        path = _square()
        path.fill = "#ff0000"
        element = path.to_svg_element(0)
        assert element.tag == f"{{{SVG_NAMESPACE}}}path"
        assert element.get("d") == "M0 0L100 0L100 100Z"
        assert element.get("fill") == "#ff0000"

    def test_from_svg_replaces_commands(self) -> None:
        """Test parsing replaces existing commands and returns the path."""
        path = Path([MoveTo(5, 5)])
        result = path.from_svg("M0 0L10 0L10 10Z", SVGParseOptions(flip_y=False))
        assert result is path
        assert path.commands == [MoveTo(0, 0), LineTo(10, 0), LineTo(10, 10), Close()]

    def test_from_svg_element(self) -> None:
        """Test parsing reads the d attribute of an element."""
        element = ET.Element("path", d="M1 1L20 20")
        path = Path.parse_svg(element, SVGParseOptions(flip_y=False))
        assert path.commands == [MoveTo(1, 1), LineTo(20, 20)]

    def test_from_svg_drops_trailing_line_near_start(self) -> None:
        """Test an open path ending within one unit of its start loses that line."""
        element = ET.Element("path", d="M1 1L2 2")
        assert Path.parse_svg(element, SVGParseOptions(flip_y=False)).commands == [MoveTo(1, 1)]
        unoptimized = Path.parse_svg(element, SVGParseOptions(flip_y=False, optimize=False))
        assert unoptimized.commands == [MoveTo(1, 1), LineTo(2, 2)]

    def test_from_svg_failure_keeps_prefix(self) -> None:
        """Test a failed parse leaves the commands parsed before the fault."""
        path = Path()
        with pytest.raises(PathParseError):
            path.from_svg("M0 0L1 1L2 2 !", SVGParseOptions(flip_y=False))
        assert path.commands == [MoveTo(0, 0), LineTo(1, 1)]


class TestPathSerialization:
    """Tests for dictionary serialization."""

    def test_round_trip(self) -> None:
        """Test to_dict and from_dict preserve commands, paint and layers."""
        path = _square()
        path.stroke = "blue"
        path.stroke_width = 3
        layer = Path([MoveTo(1, 1)])
        layer.fill = "red"
        path.layers = [layer]

        restored = Path.from_dict(path.to_dict())
        assert restored.commands == path.commands
        assert restored.stroke == "blue"
        assert restored.stroke_width == 3
        assert restored.layers is not None
        assert restored.layers[0].fill == "red"

    def test_no_layers_key_when_plain(self) -> None:
        """Test a plain path does not serialize a layers entry."""
        assert "layers" not in _square().to_dict()
