"""Path: an ordered sequence of drawing commands with paint metadata.

A path renders in exactly one of three modes: its child layers (colour glyphs),
its embedded image, or its own commands. Layers and image take precedence over
commands when present.
"""

import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Protocol

from glyphpath.config import PathDataOptions, SVGParseOptions
from glyphpath.domain.bbox import BoundingBox
from glyphpath.domain.commands import (
    Close,
    CurveTo,
    LineTo,
    MoveTo,
    PathCommand,
    QuadTo,
    command_from_dict,
)
from glyphpath.svg.parser import SVGPathParser
from glyphpath.svg.rounding import DecimalRounder
from glyphpath.svg.writer import PathDataWriter

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


@dataclass(frozen=True)
class PathImage:
    """A positioned, scaled image drawn instead of outline commands."""

    image: Any
    x: float
    y: float
    width: float
    height: float


class DrawingSink(Protocol):
    """Immediate-mode drawing target (a canvas-like context)."""

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def bezier_curve_to(
        self, x1: float, y1: float, x2: float, y2: float, x: float, y: float
    ) -> None: ...

    def quadratic_curve_to(self, x1: float, y1: float, x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def fill(self, color: str) -> None: ...

    def stroke(self, color: str, width: float) -> None: ...

    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None: ...


class Path:
    """An ordered list of drawing commands plus fill/stroke settings.

    Command validity is not enforced: a curve before any MoveTo is accepted and
    kept as is.

    Attributes:
        commands: Drawing commands in order
        fill: Fill colour (None = no fill)
        stroke: Stroke colour (None = no stroke)
        stroke_width: Stroke width
        units_per_em: Scale reference set by the owning glyph or font
        layers: Child paths of a colour glyph (None when not layered)
        image: Embedded image (None when not an image)
    """

    def __init__(self, commands: Iterable[PathCommand] | None = None) -> None:
        self.commands: list[PathCommand] = list(commands) if commands is not None else []
        self.fill: str | None = "black"
        self.stroke: str | None = None
        self.stroke_width: float = 1
        self.units_per_em: int | None = None
        self.layers: list[Path] | None = None
        self.image: PathImage | None = None

    def __repr__(self) -> str:
        return f"Path(commands={len(self.commands)}, fill={self.fill!r}, stroke={self.stroke!r})"

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(self.commands)

    # Mutators

    def move_to(self, x: float, y: float) -> None:
        self.commands.append(MoveTo(x, y))

    def line_to(self, x: float, y: float) -> None:
        self.commands.append(LineTo(x, y))

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self.commands.append(CurveTo(x1, y1, x2, y2, x, y))

    def bezier_curve_to(
        self, x1: float, y1: float, x2: float, y2: float, x: float, y: float
    ) -> None:
        self.curve_to(x1, y1, x2, y2, x, y)

    def quad_to(self, x1: float, y1: float, x: float, y: float) -> None:
        self.commands.append(QuadTo(x1, y1, x, y))

    def quadratic_curve_to(self, x1: float, y1: float, x: float, y: float) -> None:
        self.quad_to(x1, y1, x, y)

    def close(self) -> None:
        self.commands.append(Close())

    def close_path(self) -> None:
        self.close()

    def extend(self, source: "Path | BoundingBox | Iterable[PathCommand]") -> None:
        """Append commands from another path, a bounding box or a command sequence.

        A bounding box is appended as a closed rectangle through its four corners.

        Args:
            source: Path, BoundingBox or iterable of commands
        """
        if isinstance(source, Path):
            self.commands.extend(source.commands)
        elif isinstance(source, BoundingBox):
            self.move_to(source.x1, source.y1)
            self.line_to(source.x2, source.y1)
            self.line_to(source.x2, source.y2)
            self.line_to(source.x1, source.y2)
            self.close()
        else:
            self.commands.extend(source)

    # Geometry

    def get_bounding_box(self) -> BoundingBox:
        """Exact bounds of the commands; the origin when there are none."""
        return BoundingBox.of_commands(self.commands)

    # Drawing

    def draw(self, sink: DrawingSink) -> None:
        """Replay the path onto an immediate-mode drawing sink.

        Layers are drawn in order, an image is drawn as a single image call,
        otherwise commands are issued in order followed by fill then stroke.

        Args:
            sink: Drawing target
        """
        if self.layers:
            for layer in self.layers:
                layer.draw(sink)
            return

        if self.image is not None:
            img = self.image
            sink.draw_image(img.image, img.x, img.y, img.width, img.height)
            return

        sink.begin_path()
        for cmd in self.commands:
            if isinstance(cmd, MoveTo):
                sink.move_to(cmd.x, cmd.y)
            elif isinstance(cmd, LineTo):
                sink.line_to(cmd.x, cmd.y)
            elif isinstance(cmd, CurveTo):
                sink.bezier_curve_to(cmd.x1, cmd.y1, cmd.x2, cmd.y2, cmd.x, cmd.y)
            elif isinstance(cmd, QuadTo):
                sink.quadratic_curve_to(cmd.x1, cmd.y1, cmd.x, cmd.y)
            elif isinstance(cmd, Close):
                sink.close_path()

        if self.fill:
            sink.fill(self.fill)
        if self.stroke:
            sink.stroke(self.stroke, self.stroke_width)

    def draw_pen(self, pen: Any) -> None:
        """Replay the commands into a fontTools segment pen.

        Subpaths not ended by Close are finished with ``endPath()``.

        Args:
            pen: Any object implementing the fontTools pen protocol
        """
        open_subpath = False
        for cmd in self.commands:
            if isinstance(cmd, MoveTo):
                if open_subpath:
                    pen.endPath()
                pen.moveTo((cmd.x, cmd.y))
                open_subpath = True
            elif isinstance(cmd, LineTo):
                pen.lineTo((cmd.x, cmd.y))
            elif isinstance(cmd, CurveTo):
                pen.curveTo((cmd.x1, cmd.y1), (cmd.x2, cmd.y2), (cmd.x, cmd.y))
            elif isinstance(cmd, QuadTo):
                pen.qCurveTo((cmd.x1, cmd.y1), (cmd.x, cmd.y))
            elif isinstance(cmd, Close):
                pen.closePath()
                open_subpath = False
        if open_subpath:
            pen.endPath()

    # SVG codec

    def to_path_data(
        self,
        options: int | PathDataOptions | None = None,
        rounder: DecimalRounder | None = None,
    ) -> str:
        """Serialize the commands to SVG path data.

        Args:
            options: Options model, or an integer number of decimal places
                (which also turns off the vertical flip)
            rounder: Rounding cache to use

        Returns:
            SVG path ``d`` string
        """
        return PathDataWriter(PathDataOptions.coerce(options), rounder).write(self.commands)

    def _paint_attributes(self) -> dict[str, str]:
        attrs: dict[str, str] = {}
        if self.fill is None:
            attrs["fill"] = "none"
        elif self.fill != "black":
            attrs["fill"] = self.fill
        if self.stroke:
            attrs["stroke"] = self.stroke
            attrs["stroke-width"] = f"{self.stroke_width:g}"
        return attrs

    def to_svg(
        self,
        options: int | PathDataOptions | None = None,
        path_data: str | None = None,
    ) -> str:
        """Render the path as an SVG ``<path>`` element string.

        Args:
            options: Serialization options (ignored when path_data is given)
            path_data: Pre-computed path data

        Returns:
            SVG markup
        """
        if path_data is None:
            path_data = self.to_path_data(options)
        svg = f'<path d="{path_data}"'
        for name, value in self._paint_attributes().items():
            svg += f' {name}="{value}"'
        return svg + "/>"

    def to_svg_element(
        self,
        options: int | PathDataOptions | None = None,
        path_data: str | None = None,
    ) -> ET.Element:
        """Build an SVG ``<path>`` element.

        Args:
            options: Serialization options (ignored when path_data is given)
            path_data: Pre-computed path data

        Returns:
            ElementTree element in the SVG namespace
        """
        if path_data is None:
            path_data = self.to_path_data(options)
        element = ET.Element(f"{{{SVG_NAMESPACE}}}path")
        element.set("d", path_data)
        for name, value in self._paint_attributes().items():
            element.set(name, value)
        return element

    def from_svg(
        self,
        path_data: "str | ET.Element",
        options: SVGParseOptions | None = None,
        rounder: DecimalRounder | None = None,
    ) -> "Path":
        """Replace the commands with parsed SVG path data.

        On a parse failure the commands hold whatever was parsed before the
        fault; discard the path in that case.

        Args:
            path_data: Path data string, or an element carrying a ``d`` attribute
            options: Parsing options
            rounder: Rounding cache to use

        Returns:
            This path

        Raises:
            PathParseError: On malformed path data
        """
        if isinstance(path_data, ET.Element):
            path_data = path_data.get("d") or ""
        self.commands = []
        SVGPathParser(options, rounder).parse_into(path_data, self.commands)
        return self

    @classmethod
    def parse_svg(
        cls,
        path_data: "str | ET.Element",
        options: SVGParseOptions | None = None,
        rounder: DecimalRounder | None = None,
    ) -> "Path":
        """Create a new path from SVG path data."""
        return cls().from_svg(path_data, options, rounder)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Serialize commands and paint settings to a dictionary."""
        data: dict[str, Any] = {
            "commands": [cmd.to_dict() for cmd in self.commands],
            "fill": self.fill,
            "stroke": self.stroke,
            "stroke_width": self.stroke_width,
        }
        if self.layers:
            data["layers"] = [layer.to_dict() for layer in self.layers]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Path":
        """Deserialize a path written by to_dict."""
        path = cls(command_from_dict(c) for c in data.get("commands", []))
        path.fill = data.get("fill", "black")
        path.stroke = data.get("stroke")
        path.stroke_width = data.get("stroke_width", 1)
        if "layers" in data:
            path.layers = [cls.from_dict(layer) for layer in data["layers"]]
        return path
