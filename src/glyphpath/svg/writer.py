"""SVG path data serialization.

Output uses uppercase absolute commands only. Numbers are separated by a
single space, except that a negative number's leading '-' doubles as the
separator (``M10-5`` rather than ``M10 -5``).
"""

from collections.abc import Sequence

from glyphpath.config import PathDataOptions
from glyphpath.domain.bbox import BoundingBox
from glyphpath.domain.commands import Close, CurveTo, LineTo, MoveTo, PathCommand, QuadTo
from glyphpath.svg.optimizer import optimize_commands
from glyphpath.svg.rounding import DecimalRounder, get_default_rounder


class PathDataWriter:
    """Serializes drawing commands to an SVG path ``d`` string.

    Example:
        writer = PathDataWriter(PathDataOptions(flip_y=False))
        writer.write([MoveTo(0, 0), LineTo(10, 0), Close()])  # 'M0 0L10 0Z'
    """

    def __init__(
        self,
        options: PathDataOptions | None = None,
        rounder: DecimalRounder | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            options: Serialization options (defaults if None)
            rounder: Rounding cache to use (shared default if None)
        """
        self.options = options or PathDataOptions()
        self._rounder = rounder or get_default_rounder()

    def _pack(self, *values: float) -> str:
        places = self.options.decimal_places
        parts: list[str] = []
        for i, value in enumerate(values):
            text = self._rounder.format(value, places)
            if i > 0 and not text.startswith("-"):
                parts.append(" ")
            parts.append(text)
        return "".join(parts)

    def write(self, commands: Sequence[PathCommand]) -> str:
        """Serialize commands to path data.

        Args:
            commands: Commands to serialize (not modified)

        Returns:
            SVG path data string
        """
        opt = self.options
        if opt.optimize:
            commands = optimize_commands(commands)

        flip_y = opt.flip_y
        base = opt.flip_y_base
        if flip_y and base is None:
            box = BoundingBox.of_commands(commands)
            base = box.y1 + box.y2

        def fy(v: float) -> float:
            return base - v if flip_y else v  # type: ignore[operator]

        out: list[str] = []
        for cmd in commands:
            if isinstance(cmd, MoveTo):
                out.append("M" + self._pack(cmd.x, fy(cmd.y)))
            elif isinstance(cmd, LineTo):
                out.append("L" + self._pack(cmd.x, fy(cmd.y)))
            elif isinstance(cmd, CurveTo):
                out.append(
                    "C"
                    + self._pack(cmd.x1, fy(cmd.y1), cmd.x2, fy(cmd.y2), cmd.x, fy(cmd.y))
                )
            elif isinstance(cmd, QuadTo):
                out.append("Q" + self._pack(cmd.x1, fy(cmd.y1), cmd.x, fy(cmd.y)))
            elif isinstance(cmd, Close):
                out.append("Z")
        return "".join(out)


def to_path_data(
    commands: Sequence[PathCommand],
    options: int | PathDataOptions | None = None,
    rounder: DecimalRounder | None = None,
) -> str:
    """Serialize commands to SVG path data.

    Args:
        commands: Commands to serialize
        options: Options model, or an integer number of decimal places
            (which also turns off the vertical flip)
        rounder: Rounding cache to use

    Returns:
        SVG path data string
    """
    return PathDataWriter(PathDataOptions.coerce(options), rounder).write(commands)
