"""Axis-aligned bounding box with exact Bezier extrema.

A BoundingBox starts empty and widens as points and curves are added. Curves
are bounded exactly: interior extrema are found by solving the derivative of
the cubic Bernstein polynomial per axis, so a curve whose control points lie
outside its visible shape does not inflate the box.
"""

import math
from collections.abc import Iterable

from glyphpath.domain.commands import Close, CurveTo, LineTo, MoveTo, PathCommand, QuadTo


def _bernstein(v0: float, v1: float, v2: float, v3: float, t: float) -> float:
    """Evaluate one axis of a cubic Bezier at t."""
    mt = 1 - t
    return mt**3 * v0 + 3 * mt**2 * t * v1 + 3 * mt * t**2 * v2 + t**3 * v3


def cubic_extrema(v0: float, v1: float, v2: float, v3: float) -> list[float]:
    """Values of a cubic's interior extrema along one axis.

    Solves B'(t) = 0 where B'(t)/3 expands to a t^2 + b t + c with
    a = -3v0 + 9v1 - 9v2 + 3v3, b = 6v0 - 12v1 + 6v2, c = 3v1 - 3v0.
    Only roots strictly inside (0, 1) count.

    Args:
        v0: Start coordinate
        v1: First control coordinate
        v2: Second control coordinate
        v3: End coordinate

    Returns:
        Axis values of the curve at each interior extremum
    """
    a = -3 * v0 + 9 * v1 - 9 * v2 + 3 * v3
    b = 6 * v0 - 12 * v1 + 6 * v2
    c = 3 * v1 - 3 * v0

    if a == 0:
        if b == 0:
            return []
        roots = [-c / b]
    else:
        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return []
        sqrt_disc = math.sqrt(discriminant)
        roots = [(-b + sqrt_disc) / (2 * a), (-b - sqrt_disc) / (2 * a)]

    return [_bernstein(v0, v1, v2, v3, t) for t in roots if 0 < t < 1]


class BoundingBox:
    """Smallest axis-aligned box enclosing every point and curve added.

    The box is empty until the first coordinate is added; an empty box has no
    numeric extent (all four bounds are NaN). Once non-empty it never becomes
    empty again.

    Attributes:
        x1: Minimum x
        y1: Minimum y
        x2: Maximum x
        y2: Maximum y
    """

    __slots__ = ("x1", "y1", "x2", "y2")

    def __init__(self) -> None:
        self.x1 = math.nan
        self.y1 = math.nan
        self.x2 = math.nan
        self.y2 = math.nan

    def __repr__(self) -> str:
        if self.is_empty():
            return "BoundingBox(empty)"
        return f"BoundingBox(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        if self.is_empty() or other.is_empty():
            return self.is_empty() and other.is_empty()
        return self.to_tuple() == other.to_tuple()

    __hash__ = None  # type: ignore[assignment]

    def is_empty(self) -> bool:
        """Return True if no coordinate has been added yet."""
        return (
            math.isnan(self.x1)
            or math.isnan(self.y1)
            or math.isnan(self.x2)
            or math.isnan(self.y2)
        )

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (x1, y1, x2, y2)."""
        return (self.x1, self.y1, self.x2, self.y2)

    def add_point(self, x: float | None, y: float | None) -> None:
        """Widen the box to include a point.

        Either coordinate may be None to widen only along the other axis.

        Args:
            x: X coordinate, or None
            y: Y coordinate, or None
        """
        if x is not None:
            if math.isnan(self.x1) or math.isnan(self.x2):
                self.x1 = x
                self.x2 = x
            if x < self.x1:
                self.x1 = x
            if x > self.x2:
                self.x2 = x
        if y is not None:
            if math.isnan(self.y1) or math.isnan(self.y2):
                self.y1 = y
                self.y2 = y
            if y < self.y1:
                self.y1 = y
            if y > self.y2:
                self.y2 = y

    def add_x(self, x: float) -> None:
        """Widen the box horizontally to include x."""
        self.add_point(x, None)

    def add_y(self, y: float) -> None:
        """Widen the box vertically to include y."""
        self.add_point(None, y)

    def add_bezier(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        x: float,
        y: float,
    ) -> None:
        """Widen the box to include an entire cubic Bezier curve.

        Args:
            x0, y0: Start point
            x1, y1: First control point
            x2, y2: Second control point
            x, y: End point
        """
        self.add_point(x0, y0)
        self.add_point(x, y)
        for value in cubic_extrema(x0, x1, x2, x):
            self.add_x(value)
        for value in cubic_extrema(y0, y1, y2, y):
            self.add_y(value)

    def add_quad(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        x: float,
        y: float,
    ) -> None:
        """Widen the box to include an entire quadratic Bezier curve.

        The quadratic is degree-elevated to the equivalent cubic first.

        Args:
            x0, y0: Start point
            x1, y1: Control point
            x, y: End point
        """
        cp1x = x0 + 2 / 3 * (x1 - x0)
        cp1y = y0 + 2 / 3 * (y1 - y0)
        cp2x = cp1x + 1 / 3 * (x - x0)
        cp2y = cp1y + 1 / 3 * (y - y0)
        self.add_bezier(x0, y0, cp1x, cp1y, cp2x, cp2y, x, y)

    @classmethod
    def of_commands(cls, commands: Iterable[PathCommand]) -> "BoundingBox":
        """Bound a command sequence.

        Tracks the subpath start and the previous point: MoveTo resets both,
        Close returns the cursor to the subpath start, curves are bounded from
        the cursor. An empty result is seeded with the origin so the returned
        box is never empty.

        Args:
            commands: Drawing commands in order

        Returns:
            Non-empty BoundingBox
        """
        box = cls()
        start_x = start_y = prev_x = prev_y = 0.0
        for cmd in commands:
            if isinstance(cmd, MoveTo):
                box.add_point(cmd.x, cmd.y)
                start_x = prev_x = cmd.x
                start_y = prev_y = cmd.y
            elif isinstance(cmd, LineTo):
                box.add_point(cmd.x, cmd.y)
                prev_x, prev_y = cmd.x, cmd.y
            elif isinstance(cmd, QuadTo):
                box.add_quad(prev_x, prev_y, cmd.x1, cmd.y1, cmd.x, cmd.y)
                prev_x, prev_y = cmd.x, cmd.y
            elif isinstance(cmd, CurveTo):
                box.add_bezier(prev_x, prev_y, cmd.x1, cmd.y1, cmd.x2, cmd.y2, cmd.x, cmd.y)
                prev_x, prev_y = cmd.x, cmd.y
            elif isinstance(cmd, Close):
                prev_x, prev_y = start_x, start_y

        if box.is_empty():
            box.add_point(0, 0)
        return box
