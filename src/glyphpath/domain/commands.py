"""Drawing commands that make up a path.

Each command is a closed, immutable variant:
- MoveTo: Start a new subpath
- LineTo: Straight segment to a point
- QuadTo: Quadratic Bezier with one control point
- CurveTo: Cubic Bezier with two control points
- Close: Close the current subpath

Coordinates are in font design units unless a path has been scaled.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True, slots=True)
class MoveTo:
    """Start a new subpath at (x, y)."""

    x: float
    y: float
    letter: ClassVar[str] = "M"

    def map(self, fx: Callable[[float], float], fy: Callable[[float], float]) -> "MoveTo":
        return MoveTo(fx(self.x), fy(self.y))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.letter, "x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class LineTo:
    """Straight segment from the cursor to (x, y)."""

    x: float
    y: float
    letter: ClassVar[str] = "L"

    def map(self, fx: Callable[[float], float], fy: Callable[[float], float]) -> "LineTo":
        return LineTo(fx(self.x), fy(self.y))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.letter, "x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class QuadTo:
    """Quadratic Bezier from the cursor through control (x1, y1) to (x, y)."""

    x1: float
    y1: float
    x: float
    y: float
    letter: ClassVar[str] = "Q"

    def map(self, fx: Callable[[float], float], fy: Callable[[float], float]) -> "QuadTo":
        return QuadTo(fx(self.x1), fy(self.y1), fx(self.x), fy(self.y))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.letter, "x1": self.x1, "y1": self.y1, "x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class CurveTo:
    """Cubic Bezier from the cursor through (x1, y1) and (x2, y2) to (x, y)."""

    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float
    letter: ClassVar[str] = "C"

    def map(self, fx: Callable[[float], float], fy: Callable[[float], float]) -> "CurveTo":
        return CurveTo(
            fx(self.x1), fy(self.y1), fx(self.x2), fy(self.y2), fx(self.x), fy(self.y)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.letter,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True, slots=True)
class Close:
    """Close the current subpath."""

    letter: ClassVar[str] = "Z"

    def map(self, fx: Callable[[float], float], fy: Callable[[float], float]) -> "Close":  # noqa: ARG002
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.letter}


PathCommand = Union[MoveTo, LineTo, QuadTo, CurveTo, Close]

_BY_LETTER: dict[str, type] = {
    "M": MoveTo,
    "L": LineTo,
    "Q": QuadTo,
    "C": CurveTo,
    "Z": Close,
}


def command_from_dict(data: dict[str, Any]) -> PathCommand:
    """Deserialize a command from its dictionary form.

    Args:
        data: Dictionary with a ``type`` letter and the command's coordinates

    Returns:
        The matching command variant

    Raises:
        ValueError: If the type letter is unknown
    """
    letter = data.get("type")
    cls = _BY_LETTER.get(letter)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(f"Unknown path command type: {letter!r}")
    fields = {k: v for k, v in data.items() if k != "type"}
    return cls(**fields)  # type: ignore[no-any-return]
