"""Raw outline points for point-based (TrueType) glyph sources."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class GlyphPoint:
    """A point of a TrueType contour.

    Attributes:
        x: X coordinate in font units
        y: Y coordinate in font units
        on_curve: True for on-curve points, False for quadratic control points
        last_point_of_contour: True for the final point of its contour
    """

    x: float
    y: float
    on_curve: bool = True
    last_point_of_contour: bool = False

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "on_curve": self.on_curve,
            "last": self.last_point_of_contour,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphPoint":
        """Deserialize from dictionary."""
        return cls(
            x=data["x"],
            y=data["y"],
            on_curve=data.get("on_curve", True),
            last_point_of_contour=data.get("last", False),
        )
