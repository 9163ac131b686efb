"""Font capabilities consumed by the outline pipeline.

A glyph does not hold a reference to its font. Instead, pipeline calls take a
FontContext made of independently optional capability handles, so each call
site only relies on what it actually uses:

- VariationSource: produces a glyph interpolated at a variation location
- HintingEngine: produces device-space point positions for a glyph
- LayerSource: colour layers (COLR) for a glyph index
- ImageSource: embedded images (SVG-in-OpenType) for a glyph index
- Palette: colour lookup (CPAL)
- GlyphSource: on-demand glyph materialization for streaming glyph sets
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from glyphpath.config import RenderOptions
from glyphpath.core.color import RGBA
from glyphpath.domain.commands import PathCommand

if TYPE_CHECKING:
    from glyphpath.core.glyph import Glyph


@dataclass(frozen=True)
class ColorLayer:
    """One stacked sub-glyph of a colour glyph.

    Attributes:
        glyph: Glyph drawn for this layer
        palette_index: CPAL entry index (0xFFFF = foreground colour)
    """

    glyph: "Glyph"
    palette_index: int


@dataclass(frozen=True)
class EmbeddedImage:
    """An image stored in the font for a glyph.

    Attributes:
        image: Image source (SVG document text or raw bytes)
        width: Image width in font units
        height: Image height in font units
        left_side_bearing: Horizontal offset of the image's left edge
        baseline: Distance from the image's top edge down to the baseline
    """

    image: Any
    width: float
    height: float
    left_side_bearing: float = 0.0
    baseline: float = 0.0


@runtime_checkable
class VariationSource(Protocol):
    def get_transform(self, glyph: "Glyph", variation: dict[str, float] | None) -> "Glyph": ...


@runtime_checkable
class HintingEngine(Protocol):
    def exec(self, glyph: "Glyph", font_size: float, options: RenderOptions) -> Sequence[Any] | None: ...

    def get_commands(self, hinted_points: Sequence[Any]) -> Sequence[PathCommand]: ...


@runtime_checkable
class LayerSource(Protocol):
    def get(self, glyph_index: int) -> Sequence[ColorLayer] | None: ...


@runtime_checkable
class ImageSource(Protocol):
    def get(self, glyph_index: int) -> EmbeddedImage | None: ...


@runtime_checkable
class Palette(Protocol):
    def get_color(self, palette_index: int, palette: int = 0) -> RGBA | str: ...


@runtime_checkable
class GlyphSource(Protocol):
    """Backing tables for a streaming glyph set."""

    def load(self, index: int) -> "Glyph | Callable[[], Glyph]": ...

    def glyph_name(self, index: int) -> str | None: ...

    def unicodes(self, index: int) -> Sequence[int]: ...

    def horizontal_metrics(self, index: int) -> tuple[float, float] | None: ...


@dataclass
class FontContext:
    """Capabilities a font offers to the outline pipeline.

    Attributes:
        units_per_em: Design grid resolution
        variation: Variable-font instancer, if any
        hinting: Hinting engine, if any
        layers: COLR layer lookup, if any
        images: Embedded image lookup, if any
        palette: CPAL colour lookup, if any
        default_render_options: Options every get_path call starts from
    """

    units_per_em: int = 1000
    variation: VariationSource | None = None
    hinting: HintingEngine | None = None
    layers: LayerSource | None = None
    images: ImageSource | None = None
    palette: Palette | None = None
    default_render_options: RenderOptions | None = None
