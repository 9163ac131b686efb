"""Configuration settings for glyphpath."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ColorFormat(str, Enum):
    """Output format for palette colours."""

    RAW = "raw"
    HEX = "hex"
    HEXA = "hexa"
    RGB = "rgb"
    RGBA = "rgba"
    HSL = "hsl"
    HSLA = "hsla"


class PathDataOptions(BaseModel):
    """Options for serializing a path to SVG path data.

    When ``flip_y`` is on and ``flip_y_base`` is left unset, the mirror line is
    the vertical center of the (optimized) commands' bounding box.
    """

    decimal_places: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Number of decimal places coordinates are rounded to",
    )
    optimize: bool = Field(
        default=True,
        description="Drop redundant segments before serializing",
    )
    flip_y: bool = Field(
        default=True,
        description="Mirror y coordinates around flip_y_base",
    )
    flip_y_base: float | None = Field(
        default=None,
        description="Mirror line for flip_y (None = bounding box y1 + y2)",
    )
    variation: dict[str, float] | None = Field(
        default=None,
        description="Variation axis location used by Glyph.to_path_data",
    )

    @classmethod
    def coerce(cls, options: "int | PathDataOptions | None") -> "PathDataOptions":
        """Normalize the accepted option shapes.

        A bare integer is shorthand for ``decimal_places`` with no vertical flip.

        Args:
            options: Options model, decimal places, or None for defaults

        Returns:
            PathDataOptions instance
        """
        if options is None:
            return cls()
        if isinstance(options, int):
            return cls(decimal_places=options, flip_y=False)
        return options


class SVGParseOptions(BaseModel):
    """Options for parsing SVG path data into a path."""

    decimal_places: int | None = Field(
        default=2,
        ge=0,
        le=10,
        description="Decimal places parsed numbers are rounded to (None = no rounding)",
    )
    optimize: bool = Field(default=True, description="Drop redundant segments after parsing")
    flip_y: bool = Field(default=True, description="Mirror y coordinates around flip_y_base")
    flip_y_base: float | None = Field(
        default=None,
        description="Mirror line for flip_y (None = parsed bounding box y1 + y2)",
    )
    scale: float = Field(default=1.0, description="Scale applied to every coordinate")
    x: float = Field(default=0.0, description="Horizontal offset added after scaling")
    y: float = Field(default=0.0, description="Vertical offset added after scaling")


class RenderOptions(BaseModel):
    """Options for resolving a glyph outline with Glyph.get_path."""

    x_scale: float | None = Field(default=None, description="Horizontal scale override")
    y_scale: float | None = Field(default=None, description="Vertical scale override")
    hinting: bool = Field(default=False, description="Run the font's hinting engine")
    variation: dict[str, float] | None = Field(
        default=None,
        description="Variation axis location, e.g. {'wght': 700}",
    )
    draw_layers: bool = Field(default=True, description="Render COLR colour layers")
    draw_svg: bool = Field(default=True, description="Render SVG-in-OpenType images")
    fill: str | None = Field(default=None, description="Fill colour override")
    use_palette: int = Field(default=0, ge=0, description="CPAL palette index")
    color_format: ColorFormat = Field(
        default=ColorFormat.RGBA,
        description="Format of palette colours written to layer fills",
    )

    def merged_over(self, defaults: "RenderOptions | None") -> "RenderOptions":
        """Return these options layered over a set of defaults.

        Only fields explicitly set on this instance override the defaults.

        Args:
            defaults: Font-level default options, or None

        Returns:
            Merged RenderOptions
        """
        if defaults is None:
            return self
        return defaults.model_copy(update=self.model_dump(exclude_unset=True))


class CodecConfig(BaseModel):
    """Configuration for the SVG path codec."""

    rounding_cache_size: int = Field(
        default=4096,
        ge=16,
        le=1_000_000,
        description="Maximum entries kept by the decimal rounding cache",
    )


class LoadingConfig(BaseModel):
    """Configuration for font loading."""

    low_memory: bool = Field(
        default=False,
        description="Materialize glyphs on first access instead of indexing all of them",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphPathSettings(BaseModel):
    """Main application settings."""

    codec: CodecConfig = Field(default_factory=CodecConfig)
    loading: LoadingConfig = Field(default_factory=LoadingConfig)
    render: RenderOptions = Field(default_factory=RenderOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphPathSettings:
    """Get default application settings."""
    return GlyphPathSettings()
