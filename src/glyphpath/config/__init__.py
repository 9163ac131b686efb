"""Configuration management for glyphpath.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments, keyword arguments or defaults.

Key classes:
- PathDataOptions: SVG path data serialization settings
- SVGParseOptions: SVG path data parsing settings
- RenderOptions: Glyph outline rendering settings
- CodecConfig, LoadingConfig, LoggingConfig: Application-level settings
- GlyphPathSettings: Main application settings
"""

from glyphpath.config.settings import (
    CodecConfig,
    ColorFormat,
    GlyphPathSettings,
    LoadingConfig,
    LoggingConfig,
    PathDataOptions,
    RenderOptions,
    SVGParseOptions,
    get_default_settings,
)

__all__ = [
    "CodecConfig",
    "ColorFormat",
    "GlyphPathSettings",
    "LoadingConfig",
    "LoggingConfig",
    "PathDataOptions",
    "RenderOptions",
    "SVGParseOptions",
    "get_default_settings",
]
