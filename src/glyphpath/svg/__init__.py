"""SVG path codec for glyphpath.

This module converts drawing commands to and from the SVG path mini-language.

Key classes and functions:
- DecimalRounder: Half-up decimal rounding with a bounded cache
- optimize_commands: Redundant-segment removal shared by writer and parser
- PathDataWriter / to_path_data: Commands -> ``d`` string
- SVGPathParser / parse_path_data: ``d`` string -> commands
"""

from glyphpath.svg.optimizer import CLOSE_EPSILON, optimize_commands
from glyphpath.svg.parser import (
    Action,
    CharClass,
    SVGPathParser,
    TokenizerState,
    classify,
    parse_path_data,
    transition,
)
from glyphpath.svg.rounding import DecimalRounder, get_default_rounder
from glyphpath.svg.writer import PathDataWriter, to_path_data

__all__ = [
    "CLOSE_EPSILON",
    "Action",
    "CharClass",
    "DecimalRounder",
    "PathDataWriter",
    "SVGPathParser",
    "TokenizerState",
    "classify",
    "get_default_rounder",
    "optimize_commands",
    "parse_path_data",
    "to_path_data",
    "transition",
]
