"""Command-line interface for glyphpath.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Font capability summary
- Glyph outlines as SVG path data, bounding boxes and metrics
- Bulk SVG export with a progress bar
"""

from glyphpath.cli.app import cli, main

__all__ = ["cli", "main"]
