"""Utility functions for glyphpath.

This module provides:

- Logging setup and configuration
- Export statistics tracking
"""

from glyphpath.utils.logging import (
    ExportLogger,
    ExportStats,
    configure_logging,
)

__all__ = [
    "ExportLogger",
    "ExportStats",
    "configure_logging",
]
