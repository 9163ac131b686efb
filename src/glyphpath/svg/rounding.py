"""Decimal rounding with a bounded cache.

Font coordinates repeat the same fractional parts over and over (halves,
thirds of the em grid, hinted sixty-fourths), so the rounded fraction is
cached per (places, fraction) pair and only the integer part is recombined.
"""

import math
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache

DEFAULT_CACHE_SIZE = 4096


def _round_fraction(places: int, fraction: float) -> float:
    """Round a fraction in [0, 1) half-up to the given number of places."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(fraction)).quantize(quantum, rounding=ROUND_HALF_UP))


class DecimalRounder:
    """Rounds floats to a fixed number of decimal places.

    Rounding is half-up on the fractional part, so negative values round
    towards positive infinity on a tie (-1.005 -> -1.0 at 2 places).

    Example:
        rounder = DecimalRounder()
        rounder.round(1.23456, 2)  # 1.23
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize the rounder.

        Args:
            max_size: Maximum number of cached (places, fraction) entries
        """
        self._rounded: Callable[[int, float], float] = lru_cache(maxsize=max_size)(
            _round_fraction
        )

    def round(self, value: float, places: int | None) -> float:
        """Round a value to the given number of decimal places.

        Args:
            value: Value to round
            places: Decimal places, or None to return the value unchanged

        Returns:
            Rounded value
        """
        if places is None or not math.isfinite(value):
            return value
        integer_part = math.floor(value)
        return integer_part + self._rounded(places, value - integer_part)

    def format(self, value: float, places: int) -> str:
        """Format a value for SVG path data.

        Integer-valued results print without a decimal point; all others print
        with exactly ``places`` decimals. Non-finite values print as
        ``inf``, ``-inf`` or ``nan``.

        Args:
            value: Value to format
            places: Decimal places

        Returns:
            Formatted number
        """
        rounded = self.round(value, places)
        if not math.isfinite(rounded):
            return str(rounded)
        if rounded == int(rounded):
            return str(int(rounded))
        return f"{rounded:.{places}f}"

    def cache_info(self) -> object:
        """Return hit/miss statistics of the underlying cache."""
        return self._rounded.cache_info()  # type: ignore[attr-defined]


_default_rounder: DecimalRounder | None = None


def get_default_rounder() -> DecimalRounder:
    """Return the shared rounder used when no codec-specific one is supplied."""
    global _default_rounder
    if _default_rounder is None:
        _default_rounder = DecimalRounder()
    return _default_rounder
