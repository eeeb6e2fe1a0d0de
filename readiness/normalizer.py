"""
readiness/normalizer.py

Deterministic rounding and bounding utilities for readiness scoring.
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal


class ScoreNormalizer:
    """Provides stateless normalization methods for readiness sub-scores.

    All methods are deterministic and produce bounded outputs.
    No external dependencies, state, or side effects.
    """

    def ratio_to_score(self, numerator: float, denominator: float) -> int:
        """Scale a ratio to an integer percentage.

        Args:
            numerator: Count or weighted sum on top of the ratio.
            denominator: Total the numerator is measured against.

        Returns:
            An integer in [0, 100], or 0 when the denominator is not positive.
        """
        if denominator <= 0:
            return 0
        return self.percent(numerator / denominator)

    def percent(self, fraction: float) -> int:
        """Convert a [0, 1] fraction to a rounded [0, 100] integer.

        Args:
            fraction: Share to convert. Values outside [0, 1] are clamped.

        Returns:
            An integer in the range [0, 100].
        """
        return round_half_up(self.clamp(fraction, 0.0, 1.0) * 100.0)

    def clamp(self, value: float, min_value: float, max_value: float) -> float:
        """Clamp a value to the specified [min_value, max_value] range.

        Args:
            value: The float to clamp.
            min_value: The lower bound of the output range.
            max_value: The upper bound of the output range.

        Returns:
            value if within bounds, otherwise min_value or max_value.
        """
        return max(min_value, min(value, max_value))


def round_half_up(value: float, digits: int = 0):
    """Round half away from zero instead of Python's round-half-to-even.

    Args:
        value: The number to round.
        digits: Decimal places to keep. Zero returns an int.

    Returns:
        An int when digits is 0, otherwise a float.

    Raises:
        ValueError: If value is NaN or infinite.
    """
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Cannot round non-finite value: {number!r}")

    exact = Decimal(repr(number))
    quantum = Decimal(1).scaleb(-digits)
    # Precision must cover every integer digit plus the kept decimals.
    context = Context(prec=max(28, exact.adjusted() + digits + 2))
    rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    if digits == 0:
        return int(rounded)
    return float(rounded)
