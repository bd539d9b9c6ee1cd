"""
Round-half-to-even (banker's rounding) at a fixed number of decimals.

Binary floats rarely land exactly on a .5 tie after scaling (0.135 * 100
is 13.500000000000002), so a tie is detected with a small tolerance on
the scaled fractional part.  Everything else rounds to the nearest
neighbour.
"""

import math

from config import ROUNDING_EPS
from models.errors import CalculationError


def round_half_to_even(x: float, decimals: int = 2, eps: float = ROUNDING_EPS) -> float:
    """
    Round ``x`` to ``decimals`` places, sending exact ties to the even digit.

    Args:
        x: Value to round.
        decimals: Number of decimal places to keep (may be 0).
        eps: Tolerance for treating the scaled fraction as exactly 0.5.

    Returns:
        The rounded value as a float.

    Raises:
        CalculationError: If the scaled value is not finite.

    Examples:
        >>> round_half_to_even(0.125, 2)
        0.12
        >>> round_half_to_even(0.135, 2)
        0.14
    """
    factor = 10.0 ** decimals
    n = x * factor
    if not math.isfinite(n):
        raise CalculationError(f"Cannot round {x} to {decimals} decimals: value out of range.")
    floor = math.floor(n)
    frac = n - floor

    if abs(frac - 0.5) < eps:
        even = floor if floor % 2 == 0 else floor + 1
        return even / factor

    return math.floor(n + 0.5) / factor
