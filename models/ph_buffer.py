"""
pH Buffer Standard Values.

For a measured calibration temperature, reports the pH each of the five
standard buffers (nominal 1.68, 4.00, 6.86, 9.18, 12.46 at 25 C) should
read on the meter.

For every buffer:
  1. Evaluate a fitted polynomial pH(T) to get a theoretical value.
  2. Take the reference-table rows within T +/- 10 C (the whole table if
     none fall inside that window).
  3. Report the tabulated pH closest to the theoretical value, earliest
     row winning ties, rounded half-to-even to 2 decimals.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from config import PH_DECIMALS, PH_MATCH_WINDOW_C
from models.errors import CalculationError
from models.rounding import round_half_to_even

logger = logging.getLogger(__name__)

BUFFER_LABELS = ("1.68", "4.00", "6.86", "9.18", "12.46")

# Reference table, 0-50 C in 5 C steps
TABLE_TEMPS = (0, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50)
PH_TABLE = {
    "1.68": (1.668, 1.669, 1.671, 1.673, 1.676, 1.680, 1.684, 1.688, 1.694, 1.700, 1.706),
    "4.00": (4.006, 3.999, 3.996, 3.996, 3.998, 4.003, 4.010, 4.019, 4.029, 4.042, 4.055),
    "6.86": (6.981, 6.949, 6.921, 6.898, 6.879, 6.864, 6.852, 6.844, 6.838, 6.834, 6.833),
    "9.18": (9.458, 9.391, 9.330, 9.276, 9.226, 9.182, 9.142, 9.105, 9.072, 9.042, 9.015),
    "12.46": (13.416, 13.21, 13.011, 12.82, 12.637, 12.46, 12.292, 12.13, 11.975, 11.828, 11.697),
}

# Polynomial fits of pH against T (C), highest power first
PH_POLYNOMIALS = {
    "1.68": (0.00000001, 0.00001, 0.0002, 1.6679),
    "4.00": (0.00000000099, -0.0000004, 0.00007005, -0.0016105, 4.0057),
    "6.86": (-0.000000307375, 0.00009, -0.0067, 6.9802),
    "9.18": (0.000053, -0.0113, 9.4405),
    "12.46": (-0.0000000071, 0.000001055, 0.0001028, -0.0415, 13.416),
}

_TEMPS = np.array(TABLE_TEMPS, dtype=float)


@dataclass(frozen=True)
class PHBufferItem:
    """Standard value for one buffer.

    Args:
        label: Nominal buffer pH at 25 C.
        standard_value: Rounded tabulated pH to calibrate against.
        match_ph: Tabulated pH chosen before rounding.
        theoretical: Polynomial-fit pH at the input temperature.
    """

    label: str
    standard_value: float
    match_ph: float
    theoretical: float


@dataclass(frozen=True)
class PHResult:
    items: Tuple[PHBufferItem, ...]


def theoretical_ph(label: str, temperature_c: float) -> float:
    """Fitted pH of buffer ``label`` at ``temperature_c``."""
    if label not in PH_POLYNOMIALS:
        raise CalculationError(f"Unknown buffer '{label}'. Use one of {', '.join(BUFFER_LABELS)}.")
    return float(np.polyval(PH_POLYNOMIALS[label], temperature_c))


def closest_table_ph(label: str, temperature_c: float, window_c: float = PH_MATCH_WINDOW_C) -> float:
    """
    Tabulated pH closest to the fitted value within the temperature window.

    Args:
        label: Buffer label.
        temperature_c: Calibration temperature (C).
        window_c: Half-width of the candidate temperature window (C).

    Returns:
        The selected table pH (unrounded).
    """
    values = np.array(PH_TABLE[label])
    in_window = (_TEMPS >= temperature_c - window_c) & (_TEMPS <= temperature_c + window_c)
    pool = values[in_window] if np.any(in_window) else values

    theo = theoretical_ph(label, temperature_c)
    # argmin returns the first minimum, so ties go to the lower temperature
    return float(pool[np.argmin(np.abs(pool - theo))])


def compute_ph_standard_values(temperature_c: float) -> PHResult:
    """
    Standard pH values of all five buffers at a calibration temperature.

    Any finite temperature is accepted; far outside 0-50 C the match falls
    back to the whole table.

    Raises:
        CalculationError: If the temperature is missing.
    """
    if temperature_c is None or math.isnan(temperature_c):
        raise CalculationError("Please enter the temperature (C).")

    items = []
    for label in BUFFER_LABELS:
        theo = theoretical_ph(label, temperature_c)
        match = closest_table_ph(label, temperature_c)
        items.append(
            PHBufferItem(
                label=label,
                standard_value=round_half_to_even(match, PH_DECIMALS),
                match_ph=match,
                theoretical=theo,
            )
        )
    logger.debug("pH standard values at %s C: %s", temperature_c, [i.standard_value for i in items])
    return PHResult(items=tuple(items))
