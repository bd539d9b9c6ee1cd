"""
Pasquill-Turner Atmospheric Stability Class.

Second stage of the classification: combines the 10 m wind speed with the
radiation level from models.solar into one of the classes

    A (strongly unstable), A-B, B, B-C, C, D (neutral), E, F (stable)

When the wind was measured at a height other than 10 m it is first
extrapolated with the power-law profile

    u10 = u_z * (10 / z) ** alpha

where alpha depends on terrain and on a preliminary class computed from
the unadjusted speed (compound classes use their first letter).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from config import (
    DEFAULT_TERRAIN,
    PASQUILL_TURNER,
    PASQUILL_TURNER_DEFAULT,
    REFERENCE_WIND_HEIGHT_M,
    WIND_PROFILE_ALPHA,
)
from models.errors import CalculationError

logger = logging.getLogger(__name__)

STABILITY_CLASSES = ("A", "A-B", "B", "B-C", "C", "D", "E", "F")

STABILITY_DESCRIPTIONS = {
    "A": "strongly unstable",
    "A-B": "unstable",
    "B": "unstable",
    "B-C": "slightly unstable",
    "C": "slightly unstable",
    "D": "neutral",
    "E": "moderately stable",
    "F": "stable",
}

WIND_SPEED_TYPES = ("custom", "10m")


@dataclass(frozen=True)
class StabilityResult:
    wind_speed_10m: float
    stability_class: str
    description: str


def _speed_rule(wind_speed: float) -> Optional[str]:
    """Row of PASQUILL_TURNER for a 10 m wind speed, None above 6 m/s."""
    if wind_speed < 1.9:
        return "below_1_9"
    if wind_speed < 2.9:
        return "below_2_9"
    if wind_speed < 6:
        # 2.9-3.0 m/s is not covered by the 3-5 row and shares the 5-6 row
        if 3 <= wind_speed < 5:
            return "3_to_5"
        return "5_to_6"
    return None


def get_stability_class(wind_speed: float, radiation_level: int) -> str:
    """
    Pasquill-Turner class for a 10 m wind speed and radiation level.

    Args:
        wind_speed: Wind speed at 10 m (m/s).
        radiation_level: Insolation class, -2 .. 3.

    Returns:
        Stability class string, e.g. ``"B-C"``.
    """
    rule = _speed_rule(wind_speed)
    if rule is None:
        return PASQUILL_TURNER_DEFAULT
    return PASQUILL_TURNER[rule].get(radiation_level, PASQUILL_TURNER_DEFAULT)


def primary_class(stability_class: str) -> str:
    """First letter of a compound class (``"A-B"`` -> ``"A"``)."""
    return stability_class.split("-")[0]


def wind_profile_alpha(terrain: str, stability_class: str) -> float:
    """Power-law exponent for a terrain type and stability class."""
    if terrain not in WIND_PROFILE_ALPHA:
        raise CalculationError(f"Unknown terrain '{terrain}'. Use 'city' or 'countryside'.")
    return WIND_PROFILE_ALPHA[terrain][primary_class(stability_class)]


def calculate_stability(
    measured_wind_speed: float,
    radiation_level: int,
    wind_speed_type: str = "10m",
    height: Optional[float] = None,
    terrain: Optional[str] = None,
) -> StabilityResult:
    """
    Stability class, correcting the wind speed to 10 m when needed.

    Args:
        measured_wind_speed: Mean measured wind speed (m/s).
        radiation_level: Insolation class from get_radiation_level.
        wind_speed_type: ``"10m"`` when measured at 10 m, ``"custom"`` when
            measured at ``height``.
        height: Measurement height in m; None means 10 m.
        terrain: ``"city"`` or ``"countryside"`` (default).

    Returns:
        StabilityResult with the 10 m wind speed and the final class.

    Raises:
        CalculationError: Unknown wind speed type or terrain, or missing speed.
    """
    if wind_speed_type not in WIND_SPEED_TYPES:
        raise CalculationError(f"Unknown wind speed type '{wind_speed_type}'. Use 'custom' or '10m'.")
    if measured_wind_speed is None or math.isnan(measured_wind_speed):
        raise CalculationError("Wind speed is required.")

    wind_speed_10m = measured_wind_speed
    if wind_speed_type == "custom":
        h = REFERENCE_WIND_HEIGHT_M if height is None else height
        if not math.isnan(h) and h > 0 and h != REFERENCE_WIND_HEIGHT_M:
            preliminary = get_stability_class(measured_wind_speed, radiation_level)
            alpha = wind_profile_alpha(terrain or DEFAULT_TERRAIN, preliminary)
            wind_speed_10m = measured_wind_speed * math.pow(REFERENCE_WIND_HEIGHT_M / h, alpha)
            logger.debug("Wind at %.1f m -> 10 m: alpha=%.2f (%s), u10=%.3f", h, alpha, preliminary, wind_speed_10m)

    final_class = get_stability_class(wind_speed_10m, radiation_level)
    return StabilityResult(
        wind_speed_10m=wind_speed_10m,
        stability_class=final_class,
        description=STABILITY_DESCRIPTIONS[final_class],
    )
