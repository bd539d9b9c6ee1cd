"""
Groundwater Monitoring Well Volume.

Computes the standing water in a monitoring well before purging: the
water inside the casing plus the pore water held in the gravel pack
between the casing and the drilled (enlarged) bore.

Inputs follow the field spreadsheet columns:

    B  well depth below wellhead (m)
    C  casing inner diameter (cm)
    D  water level below wellhead (m)
    E  wellhead height above ground (m)
    F  enlarged bore diameter (cm)
    G  gravel-pack porosity (0-1, optional)

    buried depth  = D - E
    water depth   = B + E - D
    volume (L)    = [A_pipe * h + max(A_bore - A_pipe, 0) * h * G] / 1000

with areas in cm^2 from pi = 3.14 and h the water column in cm.  All
outputs are rounded half-to-even to one decimal.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from config import WELL_DECIMALS, WELL_PI
from models.errors import CalculationError
from models.rounding import round_half_to_even

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WellResult:
    """Derived well quantities.

    ``water_volume_l`` is None when no porosity was supplied, which is not
    the same as a computed volume of zero.
    """

    buried_depth_m: float
    water_depth_m: float
    water_volume_l: Optional[float]


def _circle_area_cm2(diameter_cm: float) -> float:
    return (diameter_cm * diameter_cm * WELL_PI) / 4


def compute_well(
    well_depth_m: float,
    casing_id_cm: float,
    water_level_m: float,
    head_height_m: float,
    bore_diameter_cm: float,
    porosity: Optional[float] = None,
) -> WellResult:
    """
    Compute buried depth, water depth and standing water volume.

    Args:
        well_depth_m: Well construction depth (B, m).
        casing_id_cm: Casing inner diameter (C, cm).
        water_level_m: Depth to water from the wellhead (D, m).
        head_height_m: Wellhead height above ground (E, m).
        bore_diameter_cm: Enlarged bore diameter (F, cm).
        porosity: Gravel-pack porosity (G, 0-1); None or NaN leaves the
            volume undetermined.

    Returns:
        WellResult.

    Raises:
        CalculationError: On missing depths/diameters or porosity outside 0-1.
    """
    named = (
        ("Well depth", well_depth_m),
        ("Casing inner diameter", casing_id_cm),
        ("Water level", water_level_m),
        ("Wellhead height", head_height_m),
        ("Bore diameter", bore_diameter_cm),
    )
    for name, value in named:
        if value is None or math.isnan(value):
            raise CalculationError(f"{name} is required.")

    buried_depth = water_level_m - head_height_m
    water_depth = well_depth_m + head_height_m - water_level_m

    buried_rounded = round_half_to_even(buried_depth, WELL_DECIMALS)
    water_rounded = round_half_to_even(water_depth, WELL_DECIMALS)

    if porosity is None or math.isnan(porosity):
        return WellResult(buried_rounded, water_rounded, None)

    if porosity < 0 or porosity > 1:
        raise CalculationError("Porosity must be between 0 and 1.")

    area_pipe = _circle_area_cm2(casing_id_cm)
    area_annulus = max(_circle_area_cm2(bore_diameter_cm) - area_pipe, 0)
    height_cm = 100 * (well_depth_m + head_height_m - water_level_m)

    volume_l = (area_pipe * height_cm + area_annulus * height_cm * porosity) / 1000
    logger.debug("Well: h=%.1f cm, A_pipe=%.3f cm2, A_annulus=%.3f cm2, V=%.4f L",
                 height_cm, area_pipe, area_annulus, volume_l)

    return WellResult(
        buried_depth_m=buried_rounded,
        water_depth_m=water_rounded,
        water_volume_l=round_half_to_even(volume_l, WELL_DECIMALS),
    )
