"""
Isokinetic Sampling Nozzle Selection.

Picks the sampling nozzle for a stack-gas sampler so that the gas entering
the nozzle moves at (or just above) the dry flue-gas velocity.

From the continuity equation Q = A * v with A = pi * (d/2)^2:

    d = 2 * sqrt(Q / (pi * v))

The theoretical diameter is computed twice: once at the instrument's full
rated flow and once at protection power (85% of rated flow).  Each is then
snapped down to the largest nozzle actually available for the sampling
type, falling back to the smallest nozzle when none is small enough.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from config import NOZZLE_SPECS, PROTECTION_POWER_FACTOR, LITERS_PER_MIN_TO_M3_PER_S
from models.errors import CalculationError

logger = logging.getLogger(__name__)

_SAMPLING_TYPE_ALIASES = {
    "normal": "normal",
    "low-concentration": "low-concentration",
    "low_concentration": "low-concentration",
}


@dataclass(frozen=True)
class NozzleResult:
    """Recommended nozzles for one sampling configuration.

    Args:
        dry_gas_velocity: Flue-gas velocity with moisture removed (m/s).
        full_power_recommended_diameter: Nozzle for 100% of rated flow (mm).
        protection_power_recommended_diameter: Nozzle for 85% of rated flow (mm).
        available_diameters: Nozzle list the recommendations were drawn from (mm).
        full_power_theoretical_diameter: Unsnapped diameter at full flow (mm).
        protection_power_theoretical_diameter: Unsnapped diameter at protection flow (mm).
    """

    dry_gas_velocity: float
    full_power_recommended_diameter: float
    protection_power_recommended_diameter: float
    available_diameters: Tuple[float, ...]
    full_power_theoretical_diameter: float
    protection_power_theoretical_diameter: float


def get_available_diameters(sampling_type: str) -> Tuple[float, ...]:
    """Return the nozzle diameters (mm) stocked for a sampling type."""
    key = _SAMPLING_TYPE_ALIASES.get(str(sampling_type).strip().lower())
    if key is None:
        raise CalculationError(
            f"Unknown sampling type '{sampling_type}'. Use 'normal' or 'low-concentration'."
        )
    return NOZZLE_SPECS[key]


def theoretical_diameter_mm(flow_rate_l_min: float, velocity_m_s: float) -> float:
    """
    Nozzle diameter that passes ``flow_rate_l_min`` at ``velocity_m_s``.

    Args:
        flow_rate_l_min: Sampling flow in L/min.
        velocity_m_s: Gas velocity at the nozzle in m/s (must be > 0).

    Returns:
        Diameter in millimetres.
    """
    flow_m3_s = flow_rate_l_min * LITERS_PER_MIN_TO_M3_PER_S
    area_m2 = flow_m3_s / velocity_m_s
    radius_m = math.sqrt(area_m2 / math.pi)
    return radius_m * 2.0 * 1000.0


def recommend_diameter(theoretical_mm: float, available: Sequence[float]) -> float:
    """Largest available diameter <= theoretical, else the smallest available."""
    suitable = [d for d in available if d <= theoretical_mm]
    if suitable:
        return max(suitable)
    return min(available)


def _check_number(value, name: str) -> float:
    if value is None:
        raise CalculationError(f"{name} is required.")
    value = float(value)
    if math.isnan(value):
        raise CalculationError(f"{name} is required.")
    return value


def calculate_sampling_nozzle(
    smoke_velocity: float,
    moisture_content: float,
    sampling_type: str,
    max_flow_rate: float,
) -> NozzleResult:
    """
    Recommend sampling nozzles for a flue-gas measurement.

    Args:
        smoke_velocity: Measured wet flue-gas velocity (m/s, > 0).
        moisture_content: Flue-gas moisture content (%, 0-100).
        sampling_type: ``"normal"`` or ``"low-concentration"``.
        max_flow_rate: Sampler's maximum flow rate (L/min, > 0).

    Returns:
        NozzleResult with the dry-gas velocity and both recommendations.

    Raises:
        CalculationError: On missing or out-of-range inputs.
    """
    available = get_available_diameters(sampling_type)

    velocity = _check_number(smoke_velocity, "Flue-gas velocity")
    if velocity <= 0:
        raise CalculationError("Flue-gas velocity must be greater than 0 m/s.")

    moisture = _check_number(moisture_content, "Moisture content")
    if moisture < 0 or moisture > 100:
        raise CalculationError("Moisture content must be between 0 and 100%.")

    flow = _check_number(max_flow_rate, "Maximum flow rate")
    if flow <= 0:
        raise CalculationError("Maximum flow rate must be greater than 0 L/min.")

    dry_velocity = velocity * (1 - moisture / 100)
    if dry_velocity <= 0:
        raise CalculationError("Dry-gas velocity is zero; check the moisture content.")

    full_theoretical = theoretical_diameter_mm(flow, dry_velocity)
    protection_theoretical = theoretical_diameter_mm(flow * PROTECTION_POWER_FACTOR, dry_velocity)

    logger.debug(
        "Nozzle: v_dry=%.4f m/s, d_full=%.3f mm, d_protect=%.3f mm",
        dry_velocity, full_theoretical, protection_theoretical,
    )

    return NozzleResult(
        dry_gas_velocity=dry_velocity,
        full_power_recommended_diameter=recommend_diameter(full_theoretical, available),
        protection_power_recommended_diameter=recommend_diameter(protection_theoretical, available),
        available_diameters=available,
        full_power_theoretical_diameter=full_theoretical,
        protection_power_theoretical_diameter=protection_theoretical,
    )
