"""
Dissolved Oxygen Saturation Model.

Computes the saturation dissolved-oxygen (DO) concentration used to check
DO meter calibration:

  1. Look up saturation DO at one standard atmosphere from an integer-degree
     table (0-40 C), interpolating linearly for fractional temperatures.
  2. Correct for barometric pressure using the saturation vapour pressure
     of water:

        DO(P) = DO(1 atm) * (P - e_s) / (P_std - e_s)
        e_s   = 0.61121 * exp((18.678 - T/234.5) * T / (T + 257.14))   [kPa]

  3. Round half-to-even to 2 decimals; the acceptance range is +/- 0.5 mg/L.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from config import (
    STANDARD_ATM_KPA,
    DO_DECIMALS,
    DO_RANGE_HALF_WIDTH,
    DO_MIN_TEMP_C,
    DO_MAX_TEMP_C,
)
from models.errors import CalculationError
from models.rounding import round_half_to_even

logger = logging.getLogger(__name__)

# Saturation DO (mg/L) in fresh water at 101.325 kPa, index = temperature in C
DO_TABLE_1ATM = (
    14.62, 14.22, 13.83, 13.46, 13.11, 12.77, 12.45, 12.14, 11.84, 11.56,  # 0-9
    11.29, 11.03, 10.78, 10.54, 10.31, 10.08, 9.87, 9.66, 9.47, 9.28,      # 10-19
    9.09, 8.91, 8.74, 8.58, 8.42, 8.26, 8.11, 7.97, 7.83, 7.69,            # 20-29
    7.56, 7.43, 7.30, 7.18, 7.07, 6.95, 6.84, 6.73, 6.63, 6.53,            # 30-39
    6.43,                                                                  # 40
)
_TABLE_TEMPS = np.arange(len(DO_TABLE_1ATM), dtype=float)
_TABLE_VALUES = np.array(DO_TABLE_1ATM)


@dataclass(frozen=True)
class DOResult:
    """Saturation DO at the given pressure and temperature.

    Args:
        standard_value: Rounded saturation DO (mg/L).
        range_min: Lower acceptance bound (mg/L).
        range_max: Upper acceptance bound (mg/L).
        g2_at_1atm: Saturation DO at one standard atmosphere (mg/L).
        es_kpa: Saturation vapour pressure of water (kPa).
        raw_i2: Pressure-corrected DO before rounding (mg/L).
    """

    standard_value: float
    range_min: float
    range_max: float
    g2_at_1atm: float
    es_kpa: float
    raw_i2: float


def saturated_do_at_1atm(temperature_c: float) -> Optional[float]:
    """Table value at 1 atm, linearly interpolated; None outside 0-40 C."""
    if temperature_c is None or math.isnan(temperature_c):
        return None
    if temperature_c < DO_MIN_TEMP_C or temperature_c > DO_MAX_TEMP_C:
        return None
    return float(np.interp(temperature_c, _TABLE_TEMPS, _TABLE_VALUES))


def water_vapour_pressure_kpa(temperature_c: float) -> float:
    """Saturation vapour pressure of water (kPa), Arden Buck equation."""
    t = temperature_c
    return 0.61121 * math.exp((18.678 - t / 234.5) * (t / (t + 257.14)))


def saturated_do_at_pressure(temperature_c: float, pressure_kpa: float) -> Optional[float]:
    """
    Saturation DO corrected to the actual barometric pressure.

    Returns:
        DO in mg/L, or None when the temperature is outside the table or
        the vapour-pressure correction is undefined.
    """
    g2 = saturated_do_at_1atm(temperature_c)
    if g2 is None:
        return None
    es = water_vapour_pressure_kpa(temperature_c)
    denom = STANDARD_ATM_KPA - es
    if denom <= 0:
        return None
    return g2 * ((pressure_kpa - es) / denom)


def compute_do(pressure_kpa: float, temperature_c: float) -> DOResult:
    """
    Compute the standard saturation DO value and its acceptance range.

    Args:
        pressure_kpa: Barometric pressure in kPa.
        temperature_c: Water temperature in C (0-40).

    Returns:
        DOResult.

    Raises:
        CalculationError: If an input is missing, the temperature is outside
            0-40 C, or the pressure correction cannot be evaluated.
    """
    if pressure_kpa is None or math.isnan(pressure_kpa):
        raise CalculationError("Please enter the barometric pressure (kPa).")
    if temperature_c is None or math.isnan(temperature_c):
        raise CalculationError("Please enter the temperature (C).")
    if temperature_c > DO_MAX_TEMP_C:
        raise CalculationError("Temperature too high: cannot calculate above 40 C.")
    if temperature_c < DO_MIN_TEMP_C:
        raise CalculationError("Temperature too low: cannot calculate below 0 C.")

    g2 = saturated_do_at_1atm(temperature_c)
    es = water_vapour_pressure_kpa(temperature_c)
    raw = saturated_do_at_pressure(temperature_c, pressure_kpa)
    if g2 is None or raw is None:
        raise CalculationError("Calculation failed, please check the inputs.")

    std = round_half_to_even(raw, DO_DECIMALS)
    logger.debug("DO: T=%s C, P=%s kPa, g2=%.4f, es=%.5f, raw=%.6f", temperature_c, pressure_kpa, g2, es, raw)

    return DOResult(
        standard_value=std,
        range_min=std - DO_RANGE_HALF_WIDTH,
        range_max=std + DO_RANGE_HALF_WIDTH,
        g2_at_1atm=g2,
        es_kpa=es,
        raw_i2=raw,
    )
