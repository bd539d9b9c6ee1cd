"""
Gas Concentration Unit Conversion.

Converts between volume mixing ratio (ppm) and mass concentration (mg/m^3)
at an arbitrary temperature and pressure using the ideal gas law:

    mg/m^3 = ppm * M * P_atm / (R * T_K)

with R = 0.082057338 L*atm/(mol*K).  NMHC is expressed as propane
equivalent.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from config import (
    GAS_CONSTANT_L_ATM,
    GAS_DEFAULT_TEMPERATURE_C,
    GAS_DEFAULT_DECIMALS,
    STANDARD_ATM_KPA,
    KELVIN_OFFSET,
)
from models.errors import CalculationError
from models.rounding import round_half_to_even

logger = logging.getLogger(__name__)

PPM = "ppm"
MG_PER_M3 = "mg/m3"


@dataclass(frozen=True)
class GasInfo:
    key: str
    name: str
    molar_mass_g_mol: float
    note: Optional[str] = None


GAS_LIST = (
    GasInfo("SO2", "Sulfur dioxide (SO2)", 64.066),
    GasInfo("NO", "Nitric oxide (NO)", 30.006),
    GasInfo("NO2", "Nitrogen dioxide (NO2)", 46.0055),
    GasInfo("CO", "Carbon monoxide (CO)", 28.010),
    GasInfo("NMHC", "Non-methane hydrocarbons (NMHC)", 44.097, note="as propane equivalent"),
)
_GASES = {g.key: g for g in GAS_LIST}


@dataclass(frozen=True)
class GasConversionResult:
    gas: GasInfo
    input_value: float
    input_unit: str
    output_value: float
    output_unit: str
    temperature_c: float
    pressure_kpa: float


def get_gas_info(key: str) -> GasInfo:
    """Look up a supported gas by key (SO2, NO, NO2, CO, NMHC)."""
    info = _GASES.get(key)
    if info is None:
        raise CalculationError(f"Unknown gas key: {key}")
    return info


def _molar_volume_term(temperature_c: float, pressure_kpa: float) -> float:
    """R * T / P in L/mol, the volume one mole occupies."""
    t_k = temperature_c + KELVIN_OFFSET
    p_atm = pressure_kpa / STANDARD_ATM_KPA
    if t_k <= 0:
        raise CalculationError("Temperature must be above absolute zero.")
    if p_atm <= 0:
        raise CalculationError("Pressure must be greater than 0 kPa.")
    return GAS_CONSTANT_L_ATM * t_k / p_atm


def ppm_to_mg_per_m3(
    ppm: float,
    gas: str,
    temperature_c: float = GAS_DEFAULT_TEMPERATURE_C,
    pressure_kpa: float = STANDARD_ATM_KPA,
) -> float:
    """Convert ppm (by volume) to mg/m^3 at the given conditions."""
    molar_mass = get_gas_info(gas).molar_mass_g_mol
    return ppm * molar_mass / _molar_volume_term(temperature_c, pressure_kpa)


def mg_per_m3_to_ppm(
    mg_per_m3: float,
    gas: str,
    temperature_c: float = GAS_DEFAULT_TEMPERATURE_C,
    pressure_kpa: float = STANDARD_ATM_KPA,
) -> float:
    """Convert mg/m^3 to ppm (by volume) at the given conditions."""
    molar_mass = get_gas_info(gas).molar_mass_g_mol
    return mg_per_m3 * _molar_volume_term(temperature_c, pressure_kpa) / molar_mass


def convert_gas_units(
    gas: str,
    input_value: float,
    input_unit: str,
    temperature_c: float = GAS_DEFAULT_TEMPERATURE_C,
    pressure_kpa: float = STANDARD_ATM_KPA,
    decimals: int = GAS_DEFAULT_DECIMALS,
) -> GasConversionResult:
    """
    Convert a concentration to the other unit, rounded half-to-even.

    Args:
        gas: Gas key, see GAS_LIST.
        input_value: Concentration to convert.
        input_unit: ``"ppm"`` or ``"mg/m3"``.
        temperature_c: Gas temperature (C).
        pressure_kpa: Gas pressure (kPa).
        decimals: Decimal places of the output.

    Returns:
        GasConversionResult carrying the inputs alongside the output.

    Raises:
        CalculationError: Unknown gas or unit, or missing / non-physical inputs.
    """
    info = get_gas_info(gas)
    for name, value in (("Concentration", input_value), ("Temperature", temperature_c), ("Pressure", pressure_kpa)):
        if value is None or math.isnan(value):
            raise CalculationError(f"{name} is required.")

    if input_unit == PPM:
        raw = ppm_to_mg_per_m3(input_value, info.key, temperature_c, pressure_kpa)
        output_unit = MG_PER_M3
    elif input_unit == MG_PER_M3:
        raw = mg_per_m3_to_ppm(input_value, info.key, temperature_c, pressure_kpa)
        output_unit = PPM
    else:
        raise CalculationError(f"Unknown unit '{input_unit}'. Use '{PPM}' or '{MG_PER_M3}'.")

    logger.debug("%s: %s %s -> %.6f %s", info.key, input_value, input_unit, raw, output_unit)

    return GasConversionResult(
        gas=info,
        input_value=input_value,
        input_unit=input_unit,
        output_value=round_half_to_even(raw, decimals),
        output_unit=output_unit,
        temperature_c=temperature_c,
        pressure_kpa=pressure_kpa,
    )
