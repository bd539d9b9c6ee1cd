"""
Water Quality Analysis QC.

Cross-checks a major-ion water analysis for internal consistency.  Each
check recomputes a quantity from the ion concentrations (mg/L) and
compares it with what was measured, passing within +/- 10%:

  - Ion balance: cation vs anion milliequivalents,
        error = (sum_C - sum_A) / (sum_C + sum_A) * 100
  - TDS vs ion sum: sum of ions, bicarbonate weighted by 60/122 (it
    leaves carbonate on evaporation), against measured TDS
  - TDS/EC ratio: measured TDS / EC (uS/cm) within 0.55-0.70
  - EC vs ions: cation and anion meq/L each against EC/100
  - Hardness: (Ca/20 + Mg/12 + Fe3/18.6 + Mn2/27.5) * 50 as CaCO3

A solubility screen compares ion activity products (molar concentrations,
activity coefficients taken as 1) of CaCO3, CaSO4, PbCrO4 and PbSO4 with
their solubility products.

Checks whose measurement is not supplied report ``passed=None``.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from config import (
    BASE_ANIONS,
    BASE_CATIONS,
    CACO3_EQUIVALENT,
    EQUIVALENT_WEIGHTS,
    HARDNESS_DIVISORS,
    HCO3_TDS_FACTOR,
    KSP,
    QC_TOLERANCE_PCT,
    SATURATION_BAND,
    SOLUBILITY_MOLAR_MASS,
    TDS_EC_RATIO_RANGE,
)
from models.errors import CalculationError

logger = logging.getLogger(__name__)

SUPERSATURATED = "supersaturated"
UNDERSATURATED = "undersaturated"
SATURATED = "saturated"
INSUFFICIENT_DATA = "insufficient data"


@dataclass(frozen=True)
class IonSpec:
    """An ion outside the base set, described by molar mass and charge."""

    key: str
    name: str
    molar_mass: float
    charge: int

    @property
    def equivalent_weight(self) -> float:
        return self.molar_mass / abs(self.charge)

    @property
    def is_cation(self) -> bool:
        return self.charge > 0


OPTIONAL_IONS = {
    spec.key: spec
    for spec in (
        IonSpec("fe2", "Iron(II) (Fe2+)", 55.845, 2),
        IonSpec("fe3", "Iron(III) (Fe3+)", 55.845, 3),
        IonSpec("mn2", "Manganese (Mn2+)", 54.938, 2),
        IonSpec("nh4", "Ammonium (NH4+)", 18.039, 1),
        IonSpec("pb2", "Lead (Pb2+)", 207.2, 2),
        IonSpec("f", "Fluoride (F-)", 18.998, -1),
        IonSpec("no3", "Nitrate (NO3-)", 62.004, -1),
        IonSpec("no2", "Nitrite (NO2-)", 46.005, -1),
        IonSpec("po4", "Phosphate (PO4 3-)", 94.971, -3),
        IonSpec("cro4", "Chromate (CrO4 2-)", 115.99, -2),
    )
}

OptionalIon = Tuple[Union[str, IonSpec], float]


@dataclass(frozen=True)
class IonBalanceCheck:
    total_cations_meq: float
    total_anions_meq: float
    error_pct: float
    passed: bool


@dataclass(frozen=True)
class TdsIonCheck:
    calculated_tds: float
    measured_tds: Optional[float]
    error_pct: Optional[float]
    passed: Optional[bool]


@dataclass(frozen=True)
class TdsEcCheck:
    ratio: Optional[float]
    passed: Optional[bool]


@dataclass(frozen=True)
class EcIonCheck:
    cation_error_pct: Optional[float]
    anion_error_pct: Optional[float]
    cations_passed: Optional[bool]
    anions_passed: Optional[bool]
    passed: Optional[bool]


@dataclass(frozen=True)
class HardnessCheck:
    calculated: float
    measured: Optional[float]
    error_pct: Optional[float]
    passed: Optional[bool]


@dataclass(frozen=True)
class SolubilityCheck:
    mineral: str
    iap: float
    ksp: float
    status: str


@dataclass(frozen=True)
class WaterQualityReport:
    ion_balance: IonBalanceCheck
    tds_vs_ions: TdsIonCheck
    tds_vs_ec: TdsEcCheck
    ec_vs_ions: EcIonCheck
    hardness: HardnessCheck
    solubility: Tuple[SolubilityCheck, ...]


def _within_tolerance(error_pct: Optional[float]) -> Optional[bool]:
    if error_pct is None:
        return None
    return abs(error_pct) <= QC_TOLERANCE_PCT


def _relative_error_pct(calculated: float, measured: Optional[float]) -> Optional[float]:
    """(calculated / measured - 1) * 100, None without a positive measurement."""
    if measured is None or measured <= 0:
        return None
    return (calculated / measured - 1) * 100


def _measurement(value: Optional[float], name: str) -> Optional[float]:
    if value is None or math.isnan(value):
        return None
    if value < 0:
        raise CalculationError(f"{name} must not be negative.")
    return float(value)


def _normalize_base_ions(base_ions: Mapping[str, Optional[float]]) -> Dict[str, float]:
    ions = {key: 0.0 for key in EQUIVALENT_WEIGHTS}
    for key, value in base_ions.items():
        key = key.lower()
        if key not in ions:
            raise CalculationError(f"Unknown base ion '{key}'.")
        if value is None or math.isnan(value):
            continue
        if value < 0:
            raise CalculationError(f"Concentration of {key} must not be negative.")
        ions[key] = float(value)
    return ions


def _normalize_optional_ions(optional_ions: Iterable[OptionalIon]) -> Tuple[Tuple[IonSpec, float], ...]:
    resolved = []
    for ion, value in optional_ions:
        spec = ion if isinstance(ion, IonSpec) else OPTIONAL_IONS.get(str(ion).lower())
        if spec is None:
            raise CalculationError(f"Unknown optional ion '{ion}'.")
        if spec.charge == 0:
            raise CalculationError(f"Ion '{spec.key}' must carry a charge.")
        if value is None or math.isnan(value) or value <= 0:
            continue
        resolved.append((spec, float(value)))
    return tuple(resolved)


def _optional_total(optional: Tuple[Tuple[IonSpec, float], ...], key: str) -> float:
    return sum(value for spec, value in optional if spec.key == key)


def ion_balance(ions: Mapping[str, float], optional: Tuple[Tuple[IonSpec, float], ...]) -> IonBalanceCheck:
    cations = sum(ions[k] / EQUIVALENT_WEIGHTS[k] for k in BASE_CATIONS)
    anions = sum(ions[k] / EQUIVALENT_WEIGHTS[k] for k in BASE_ANIONS)
    for spec, value in optional:
        meq = value / spec.equivalent_weight
        if spec.is_cation:
            cations += meq
        else:
            anions += meq

    total = cations + anions
    error = (cations - anions) / total * 100 if total > 0 else 0.0
    return IonBalanceCheck(
        total_cations_meq=cations,
        total_anions_meq=anions,
        error_pct=error,
        passed=abs(error) <= QC_TOLERANCE_PCT,
    )


def tds_vs_ions(
    ions: Mapping[str, float],
    optional: Tuple[Tuple[IonSpec, float], ...],
    tds_measured: Optional[float],
) -> TdsIonCheck:
    calculated = sum(
        value * HCO3_TDS_FACTOR if key == "hco3" else value for key, value in ions.items()
    )
    calculated += sum(value for _, value in optional)
    error = _relative_error_pct(calculated, tds_measured)
    return TdsIonCheck(calculated, tds_measured, error, _within_tolerance(error))


def tds_vs_ec(tds_measured: Optional[float], ec_measured: Optional[float]) -> TdsEcCheck:
    if not tds_measured or not ec_measured:
        return TdsEcCheck(ratio=None, passed=None)
    ratio = tds_measured / ec_measured
    low, high = TDS_EC_RATIO_RANGE
    return TdsEcCheck(ratio=ratio, passed=low <= ratio <= high)


def ec_vs_ions(balance: IonBalanceCheck, ec_measured: Optional[float]) -> EcIonCheck:
    error_c = _relative_error_pct(balance.total_cations_meq * 100, ec_measured)
    error_a = _relative_error_pct(balance.total_anions_meq * 100, ec_measured)
    ok_c = _within_tolerance(error_c)
    ok_a = _within_tolerance(error_a)
    passed = None if ok_c is None else (ok_c and ok_a)
    return EcIonCheck(error_c, error_a, ok_c, ok_a, passed)


def hardness(
    ions: Mapping[str, float],
    optional: Tuple[Tuple[IonSpec, float], ...],
    hardness_measured: Optional[float],
) -> HardnessCheck:
    contributions = {
        "ca": ions["ca"],
        "mg": ions["mg"],
        "fe3": _optional_total(optional, "fe3"),
        "mn2": _optional_total(optional, "mn2"),
    }
    calculated = sum(v / HARDNESS_DIVISORS[k] for k, v in contributions.items()) * CACO3_EQUIVALENT
    error = _relative_error_pct(calculated, hardness_measured)
    return HardnessCheck(calculated, hardness_measured, error, _within_tolerance(error))


def saturation_status(iap: float, ksp: float) -> str:
    """Classify IAP/Ksp against the +/- 10% saturation band."""
    if iap == 0:
        return INSUFFICIENT_DATA
    ratio = iap / ksp
    low, high = SATURATION_BAND
    if ratio > high:
        return SUPERSATURATED
    if ratio < low:
        return UNDERSATURATED
    return SATURATED


def solubility(
    ions: Mapping[str, float],
    optional: Tuple[Tuple[IonSpec, float], ...],
) -> Tuple[SolubilityCheck, ...]:
    mg_l = {
        "ca": ions["ca"],
        "co3": ions["co3"],
        "so4": ions["so4"],
        "pb2": _optional_total(optional, "pb2"),
        "cro4": _optional_total(optional, "cro4"),
    }
    mol = {k: v / 1000 / SOLUBILITY_MOLAR_MASS[k] for k, v in mg_l.items()}

    pairs = (
        ("CaCO3", "ca", "co3"),
        ("CaSO4", "ca", "so4"),
        ("PbCrO4", "pb2", "cro4"),
        ("PbSO4", "pb2", "so4"),
    )
    checks = []
    for mineral, cation, anion in pairs:
        iap = mol[cation] * mol[anion]
        checks.append(SolubilityCheck(mineral, iap, KSP[mineral], saturation_status(iap, KSP[mineral])))
    return tuple(checks)


def analyze_water_quality(
    base_ions: Mapping[str, Optional[float]],
    optional_ions: Iterable[OptionalIon] = (),
    tds_measured: Optional[float] = None,
    ec_measured: Optional[float] = None,
    hardness_measured: Optional[float] = None,
) -> WaterQualityReport:
    """
    Run every QC check on one water analysis.

    Args:
        base_ions: mg/L of k, na, ca, mg, cl, so4, hco3, co3; missing or
            None entries count as 0.
        optional_ions: ``(ion, mg/L)`` pairs where ion is a key of
            OPTIONAL_IONS or an IonSpec; non-positive values are ignored.
        tds_measured: Measured total dissolved solids (mg/L).
        ec_measured: Measured electrical conductivity (uS/cm).
        hardness_measured: Measured total hardness as CaCO3 (mg/L).

    Returns:
        WaterQualityReport.

    Raises:
        CalculationError: Unknown ions or negative concentrations.
    """
    ions = _normalize_base_ions(base_ions)
    optional = _normalize_optional_ions(optional_ions)
    tds = _measurement(tds_measured, "TDS")
    ec = _measurement(ec_measured, "Conductivity")
    hard = _measurement(hardness_measured, "Hardness")

    balance = ion_balance(ions, optional)
    logger.debug("Ion balance: C=%.4f meq/L, A=%.4f meq/L, error=%.2f%%",
                 balance.total_cations_meq, balance.total_anions_meq, balance.error_pct)

    return WaterQualityReport(
        ion_balance=balance,
        tds_vs_ions=tds_vs_ions(ions, optional, tds),
        tds_vs_ec=tds_vs_ec(tds, ec),
        ec_vs_ions=ec_vs_ions(balance, ec),
        hardness=hardness(ions, optional, hard),
        solubility=solubility(ions, optional),
    )
