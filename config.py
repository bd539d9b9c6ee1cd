"""
Global configuration and constants for the Environmental Monitoring Calculators.
"""

# --- Rounding ---
ROUNDING_EPS = 1e-10           # Tolerance for detecting an exact .5 tie after scaling

# --- Standard Atmosphere ---
STANDARD_ATM_KPA = 101.325     # kPa
KELVIN_OFFSET = 273.15

# --- Sampling Nozzle ---
# Available nozzle inner diameters (mm), ascending
NOZZLE_SPECS = {
    "normal": (4.5, 6, 7, 8, 10, 12),
    "low-concentration": (4, 4.5, 5, 6, 7, 8, 10, 12, 14, 15, 16, 18, 20, 22, 24),
}
PROTECTION_POWER_FACTOR = 0.85  # Protection power runs the pump at 85% of max flow
LITERS_PER_MIN_TO_M3_PER_S = 1.0 / 60000.0

# --- Dissolved Oxygen ---
DO_DECIMALS = 2
DO_RANGE_HALF_WIDTH = 0.5      # mg/L either side of the standard value
DO_MIN_TEMP_C = 0.0
DO_MAX_TEMP_C = 40.0

# --- pH Buffers ---
PH_DECIMALS = 2
PH_MATCH_WINDOW_C = 10.0       # Table rows within T +/- window are candidates

# --- Gas Conversion ---
GAS_CONSTANT_L_ATM = 0.082057338   # L·atm/(mol·K)
GAS_DEFAULT_TEMPERATURE_C = 25.0
GAS_DEFAULT_DECIMALS = 2

# --- Groundwater Well ---
WELL_DECIMALS = 1
WELL_PI = 3.14                 # Matches the field spreadsheet, not math.pi

# --- Atmospheric Stability ---
CLOUD_COVER_MAX = 10           # Cloud cover in tenths of sky
DEFAULT_TERRAIN = "countryside"
REFERENCE_WIND_HEIGHT_M = 10.0

# Upper bounds (degrees) of the solar altitude bands used by the insolation table
SOLAR_ALTITUDE_BANDS = (15.0, 35.0, 65.0, float("inf"))

# Radiation level by cloud condition, one entry per altitude band
RADIATION_LEVELS = {
    "low_cloud_clear": (-1, 1, 2, 3),
    "low_cloud_scatter": (0, 1, 2, 3),
    "low_cloud_broken": (0, 0, 1, 1),
    "mid_cloud_overcast": (0, 0, 0, 1),
    "high_cloud_overcast": (0, 0, 0, 0),
}

# Power-law wind profile exponents by terrain and primary stability class
WIND_PROFILE_ALPHA = {
    "city": {"A": 0.10, "B": 0.15, "C": 0.20, "D": 0.25, "E": 0.30, "F": 0.30},
    "countryside": {"A": 0.07, "B": 0.07, "C": 0.10, "D": 0.15, "E": 0.35, "F": 0.35},
}

# Pasquill-Turner classes keyed by radiation level (3 .. -2), one row per speed rule
PASQUILL_TURNER = {
    "below_1_9": {3: "A", 2: "A-B", 1: "B", 0: "D", -1: "E", -2: "F"},
    "below_2_9": {3: "A-B", 2: "B", 1: "C", 0: "D", -1: "E", -2: "F"},
    "3_to_5": {3: "B", 2: "B-C", 1: "C", 0: "D", -1: "D", -2: "E"},
    "5_to_6": {3: "C", 2: "C", 1: "D", 0: "D", -1: "D", -2: "D"},
}
PASQUILL_TURNER_DEFAULT = "D"  # Wind speed >= 6 m/s

# --- Monitoring Suitability ---
SUITABILITY_RANK = {"a": 1, "b": 2, "c": 3, "d": 4}
DIRECTION_STD_THRESHOLDS = (15.0, 30.0, 45.0)   # degrees: <a, <b, <=c
SPEED_THRESHOLDS = (1.0, 2.0, 3.0, 4.5)         # m/s: <d, <=a, <=b, <=c

# --- Water Quality QC ---
QC_TOLERANCE_PCT = 10.0
TDS_EC_RATIO_RANGE = (0.55, 0.70)
HCO3_TDS_FACTOR = 60.0 / 122.0  # Bicarbonate counted as carbonate residue after evaporation
SATURATION_BAND = (0.9, 1.1)    # IAP/Ksp below -> undersaturated, above -> supersaturated

# Equivalent weights (mg/meq) of the base ion set
EQUIVALENT_WEIGHTS = {
    "k": 39.1,
    "na": 23.0,
    "ca": 20.04,
    "mg": 12.15,
    "cl": 35.45,
    "so4": 48.03,
    "hco3": 61.02,
    "co3": 30.005,
}
BASE_CATIONS = ("k", "na", "ca", "mg")
BASE_ANIONS = ("cl", "so4", "hco3", "co3")

# Hardness as CaCO3: mg/L divided by these equivalent weights, times 50
HARDNESS_DIVISORS = {"ca": 20.0, "mg": 12.0, "fe3": 18.6, "mn2": 27.5}
CACO3_EQUIVALENT = 50.0

# Molar masses (g/mol) used for ion activity products
SOLUBILITY_MOLAR_MASS = {
    "ca": 40.08,
    "co3": 60.009,
    "so4": 96.06,
    "pb2": 207.2,
    "cro4": 115.99,
}

# Solubility products at 25 C
KSP = {
    "CaCO3": 3.8e-9,
    "CaSO4": 2.4e-5,
    "PbCrO4": 1.8e-14,
    "PbSO4": 1.7e-8,
}
