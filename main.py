#!/usr/bin/env python3
"""
Environmental Monitoring Calculators, command-line interface.

Usage:
    python main.py nozzle --velocity 12.5 --moisture 8 --type normal --max-flow 40
    python main.py do --pressure 101.325 --temperature 20
    python main.py ph --temperature 23,5
    python main.py gas --gas SO2 --value 1 --unit ppm --temperature 25 --pressure 101.325
    python main.py well --depth 50 --casing-id 10 --water-level 10 --head 0.5 --bore 20 --porosity 0.35
    python main.py stability --date 2024-06-21 --time 14:00 --lat 31.2 --lon 121.4 \\
        --total-cloud 3 --low-cloud 2 --speeds 1.8 2.1 --directions 90 95 100
    python main.py wqc --ion ca=80.2 --ion mg=24.3 --ion hco3=122 --optional fe3=0.2 --tds 350 --ec 550

Numbers may use ',' as the decimal separator.  Results are printed as JSON.
"""

import sys
import os
import argparse
import json
import logging
from dataclasses import asdict

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from data.instruments import InstrumentRegistry
from data.parsing import parse_number, parse_readings
from models.dissolved_oxygen import compute_do
from models.errors import CalculationError
from models.gas_units import GAS_LIST, convert_gas_units
from models.ph_buffer import compute_ph_standard_values
from models.sampling_nozzle import calculate_sampling_nozzle
from models.suitability import assess_monitoring_conditions
from models.water_quality import analyze_water_quality
from models.well_volume import compute_well

logger = logging.getLogger("envcalc")


def _key_value_pairs(pairs, name):
    """Split repeated ``key=value`` options into (key, float) tuples."""
    parsed = []
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep:
            raise CalculationError(f"{name} must be given as key=value, got '{pair}'.")
        parsed.append((key.strip().lower(), parse_number(value, f"{name} {key.strip()}")))
    return parsed


def _max_flow_rate(args) -> float:
    if args.instrument_id:
        if not args.instruments:
            raise CalculationError("--instrument-id needs --instruments FILE.")
        try:
            with open(args.instruments, encoding="utf-8") as fh:
                registry = InstrumentRegistry.from_json(fh.read())
        except CalculationError:
            raise
        except (OSError, ValueError, TypeError) as exc:
            raise CalculationError(f"Cannot read instrument registry {args.instruments}: {exc}") from exc
        return registry.get(args.instrument_id).max_flow_rate
    flow = parse_number(args.max_flow, "Maximum flow rate")
    if flow is None:
        raise CalculationError("Give --max-flow or --instrument-id.")
    return flow


def run_nozzle(args):
    return calculate_sampling_nozzle(
        smoke_velocity=parse_number(args.velocity, "Flue-gas velocity"),
        moisture_content=parse_number(args.moisture, "Moisture content"),
        sampling_type=args.type,
        max_flow_rate=_max_flow_rate(args),
    )


def run_do(args):
    return compute_do(
        parse_number(args.pressure, "Pressure", default=float("nan")),
        parse_number(args.temperature, "Temperature", default=float("nan")),
    )


def run_ph(args):
    return compute_ph_standard_values(parse_number(args.temperature, "Temperature", default=float("nan")))


def run_gas(args):
    return convert_gas_units(
        gas=args.gas,
        input_value=parse_number(args.value, "Concentration", default=float("nan")),
        input_unit=args.unit,
        temperature_c=parse_number(args.temperature, "Temperature", default=float("nan")),
        pressure_kpa=parse_number(args.pressure, "Pressure", default=float("nan")),
        decimals=args.decimals,
    )


def run_well(args):
    return compute_well(
        well_depth_m=parse_number(args.depth, "Well depth", default=float("nan")),
        casing_id_cm=parse_number(args.casing_id, "Casing inner diameter", default=float("nan")),
        water_level_m=parse_number(args.water_level, "Water level", default=float("nan")),
        head_height_m=parse_number(args.head, "Wellhead height", default=float("nan")),
        bore_diameter_cm=parse_number(args.bore, "Bore diameter", default=float("nan")),
        porosity=parse_number(args.porosity, "Porosity"),
    )


def run_stability(args):
    return assess_monitoring_conditions(
        date_value=args.date,
        time_hhmm=args.time,
        lat=parse_number(args.lat, "Latitude"),
        lon=parse_number(args.lon, "Longitude"),
        total_cloud=parse_number(args.total_cloud, "Total cloud"),
        low_cloud=parse_number(args.low_cloud, "Low cloud"),
        speeds=parse_readings(args.speeds, "Wind speed"),
        directions=parse_readings(args.directions or [], "Wind direction"),
        wind_speed_type=args.wind_speed_type,
        height=parse_number(args.height, "Measurement height"),
        terrain=args.terrain,
    )


def run_wqc(args):
    return analyze_water_quality(
        base_ions=dict(_key_value_pairs(args.ion, "Ion")),
        optional_ions=_key_value_pairs(args.optional, "Optional ion"),
        tds_measured=parse_number(args.tds, "TDS"),
        ec_measured=parse_number(args.ec, "Conductivity"),
        hardness_measured=parse_number(args.hardness, "Hardness"),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envcalc",
        description="Environmental monitoring calculators",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log intermediate values")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("nozzle", help="Isokinetic sampling nozzle selection")
    p.add_argument("--velocity", required=True, help="Flue-gas velocity (m/s)")
    p.add_argument("--moisture", required=True, help="Moisture content (%%)")
    p.add_argument("--type", default="normal", choices=["normal", "low-concentration"],
                   help="Sampling type")
    p.add_argument("--max-flow", help="Instrument maximum flow rate (L/min)")
    p.add_argument("--instruments", help="Instrument registry JSON file")
    p.add_argument("--instrument-id", help="Instrument id from the registry")
    p.set_defaults(func=run_nozzle)

    p = sub.add_parser("do", help="Saturation dissolved oxygen")
    p.add_argument("--pressure", required=True, help="Barometric pressure (kPa)")
    p.add_argument("--temperature", required=True, help="Water temperature (C)")
    p.set_defaults(func=run_do)

    p = sub.add_parser("ph", help="pH buffer standard values")
    p.add_argument("--temperature", required=True, help="Calibration temperature (C)")
    p.set_defaults(func=run_ph)

    p = sub.add_parser("gas", help="ppm <-> mg/m3 conversion")
    p.add_argument("--gas", required=True, choices=[g.key for g in GAS_LIST])
    p.add_argument("--value", required=True, help="Concentration to convert")
    p.add_argument("--unit", required=True, choices=["ppm", "mg/m3"], help="Unit of --value")
    p.add_argument("--temperature", default="25", help="Gas temperature (C)")
    p.add_argument("--pressure", default="101.325", help="Gas pressure (kPa)")
    p.add_argument("--decimals", type=int, default=2, help="Decimal places of the result")
    p.set_defaults(func=run_gas)

    p = sub.add_parser("well", help="Groundwater well volume")
    p.add_argument("--depth", required=True, help="Well depth (m)")
    p.add_argument("--casing-id", required=True, help="Casing inner diameter (cm)")
    p.add_argument("--water-level", required=True, help="Water level below wellhead (m)")
    p.add_argument("--head", required=True, help="Wellhead height above ground (m)")
    p.add_argument("--bore", required=True, help="Enlarged bore diameter (cm)")
    p.add_argument("--porosity", help="Gravel-pack porosity (0-1)")
    p.set_defaults(func=run_well)

    p = sub.add_parser("stability", help="Atmospheric stability and monitoring suitability")
    p.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    p.add_argument("--time", required=True, help="Local time (HH:MM)")
    p.add_argument("--lat", required=True, help="Latitude (degrees)")
    p.add_argument("--lon", required=True, help="Longitude (degrees)")
    p.add_argument("--total-cloud", required=True, help="Total cloud cover (0-10)")
    p.add_argument("--low-cloud", required=True, help="Low cloud cover (0-10)")
    p.add_argument("--speeds", nargs="+", required=True, help="Wind speed readings (m/s)")
    p.add_argument("--directions", nargs="*", help="Wind direction readings (degrees)")
    p.add_argument("--wind-speed-type", default="custom", choices=["custom", "10m"])
    p.add_argument("--height", help="Wind measurement height (m)")
    p.add_argument("--terrain", default="countryside", choices=["city", "countryside"])
    p.set_defaults(func=run_stability)

    p = sub.add_parser("wqc", help="Water quality analysis QC")
    p.add_argument("--ion", action="append", help="Base ion as key=mg/L (k, na, ca, mg, cl, so4, hco3, co3)")
    p.add_argument("--optional", action="append", help="Optional ion as key=mg/L (fe2, fe3, mn2, nh4, pb2, f, no3, no2, po4, cro4)")
    p.add_argument("--tds", help="Measured TDS (mg/L)")
    p.add_argument("--ec", help="Measured conductivity (uS/cm)")
    p.add_argument("--hardness", help="Measured total hardness (mg/L as CaCO3)")
    p.set_defaults(func=run_wqc)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = args.func(args)
    except CalculationError as exc:
        logger.debug("Calculation rejected", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(asdict(result), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
