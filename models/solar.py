"""
Solar Position and Insolation Class.

First stage of the Pasquill-Turner stability classification: from the date,
local (Beijing standard) time and site coordinates, compute the solar
declination and altitude, then combine the altitude with cloud cover
(tenths of sky) into a radiation level from -2 (clear night) to 3 (strong
insolation).

Declination uses the 7-term Fourier series in Qo = 2*pi*d/365:

    delta = 0.006918 - 0.399912 cos(Qo) + 0.070257 sin(Qo)
            - 0.006758 cos(2Qo) + 0.00907 sin(2Qo)
            - 0.002697 cos(3Qo) + 0.00148 sin(3Qo)

Altitude:

    h0 = asin(sin(lat) sin(delta) + cos(lat) cos(delta) cos(15t + lon - 300))

where t is local time in decimal hours; the -300 term is the hour-angle
offset for UTC+8 clock time.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Union

import numpy as np

from config import CLOUD_COVER_MAX, RADIATION_LEVELS, SOLAR_ALTITUDE_BANDS
from models.errors import CalculationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolarParams:
    """Solar geometry and the derived radiation level.

    Args:
        day_of_year: 1-based day number.
        solar_declination: Declination in degrees.
        solar_altitude: Altitude above the horizon in degrees.
        radiation_level: Insolation class, -2 .. 3.
    """

    day_of_year: int
    solar_declination: float
    solar_altitude: float
    radiation_level: int


def _parse_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise CalculationError(f"Invalid date '{value}', expected YYYY-MM-DD.")


def _parse_decimal_hours(value: Union[str, time]) -> float:
    if isinstance(value, time):
        return value.hour + value.minute / 60
    try:
        hour, minute = (int(part) for part in str(value).strip().split(":")[:2])
    except ValueError:
        raise CalculationError(f"Invalid time '{value}', expected HH:MM.")
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise CalculationError(f"Invalid time '{value}', expected HH:MM.")
    return hour + minute / 60


def solar_declination_deg(day_of_year: int) -> float:
    """Solar declination (degrees) for a 1-based day of year."""
    qo = np.radians(360.0 * day_of_year / 365.0)
    delta = (
        0.006918
        - 0.399912 * np.cos(qo)
        + 0.070257 * np.sin(qo)
        - 0.006758 * np.cos(2 * qo)
        + 0.00907 * np.sin(2 * qo)
        - 0.002697 * np.cos(3 * qo)
        + 0.00148 * np.sin(3 * qo)
    )
    return float(np.degrees(delta))


def solar_altitude_deg(lat: float, lon: float, declination_deg: float, hours: float) -> float:
    """Solar altitude (degrees) at local clock time ``hours``."""
    lat_r = np.radians(lat)
    dec_r = np.radians(declination_deg)
    hour_angle = np.radians(15 * hours + lon - 300)
    sin_h = np.sin(lat_r) * np.sin(dec_r) + np.cos(lat_r) * np.cos(dec_r) * np.cos(hour_angle)
    return float(np.degrees(np.arcsin(np.clip(sin_h, -1.0, 1.0))))


def _cloud_condition(total_cloud: float, low_cloud: float) -> str:
    if low_cloud <= 4:
        if total_cloud <= 4:
            return "low_cloud_clear"
        if total_cloud <= 7:
            return "low_cloud_scatter"
        return "low_cloud_broken"
    if low_cloud <= 7:
        return "mid_cloud_overcast"
    return "high_cloud_overcast"


def get_radiation_level(h0: float, total_cloud: float, low_cloud: float) -> int:
    """
    Insolation class from solar altitude and cloud cover.

    At night (h0 <= 0) only total cloud matters: -2 for <= 4 tenths, -1 for
    <= 7, else 0.  By day the cloud condition selects a row of
    RADIATION_LEVELS and the altitude band (<=15, <=35, <=65, >65 degrees)
    selects the column.
    """
    if h0 is None or not math.isfinite(h0):
        raise CalculationError(f"Solar altitude must be a finite number, got {h0}.")
    if h0 <= 0:
        if total_cloud <= 4:
            return -2
        if total_cloud <= 7:
            return -1
        return 0

    row = RADIATION_LEVELS[_cloud_condition(total_cloud, low_cloud)]
    band = next(i for i, upper in enumerate(SOLAR_ALTITUDE_BANDS) if h0 <= upper)
    return row[band]


def calculate_solar_params(
    date_value: Union[str, date],
    time_hhmm: Union[str, time],
    lat: float,
    lon: float,
    total_cloud: float,
    low_cloud: float,
) -> SolarParams:
    """
    Solar position and radiation level for a monitoring session.

    Args:
        date_value: Calendar date, ``date`` or ``"YYYY-MM-DD"``.
        time_hhmm: Local clock time, ``time`` or ``"HH:MM"``.
        lat: Latitude in degrees (north positive).
        lon: Longitude in degrees (east positive).
        total_cloud: Total cloud cover, 0-10.
        low_cloud: Low cloud cover, 0-10.

    Returns:
        SolarParams.

    Raises:
        CalculationError: Unparseable date/time, cloud cover outside 0-10, or
            non-finite coordinates.
    """
    for name, cover in (("Total cloud", total_cloud), ("Low cloud", low_cloud)):
        if cover is None or not (0 <= cover <= CLOUD_COVER_MAX):
            raise CalculationError(f"{name} cover must be between 0 and {CLOUD_COVER_MAX}.")
    if lat is None or lon is None or not (math.isfinite(lat) and math.isfinite(lon)):
        raise CalculationError("Latitude and longitude must be finite numbers.")

    day = _parse_date(date_value)
    hours = _parse_decimal_hours(time_hhmm)
    day_of_year = day.timetuple().tm_yday

    declination = solar_declination_deg(day_of_year)
    altitude = solar_altitude_deg(lat, lon, declination, hours)
    level = get_radiation_level(altitude, total_cloud, low_cloud)

    logger.debug("Solar: doy=%d, decl=%.3f, alt=%.3f, level=%d", day_of_year, declination, altitude, level)
    return SolarParams(
        day_of_year=day_of_year,
        solar_declination=declination,
        solar_altitude=altitude,
        radiation_level=level,
    )
