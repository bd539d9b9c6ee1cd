"""
Fugitive Emission Monitoring Suitability.

Final stage of the assessment: grades how suitable the current weather is
for fugitive (unorganised) emission monitoring on a four-step scale

    a  unfavourable to dispersion, suitable for monitoring
    b  fairly unfavourable to dispersion, fairly suitable
    c  favourable to dispersion, fairly unsuitable
    d  very favourable to dispersion, unsuitable

from three indicators: the spread of the wind direction readings, the
10 m wind speed, and the stability class.  The overall grade is the worst
of the three; monitoring should be cancelled when any indicator is ``d``
or at least two are ``c``.

``assess_monitoring_conditions`` chains models.solar, models.stability and
this module the way a field session uses them.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional, Sequence, Union

import numpy as np

from config import DIRECTION_STD_THRESHOLDS, SPEED_THRESHOLDS, SUITABILITY_RANK
from models.errors import CalculationError
from models.solar import SolarParams, calculate_solar_params
from models.stability import StabilityResult, calculate_stability

logger = logging.getLogger(__name__)

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)

SUITABILITY_DESCRIPTIONS = {
    "a": "Unfavourable to pollutant dispersion; suitable for fugitive emission monitoring",
    "b": "Fairly unfavourable to dispersion; fairly suitable for fugitive emission monitoring",
    "c": "Favourable to dispersion; fairly unsuitable for fugitive emission monitoring",
    "d": "Very favourable to dispersion; unsuitable for fugitive emission monitoring",
}


@dataclass(frozen=True)
class SuitabilityResult:
    dir_std_dev: float
    mean_direction: float
    direction_description: str
    dir_suitability: str
    speed_avg: float
    speed_suitability: str
    stability_class: str
    stability_suitability: str
    overall: str
    overall_description: str
    should_cancel: bool


@dataclass(frozen=True)
class MonitoringAssessment:
    """Combined output of a full suitability assessment.

    ``suitability`` is None when fewer than two direction readings were
    given; ``note`` then says why.
    """

    solar: SolarParams
    stability: StabilityResult
    measured_wind_speed: float
    suitability: Optional[SuitabilityResult]
    note: Optional[str] = None


def direction_std_dev(directions: Sequence[float]) -> float:
    """Sample standard deviation (n - 1) of direction readings; 0 for fewer than two."""
    if len(directions) < 2:
        return 0.0
    return float(np.std(np.asarray(directions, dtype=float), ddof=1))


def get_wind_direction_description(angle: float) -> str:
    """Nearest of the 16 compass points for a bearing in degrees."""
    normalized = ((angle % 360) + 360) % 360
    index = math.floor(normalized / 22.5 + 0.5) % 16
    return COMPASS_POINTS[index]


def get_wind_dir_suitability(std_dev: float) -> str:
    a_max, b_max, c_max = DIRECTION_STD_THRESHOLDS
    if std_dev < a_max:
        return "a"
    if std_dev < b_max:
        return "b"
    if std_dev <= c_max:
        return "c"
    return "d"


def get_wind_speed_suitability(avg_speed: float) -> str:
    calm, a_max, b_max, c_max = SPEED_THRESHOLDS
    if avg_speed < calm:
        return "d"
    if avg_speed <= a_max:
        return "a"
    if avg_speed <= b_max:
        return "b"
    if avg_speed <= c_max:
        return "c"
    return "d"


def get_stability_suitability(stability_class: str) -> str:
    if stability_class in ("E", "F"):
        return "a"
    if stability_class == "D":
        return "b"
    if stability_class in ("C", "B-C"):
        return "c"
    return "d"


def worst_grade(grades: Sequence[str]) -> str:
    """Highest-ranked (least suitable) grade."""
    return max(grades, key=lambda g: SUITABILITY_RANK[g])


def should_cancel_monitoring(grades: Sequence[str]) -> bool:
    """True when any grade is ``d`` or at least two are ``c``."""
    return grades.count("d") > 0 or grades.count("c") >= 2


def calculate_suitability(
    directions: Sequence[float],
    wind_speed_10m: float,
    stability_class: str,
) -> SuitabilityResult:
    """
    Grade monitoring suitability from direction readings, wind speed and stability.

    The mean direction is the arithmetic mean of the readings, so readings
    either side of north (e.g. 350 and 10) average to south.

    Args:
        directions: Wind direction readings in degrees; at least two are
            needed for a meaningful standard deviation.
        wind_speed_10m: Wind speed at 10 m (m/s).
        stability_class: Pasquill-Turner class.

    Returns:
        SuitabilityResult.

    Raises:
        CalculationError: If no direction readings are given.
    """
    if len(directions) == 0:
        raise CalculationError("At least one wind direction reading is required.")

    std_dev = direction_std_dev(directions)
    mean_direction = float(np.mean(np.asarray(directions, dtype=float)))

    dir_grade = get_wind_dir_suitability(std_dev)
    speed_grade = get_wind_speed_suitability(wind_speed_10m)
    stability_grade = get_stability_suitability(stability_class)
    grades = [dir_grade, speed_grade, stability_grade]
    overall = worst_grade(grades)

    return SuitabilityResult(
        dir_std_dev=std_dev,
        mean_direction=mean_direction,
        direction_description=get_wind_direction_description(mean_direction),
        dir_suitability=dir_grade,
        speed_avg=wind_speed_10m,
        speed_suitability=speed_grade,
        stability_class=stability_class,
        stability_suitability=stability_grade,
        overall=overall,
        overall_description=SUITABILITY_DESCRIPTIONS[overall],
        should_cancel=should_cancel_monitoring(grades),
    )


def assess_monitoring_conditions(
    date_value: Union[str, date],
    time_hhmm: Union[str, time],
    lat: float,
    lon: float,
    total_cloud: float,
    low_cloud: float,
    speeds: Sequence[Optional[float]],
    directions: Sequence[Optional[float]] = (),
    wind_speed_type: str = "custom",
    height: Optional[float] = None,
    terrain: Optional[str] = None,
) -> MonitoringAssessment:
    """
    Run solar position, stability class and suitability for one session.

    Blank (None) readings are skipped.  The measured wind speed is the mean
    of the remaining speed readings.

    Raises:
        CalculationError: If no speed reading is given or a stage rejects
            its inputs.
    """
    speed_values: List[float] = [s for s in speeds if s is not None]
    direction_values: List[float] = [d for d in directions if d is not None]
    if not speed_values:
        raise CalculationError("Enter at least one valid wind speed reading.")

    measured = float(np.mean(speed_values))
    solar = calculate_solar_params(date_value, time_hhmm, lat, lon, total_cloud, low_cloud)
    stability = calculate_stability(measured, solar.radiation_level, wind_speed_type, height, terrain)

    if len(direction_values) >= 2:
        suitability = calculate_suitability(direction_values, stability.wind_speed_10m, stability.stability_class)
        note = None
    else:
        suitability = None
        note = "Wind direction standard deviation needs at least 2 readings; suitability was not assessed."
        logger.info("Suitability skipped: %d direction reading(s)", len(direction_values))

    return MonitoringAssessment(
        solar=solar,
        stability=stability,
        measured_wind_speed=measured,
        suitability=suitability,
        note=note,
    )
