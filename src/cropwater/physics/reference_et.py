"""
Reference evapotranspiration (ET0).

Two interchangeable methods, selected by data completeness:
1. FAO-56 Penman-Monteith (Eq. 6), requires Tmax, Tmin, humidity and
   either measured solar radiation or sunshine duration
2. Hargreaves (FAO-56 Eq. 52), requires Tmax and Tmin only

References:
- Allen, R.G., Pereira, L.S., Raes, D. and Smith, M. (1998).
  Crop evapotranspiration - Guidelines for computing crop water requirements.
  FAO Irrigation and drainage paper 56. FAO, Rome.
- Hargreaves, G.H. and Samani, Z.A. (1985). Reference crop
  evapotranspiration from temperature. Applied Eng. in Agric., 1(2):96-99.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

import numpy as np

from cropwater.core.config import HargreavesConfig, PenmanMonteithConfig
from cropwater.core.constants import ALBEDO, RADIATION_TO_EVAPORATION, STEFAN_BOLTZMANN
from cropwater.core.types import ClimateDailyRecord, ET0Mm, Location
from cropwater.physics.solar import extraterrestrial_radiation

logger = logging.getLogger(__name__)


class Et0Method(str, Enum):
    PENMAN_MONTEITH = "penman_monteith"
    HARGREAVES = "hargreaves"
    PRECOMPUTED = "precomputed"


@dataclass(frozen=True)
class Et0Result:
    """Reference ET for one day"""
    et0: ET0Mm  # mm/day
    ra: float  # MJ/(m²·day)
    method: Et0Method


# =============================================================================
# VAPOUR PRESSURE AND ATMOSPHERE
# =============================================================================

def saturation_vapour_pressure(temperature: float) -> float:
    """e°(T) in kPa (FAO-56 Eq. 11)"""
    return 0.6108 * np.exp(17.27 * temperature / (temperature + 237.3))


def vapour_pressure_slope(temperature: float) -> float:
    """Slope of the saturation vapour pressure curve Δ in kPa/°C (FAO-56 Eq. 13)"""
    return 4098 * saturation_vapour_pressure(temperature) / (temperature + 237.3) ** 2


def psychrometric_constant(altitude: float) -> float:
    """γ in kPa/°C from station altitude (FAO-56 Eq. 7 and 8)"""
    pressure = 101.3 * ((293 - 0.0065 * altitude) / 293) ** 5.26
    return 0.000665 * pressure


# =============================================================================
# METHODS
# =============================================================================

def penman_monteith(
    record: ClimateDailyRecord,
    location: Location,
    day: date,
    config: Optional[PenmanMonteithConfig] = None,
) -> Optional[Et0Result]:
    """
    FAO-56 Penman-Monteith reference evapotranspiration.

        ET0 = [0.408·Δ·Rn + γ·900/(T+273)·u2·(es - ea)] / [Δ + γ·(1 + 0.34·u2)]

    Soil heat flux G is neglected for daily steps. Rs is taken from the
    record or estimated from sunshine duration with the Angström formula
    (Eq. 35) and capped at clear-sky radiation Rso.

    Args:
        record: Daily climate record
        location: Field location (latitude and optional altitude)
        day: Calendar date
        config: Angström coefficients and defaults

    Returns:
        Et0Result, or None when the record lacks the required fields
    """
    if not record.supports_penman_monteith:
        return None
    config = config or PenmanMonteithConfig()

    solar = extraterrestrial_radiation(day, location.latitude)
    if solar.ra == 0:
        return Et0Result(et0=0.0, ra=0.0, method=Et0Method.PENMAN_MONTEITH)

    t_max = record.max_temp
    t_min = record.min_temp
    t_mean = record.mean_temp if record.mean_temp is not None else (t_max + t_min) / 2
    u2 = record.windspeed if record.windspeed is not None else config.default_windspeed
    altitude = location.altitude_m if location.altitude_m is not None else config.default_altitude

    # Vapour pressure deficit (Eq. 12 and 19)
    es = (saturation_vapour_pressure(t_max) + saturation_vapour_pressure(t_min)) / 2
    ea = record.humidity / 100 * es

    # Shortwave radiation (Eq. 35 to 38)
    rs0 = (0.75 + 2e-5 * altitude) * solar.ra
    if record.solar_radiation is not None:
        rs = record.solar_radiation
    else:
        n_max = solar.daylight_hours
        rs = (config.a_s + config.b_s * record.sunshine_duration / n_max) * solar.ra
        rs = min(rs, rs0)
    rs_ratio = min(rs / rs0, 1.0) if rs0 > 0 else 1.0
    rns = (1 - ALBEDO) * rs

    # Net longwave radiation (Eq. 39)
    rnl = (
        STEFAN_BOLTZMANN
        * ((t_max + 273.16) ** 4 + (t_min + 273.16) ** 4) / 2
        * (0.34 - 0.14 * np.sqrt(ea))
        * (1.35 * rs_ratio - 0.35)
    )
    rn = rns - rnl

    gamma = psychrometric_constant(altitude)
    delta = vapour_pressure_slope(t_mean)

    et0 = (
        (RADIATION_TO_EVAPORATION * delta * rn + gamma * 900 / (t_mean + 273) * u2 * (es - ea))
        / (delta + gamma * (1 + 0.34 * u2))
    )

    return Et0Result(et0=max(0.0, float(et0)), ra=solar.ra, method=Et0Method.PENMAN_MONTEITH)


def hargreaves(
    record: ClimateDailyRecord,
    location: Location,
    day: date,
    config: Optional[HargreavesConfig] = None,
) -> Optional[Et0Result]:
    """
    Hargreaves temperature-only reference evapotranspiration.

        ET0 = ch · Ra · (Tmax - Tmin)^eh · (Tmean + ct)

    Ra enters in MJ m-2 day-1. With radiation_as_evaporation it is first
    converted to equivalent evaporation (0.408·Ra, FAO-56 Eq. 52).
    A negative temperature range is treated as 0.

    Returns:
        Et0Result, or None when Tmax or Tmin is missing
    """
    if not record.has_temperature_range:
        return None
    config = config or HargreavesConfig()

    solar = extraterrestrial_radiation(day, location.latitude)
    if solar.ra == 0:
        return Et0Result(et0=0.0, ra=0.0, method=Et0Method.HARGREAVES)

    t_range = max(0.0, record.max_temp - record.min_temp)
    t_mean = (record.max_temp + record.min_temp) / 2
    ra = RADIATION_TO_EVAPORATION * solar.ra if config.radiation_as_evaporation else solar.ra
    et0 = config.ch * ra * t_range ** config.eh * (t_mean + config.ct)

    return Et0Result(et0=max(0.0, float(et0)), ra=solar.ra, method=Et0Method.HARGREAVES)


def reference_et(
    record: ClimateDailyRecord,
    location: Location,
    day: date,
    penman_config: Optional[PenmanMonteithConfig] = None,
    hargreaves_config: Optional[HargreavesConfig] = None,
) -> Optional[Et0Result]:
    """
    Reference ET with automatic method selection.

    Penman-Monteith when its inputs are complete, Hargreaves otherwise.
    Returns None only when the temperature range is missing.
    """
    result = penman_monteith(record, location, day, penman_config)
    if result is not None:
        return result

    result = hargreaves(record, location, day, hargreaves_config)
    if result is None:
        logger.debug(f"No reference ET for {day}: temperature range missing")
    return result
