"""
Solar geometry for daily reference evapotranspiration.

Extraterrestrial radiation and sunset hour angle from the day of year and
latitude (FAO-56 Equations 21 to 25).
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date

import numpy as np

from cropwater.core.constants import SOLAR_CONSTANT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolarResult:
    """Extraterrestrial radiation and day geometry for one date"""
    ra: float  # MJ/(m²·day)
    omega_s: float  # rad
    declination: float  # rad
    inverse_distance: float  # dr, dimensionless

    @property
    def daylight_hours(self) -> float:
        """Maximum possible duration of sunshine N (FAO-56 Eq. 34)"""
        return 24.0 / np.pi * self.omega_s


def extraterrestrial_radiation(day: date, latitude: float) -> SolarResult:
    """
    Calculate extraterrestrial radiation Ra.

    FAO-56 Equation 21:
        Ra = 24·60/π · Gsc · dr · [ωs·sin(φ)·sin(δ) + cos(φ)·cos(δ)·sin(ωs)]

    The argument of the sunset hour angle arc-cosine is clipped to [-1, 1],
    so polar day yields ωs = π and polar night yields Ra = 0.

    Args:
        day: Calendar date
        latitude: Latitude in decimal degrees (south negative)

    Returns:
        SolarResult with Ra in MJ/(m²·day)
    """
    year_length = 366 if calendar.isleap(day.year) else 365
    doy = day.timetuple().tm_yday
    phi = np.radians(latitude)

    # Eq. 23 and 24, year length aware
    inverse_distance = 1 + 0.033 * np.cos(2 * np.pi / year_length * doy)
    declination = 0.409 * np.sin(2 * np.pi / year_length * doy - 1.39)

    # Eq. 25
    x = float(np.clip(-np.tan(phi) * np.tan(declination), -1.0, 1.0))
    omega_s = float(np.arccos(x))

    ra = (
        24 * 60 / np.pi * SOLAR_CONSTANT * inverse_distance
        * (omega_s * np.sin(phi) * np.sin(declination)
           + np.cos(phi) * np.cos(declination) * np.sin(omega_s))
    )
    # Rounding noise around polar night
    ra = max(0.0, float(ra))

    return SolarResult(
        ra=ra,
        omega_s=omega_s,
        declination=float(declination),
        inverse_distance=float(inverse_distance),
    )
