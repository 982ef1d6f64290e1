"""
FAO-56 crop transpiration: basal coefficient adjustment, depletion
fraction, water stress coefficient and canopy interception.

References:
- Allen, R.G., Pereira, L.S., Raes, D. and Smith, M. (1998). FAO-56.
- Braden, H. (1985). Ein Energiehaushalts- und Verdunstungsmodell für
  Wasser- und Stoffhaushaltsuntersuchungen landwirtschaftlich genutzter
  Einzugsgebiete. Mitt. Dtsch. Bodenkundl. Ges., 42:294-299.
"""

import logging
from typing import Optional

import numpy as np

from cropwater.core.constants import (
    INTERCEPTION_EXTINCTION,
    KCB_CLIMATE_THRESHOLD,
    P_ADJ_MAX,
    P_ADJ_MIN,
    REFERENCE_ET_FOR_P,
    REFERENCE_HUMIDITY,
    REFERENCE_WINDSPEED,
)
from cropwater.core.types import GrowthStage

logger = logging.getLogger(__name__)


# =============================================================================
# CROP COEFFICIENTS
# =============================================================================

def calculate_Kcb_adjusted(
    Kcb: float,
    stage: GrowthStage,
    u2: Optional[float] = None,
    RH_min: Optional[float] = None,
    crop_height_m: Optional[float] = None,
) -> float:
    """
    Adjust Kcb for local climate conditions (FAO-56 Eq. 70).

    Kcb_adj = Kcb + [0.04(u2 - 2) - 0.004(RH_min - 45)] × (h/3)^0.3

    Only applied in mid-season and late season stages and for Kcb above
    0.45; otherwise Kcb is returned unchanged. Missing wind and humidity
    take the reference values, missing height is 0.

    Args:
        Kcb: Tabulated basal crop coefficient
        stage: Growth stage of the day
        u2: Wind speed at 2m height (m/s)
        RH_min: Minimum daily relative humidity (%)
        crop_height_m: Crop height (m)

    Returns:
        Climate-adjusted Kcb
    """
    if not stage.is_climate_adjusted or Kcb <= KCB_CLIMATE_THRESHOLD:
        return Kcb

    u2 = REFERENCE_WINDSPEED if u2 is None else u2
    RH_min = REFERENCE_HUMIDITY if RH_min is None else RH_min
    h = max(0.0, crop_height_m or 0.0)

    adjustment = (0.04 * (u2 - REFERENCE_WINDSPEED) - 0.004 * (RH_min - REFERENCE_HUMIDITY)) * (h / 3) ** 0.3
    return Kcb + adjustment


def calculate_p_adjusted(p_standard: float, T: float) -> float:
    """
    Adjust depletion fraction p for crop water demand (FAO-56 Table 22 note).

    p = p_standard + 0.04 × (5 - T), limited to [0.1, 0.8]

    Args:
        p_standard: Tabulated depletion fraction
        T: Potential transpiration of the day (mm/day)

    Returns:
        Adjusted p value
    """
    p_adj = p_standard + 0.04 * (REFERENCE_ET_FOR_P - T)
    return float(np.clip(p_adj, P_ADJ_MIN, P_ADJ_MAX))


def calculate_Ks(
    TAW: float,
    Dr: float,
    p_adj: float,
    is_fallow: bool = False,
) -> float:
    """
    Calculate water stress coefficient Ks (FAO-56 Eq. 84).

        Ks = 1                           for Dr ≤ RAW
        Ks = (TAW - Dr) / (TAW - RAW)    for Dr > RAW

    where RAW = p × TAW. Fallow land is never stressed, not even without
    available water; a cropped root zone without available water has Ks = 0.

    Args:
        TAW: Total available water of the root zone (mm)
        Dr: Root zone depletion at the end of the previous day (mm)
        p_adj: Adjusted depletion fraction
        is_fallow: No crop on the field

    Returns:
        Ks coefficient (0-1)
    """
    if is_fallow:
        return 1.0

    RAW = TAW * p_adj
    if RAW <= 0:
        return 0.0
    if Dr <= RAW:
        return 1.0

    return float(np.clip((TAW - Dr) / (TAW - RAW), 0.0, 1.0))


# =============================================================================
# CANOPY INTERCEPTION
# =============================================================================

def canopy_cover_fraction(LAI: float) -> float:
    """Soil cover fraction from LAI, 1 - exp(-0.385 LAI)"""
    return 1.0 - np.exp(-INTERCEPTION_EXTINCTION * LAI)


def canopy_interception(amount: float, LAI: float, a: float = 0.25) -> float:
    """
    Interception of rain or irrigation water by the canopy.

        I = a × LAI × [1 - 1 / (1 + cf × P / (a × LAI))]

    The storage capacity a × LAI saturates exponentially with the water
    amount P.

    Args:
        amount: Water reaching the canopy (mm)
        LAI: Leaf area index
        a: Interception coefficient (mm)

    Returns:
        Intercepted water (mm), never more than the amount
    """
    if LAI <= 0 or a <= 0 or amount <= 0:
        return 0.0

    capacity = a * LAI
    cf = canopy_cover_fraction(LAI)
    intercepted = capacity * (1 - 1 / (1 + cf * amount / capacity))
    return float(min(intercepted, amount))
