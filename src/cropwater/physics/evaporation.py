"""
FAO-56 soil evaporation from the surface evaporation layer (Chapter 7).

Ke = min(Kr × (Kc_max - Kcb), few × Kc_max)
E  = Ke × ET0

The evaporation layer depletion De follows a one-layer water balance
(FAO-56 Eq. 77) and is updated in place on the soil water state.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from cropwater.core.constants import (
    FC_MAX,
    KC_MAX_BASE,
    KC_MAX_LOWER,
    KC_MAX_UPPER,
    KC_MIN,
    MM_PER_M,
    REFERENCE_HUMIDITY,
    REFERENCE_WINDSPEED,
    TEW_REW_RATIO,
)
from cropwater.core.types import SoilLayerProperties

logger = logging.getLogger(__name__)


@dataclass
class EvaporationResult:
    """Coefficients and fluxes of one evaporation step"""
    e: float  # mm
    de: float  # mm, after the step
    dpe: float  # mm, percolation out of the evaporation layer
    kc_max: float
    kc_min: float
    kcb: float
    fc: float
    few: float
    tew: float
    rew: float
    kr: float
    ke: float


# =============================================================================
# LAYER CAPACITY
# =============================================================================

def total_evaporable_water(soil: SoilLayerProperties, default_depth_m: float = 0.1) -> float:
    """
    Total evaporable water TEW (FAO-56 Eq. 73).

    TEW = 1000 × (θFC - 0.5 × θWP) × Ze
    """
    ze = soil.evaporation_layer_depth if soil.evaporation_layer_depth is not None else default_depth_m
    return max(0.0, MM_PER_M * (soil.field_capacity - 0.5 * soil.wilting_point) * ze)


# =============================================================================
# COEFFICIENTS
# =============================================================================

def calculate_Kc_max(
    Kcb: float,
    u2: Optional[float] = None,
    RH_min: Optional[float] = None,
    crop_height_m: float = 0.0,
) -> float:
    """
    Upper limit of Kc after wetting (FAO-56 Eq. 72).

    Kc_max = max(1.2 + [0.04(u2 - 2) - 0.004(RH_min - 45)] × (h/3)^0.3, Kcb + 0.05),
    then limited to [1.05, 1.3].
    """
    u2 = REFERENCE_WINDSPEED if u2 is None else u2
    RH_min = REFERENCE_HUMIDITY if RH_min is None else RH_min
    h = max(0.0, crop_height_m)

    kc_max = KC_MAX_BASE + (0.04 * (u2 - 2) - 0.004 * (RH_min - 45)) * (h / 3) ** 0.3
    kc_max = max(kc_max, Kcb + 0.05)
    return float(np.clip(kc_max, KC_MAX_LOWER, KC_MAX_UPPER))


def calculate_fc(Kcb: float, kc_max: float, kc_min: float, crop_height_m: float = 0.0) -> float:
    """
    Effective canopy cover fraction (FAO-56 Eq. 76).

    fc = ((Kcb - Kc_min) / (Kc_max - Kc_min))^(1 + 0.5h), at most 0.99
    """
    fc = (max(Kcb - kc_min, 0.01) / (kc_max - kc_min)) ** (1 + 0.5 * max(0.0, crop_height_m))
    return float(min(FC_MAX, fc))


def calculate_few(fc: float, fw: float, drip: bool = False) -> float:
    """
    Exposed and wetted soil fraction (FAO-56 Eq. 75 and 80).

    Drip irrigation only wets the soil beside the canopy:
    few = min(1 - fc, (1 - 2/3 fc) × fw)
    """
    if drip:
        return max(0.0, min(1 - fc, (1 - 2.0 / 3.0 * fc) * fw))
    return max(0.0, min(1 - fc, fw))


def calculate_Kr(De: float, TEW: float, REW: float) -> float:
    """
    Calculate evaporation reduction coefficient Kr.

    FAO-56 Equation 74:
        Kr = (TEW - De) / (TEW - REW)  for De > REW
        Kr = 1                          for De ≤ REW
    """
    if REW <= 0:
        return 0.0
    if De <= REW:
        return 1.0  # Stage 1
    return max(0.0, (TEW - De) / (TEW - REW))  # Stage 2


# =============================================================================
# DAILY STEP
# =============================================================================

def soil_evaporation(
    state,
    Kcb: float,
    et0: float,
    tew: float,
    net_input: float,
    fw: float = 1.0,
    drip_irrigation: bool = False,
    is_fallow: bool = False,
    u2: Optional[float] = None,
    RH_min: Optional[float] = None,
    crop_height_m: float = 0.0,
    e_factor: float = 1.0,
) -> EvaporationResult:
    """
    Soil evaporation for one day, updating the evaporation layer.

    Args:
        state: Soil water state, its de and dpe are updated in place
        Kcb: Basal crop coefficient (ignored for fallow land)
        et0: Reference ET (mm/day)
        tew: Total evaporable water (mm)
        net_input: Precipitation and irrigation reaching the soil (mm)
        fw: Wetted fraction of the irrigation methods in use
        drip_irrigation: Drip-type irrigation was applied today
        is_fallow: Bare soil, no canopy
        u2: Wind speed at 2m height (m/s)
        RH_min: Minimum relative humidity (%)
        crop_height_m: Crop height (m)
        e_factor: External evaporation reduction, e.g. mulching

    Returns:
        EvaporationResult
    """
    if is_fallow:
        kcb, kc_max, kc_min, fc = 0.0, KC_MAX_BASE, 0.0, 0.0
    else:
        kcb = Kcb
        kc_max = calculate_Kc_max(kcb, u2, RH_min, crop_height_m)
        kc_min = KC_MIN
        fc = calculate_fc(kcb, kc_max, kc_min, crop_height_m)

    few = calculate_few(fc, fw, drip=drip_irrigation)
    rew = tew / TEW_REW_RATIO
    kr = calculate_Kr(state.de, tew, rew)
    ke = max(0.0, min(kr * (kc_max - kcb), few * kc_max))
    e = ke * et0 * e_factor

    # FAO-56 Eq. 77 and 79
    dpe = max(0.0, net_input - state.de)
    withdrawal = e / few if few > 0 else 0.0
    de = float(np.clip(state.de - net_input + withdrawal + dpe, 0.0, tew))

    state.de = de
    state.dpe = dpe

    return EvaporationResult(
        e=e, de=de, dpe=dpe,
        kc_max=kc_max, kc_min=kc_min, kcb=kcb, fc=fc, few=few,
        tew=tew, rew=rew, kr=kr, ke=ke,
    )
