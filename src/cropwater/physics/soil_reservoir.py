"""
Two-zone soil depletion model.

The profile down to the maximum depth is split at the rooting depth Zr
into a root zone and a deep zone. Both zones are tracked as depletion
below field capacity (FAO-56 Eq. 85), the deep zone receiving the
percolation of the root zone.
"""
import logging
from dataclasses import dataclass, replace

from cropwater.core.constants import EPSILON, MM_PER_M
from cropwater.core.types import SoilLayerProperties

logger = logging.getLogger(__name__)


@dataclass
class SoilWaterState:
    """Soil water state carried from day to day (all depths in mm unless noted)"""
    dr_rz: float = 0.0  # Root zone depletion
    dr_dz: float = 0.0  # Deep zone depletion
    de: float = 0.0  # Evaporation layer depletion
    dpe: float = 0.0  # Percolation out of the evaporation layer
    zr: float = 0.0  # Rooting depth (m)
    taw_rz: float = 0.0  # Total available water, root zone
    taw_dz: float = 0.0  # Total available water, deep zone

    @property
    def total_depletion(self) -> float:
        return self.dr_rz + self.dr_dz

    def copy(self) -> "SoilWaterState":
        return replace(self)


@dataclass
class RootZoneBalance:
    """Fluxes of the root zone step"""
    dr: float
    dp: float  # Percolation into the deep zone
    e_act: float
    t_act: float
    exceed: float = 0.0


@dataclass
class DeepZoneBalance:
    """Fluxes of the deep zone step"""
    dr: float
    dp: float  # Percolation below the maximum depth
    exceed: float = 0.0


@dataclass
class ZoneResize:
    """Depletion moved by a change of rooting depth"""
    moved_to_rz: float = 0.0  # Negative when moved into the deep zone
    overflow: float = 0.0  # Depletion that did not fit either zone


def total_available_water(soil: SoilLayerProperties, depth_m: float) -> float:
    """TAW = 1000 × (θFC - θWP) × Z (FAO-56 Eq. 82)"""
    return max(0.0, MM_PER_M * soil.available_water_fraction * depth_m)


def initial_soil_state(
    zr: float,
    taw_rz: float,
    taw_dz: float,
    tew: float,
    fraction_rz: float = 0.1,
    fraction_dz: float = 0.1,
    fraction_de: float = 0.1,
) -> SoilWaterState:
    """Soil state at the start of a simulation, depletions as fractions of capacity"""
    return SoilWaterState(
        dr_rz=fraction_rz * taw_rz,
        dr_dz=fraction_dz * taw_dz,
        de=fraction_de * tew,
        dpe=0.0,
        zr=zr,
        taw_rz=taw_rz,
        taw_dz=taw_dz,
    )


def redistribute_zone_change(
    state: SoilWaterState,
    zr: float,
    taw_rz: float,
    taw_dz: float,
    max_depth: float,
) -> ZoneResize:
    """
    Move depletion between the zones after the rooting depth changed.

    The zone losing soil hands over the share of its depletion that
    corresponds to the share of its TAW it loses (depth share when it has
    no TAW). Roots growing from 0 to the maximum depth, or retreating from
    the maximum depth to 0, move the whole depletion. The sum of both
    depletions is preserved; afterwards each zone is limited to its new
    capacity, the excess going to the other zone.

    Args:
        state: Soil state at the previous rooting depth, updated in place
        zr: New rooting depth (m)
        taw_rz: TAW of the root zone at the new depth (mm)
        taw_dz: TAW of the deep zone at the new depth (mm)
        max_depth: Maximum soil depth (m)

    Returns:
        ZoneResize with the moved and overflowing depletion
    """
    old_zr = state.zr
    moved = 0.0

    if old_zr <= 0 and zr >= max_depth:
        moved = state.dr_dz
    elif old_zr >= max_depth and zr <= 0:
        moved = -state.dr_rz
    elif zr > old_zr:
        # Roots grow into the deep zone
        if state.taw_dz > EPSILON:
            share = (state.taw_dz - taw_dz) / state.taw_dz
        else:
            share = (zr - old_zr) / max(max_depth - old_zr, EPSILON)
        moved = state.dr_dz * min(max(share, 0.0), 1.0)
    elif zr < old_zr:
        # Roots retreat, root zone soil joins the deep zone
        if state.taw_rz > EPSILON:
            share = (state.taw_rz - taw_rz) / state.taw_rz
        else:
            share = (old_zr - zr) / old_zr
        moved = -state.dr_rz * min(max(share, 0.0), 1.0)

    dr_rz = state.dr_rz + moved
    dr_dz = state.dr_dz - moved

    if dr_rz > taw_rz:
        dr_dz += dr_rz - taw_rz
        dr_rz = taw_rz
    if dr_dz > taw_dz:
        dr_rz += dr_dz - taw_dz
        dr_dz = taw_dz
    overflow = 0.0
    if dr_rz > taw_rz:
        overflow = dr_rz - taw_rz
        dr_rz = taw_rz
        logger.warning(f"Depletion of {overflow:.3f} mm exceeds the soil profile after zone resize")

    state.dr_rz = dr_rz
    state.dr_dz = dr_dz
    state.zr = zr
    state.taw_rz = taw_rz
    state.taw_dz = taw_dz

    return ZoneResize(moved_to_rz=moved, overflow=overflow)


def root_zone_balance(
    state: SoilWaterState,
    net_input: float,
    evaporation: float,
    transpiration: float,
) -> RootZoneBalance:
    """
    Root zone depletion with overflow correction.

        Dr = Dr_prev - P_net + E + T + DP,  DP = max(0, P_net - Dr_prev)

    A depletion above TAW reduces E and T in proportion to their share by
    the exceeding amount, so the zone cannot dry out beyond the wilting
    point. The exceed amount is reported.

    Args:
        state: Soil state, dr_rz is updated in place
        net_input: Net precipitation and irrigation (mm)
        evaporation: Soil evaporation (mm)
        transpiration: Actual transpiration (mm)

    Returns:
        RootZoneBalance
    """
    dr_prev = state.dr_rz
    taw = state.taw_rz
    e_act = evaporation
    t_act = transpiration

    dp = max(0.0, net_input - dr_prev)
    dr = dr_prev - net_input + e_act + t_act + dp
    if dr < 0:
        dp -= dr
        dr = 0.0

    exceed = 0.0
    if dr > taw:
        exceed = dr - taw
        et = e_act + t_act
        if et > 0:
            e_act = max(0.0, e_act - exceed * e_act / et)
            t_act = max(0.0, t_act - exceed * t_act / et)
        dr = dr_prev - net_input + e_act + t_act + dp
        dr = min(max(dr, 0.0), taw)
        logger.debug(f"Root zone exceed of {exceed:.3f} mm, E and T reduced")

    state.dr_rz = dr
    return RootZoneBalance(dr=dr, dp=dp, e_act=e_act, t_act=t_act, exceed=exceed)


def deep_zone_balance(state: SoilWaterState, percolation: float) -> DeepZoneBalance:
    """
    Deep zone depletion fed by root zone percolation.

    An exceed of the deep zone capacity is reported and clipped, no flux
    upstream is changed.
    """
    dr_prev = state.dr_dz
    taw = state.taw_dz

    dp = max(0.0, percolation - dr_prev)
    dr = dr_prev - percolation + dp
    if dr < 0:
        dp -= dr
        dr = 0.0

    exceed = 0.0
    if dr > taw:
        exceed = dr - taw
        dr = taw
        logger.warning(f"Deep zone exceed of {exceed:.3f} mm")

    state.dr_dz = dr
    return DeepZoneBalance(dr=dr, dp=dp, exceed=exceed)
