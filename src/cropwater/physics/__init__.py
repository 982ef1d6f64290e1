"""Physics modules for the daily soil water balance."""
from cropwater.physics.solar import SolarResult, extraterrestrial_radiation
from cropwater.physics.reference_et import (
    Et0Method,
    Et0Result,
    penman_monteith,
    hargreaves,
    reference_et,
)
from cropwater.physics.evaporation import (
    EvaporationResult,
    soil_evaporation,
    total_evaporable_water,
)
from cropwater.physics.soil_reservoir import (
    SoilWaterState,
    initial_soil_state,
    redistribute_zone_change,
    root_zone_balance,
    deep_zone_balance,
    total_available_water,
)
from cropwater.physics.transpiration import (
    calculate_Kcb_adjusted,
    calculate_p_adjusted,
    calculate_Ks,
    canopy_interception,
)
from cropwater.physics.irrigation import AutoIrrigationPolicy, IrrigationDecision
from cropwater.physics.crop_development import development_day

__all__ = [
    "SolarResult",
    "extraterrestrial_radiation",
    "Et0Method",
    "Et0Result",
    "penman_monteith",
    "hargreaves",
    "reference_et",
    "EvaporationResult",
    "soil_evaporation",
    "total_evaporable_water",
    "SoilWaterState",
    "initial_soil_state",
    "redistribute_zone_change",
    "root_zone_balance",
    "deep_zone_balance",
    "total_available_water",
    "calculate_Kcb_adjusted",
    "calculate_p_adjusted",
    "calculate_Ks",
    "canopy_interception",
    "AutoIrrigationPolicy",
    "IrrigationDecision",
    "development_day",
]
