"""
Physical constants and FAO-56 default values.
"""
from typing import Final

# Physical constants
SOLAR_CONSTANT: Final[float] = 0.082  # MJ/(m²·min)
STEFAN_BOLTZMANN: Final[float] = 4.903e-9  # MJ/(K⁴·m²·day)
MM_PER_M: Final[float] = 1000.0
ALBEDO: Final[float] = 0.23  # grass reference crop
RADIATION_TO_EVAPORATION: Final[float] = 0.408  # mm per MJ/m², 1/λ

# FAO-56 reference values
REFERENCE_WINDSPEED: Final[float] = 2.0  # m/s
REFERENCE_HUMIDITY: Final[float] = 45.0  # %
REFERENCE_ET_FOR_P: Final[float] = 5.0  # mm/day, Table 22
P_ADJ_MIN: Final[float] = 0.1
P_ADJ_MAX: Final[float] = 0.8

# Soil evaporation (FAO-56 Ch. 7)
KC_MAX_BASE: Final[float] = 1.2
KC_MAX_UPPER: Final[float] = 1.3
KC_MAX_LOWER: Final[float] = 1.05
KC_MIN: Final[float] = 0.175
FC_MAX: Final[float] = 0.99
TEW_REW_RATIO: Final[float] = 2.2926  # tew / rew, mean over soil textures

# Crop coefficient climate adjustment only above this Kcb
KCB_CLIMATE_THRESHOLD: Final[float] = 0.45

# Canopy interception (von Hoyningen-Huene / Braden)
INTERCEPTION_EXTINCTION: Final[float] = 0.385

# Numerical stability
EPSILON: Final[float] = 1e-10
FLUX_EPSILON: Final[float] = 0.001  # mm, fluxes below are reported as zero
