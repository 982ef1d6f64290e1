"""
Type definitions and type aliases for the cropwater engine.
Provides strong typing throughout the codebase.
"""
from datetime import date
from typing import Optional, Protocol, runtime_checkable
from enum import Enum
from dataclasses import dataclass
from typing_extensions import TypeAlias


# Type aliases for clarity
FieldID: TypeAlias = str
Date: TypeAlias = date
DevelopmentDay: TypeAlias = int
DepthM: TypeAlias = float
PrecipitationMm: TypeAlias = float
ET0Mm: TypeAlias = float


class GrowthStage(str, Enum):
    """
    Crop growth stages following FAO-56.

    Winter crops split the development stage into three parts to follow
    the stagnation of growth during frost.
    """
    INITIAL = "initial"
    DEVELOPMENT = "development"
    DEVELOPMENT_STAGNATION = "development_stagnation"
    DEVELOPMENT_FINISH = "development_finish"
    MID_SEASON = "mid_season"
    LATE_SEASON = "late_season"

    @property
    def is_climate_adjusted(self) -> bool:
        """Stages in which Kcb is corrected for wind, humidity and height"""
        return self in (GrowthStage.MID_SEASON, GrowthStage.LATE_SEASON)


@dataclass(frozen=True)
class Location:
    """Field location, WGS84 decimal degrees"""
    latitude: float
    longitude: float
    altitude_m: Optional[float] = None


@dataclass(frozen=True)
class ClimateDailyRecord:
    """Immutable daily climate record"""
    max_temp: Optional[float] = None  # °C
    min_temp: Optional[float] = None  # °C
    mean_temp: Optional[float] = None  # °C
    humidity: Optional[float] = None  # %
    windspeed: Optional[float] = None  # m/s at 2 m
    sunshine_duration: Optional[float] = None  # h
    solar_radiation: Optional[float] = None  # MJ/(m²·day)
    precipitation: Optional[float] = None  # mm
    et0: Optional[float] = None  # mm, precomputed
    pattern_precipitation: Optional[float] = None  # mm, pattern-scaled

    @property
    def has_temperature_range(self) -> bool:
        return self.max_temp is not None and self.min_temp is not None

    @property
    def supports_penman_monteith(self) -> bool:
        """Whether the record holds enough data for the energy-balance method"""
        return (
            self.has_temperature_range
            and self.humidity is not None
            and (self.solar_radiation is not None or self.sunshine_duration is not None)
        )

    def effective_precipitation(self, use_pattern: bool = False) -> PrecipitationMm:
        """Precipitation reaching the canopy, pattern-scaled if requested and present"""
        if use_pattern and self.pattern_precipitation is not None:
            return self.pattern_precipitation
        return self.precipitation or 0.0


@dataclass(frozen=True)
class PlantStageParameters:
    """Plant parameters for one development day"""
    stage: GrowthStage
    kcb: float
    lai: float = 0.0
    zr: DepthM = 0.0
    p: float = 0.5
    ky: Optional[float] = None
    height: float = 0.0
    is_fallow: bool = False
    kc: Optional[float] = None


@dataclass(frozen=True)
class SoilLayerProperties:
    """Soil hydraulic properties at a queried depth"""
    field_capacity: float  # m³/m³
    wilting_point: float  # m³/m³
    evaporation_layer_depth: Optional[DepthM] = None  # m

    @property
    def available_water_fraction(self) -> float:
        """Volumetric plant available water (m³/m³)"""
        return self.field_capacity - self.wilting_point


# Protocol definitions for dependency injection
@runtime_checkable
class Plant(Protocol):
    """Protocol for plant parameter providers"""

    stage_total: int

    def get_development_day(self, day: Date, seed_date: Date, harvest_date: Date) -> Optional[DevelopmentDay]:
        """Map a calendar date onto the plant's development day"""
        ...

    def get_stage_parameters(self, development_day: DevelopmentDay) -> Optional[PlantStageParameters]:
        """Parameters for a development day"""
        ...


@runtime_checkable
class Soil(Protocol):
    """Protocol for soil property providers"""

    max_depth: DepthM

    def get_layer_properties(self, depth: DepthM) -> Optional[SoilLayerProperties]:
        """Soil properties at the given depth"""
        ...


@runtime_checkable
class Climate(Protocol):
    """Protocol for climate record providers"""

    name: str

    def get_daily_record(self, day: Date) -> Optional[ClimateDailyRecord]:
        """Climate record for a date"""
        ...
