"""
Shared fixtures: a maize-like plant on a uniform loam with a synthetic
summer climate record.
"""
import math
from datetime import date, timedelta

import pytest

from cropwater.core.config import SimulationConfig, set_config
from cropwater.core.types import ClimateDailyRecord, GrowthStage, Location, SoilLayerProperties
from cropwater.data.sources import FrameClimate, LayeredSoil, TabularPlant
from cropwater.pipeline.simulation import SimulationArgs

SEED_DATE = date(2015, 5, 1)
HARVEST_DATE = date(2015, 8, 28)


def synthetic_climate(start: date, end: date, rain_every: int = 7, rain_mm: float = 12.0) -> FrameClimate:
    """Smooth summer weather with a rain event every few days"""
    records = {}
    day = start
    i = 0
    while day <= end:
        wave = math.sin(2 * math.pi * i / 30)
        records[day] = ClimateDailyRecord(
            max_temp=26.0 + 4 * wave,
            min_temp=12.0 + 2 * wave,
            humidity=55.0 - 10 * wave,
            windspeed=2.2,
            sunshine_duration=9.0 + 2 * wave,
            precipitation=rain_mm if rain_every and i % rain_every == 0 else 0.0,
        )
        day += timedelta(days=1)
        i += 1
    return FrameClimate("synthetic", records)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Each test starts without a cached global configuration"""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def location():
    return Location(latitude=42.0, longitude=-94.0, altitude_m=330.0)


@pytest.fixture
def loam():
    return SoilLayerProperties(field_capacity=0.30, wilting_point=0.15, evaporation_layer_depth=0.1)


@pytest.fixture
def soil(loam):
    return LayeredSoil.uniform("loam", loam, max_depth=1.5)


@pytest.fixture
def plant():
    return TabularPlant.from_stages(
        "maize",
        [
            (GrowthStage.INITIAL, 20, {"kcb": 0.15, "lai": 0.3, "zr": 0.3, "ky": 0.4, "height": 0.3}),
            (GrowthStage.DEVELOPMENT, 30, {"kcb": 0.6, "lai": 2.0, "zr": 0.6, "ky": 0.4, "height": 1.0}),
            (GrowthStage.MID_SEASON, 40, {"kcb": 1.15, "lai": 4.0, "zr": 1.0, "ky": 1.3, "height": 2.0}),
            (GrowthStage.LATE_SEASON, 30, {"kcb": 0.5, "lai": 2.5, "zr": 1.0, "ky": 0.5, "height": 2.0}),
        ],
        defaults={"p": 0.55},
    )


@pytest.fixture
def climate():
    return synthetic_climate(date(2015, 4, 1), date(2015, 9, 30))


@pytest.fixture
def dry_climate():
    return synthetic_climate(date(2015, 4, 1), date(2015, 9, 30), rain_every=0)


@pytest.fixture
def config():
    return SimulationConfig()


@pytest.fixture
def args(location, climate, plant, soil):
    return SimulationArgs(
        location=location,
        climate=climate,
        plant=plant,
        soil=soil,
        seed_date=SEED_DATE,
        harvest_date=HARVEST_DATE,
        field_id="field-1",
    )


@pytest.fixture
def make_climate():
    """Factory for synthetic climate providers"""
    return synthetic_climate
