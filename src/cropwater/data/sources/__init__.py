"""
Reference data providers for plants, soils and climate stations.

In-memory providers implement the Plant, Soil and Climate protocols of
cropwater.core.types; the load_* functions build them from semicolon
delimited files.

Usage:
------
>>> from cropwater.data.sources import load_climate_csv, load_plant_csv, load_soil_csv
>>> climate = load_climate_csv("station.csv")
>>> plant = load_plant_csv("plants.csv", "Maize")
>>> soil = load_soil_csv("soils.csv", "loam", max_depth=2.0)
"""

from cropwater.data.sources.climate import FrameClimate, load_climate_csv, CLIMATE_FIELDS
from cropwater.data.sources.plant import TabularPlant, load_plant_csv, PLANT_FIELDS
from cropwater.data.sources.soil import LayeredSoil, load_soil_csv, SOIL_FIELDS

__all__ = [
    "FrameClimate",
    "load_climate_csv",
    "CLIMATE_FIELDS",
    "TabularPlant",
    "load_plant_csv",
    "PLANT_FIELDS",
    "LayeredSoil",
    "load_soil_csv",
    "SOIL_FIELDS",
]
