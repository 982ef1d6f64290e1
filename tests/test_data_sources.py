"""
Tests for the delimited reference data loaders and in-memory providers.
"""
import io
from datetime import date

import pandas as pd
import pytest

from cropwater.core.exceptions import DataValidationError, MissingDataError
from cropwater.core.types import Climate, GrowthStage, Plant, Soil
from cropwater.data.sources import (
    FrameClimate, load_climate_csv, load_plant_csv, load_soil_csv,
)

CLIMATE_CSV = """dataObjName;_iterator.date;max_temp;min_temp;humidity;windspeed;sunshine_duration;precipitation
# station A, quality checked
Station A;2015-06-01;25.0;12.0;50;2.0;8.0;0.0
Station A;2015-06-02; 26.0;13.0;#NV;2.0;8.0;4.2
Station B;2015-06-01;20.0;10.0;60;1.0;5.0;1.0
"""

PLANT_CSV = """dataObjName;_iterator;name;Kcb;LAI;Zr;p;Ky;height;isFallow
Maize;0;;#NV;#NV;#NV;0.55;#NV;#NV;false
Maize;1;initial;0.15;0.3;0.3;#NV;0.4;0.3;#NV
Maize;2;initial;0.15;0.4;0.3;#NV;0.4;0.3;#NV
Maize;3;development;0.6;1.0;0.5;0.5;0.4;1.0;#NV
Fallow;0;;0.0;0.0;0.1;0.5;#NV;0.0;true
Fallow;1;initial;0.0;0.0;0.1;#NV;#NV;0.0;#NV
"""

SOIL_CSV = """dataObjName;_iterator.z;Qfc;Qwp;Ze
loam;0;0.30;0.15;0.1
loam;0.5;0.32;0.16;#NV
loam;1.004;0.34;0.17;#NV
sand;0;0.12;0.04;0.1
"""


class TestClimateLoader:
    """Test suite for climate files"""

    def test_first_station_by_default(self):
        climate = load_climate_csv(io.StringIO(CLIMATE_CSV))

        assert climate.name == "Station A"
        assert len(climate) == 2
        assert climate.start == date(2015, 6, 1)
        assert climate.end == date(2015, 6, 2)
        assert isinstance(climate, Climate)

    def test_missing_values(self):
        record = load_climate_csv(io.StringIO(CLIMATE_CSV)).get_daily_record(date(2015, 6, 2))

        assert record.max_temp == 26.0
        assert record.humidity is None
        assert record.precipitation == pytest.approx(4.2)
        assert not record.supports_penman_monteith

    def test_named_station(self):
        climate = load_climate_csv(io.StringIO(CLIMATE_CSV), "Station B")

        assert len(climate) == 1
        assert climate.get_daily_record(date(2015, 6, 1)).windspeed == 1.0
        assert climate.get_daily_record(date(2015, 6, 2)) is None

    def test_unknown_station(self):
        with pytest.raises(MissingDataError, match="Station C"):
            load_climate_csv(io.StringIO(CLIMATE_CSV), "Station C")

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingDataError):
            load_climate_csv(tmp_path / "missing.csv")

    def test_invalid_number(self):
        text = CLIMATE_CSV.replace("25.0", "warm")

        with pytest.raises(DataValidationError, match="warm"):
            load_climate_csv(io.StringIO(text))

    def test_missing_date_column(self):
        text = CLIMATE_CSV.replace("_iterator.date", "day")

        with pytest.raises(DataValidationError, match="_iterator.date"):
            load_climate_csv(io.StringIO(text))

    def test_missing_name_column(self):
        text = CLIMATE_CSV.replace("dataObjName", "station")

        with pytest.raises(DataValidationError, match="dataObjName"):
            load_climate_csv(io.StringIO(text))

    def test_frame_conversion(self):
        climate = load_climate_csv(io.StringIO(CLIMATE_CSV))
        frame = climate.to_frame()
        rebuilt = FrameClimate.from_frame("copy", frame)

        assert frame.index.name == "date"
        assert pd.isna(frame.loc[date(2015, 6, 2), "humidity"])
        for day in (date(2015, 6, 1), date(2015, 6, 2)):
            assert rebuilt.get_daily_record(day) == climate.get_daily_record(day)

    def test_frame_with_unknown_columns(self):
        frame = pd.DataFrame({"cloudiness": [0.5]}, index=[pd.Timestamp("2015-06-01")])

        with pytest.raises(DataValidationError):
            FrameClimate.from_frame("bad", frame)


class TestPlantLoader:
    """Test suite for plant files"""

    def test_defaults_merged_into_days(self):
        plant = load_plant_csv(io.StringIO(PLANT_CSV), "Maize")
        day1 = plant.get_stage_parameters(1)

        assert isinstance(plant, Plant)
        assert plant.stage_total == 3
        assert day1.stage == GrowthStage.INITIAL
        assert day1.kcb == 0.15
        assert day1.p == 0.55
        assert day1.ky == 0.4
        assert not day1.is_fallow
        assert day1.kc is None

    def test_day_values_override_defaults(self):
        plant = load_plant_csv(io.StringIO(PLANT_CSV), "Maize")

        assert plant.get_stage_parameters(3).p == 0.5
        assert plant.get_stage_parameters(3).stage == GrowthStage.DEVELOPMENT

    def test_fallow_flag(self):
        plant = load_plant_csv(io.StringIO(PLANT_CSV), "Fallow")

        assert plant.get_stage_parameters(1).is_fallow
        assert plant.get_stage_parameters(1).ky is None

    def test_days_outside_table(self):
        plant = load_plant_csv(io.StringIO(PLANT_CSV))

        assert plant.get_stage_parameters(0) is None
        assert plant.get_stage_parameters(4) is None

    def test_development_day_uses_table_length(self):
        plant = load_plant_csv(io.StringIO(PLANT_CSV))

        assert plant.get_development_day(date(2015, 5, 11), date(2015, 5, 1), date(2015, 5, 21)) == 2

    def test_unknown_stage(self):
        plant = load_plant_csv(io.StringIO(PLANT_CSV.replace("development", "flowering")))

        with pytest.raises(DataValidationError, match="development day 3"):
            plant.get_stage_parameters(3)

    def test_invalid_day(self):
        with pytest.raises(DataValidationError, match="Invalid development day"):
            load_plant_csv(io.StringIO(PLANT_CSV.replace("Maize;2;", "Maize;two;")))


class TestSoilLoader:
    """Test suite for soil files"""

    def test_depth_lookup(self):
        soil = load_soil_csv(io.StringIO(SOIL_CSV), "loam", max_depth=1.5)

        assert isinstance(soil, Soil)
        assert soil.max_depth == 1.5
        assert soil.get_layer_properties(0.5).field_capacity == 0.32
        assert soil.get_layer_properties(0.5).evaporation_layer_depth is None

    def test_depths_rounded_to_centimetres(self):
        soil = load_soil_csv(io.StringIO(SOIL_CSV), "loam")

        assert soil.get_layer_properties(1.0).field_capacity == 0.34
        assert soil.get_layer_properties(0.499).field_capacity == 0.32

    def test_fallback_to_surface_properties(self):
        soil = load_soil_csv(io.StringIO(SOIL_CSV), "loam")

        assert soil.get_layer_properties(0.7).field_capacity == 0.30
        assert soil.max_depth == 2.0

    def test_named_soil(self):
        soil = load_soil_csv(io.StringIO(SOIL_CSV), "sand")

        assert soil.get_layer_properties(1.2).wilting_point == 0.04

    def test_missing_property(self):
        text = SOIL_CSV.replace("sand;0;0.12;0.04;0.1", "sand;0;0.12;#NV;0.1")

        with pytest.raises(DataValidationError):
            load_soil_csv(io.StringIO(text), "sand")

    def test_invalid_max_depth(self):
        with pytest.raises(ValueError):
            load_soil_csv(io.StringIO(SOIL_CSV), "loam", max_depth=0.0)
