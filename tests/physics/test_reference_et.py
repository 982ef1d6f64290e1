"""
Tests for reference evapotranspiration and method selection.
"""
from datetime import date

import pytest

from cropwater.core.config import HargreavesConfig, PenmanMonteithConfig
from cropwater.core.types import ClimateDailyRecord, Location
from cropwater.physics.reference_et import (
    Et0Method, hargreaves, penman_monteith, reference_et,
    psychrometric_constant, saturation_vapour_pressure,
)

DAY = date(2015, 6, 12)


class TestReferenceET:
    """Test suite for ET0 methods"""

    @pytest.fixture
    def location(self):
        return Location(latitude=42.0, longitude=-94.0, altitude_m=330.0)

    @pytest.fixture
    def full_record(self):
        return ClimateDailyRecord(
            min_temp=3.5, max_temp=21.7, mean_temp=11.0,
            precipitation=0.0, windspeed=2.6, humidity=45.0, sunshine_duration=4.7,
        )

    @pytest.fixture
    def temperature_record(self):
        return ClimateDailyRecord(min_temp=3.5, max_temp=21.7, precipitation=0.0)

    def test_penman_monteith_golden_value(self, full_record, location):
        """Regression value of the energy balance method"""
        result = penman_monteith(full_record, location, DAY)

        assert result.method == Et0Method.PENMAN_MONTEITH
        assert result.et0 == pytest.approx(4.1388, rel=1e-4)
        assert result.ra == pytest.approx(41.7997, rel=1e-4)

    def test_hargreaves_golden_value(self, temperature_record, location):
        """Regression value of the temperature method"""
        result = hargreaves(temperature_record, location, DAY)

        assert result.method == Et0Method.HARGREAVES
        assert result.et0 == pytest.approx(12.4684, rel=1e-4)

    def test_hargreaves_radiation_as_evaporation(self, temperature_record, location):
        """Ra converted to mm/day scales the result by 0.408"""
        config = HargreavesConfig(radiation_as_evaporation=True)
        result = hargreaves(temperature_record, location, DAY, config)

        assert result.et0 == pytest.approx(5.0871, rel=1e-4)

    def test_selects_penman_monteith_when_complete(self, full_record, location):
        result = reference_et(full_record, location, DAY)

        assert result.method == Et0Method.PENMAN_MONTEITH
        assert result.et0 >= 0

    def test_selects_hargreaves_with_temperatures_only(self, temperature_record, location):
        result = reference_et(temperature_record, location, DAY)

        assert result.method == Et0Method.HARGREAVES

    def test_measured_radiation_replaces_sunshine(self, location):
        record = ClimateDailyRecord(min_temp=10, max_temp=25, humidity=60, solar_radiation=22.0)
        result = reference_et(record, location, DAY)

        assert result.method == Et0Method.PENMAN_MONTEITH
        assert result.et0 > 0

    def test_no_result_without_temperatures(self, location):
        record = ClimateDailyRecord(humidity=50, sunshine_duration=8, precipitation=2)

        assert reference_et(record, location, DAY) is None

    def test_missing_windspeed_uses_default(self, full_record, location):
        """Missing u2 is taken as 2 m/s"""
        no_wind = ClimateDailyRecord(
            min_temp=3.5, max_temp=21.7, mean_temp=11.0, humidity=45.0, sunshine_duration=4.7
        )
        two_ms = ClimateDailyRecord(
            min_temp=3.5, max_temp=21.7, mean_temp=11.0, humidity=45.0, sunshine_duration=4.7,
            windspeed=2.0,
        )

        assert penman_monteith(no_wind, location, DAY).et0 == pytest.approx(
            penman_monteith(two_ms, location, DAY).et0
        )

    def test_polar_night_is_zero(self, full_record, temperature_record):
        arctic = Location(latitude=80.0, longitude=15.0)
        winter = date(2015, 12, 21)

        assert penman_monteith(full_record, arctic, winter).et0 == 0.0
        assert hargreaves(temperature_record, arctic, winter).et0 == 0.0

    def test_inverted_temperature_range_is_clamped(self, location):
        record = ClimateDailyRecord(min_temp=20.0, max_temp=15.0)

        assert hargreaves(record, location, DAY).et0 == 0.0

    def test_hargreaves_coefficients_are_tunable(self, temperature_record, location):
        default = hargreaves(temperature_record, location, DAY).et0
        doubled = hargreaves(temperature_record, location, DAY, HargreavesConfig(ch=0.0046)).et0

        assert doubled == pytest.approx(2 * default)

    def test_angstrom_coefficients_change_radiation(self, full_record, location):
        cloudy = penman_monteith(full_record, location, DAY, PenmanMonteithConfig(a_s=0.15, b_s=0.4))
        default = penman_monteith(full_record, location, DAY)

        assert cloudy.et0 < default.et0

    def test_never_negative(self, location):
        """Cold, humid, calm day"""
        record = ClimateDailyRecord(min_temp=-5, max_temp=-1, humidity=100, windspeed=0.5, sunshine_duration=0)
        result = reference_et(record, location, date(2015, 1, 15))

        assert result.et0 >= 0


class TestAtmosphere:
    """Test suite for vapour pressure helpers"""

    def test_saturation_vapour_pressure(self):
        """FAO-56 Table 2.3: e°(20 °C) = 2.338 kPa"""
        assert saturation_vapour_pressure(20.0) == pytest.approx(2.338, abs=1e-3)

    def test_psychrometric_constant_sea_level(self):
        """FAO-56 Table 2.2: γ = 0.067 kPa/°C at 0 m"""
        assert psychrometric_constant(0.0) == pytest.approx(0.0674, abs=1e-4)
