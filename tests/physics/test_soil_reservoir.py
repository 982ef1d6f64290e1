"""
Tests for the two-zone depletion model.
"""
import pytest

from cropwater.core.types import SoilLayerProperties
from cropwater.physics.soil_reservoir import (
    SoilWaterState, deep_zone_balance, initial_soil_state,
    redistribute_zone_change, root_zone_balance, total_available_water,
)

# θFC - θWP = 0.15, 150 mm per metre
SOIL = SoilLayerProperties(field_capacity=0.30, wilting_point=0.15)
MAX_DEPTH = 1.5
TAW_MAX = 225.0


def state_at(zr: float, dr_rz: float, dr_dz: float) -> SoilWaterState:
    taw_rz = total_available_water(SOIL, zr)
    return SoilWaterState(dr_rz=dr_rz, dr_dz=dr_dz, zr=zr, taw_rz=taw_rz, taw_dz=TAW_MAX - taw_rz)


class TestRootZoneBalance:
    """Test suite for the root zone step"""

    def test_depletion_grows_with_et(self):
        state = SoilWaterState(dr_rz=10.0, taw_rz=100.0)
        result = root_zone_balance(state, net_input=0.0, evaporation=2.0, transpiration=3.0)

        assert result.dr == pytest.approx(15.0)
        assert result.dp == 0.0
        assert state.dr_rz == pytest.approx(15.0)

    def test_excess_input_percolates(self):
        state = SoilWaterState(dr_rz=5.0, taw_rz=100.0)
        result = root_zone_balance(state, net_input=20.0, evaporation=1.0, transpiration=1.0)

        assert result.dp == pytest.approx(15.0)
        assert result.dr == pytest.approx(2.0)

    def test_overflow_reduces_evaporation_and_transpiration(self):
        state = SoilWaterState(dr_rz=98.0, taw_rz=100.0)
        result = root_zone_balance(state, net_input=0.0, evaporation=2.0, transpiration=6.0)

        assert result.exceed == pytest.approx(6.0)
        assert result.e_act == pytest.approx(0.5)
        assert result.t_act == pytest.approx(1.5)
        assert result.dr == pytest.approx(100.0)

    def test_wilting_point_stops_uptake(self):
        state = SoilWaterState(dr_rz=100.0, taw_rz=100.0)
        result = root_zone_balance(state, net_input=0.0, evaporation=1.0, transpiration=1.0)

        assert result.e_act == 0.0
        assert result.t_act == 0.0
        assert result.dr == pytest.approx(100.0)


class TestDeepZoneBalance:
    """Test suite for the deep zone step"""

    def test_percolation_refills_deep_zone(self):
        state = SoilWaterState(dr_dz=20.0, taw_dz=100.0)
        result = deep_zone_balance(state, percolation=15.0)

        assert result.dr == pytest.approx(5.0)
        assert result.dp == 0.0

    def test_drainage_below_profile(self):
        state = SoilWaterState(dr_dz=20.0, taw_dz=100.0)
        result = deep_zone_balance(state, percolation=30.0)

        assert result.dr == 0.0
        assert result.dp == pytest.approx(10.0)

    def test_no_deep_zone_passes_everything(self):
        state = SoilWaterState(dr_dz=0.0, taw_dz=0.0)
        result = deep_zone_balance(state, percolation=7.0)

        assert result.dp == pytest.approx(7.0)
        assert result.exceed == 0.0


class TestZoneResize:
    """Test suite for redistribution after root growth"""

    def test_root_growth_takes_deep_zone_depletion(self):
        state = state_at(0.3, dr_rz=10.0, dr_dz=36.0)
        resize = redistribute_zone_change(state, 0.6, 90.0, 135.0, MAX_DEPTH)

        assert resize.moved_to_rz == pytest.approx(9.0)
        assert state.dr_rz == pytest.approx(19.0)
        assert state.dr_dz == pytest.approx(27.0)
        assert state.zr == 0.6
        assert state.taw_rz == 90.0

    def test_root_retreat_gives_depletion_to_deep_zone(self):
        state = state_at(0.6, dr_rz=30.0, dr_dz=10.0)
        redistribute_zone_change(state, 0.3, 45.0, 180.0, MAX_DEPTH)

        assert state.dr_rz == pytest.approx(15.0)
        assert state.dr_dz == pytest.approx(25.0)

    def test_growth_from_zero_to_max_moves_everything(self):
        state = state_at(0.0, dr_rz=0.0, dr_dz=50.0)
        redistribute_zone_change(state, MAX_DEPTH, TAW_MAX, 0.0, MAX_DEPTH)

        assert state.dr_rz == pytest.approx(50.0)
        assert state.dr_dz == 0.0

    def test_retreat_from_max_to_zero_moves_everything(self):
        state = state_at(MAX_DEPTH, dr_rz=80.0, dr_dz=0.0)
        redistribute_zone_change(state, 0.0, 0.0, TAW_MAX, MAX_DEPTH)

        assert state.dr_rz == 0.0
        assert state.dr_dz == pytest.approx(80.0)

    @pytest.mark.parametrize("old_zr,new_zr,dr_rz,dr_dz", [
        (0.3, 1.0, 45.0, 180.0),
        (1.0, 0.2, 150.0, 70.0),
        (0.5, 0.55, 0.0, 100.0),
        (1.2, 0.1, 170.0, 0.0),
    ])
    def test_sum_preserved_and_capacities_respected(self, old_zr, new_zr, dr_rz, dr_dz):
        state = state_at(old_zr, dr_rz=dr_rz, dr_dz=dr_dz)
        taw_rz = total_available_water(SOIL, new_zr)
        resize = redistribute_zone_change(state, new_zr, taw_rz, TAW_MAX - taw_rz, MAX_DEPTH)

        assert resize.overflow == 0.0
        assert state.dr_rz + state.dr_dz == pytest.approx(dr_rz + dr_dz)
        assert 0.0 <= state.dr_rz <= state.taw_rz + 1e-9
        assert 0.0 <= state.dr_dz <= state.taw_dz + 1e-9


class TestSoilWaterState:
    """Test suite for state creation"""

    def test_initial_state_from_fractions(self):
        state = initial_soil_state(zr=0.3, taw_rz=45.0, taw_dz=180.0, tew=22.5,
                                   fraction_rz=0.2, fraction_dz=0.1, fraction_de=0.5)

        assert state.dr_rz == pytest.approx(9.0)
        assert state.dr_dz == pytest.approx(18.0)
        assert state.de == pytest.approx(11.25)
        assert state.taw_rz == pytest.approx(45.0)
        assert state.total_depletion == pytest.approx(27.0)

    def test_copy_is_independent(self):
        state = state_at(0.3, 10.0, 20.0)
        clone = state.copy()
        clone.dr_rz = 40.0

        assert state.dr_rz == 10.0
        assert clone == state_at(0.3, 40.0, 20.0)
