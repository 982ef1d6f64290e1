"""
Tests for crop coefficients, water stress and canopy interception.
"""
import pytest

from cropwater.core.types import GrowthStage
from cropwater.physics.transpiration import (
    calculate_Kcb_adjusted, calculate_Ks, calculate_p_adjusted,
    canopy_cover_fraction, canopy_interception,
)


class TestKcbAdjustment:
    """Test suite for the climate adjustment of Kcb"""

    def test_mid_season_adjustment(self):
        kcb = calculate_Kcb_adjusted(1.15, GrowthStage.MID_SEASON, u2=3.0, RH_min=30.0, crop_height_m=2.0)

        assert kcb == pytest.approx(1.2385467, rel=1e-6)

    def test_reference_climate_leaves_kcb_unchanged(self):
        kcb = calculate_Kcb_adjusted(1.15, GrowthStage.LATE_SEASON, u2=2.0, RH_min=45.0, crop_height_m=2.0)

        assert kcb == pytest.approx(1.15)

    def test_missing_values_use_reference_climate(self):
        assert calculate_Kcb_adjusted(1.15, GrowthStage.MID_SEASON, crop_height_m=2.0) == pytest.approx(1.15)

    @pytest.mark.parametrize("stage", [
        GrowthStage.INITIAL,
        GrowthStage.DEVELOPMENT,
        GrowthStage.DEVELOPMENT_STAGNATION,
        GrowthStage.DEVELOPMENT_FINISH,
    ])
    def test_early_stages_not_adjusted(self, stage):
        assert calculate_Kcb_adjusted(1.15, stage, u2=5.0, RH_min=20.0, crop_height_m=2.0) == 1.15

    def test_small_kcb_not_adjusted(self):
        assert calculate_Kcb_adjusted(0.4, GrowthStage.MID_SEASON, u2=5.0, RH_min=20.0, crop_height_m=2.0) == 0.4

    def test_dry_windy_climate_raises_kcb(self):
        humid = calculate_Kcb_adjusted(1.0, GrowthStage.MID_SEASON, u2=1.0, RH_min=70.0, crop_height_m=1.5)
        arid = calculate_Kcb_adjusted(1.0, GrowthStage.MID_SEASON, u2=4.0, RH_min=20.0, crop_height_m=1.5)

        assert humid < 1.0 < arid


class TestWaterStress:
    """Test suite for p adjustment and Ks"""

    @pytest.mark.parametrize("p,T,expected", [
        (0.5, 5.0, 0.5),
        (0.5, 3.0, 0.58),
        (0.5, 10.0, 0.3),
        (0.75, 0.0, 0.8),
        (0.1, 10.0, 0.1),
    ])
    def test_p_adjusted(self, p, T, expected):
        assert calculate_p_adjusted(p, T) == pytest.approx(expected)

    def test_no_stress_below_raw(self):
        assert calculate_Ks(TAW=100.0, Dr=30.0, p_adj=0.5) == 1.0
        assert calculate_Ks(TAW=100.0, Dr=50.0, p_adj=0.5) == 1.0

    def test_linear_stress_above_raw(self):
        assert calculate_Ks(TAW=100.0, Dr=75.0, p_adj=0.5) == pytest.approx(0.5)

    def test_wilting_point(self):
        assert calculate_Ks(TAW=100.0, Dr=100.0, p_adj=0.5) == 0.0
        assert calculate_Ks(TAW=100.0, Dr=120.0, p_adj=0.5) == 0.0

    def test_no_available_water(self):
        assert calculate_Ks(TAW=0.0, Dr=0.0, p_adj=0.5) == 0.0

    def test_fallow_never_stressed(self):
        assert calculate_Ks(TAW=100.0, Dr=90.0, p_adj=0.5, is_fallow=True) == 1.0

    def test_fallow_without_available_water(self):
        assert calculate_Ks(TAW=0.0, Dr=0.0, p_adj=0.5, is_fallow=True) == 1.0
        assert calculate_Ks(TAW=50.0, Dr=10.0, p_adj=0.0, is_fallow=True) == 1.0


class TestCanopyInterception:
    """Test suite for canopy interception"""

    def test_interception(self):
        assert canopy_interception(10.0, LAI=3.0, a=0.25) == pytest.approx(0.675981, rel=1e-5)

    def test_interception_saturates_at_storage_capacity(self):
        assert canopy_interception(1000.0, LAI=3.0, a=0.25) == pytest.approx(0.75, rel=1e-2)
        assert canopy_interception(1000.0, LAI=3.0, a=0.25) < 0.75

    def test_small_amounts_partly_intercepted(self):
        intercepted = canopy_interception(0.1, LAI=3.0)

        assert 0.0 < intercepted < 0.1

    @pytest.mark.parametrize("amount,LAI,a", [
        (0.0, 3.0, 0.25),
        (10.0, 0.0, 0.25),
        (10.0, 3.0, 0.0),
    ])
    def test_no_interception(self, amount, LAI, a):
        assert canopy_interception(amount, LAI=LAI, a=a) == 0.0

    def test_cover_fraction(self):
        assert canopy_cover_fraction(0.0) == 0.0
        assert canopy_cover_fraction(3.0) == pytest.approx(0.68495, rel=1e-4)
