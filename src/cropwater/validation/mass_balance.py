"""
Water balance closure of the two-zone soil model.

Checks, per day and cumulated, that

    P + I_net + I_auto,net - Int - E - T - DP_dz + ΔDr = 0

where ΔDr is the change of the summed root and deep zone depletion. A
depletion increase is water that left the profile, hence the positive
sign.
"""

import logging
from dataclasses import dataclass
from typing import Dict

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class MassBalanceValidation:
    """Running water balance of a simulation (all values in mm)"""
    # Cumulative values
    cumulative_input: float = 0.0
    cumulative_interception: float = 0.0
    cumulative_evaporation: float = 0.0
    cumulative_transpiration: float = 0.0
    cumulative_drainage: float = 0.0
    cumulative_depletion_change: float = 0.0

    # Error tracking
    cumulative_error: float = 0.0
    max_daily_error: float = 0.0
    n_days: int = 0

    # Threshold
    tolerance_mm: float = 1e-3

    def add_timestep(
        self,
        water_input: float,
        interception: float,
        evaporation: float,
        transpiration: float,
        drainage: float,
        depletion_change: float,
    ) -> float:
        """
        Add one day to the running totals.

        Args:
            water_input: Precipitation plus net scheduled and automatic irrigation
            interception: Interception of all water streams
            evaporation: Actual soil evaporation
            transpiration: Actual transpiration
            drainage: Percolation below the deep zone
            depletion_change: End minus start of day of Dr_rz + Dr_dz

        Returns:
            Balance error of the day
        """
        self.cumulative_input += water_input
        self.cumulative_interception += interception
        self.cumulative_evaporation += evaporation
        self.cumulative_transpiration += transpiration
        self.cumulative_drainage += drainage
        self.cumulative_depletion_change += depletion_change

        error = (
            water_input - interception - evaporation - transpiration - drainage
            + depletion_change
        )

        self.cumulative_error += error
        self.max_daily_error = max(self.max_daily_error, abs(error))
        self.n_days += 1
        return error

    def is_valid(self) -> bool:
        """Check if the balance closes within tolerance"""
        return abs(self.cumulative_error) <= self.tolerance_mm

    def get_summary(self) -> Dict[str, float]:
        """Get summary statistics"""
        return {
            'cumulative_input_mm': self.cumulative_input,
            'cumulative_interception_mm': self.cumulative_interception,
            'cumulative_evaporation_mm': self.cumulative_evaporation,
            'cumulative_transpiration_mm': self.cumulative_transpiration,
            'cumulative_drainage_mm': self.cumulative_drainage,
            'cumulative_depletion_change_mm': self.cumulative_depletion_change,
            'cumulative_error_mm': self.cumulative_error,
            'mean_daily_error_mm': self.cumulative_error / max(1, self.n_days),
            'max_daily_error_mm': self.max_daily_error,
            'n_days': self.n_days,
            'is_valid': self.is_valid()
        }


def validate_mass_balance_series(df: pd.DataFrame, tolerance_mm: float = 1e-3) -> MassBalanceValidation:
    """
    Recompute the balance from a daily result table.

    Args:
        df: Output of CumulativeResult.to_dataframe()
        tolerance_mm: Allowed cumulative error

    Returns:
        MassBalanceValidation over all rows
    """
    validation = MassBalanceValidation(tolerance_mm=tolerance_mm)
    for _, row in df.iterrows():
        validation.add_timestep(
            water_input=row['precipitation'] + row['net_irrigation'] + row['net_auto_irrigation'],
            interception=row['interception'] + row['interception_irrigation'] + row['interception_auto_irrigation'],
            evaporation=row['e_act'],
            transpiration=row['t_act'],
            drainage=row['dp_dz'],
            depletion_change=row['dr_diff'],
        )

    if not validation.is_valid():
        logger.warning(
            f"Water balance does not close: cumulative error {validation.cumulative_error:.4f} mm"
        )
    return validation
