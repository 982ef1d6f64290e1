"""
Daily and cumulative simulation results.
"""
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from cropwater.data.contracts import IrrigationSchedule
from cropwater.physics.soil_reservoir import SoilWaterState
from cropwater.validation.mass_balance import MassBalanceValidation

logger = logging.getLogger(__name__)


@dataclass
class MeanValue:
    """Running arithmetic mean"""
    total: float = 0.0
    count: int = 0

    def add(self, value: float):
        self.total += value
        self.count += 1

    @property
    def value(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass
class DailyResult:
    """All quantities computed for one simulated date (water in mm)"""
    date: date
    development_day: int
    stage: str
    zr: float = 0.0

    # Reference ET
    et0: float = 0.0
    ra: float = 0.0
    et0_method: str = ""

    # Water input
    precipitation: float = 0.0
    irrigation: float = 0.0
    net_irrigation: float = 0.0
    auto_irrigation: float = 0.0
    net_auto_irrigation: float = 0.0
    interception: float = 0.0
    interception_irrigation: float = 0.0
    interception_auto_irrigation: float = 0.0
    net_precipitation: float = 0.0

    # Transpiration
    kcb: float = 0.0
    kcb_adj: float = 0.0
    t: float = 0.0
    t_act: float = 0.0
    ks: float = 0.0
    p_adj: float = 0.0
    raw: float = 0.0

    # Evaporation
    e: float = 0.0
    e_act: float = 0.0
    few: float = 0.0
    kr: float = 0.0
    ke: float = 0.0
    tew: float = 0.0
    de: float = 0.0
    dpe: float = 0.0

    # Soil zones
    taw_rz: float = 0.0
    taw_dz: float = 0.0
    dr_rz: float = 0.0
    dr_dz: float = 0.0
    dp_rz: float = 0.0
    dp_dz: float = 0.0
    exceed_rz: float = 0.0
    exceed_dz: float = 0.0
    dr_diff: float = 0.0

    # Diagnostics
    prec_irr_efficiency: float = 0.0
    soil_storage_efficiency: float = 0.0
    yield_reduction: float = 0.0
    balance_error: float = 0.0


# DailyResult fields summed over the simulated span
SUMMED_FIELDS: Tuple[str, ...] = (
    "et0", "precipitation",
    "irrigation", "net_irrigation", "auto_irrigation", "net_auto_irrigation",
    "interception", "interception_irrigation", "interception_auto_irrigation",
    "net_precipitation", "t", "t_act", "e", "e_act", "dpe",
    "dp_rz", "dp_dz", "exceed_rz", "exceed_dz", "dr_diff", "balance_error",
)


@dataclass
class CumulativeResult:
    """
    Totals of a simulation run.

    Reused across chained runs, each run adds to the totals and replaces
    the final state.
    """
    totals: Dict[str, float] = field(default_factory=lambda: {name: 0.0 for name in SUMMED_FIELDS})
    n_days: int = 0
    first_date: Optional[date] = None
    last_date: Optional[date] = None

    ks_mean_by_stage: Dict[str, MeanValue] = field(default_factory=dict)
    ky_by_stage: Dict[str, float] = field(default_factory=dict)
    yield_reduction_by_stage: Dict[str, float] = field(default_factory=dict)
    yield_reduction: float = 0.0

    soil_storage_efficiency: MeanValue = field(default_factory=MeanValue)
    balance: MassBalanceValidation = field(default_factory=MassBalanceValidation)

    daily_values: Dict[date, DailyResult] = field(default_factory=dict)
    auto_irrigation_schedule: Optional[IrrigationSchedule] = None
    final_state: Optional[SoilWaterState] = None

    runtime_ms: float = 0.0
    error: Optional[str] = None

    def __getattr__(self, name: str) -> Any:
        # Totals read as attributes, e.g. result.et0
        totals = self.__dict__.get("totals")
        if totals is not None and name in totals:
            return totals[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def prec_irr_efficiency(self) -> float:
        """Share of the water input that stayed in the profile"""
        water_input = (
            self.totals["precipitation"] + self.totals["net_irrigation"] + self.totals["net_auto_irrigation"]
        )
        if water_input <= 0:
            return 0.0
        return (self.totals["net_precipitation"] - self.totals["dp_dz"]) / water_input

    def add(self, daily: DailyResult, ky: Optional[float] = None, keep_daily_values: bool = False):
        """Accumulate one simulated day"""
        for name in SUMMED_FIELDS:
            self.totals[name] += getattr(daily, name)
        self.n_days += 1
        if self.first_date is None or daily.date < self.first_date:
            self.first_date = daily.date
        if self.last_date is None or daily.date > self.last_date:
            self.last_date = daily.date

        self.ks_mean_by_stage.setdefault(daily.stage, MeanValue()).add(daily.ks)
        if ky is not None:
            self.ky_by_stage[daily.stage] = ky
        if daily.soil_storage_efficiency:
            self.soil_storage_efficiency.add(daily.soil_storage_efficiency)

        if keep_daily_values:
            self.daily_values[daily.date] = daily

    def finalize(self):
        """Per-stage and overall yield reduction"""
        self.yield_reduction_by_stage = {
            stage: ky * (1 - self.ks_mean_by_stage[stage].value)
            for stage, ky in self.ky_by_stage.items()
            if stage in self.ks_mean_by_stage
        }
        remaining = 1.0
        for reduction in self.yield_reduction_by_stage.values():
            remaining *= 1 - reduction
        self.yield_reduction = 1 - remaining

        if self.n_days and not self.balance.is_valid():
            logger.warning(
                f"Water balance error of {self.balance.cumulative_error:.4f} mm exceeds "
                f"{self.balance.tolerance_mm} mm"
            )

    def to_dataframe(self) -> pd.DataFrame:
        """Retained daily values as a DataFrame indexed by date"""
        columns = [f.name for f in fields(DailyResult)]
        rows = [asdict(daily) for _, daily in sorted(self.daily_values.items())]
        frame = pd.DataFrame(rows, columns=columns)
        return frame.set_index("date")

    def summary(self) -> Dict[str, Any]:
        """Totals, yield figures and water balance check as a flat dictionary"""
        summary: Dict[str, Any] = {
            "first_date": self.first_date,
            "last_date": self.last_date,
            "n_days": self.n_days,
        }
        summary.update(self.totals)
        summary.update({
            "prec_irr_efficiency": self.prec_irr_efficiency,
            "soil_storage_efficiency": self.soil_storage_efficiency.value,
            "yield_reduction": self.yield_reduction,
            "runtime_ms": self.runtime_ms,
            "error": self.error,
        })
        balance = self.balance.get_summary()
        balance.pop("n_days")
        summary.update(balance)
        for stage, mean in self.ks_mean_by_stage.items():
            summary[f"ks_mean_{stage}"] = mean.value
        for stage, reduction in self.yield_reduction_by_stage.items():
            summary[f"yield_reduction_{stage}"] = reduction
        return summary
