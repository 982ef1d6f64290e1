"""
Data contracts for irrigation inputs.
Ensures irrigation methods, schedules and auto-irrigation settings are
valid before a simulation starts.
"""
from datetime import date
from typing import Dict, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class IrrigationMethodName(str, Enum):
    """Irrigation methods of FAO-56 Table 20"""
    TRICKLE = "trickle"
    FURROW_NARROW_BED = "furrow_narrow_bed"
    FURROW_WIDE_BED = "furrow_wide_bed"
    FURROW_ALTERNATED = "furrow_alternated"
    SPRINKLER = "sprinkler"
    BASIN = "basin"
    BORDER = "border"
    DRIP = "drip"


class IrrigationMethod(BaseModel):
    """Irrigation method descriptor"""
    name: str
    fw: float = Field(default=1.0, gt=0, le=1, description="Fraction of soil surface wetted")
    interception: float = Field(default=0.0, ge=0, le=1, description="Share of canopy interception applied")
    min_amount: float = Field(default=0.0, ge=0, description="Minimum daily gross dose (mm), 0 = none")
    max_amount: float = Field(default=0.0, ge=0, description="Maximum daily gross dose (mm), 0 = none")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def validate_dose_range(self):
        """Ensure min <= max when both are limited"""
        if self.min_amount and self.max_amount and self.min_amount > self.max_amount:
            raise ValueError("min_amount must be <= max_amount")
        return self

    @property
    def is_drip(self) -> bool:
        """Drip-type methods wet only the soil beside the plants"""
        return self.name in (IrrigationMethodName.DRIP.value, IrrigationMethodName.TRICKLE.value)

    def with_limits(self, min_amount: float = 0.0, max_amount: float = 0.0) -> "IrrigationMethod":
        """Copy of the method with daily dose limits"""
        return self.model_copy(update={"min_amount": min_amount, "max_amount": max_amount})


IRRIGATION_METHODS: Dict[str, IrrigationMethod] = {
    method.name: method for method in (
        IrrigationMethod(name=IrrigationMethodName.TRICKLE.value, fw=0.4, interception=0),
        IrrigationMethod(name=IrrigationMethodName.FURROW_NARROW_BED.value, fw=0.8, interception=0),
        IrrigationMethod(name=IrrigationMethodName.FURROW_WIDE_BED.value, fw=0.5, interception=0),
        IrrigationMethod(name=IrrigationMethodName.FURROW_ALTERNATED.value, fw=0.4, interception=0),
        IrrigationMethod(name=IrrigationMethodName.SPRINKLER.value, fw=1.0, interception=1),
        IrrigationMethod(name=IrrigationMethodName.BASIN.value, fw=1.0, interception=0),
        IrrigationMethod(name=IrrigationMethodName.BORDER.value, fw=1.0, interception=0),
        IrrigationMethod(name=IrrigationMethodName.DRIP.value, fw=0.3, interception=0),
    )
}


def get_irrigation_method(name: str) -> IrrigationMethod:
    """Look up a predefined irrigation method by name"""
    try:
        return IRRIGATION_METHODS[name]
    except KeyError:
        raise ValueError(
            f"Unknown irrigation method '{name}', expected one of {sorted(IRRIGATION_METHODS)}"
        ) from None


class IrrigationSchedule(BaseModel):
    """Gross irrigation amounts by date for one irrigation method"""
    method: IrrigationMethod = Field(default_factory=lambda: IRRIGATION_METHODS["sprinkler"])
    events: Dict[date, float] = Field(default_factory=dict)

    @field_validator("events")
    @classmethod
    def validate_amounts(cls, v):
        """Ensure amounts are non-negative"""
        for day, amount in v.items():
            if amount < 0:
                raise ValueError(f"Irrigation amount on {day} must be >= 0, got {amount}")
        return v

    def amount_on(self, day: date) -> float:
        """Gross amount scheduled for a date (mm)"""
        return self.events.get(day, 0.0)

    def add(self, day: date, amount: float):
        """Add a gross amount to a date"""
        if amount < 0:
            raise ValueError(f"Irrigation amount must be >= 0, got {amount}")
        self.events[day] = self.events.get(day, 0.0) + amount

    def clone(self) -> "IrrigationSchedule":
        return self.model_copy(deep=True)

    @property
    def total(self) -> float:
        return sum(self.events.values())


class AutoIrrigationControl(BaseModel):
    """Settings of the automatic irrigation policy"""
    level: float = Field(
        default=0.0, ge=0, le=1,
        description="Trigger below this root zone saturation, 0 = plant stress trigger"
    )
    cutoff: float = Field(default=1.0, gt=0, le=1, description="Target saturation of a computed dose")
    amount: float = Field(default=0.0, ge=0, description="Fixed gross dose (mm), 0 = dose to cutoff")
    method: IrrigationMethod = Field(default_factory=lambda: IRRIGATION_METHODS["sprinkler"])
    start_day: Optional[int] = Field(default=None, ge=1, description="First development day")
    end_day: Optional[int] = Field(default=None, ge=1, description="Last development day")
    deficit: float = Field(default=0.0, ge=-1, le=1, description="Offset of the stress trigger")

    @model_validator(mode="after")
    def validate_window(self):
        """Ensure start_day <= end_day"""
        if self.start_day is not None and self.end_day is not None and self.start_day > self.end_day:
            raise ValueError("start_day must be <= end_day")
        return self

    def is_active(self, development_day: int) -> bool:
        """Whether a development day lies in the activation window"""
        if self.start_day is not None and development_day < self.start_day:
            return False
        if self.end_day is not None and development_day > self.end_day:
            return False
        return True
