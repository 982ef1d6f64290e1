"""
cropwater Data Package.

Provides irrigation contracts and reference data providers.
"""

from cropwater.data.contracts import (
    IrrigationMethodName,
    IrrigationMethod,
    IRRIGATION_METHODS,
    get_irrigation_method,
    IrrigationSchedule,
    AutoIrrigationControl,
)

__all__ = [
    "IrrigationMethodName",
    "IrrigationMethod",
    "IRRIGATION_METHODS",
    "get_irrigation_method",
    "IrrigationSchedule",
    "AutoIrrigationControl",
]
