"""
Validation of simulation results.
"""
from cropwater.validation.mass_balance import MassBalanceValidation, validate_mass_balance_series

__all__ = [
    "MassBalanceValidation",
    "validate_mass_balance_series",
]
