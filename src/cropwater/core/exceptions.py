"""
Custom exception hierarchy for the cropwater engine.
Errors carry the field, date and component they occurred in.
"""
from typing import Optional, Any, Dict
from dataclasses import dataclass


@dataclass
class ErrorContext:
    """Context information for errors"""
    field_id: Optional[str] = None
    date: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class CropwaterError(Exception):
    """Base exception for all cropwater errors"""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def __str__(self) -> str:
        context_str = ""
        if self.context.field_id:
            context_str += f" [Field: {self.context.field_id}]"
        if self.context.date:
            context_str += f" [Date: {self.context.date}]"
        if self.context.component:
            context_str += f" [Component: {self.context.component}]"

        return f"{self.__class__.__name__}: {self.message}{context_str}"


# Configuration errors
class ConfigurationError(CropwaterError):
    """Missing collaborator or invalid date range, fatal before the first day"""
    pass


# Data-related errors
class DataError(CropwaterError):
    """Base class for input data errors"""
    pass


class MissingDataError(DataError):
    """A plant, soil or climate input needed for a day is missing"""
    pass


class DataValidationError(DataError):
    """Input data could not be parsed or is inconsistent"""
    pass


# Physics model errors
class PhysicsModelError(CropwaterError):
    """Base class for physics model errors"""
    pass


def handle_exception(exc: Exception, context: Optional[ErrorContext] = None) -> CropwaterError:
    """
    Wrap generic exceptions in the CropwaterError hierarchy.
    Used by the data loaders to categorize parsing and I/O failures, and by
    the simulation driver for failures of caller-provided providers.
    """
    if isinstance(exc, CropwaterError):
        return exc

    error_map = {
        FileNotFoundError: MissingDataError,
        KeyError: DataValidationError,
        ValueError: DataValidationError,
        TypeError: DataValidationError,
        ArithmeticError: PhysicsModelError,
    }

    for exc_type, cropwater_exc_type in error_map.items():
        if isinstance(exc, exc_type):
            return cropwater_exc_type(str(exc), context)

    return CropwaterError(str(exc), context)
