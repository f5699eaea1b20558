"""
Rental Returns Domain Layer.

Contains pure business logic for the rental return use case.
No database access or I/O - just business rules.
"""

from .errors import (
    ReturnWorkflowError,
    UnauthenticatedError,
    InvalidInputError,
    RentalNotFoundError,
    AlreadyProcessedError,
    StoreUnavailableError,
)
from .models import CustomerSnapshot, MovieSnapshot, Rental
from .policies import ReturnRequestValidator, RETURN_STOCK_DELTA
from .services import FeeResult, RentalCloser, RentalFeeCalculator

__all__ = [
    "ReturnWorkflowError",
    "UnauthenticatedError",
    "InvalidInputError",
    "RentalNotFoundError",
    "AlreadyProcessedError",
    "StoreUnavailableError",
    "CustomerSnapshot",
    "MovieSnapshot",
    "Rental",
    "ReturnRequestValidator",
    "RETURN_STOCK_DELTA",
    "FeeResult",
    "RentalCloser",
    "RentalFeeCalculator",
]
