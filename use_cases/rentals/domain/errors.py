"""
Return Workflow Errors.

Every failure the return workflow can produce is one of these kinds.
The HTTP layer maps each kind to a status code; nothing here is retried.
"""

from typing import List, Optional

from core.domain import ValidationError


class ReturnWorkflowError(Exception):
    """Base class for caller-visible return failures."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(ReturnWorkflowError):
    kind = "unauthenticated"

    def __init__(self, message: str = "Access denied. No valid session token provided."):
        super().__init__(message)


class InvalidInputError(ReturnWorkflowError):
    """A request field is missing or not a valid identifier."""

    kind = "invalid_input"

    def __init__(self, field: str, errors: Optional[List[ValidationError]] = None):
        self.field = field
        self.errors = list(errors or [])
        message = next(
            (e.message for e in self.errors if e.field == field),
            f"{field} is invalid",
        )
        super().__init__(message)


class RentalNotFoundError(ReturnWorkflowError):
    kind = "not_found"

    def __init__(self, message: str = "Rental not found."):
        super().__init__(message)


class AlreadyProcessedError(ReturnWorkflowError):
    kind = "already_processed"

    def __init__(self, message: str = "Rental already processed."):
        super().__init__(message)


class StoreUnavailableError(ReturnWorkflowError):
    """
    Transient infrastructure failure from a store.

    partially_committed is set when the rental was closed but the stock
    increment that follows it failed.
    """

    kind = "store_unavailable"

    def __init__(self, message: str, partially_committed: bool = False):
        super().__init__(message)
        self.partially_committed = partially_committed
