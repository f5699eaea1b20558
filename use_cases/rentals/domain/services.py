"""
Domain Services - Business Operations.

These services hold the return arithmetic without I/O dependencies.
They work with pure data structures and an explicit "now".
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from core.domain import DomainService, whole_days_between

from .models import Rental


@dataclass
class FeeResult:
    """Result of a rental fee calculation."""
    rental_days: int
    daily_rental_rate: Decimal
    rental_fee: Decimal


class RentalFeeCalculator(DomainService):
    """
    Calculates the fee owed for a rental.

    Only whole days count, so a same-day return is free. The rate is the
    one snapshotted at checkout, never the movie's current price.
    """

    def execute(
        self,
        date_out: datetime,
        daily_rental_rate: Decimal,
        returned_at: datetime,
    ) -> FeeResult:
        rental_days = whole_days_between(date_out, returned_at)
        return FeeResult(
            rental_days=rental_days,
            daily_rental_rate=daily_rental_rate,
            rental_fee=daily_rental_rate * rental_days,
        )


class RentalCloser(DomainService):
    """
    Produces the closed state of an open rental.

    Raises AlreadyProcessedError if the rental is not open.
    """

    def __init__(self):
        self.fee_calculator = RentalFeeCalculator()

    def execute(self, rental: Rental, returned_at: datetime) -> Rental:
        fee = self.fee_calculator.execute(
            date_out=rental.date_out,
            daily_rental_rate=rental.daily_rental_rate,
            returned_at=returned_at,
        )
        return rental.close(returned_at=returned_at, rental_fee=fee.rental_fee)
