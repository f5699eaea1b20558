"""
Return Processor - closes an open rental and credits stock.

This is the orchestration layer of the rental use case: it wires the pure
domain services to the stores. Ordering matters here:

1. Authentication, then customerId, then movieId are checked before any lookup.
2. The rental is closed and saved before stock is touched, so a failed save
   never credits inventory.
3. A failed stock increment after a successful save is reported, not undone.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .data.base import InventoryStore, RentalStore
from .domain.errors import (
    AlreadyProcessedError,
    InvalidInputError,
    RentalNotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from .domain.models import Rental
from .domain.policies import RETURN_STOCK_DELTA, ReturnRequestValidator
from .domain.services import RentalCloser

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReturnProcessor:
    """
    Processes rental returns.

    OPEN --process_return--> CLOSED. Every failure leaves the rental untouched
    and raises one of the ReturnWorkflowError kinds.
    """

    def __init__(
        self,
        rental_store: RentalStore,
        inventory_store: InventoryStore,
        validator: Optional[ReturnRequestValidator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rental_store = rental_store
        self.inventory_store = inventory_store
        self.validator = validator or ReturnRequestValidator()
        self.closer = RentalCloser()
        self._clock = clock

    def process_return(
        self,
        principal: Optional[Dict[str, Any]],
        customer_id: Optional[str],
        movie_id: Optional[str],
    ) -> Rental:
        """
        Close the open rental for (customer_id, movie_id).

        Args:
            principal: The authenticated session, or None
            customer_id: Customer identifier from the request
            movie_id: Movie identifier from the request

        Returns:
            The closed rental as persisted

        Raises:
            UnauthenticatedError, InvalidInputError, RentalNotFoundError,
            AlreadyProcessedError, StoreUnavailableError
        """
        if not principal:
            raise UnauthenticatedError()

        self._validate(customer_id, movie_id)

        rental = self._lookup(customer_id, movie_id)
        if not rental.is_open:
            logger.info(f"Return rejected, rental {rental.id} already processed")
            raise AlreadyProcessedError()

        closed = self.closer.execute(rental, returned_at=self._clock())

        # Raises AlreadyProcessedError if a concurrent return saved first
        saved = self.rental_store.save(closed)

        try:
            self.inventory_store.increment_stock(saved.movie_id, RETURN_STOCK_DELTA)
        except StoreUnavailableError as e:
            logger.error(
                f"Rental {saved.id} was closed but stock for movie {saved.movie_id} "
                f"was not credited: {e.message}"
            )
            raise StoreUnavailableError(e.message, partially_committed=True) from e

        logger.info(
            f"Rental {saved.id} returned by {principal.get('user_id')}: "
            f"fee {saved.rental_fee} for movie {saved.movie_id}"
        )
        return saved

    def _validate(self, customer_id: Optional[str], movie_id: Optional[str]) -> None:
        errors = self.validator.validate({"customerId": customer_id, "movieId": movie_id})
        if errors:
            logger.info(f"Return rejected, invalid input: {[e.field for e in errors]}")
            raise InvalidInputError(errors[0].field, errors)

    def _lookup(self, customer_id: str, movie_id: str) -> Rental:
        rental = self.rental_store.find_open_rental(customer_id, movie_id)
        if rental is not None:
            return rental

        latest = self.rental_store.find_latest_rental(customer_id, movie_id)
        if latest is None:
            logger.info(f"Return rejected, no rental for customer {customer_id} and movie {movie_id}")
            raise RentalNotFoundError()
        if latest.is_open:
            # Checked out after the open-rental query ran
            logger.info(f"Return rejected, rental {latest.id} was not open when looked up")
            raise RentalNotFoundError()
        return latest
