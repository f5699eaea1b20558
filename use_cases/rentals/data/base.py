"""
Store interfaces consumed by the return workflow.

Concrete backends live beside this module (Cosmos DB and in-memory).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from core.data import Repository

from ..domain.models import Rental


class RentalStore(Repository[Rental]):
    """
    Persists rentals and resolves them by (customer, movie) pair.
    """

    @abstractmethod
    def find_open_rental(self, customer_id: str, movie_id: str) -> Optional[Rental]:
        """
        Get the open rental for the pair.

        Returns None when the pair is unknown or every rental for it is
        closed. If several are open, the one with the oldest date_out wins.
        """
        pass

    @abstractmethod
    def find_latest_rental(self, customer_id: str, movie_id: str) -> Optional[Rental]:
        """Get the most recent rental for the pair by date_out, open or closed."""
        pass

    @abstractmethod
    def save(self, entity: Rental) -> Rental:
        """
        Rewrite the mutable fields of an existing rental.

        The write only succeeds if the stored record still matches the
        etag the rental was read with.

        Raises:
            RentalNotFoundError: the record no longer exists
            AlreadyProcessedError: the record changed since it was read
            StoreUnavailableError: any other store failure
        """
        pass


class InventoryStore(ABC):
    """Owns movie stock counts."""

    @abstractmethod
    def increment_stock(self, movie_id: str, delta: int) -> None:
        """
        Atomically add delta to the movie's stock.

        Raises:
            StoreUnavailableError: unknown movie or store failure
        """
        pass

    @abstractmethod
    def get_stock(self, movie_id: str) -> Optional[int]:
        """Current stock for a movie, or None if the movie is unknown."""
        pass


class UserDirectory(ABC):
    """Read-only lookup of staff accounts for login."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        pass
