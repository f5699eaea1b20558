"""
In-memory stores for local development and tests.

Documents are kept in the same shape as the Cosmos DB containers and every
read hands back a fresh copy. A lock stands in for the atomic primitives
Cosmos DB provides.
"""

import copy
import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional

from ..domain.errors import (
    AlreadyProcessedError,
    RentalNotFoundError,
    StoreUnavailableError,
)
from ..domain.models import Rental
from .base import InventoryStore, RentalStore, UserDirectory

logger = logging.getLogger(__name__)


def _new_etag() -> str:
    return uuid.uuid4().hex


class InMemoryRentalStore(RentalStore):
    """Rental documents keyed by id."""

    def __init__(self, documents: Optional[Iterable[Dict[str, Any]]] = None):
        self._lock = threading.Lock()
        self._documents: Dict[str, Dict[str, Any]] = {}
        for doc in documents or []:
            self.add(doc)

    def add(self, document: Dict[str, Any]) -> Rental:
        """Insert a rental document as the checkout flow would."""
        doc = copy.deepcopy(document)
        doc["_etag"] = _new_etag()
        with self._lock:
            self._documents[doc["id"]] = doc
        return Rental.from_dict(doc)

    def _matching(self, customer_id: str, movie_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            docs = [
                copy.deepcopy(doc) for doc in self._documents.values()
                if doc.get("customerId") == customer_id and doc.get("movieId") == movie_id
            ]
        # ISO-8601 strings order the same way Cosmos DB orders c.dateOut
        return sorted(docs, key=lambda doc: doc.get("dateOut", ""))

    def get_by_id(self, id: str) -> Optional[Rental]:
        with self._lock:
            doc = copy.deepcopy(self._documents.get(id))
        return Rental.from_dict(doc) if doc else None

    def find_open_rental(self, customer_id: str, movie_id: str) -> Optional[Rental]:
        open_docs = [doc for doc in self._matching(customer_id, movie_id) if doc.get("dateReturned") is None]
        if len(open_docs) > 1:
            logger.warning(
                f"{len(open_docs)} open rentals for customer {customer_id} and movie {movie_id}; "
                f"using {open_docs[0]['id']}"
            )
        return Rental.from_dict(open_docs[0]) if open_docs else None

    def find_latest_rental(self, customer_id: str, movie_id: str) -> Optional[Rental]:
        docs = self._matching(customer_id, movie_id)
        return Rental.from_dict(docs[-1]) if docs else None

    def save(self, entity: Rental) -> Rental:
        with self._lock:
            stored = self._documents.get(entity.id)
            if stored is None:
                raise RentalNotFoundError(f"Rental {entity.id} no longer exists.")
            if entity.etag is not None and stored.get("_etag") != entity.etag:
                raise AlreadyProcessedError()
            doc = entity.to_dict()
            doc["_etag"] = _new_etag()
            self._documents[entity.id] = doc
            saved = copy.deepcopy(doc)
        return Rental.from_dict(saved)


class InMemoryInventoryStore(InventoryStore):
    """Movie documents keyed by id, each with a numberInStock count."""

    def __init__(self, movies: Optional[Iterable[Dict[str, Any]]] = None):
        self._lock = threading.Lock()
        self._movies: Dict[str, Dict[str, Any]] = {
            movie["id"]: copy.deepcopy(movie) for movie in movies or []
        }

    def add_movie(self, movie: Dict[str, Any]) -> None:
        with self._lock:
            self._movies[movie["id"]] = copy.deepcopy(movie)

    def increment_stock(self, movie_id: str, delta: int) -> None:
        with self._lock:
            movie = self._movies.get(movie_id)
            if movie is None:
                raise StoreUnavailableError(f"Movie {movie_id} not found in inventory.")
            movie["numberInStock"] = movie.get("numberInStock", 0) + delta

    def get_stock(self, movie_id: str) -> Optional[int]:
        with self._lock:
            movie = self._movies.get(movie_id)
            return movie.get("numberInStock", 0) if movie else None


class InMemoryUserDirectory(UserDirectory):
    def __init__(self, users: Optional[Iterable[Dict[str, Any]]] = None):
        self._users = {user["email"].lower(): copy.deepcopy(user) for user in users or []}

    def add_user(self, user: Dict[str, Any]) -> None:
        self._users[user["email"].lower()] = copy.deepcopy(user)

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        user = self._users.get((email or "").lower())
        return copy.deepcopy(user) if user else None
