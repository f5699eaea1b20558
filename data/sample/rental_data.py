"""
Sample data for the Rental Returns service.

Movies, customers, staff users and rentals in the document shape the
Cosmos DB containers hold. Rental dates are generated relative to "now"
so the open rentals always have realistic ages.

All staff users share the password DEFAULT_PASSWORD.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from auth import hash_password

DEFAULT_PASSWORD = "demo123"

MOVIES: List[Dict[str, Any]] = [
    {
        "id": "5b21ca3eeb7f6fbccd471801",
        "title": "Terminator 2: Judgment Day",
        "genre": {"id": "5b21ca3eeb7f6fbccd471701", "name": "Action"},
        "numberInStock": 4,
        "dailyRentalRate": 2,
    },
    {
        "id": "5b21ca3eeb7f6fbccd471802",
        "title": "The Grand Budapest Hotel",
        "genre": {"id": "5b21ca3eeb7f6fbccd471702", "name": "Comedy"},
        "numberInStock": 2,
        "dailyRentalRate": 1.5,
    },
    {
        "id": "5b21ca3eeb7f6fbccd471803",
        "title": "Spirited Away",
        "genre": {"id": "5b21ca3eeb7f6fbccd471703", "name": "Animation"},
        "numberInStock": 0,
        "dailyRentalRate": 3,
    },
]

CUSTOMERS: List[Dict[str, Any]] = [
    {
        "id": "5b21ca3eeb7f6fbccd471901",
        "name": "Jane Smith",
        "phone": "555-0142",
        "isGold": True,
    },
    {
        "id": "5b21ca3eeb7f6fbccd471902",
        "name": "Robert Johnson",
        "phone": "555-0199",
        "isGold": False,
    },
]

USERS: List[Dict[str, Any]] = [
    {
        "id": "5b21ca3eeb7f6fbccd471a01",
        "name": "Front Desk",
        "email": "desk@vidly.example",
        "password_hash": hash_password(DEFAULT_PASSWORD, "vidly-desk"),
        "isAdmin": False,
    },
    {
        "id": "5b21ca3eeb7f6fbccd471a02",
        "name": "Store Manager",
        "email": "manager@vidly.example",
        "password_hash": hash_password(DEFAULT_PASSWORD, "vidly-manager"),
        "isAdmin": True,
    },
]

# (rental id, customer index, movie index, days out, days until returned or None)
_RENTAL_PLAN = [
    ("5b21ca3eeb7f6fbccd471b01", 0, 0, 7, None),
    ("5b21ca3eeb7f6fbccd471b02", 0, 1, 0, None),
    ("5b21ca3eeb7f6fbccd471b03", 1, 2, 3, None),
    ("5b21ca3eeb7f6fbccd471b04", 1, 0, 20, 4),
]


def _snapshot_customer(customer: Dict[str, Any]) -> Dict[str, Any]:
    return {key: customer[key] for key in ("id", "name", "phone", "isGold")}


def _snapshot_movie(movie: Dict[str, Any]) -> Dict[str, Any]:
    return {key: movie[key] for key in ("id", "title", "dailyRentalRate")}


def prepare_rentals(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Build rental documents with dates relative to now."""
    now = now or datetime.now(timezone.utc)
    rentals = []
    for rental_id, customer_index, movie_index, days_out, days_kept in _RENTAL_PLAN:
        customer = CUSTOMERS[customer_index]
        movie = MOVIES[movie_index]
        date_out = now - timedelta(days=days_out, hours=1)
        rental: Dict[str, Any] = {
            "id": rental_id,
            "customerId": customer["id"],
            "movieId": movie["id"],
            "customer": _snapshot_customer(customer),
            "movie": _snapshot_movie(movie),
            "dateOut": date_out.isoformat(),
            "dateReturned": None,
            "rentalFee": None,
        }
        if days_kept is not None:
            rental["dateReturned"] = (date_out + timedelta(days=days_kept)).isoformat()
            rental["rentalFee"] = days_kept * movie["dailyRentalRate"]
        rentals.append(rental)
    return rentals
