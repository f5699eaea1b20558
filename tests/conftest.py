# tests/conftest.py
import os

# Must be set before config.settings is created on first import
os.environ["STORE_BACKEND"] = "memory"
os.environ["SEED_SAMPLE_DATA"] = "true"

from datetime import datetime, timedelta, timezone

import pytest

from use_cases.rentals import ReturnProcessor
from use_cases.rentals.data import InMemoryInventoryStore, InMemoryRentalStore

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
CUSTOMER_ID = "5c9a1b2c3d4e5f6a7b8c9d01"
MOVIE_ID = "5c9a1b2c3d4e5f6a7b8c9d02"
OTHER_MOVIE_ID = "5c9a1b2c3d4e5f6a7b8c9d03"


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_rental_doc():
    """Build a rental document as the checkout flow would store it"""
    counter = {"n": 0}

    def _make(
        customer_id=CUSTOMER_ID,
        movie_id=MOVIE_ID,
        days_out=0,
        hours_out=0,
        daily_rental_rate=2,
        date_returned=None,
        rental_fee=None,
        rental_id=None,
    ):
        counter["n"] += 1
        date_out = NOW - timedelta(days=days_out, hours=hours_out)
        return {
            "id": rental_id or f"5d0000000000000000000{counter['n']:03d}",
            "customerId": customer_id,
            "movieId": movie_id,
            "customer": {"id": customer_id, "name": "Jane Smith", "phone": "555-0142", "isGold": False},
            "movie": {"id": movie_id, "title": "Terminator 2", "dailyRentalRate": daily_rental_rate},
            "dateOut": date_out.isoformat(),
            "dateReturned": date_returned.isoformat() if date_returned else None,
            "rentalFee": rental_fee,
        }

    return _make


@pytest.fixture
def rental_store():
    return InMemoryRentalStore()


@pytest.fixture
def inventory_store():
    return InMemoryInventoryStore([
        {"id": MOVIE_ID, "title": "Terminator 2", "numberInStock": 3, "dailyRentalRate": 2},
        {"id": OTHER_MOVIE_ID, "title": "Spirited Away", "numberInStock": 0, "dailyRentalRate": 3},
    ])


@pytest.fixture
def processor(rental_store, inventory_store):
    return ReturnProcessor(rental_store, inventory_store, clock=lambda: NOW)


@pytest.fixture
def principal():
    return {"user_id": "5b21ca3eeb7f6fbccd471a01", "email": "desk@vidly.example"}
