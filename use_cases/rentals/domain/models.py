"""
Rental Entities.

A Rental carries its own copy of the customer and movie fields it needs.
Those snapshots are taken at checkout and never follow later edits to the
source customer or movie.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.domain import format_date, parse_date

from .errors import AlreadyProcessedError


def to_decimal(value: Any) -> Decimal:
    """Convert a stored number to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_json_number(value: Optional[Decimal]) -> Optional[Any]:
    """Integral decimals become ints, everything else a float."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class CustomerSnapshot:
    id: str
    name: str
    phone: str
    is_gold: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "isGold": self.is_gold,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomerSnapshot":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            is_gold=bool(data.get("isGold", False)),
        )


@dataclass(frozen=True)
class MovieSnapshot:
    id: str
    title: str
    daily_rental_rate: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "dailyRentalRate": to_json_number(self.daily_rental_rate),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MovieSnapshot":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            daily_rental_rate=to_decimal(data["dailyRentalRate"]),
        )


@dataclass(frozen=True)
class Rental:
    """
    One checkout-to-return cycle.

    Open while date_returned is unset. Closed once both date_returned and
    rental_fee are set, after which it is never modified again.
    """
    id: str
    customer: CustomerSnapshot
    movie: MovieSnapshot
    date_out: datetime
    date_returned: Optional[datetime] = None
    rental_fee: Optional[Decimal] = None
    etag: Optional[str] = field(default=None, compare=False)

    @property
    def customer_id(self) -> str:
        return self.customer.id

    @property
    def movie_id(self) -> str:
        return self.movie.id

    @property
    def daily_rental_rate(self) -> Decimal:
        return self.movie.daily_rental_rate

    @property
    def is_open(self) -> bool:
        return self.date_returned is None

    @property
    def is_closed(self) -> bool:
        return self.date_returned is not None and self.rental_fee is not None

    def close(self, returned_at: datetime, rental_fee: Decimal) -> "Rental":
        """Return a closed copy of this rental."""
        if not self.is_open:
            raise AlreadyProcessedError()
        if rental_fee < 0:
            raise ValueError("rental_fee must not be negative")
        return replace(self, date_returned=returned_at, rental_fee=rental_fee)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the document shape used for persistence and responses."""
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "movieId": self.movie_id,
            "customer": self.customer.to_dict(),
            "movie": self.movie.to_dict(),
            "dateOut": format_date(self.date_out),
            "dateReturned": format_date(self.date_returned),
            "rentalFee": to_json_number(self.rental_fee),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rental":
        date_out = parse_date(data.get("dateOut", ""))
        if date_out is None:
            raise ValueError(f"Rental {data.get('id')} has no valid dateOut")
        date_returned = None
        if data.get("dateReturned") is not None:
            date_returned = parse_date(data["dateReturned"])
            if date_returned is None:
                raise ValueError(f"Rental {data.get('id')} has an invalid dateReturned")
        fee = data.get("rentalFee")
        return cls(
            id=data["id"],
            customer=CustomerSnapshot.from_dict(data["customer"]),
            movie=MovieSnapshot.from_dict(data["movie"]),
            date_out=date_out,
            date_returned=date_returned,
            rental_fee=to_decimal(fee) if fee is not None else None,
            etag=data.get("_etag"),
        )
