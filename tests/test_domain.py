from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.domain import parse_date, whole_days_between
from use_cases.rentals.domain import (
    AlreadyProcessedError,
    Rental,
    RentalCloser,
    RentalFeeCalculator,
    ReturnRequestValidator,
)

from conftest import CUSTOMER_ID, MOVIE_ID, NOW


def test_whole_days_drops_partial_days():
    start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    assert whole_days_between(start, start) == 0
    assert whole_days_between(start, start + timedelta(hours=23, minutes=59)) == 0
    assert whole_days_between(start, start + timedelta(days=1)) == 1
    assert whole_days_between(start, start + timedelta(days=6, hours=23)) == 6


def test_whole_days_never_negative():
    start = datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert whole_days_between(start, start - timedelta(hours=5)) == 0


def test_whole_days_treats_naive_as_utc():
    aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
    naive = datetime(2024, 1, 4)
    assert whole_days_between(aware, naive) == 3


def test_parse_date_formats():
    assert parse_date("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_date("2024-01-01T00:00:00") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_date("not a date") is None
    assert parse_date("") is None


def test_fee_is_whole_days_times_rate():
    calculator = RentalFeeCalculator()
    result = calculator.execute(NOW - timedelta(days=7), Decimal("2"), NOW)

    assert result.rental_days == 7
    assert result.rental_fee == Decimal("14")


def test_same_day_return_is_free():
    calculator = RentalFeeCalculator()
    result = calculator.execute(NOW - timedelta(hours=23), Decimal("3"), NOW)

    assert result.rental_days == 0
    assert result.rental_fee == 0


def test_fractional_rate():
    calculator = RentalFeeCalculator()
    result = calculator.execute(NOW - timedelta(days=3, hours=2), Decimal("1.5"), NOW)
    assert result.rental_fee == Decimal("4.5")


def test_rental_round_trip_keeps_snapshot(make_rental_doc):
    doc = make_rental_doc(days_out=2, daily_rental_rate=1.5)
    rental = Rental.from_dict(doc)

    assert rental.customer_id == CUSTOMER_ID
    assert rental.movie_id == MOVIE_ID
    assert rental.daily_rental_rate == Decimal("1.5")
    assert rental.is_open
    assert not rental.is_closed
    assert rental.to_dict()["movie"]["dailyRentalRate"] == 1.5


def test_close_sets_return_date_and_fee(make_rental_doc):
    rental = Rental.from_dict(make_rental_doc(days_out=7))

    closed = RentalCloser().execute(rental, returned_at=NOW)

    assert closed.is_closed
    assert closed.date_returned == NOW
    assert closed.rental_fee == Decimal("14")
    assert closed.to_dict()["rentalFee"] == 14
    # original is untouched
    assert rental.is_open


def test_closed_rental_cannot_close_again(make_rental_doc):
    rental = Rental.from_dict(make_rental_doc(days_out=1, date_returned=NOW, rental_fee=2))

    assert rental.is_closed
    with pytest.raises(AlreadyProcessedError):
        rental.close(NOW, Decimal("0"))


def test_negative_fee_rejected(make_rental_doc):
    rental = Rental.from_dict(make_rental_doc())
    with pytest.raises(ValueError):
        rental.close(NOW, Decimal("-1"))


def test_unparseable_return_date_is_rejected(make_rental_doc):
    doc = make_rental_doc(days_out=5, rental_fee=8)

    for bad in ("2024-13-45T00:00:00Z", ""):
        doc["dateReturned"] = bad
        with pytest.raises(ValueError):
            Rental.from_dict(doc)


def test_validator_accepts_object_ids():
    validator = ReturnRequestValidator()
    assert validator.is_valid({"customerId": CUSTOMER_ID, "movieId": MOVIE_ID})


def test_validator_reports_fields_in_order():
    validator = ReturnRequestValidator()

    errors = validator.validate({"movieId": "nope"})

    assert [(e.field, e.code) for e in errors] == [
        ("customerId", "required"),
        ("movieId", "invalid_format"),
    ]


def test_validator_rejects_non_strings():
    validator = ReturnRequestValidator()
    errors = validator.validate({"customerId": 12345, "movieId": MOVIE_ID})
    assert [e.field for e in errors] == ["customerId"]


def test_validator_custom_pattern():
    validator = ReturnRequestValidator(r"^[a-z]+-\d+$")
    assert validator.is_valid({"customerId": "cust-1", "movieId": "movie-2"})
    assert not validator.is_valid({"customerId": CUSTOMER_ID, "movieId": "movie-2"})
