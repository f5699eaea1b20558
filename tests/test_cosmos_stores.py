from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from azure.core import MatchConditions
from azure.core.exceptions import ServiceRequestError
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosHttpResponseError,
    CosmosResourceNotFoundError,
)

from use_cases.rentals.data import (
    CosmosInventoryStore,
    CosmosRentalStore,
    CosmosUserDirectory,
)
from use_cases.rentals.domain import (
    AlreadyProcessedError,
    Rental,
    RentalNotFoundError,
    StoreUnavailableError,
)

from conftest import CUSTOMER_ID, MOVIE_ID, NOW


@pytest.fixture
def container():
    return MagicMock()


def with_etag(doc, etag="etag-1"):
    doc = dict(doc)
    doc["_etag"] = etag
    return doc


def test_find_open_rental_queries_by_pair(container, make_rental_doc):
    container.query_items.return_value = iter([with_etag(make_rental_doc(days_out=2))])
    store = CosmosRentalStore(container)

    rental = store.find_open_rental(CUSTOMER_ID, MOVIE_ID)

    assert rental.customer_id == CUSTOMER_ID
    assert rental.etag == "etag-1"
    query = container.query_items.call_args[0][0]
    kwargs = container.query_items.call_args[1]
    assert "IS_DEFINED(c.dateReturned)" in query
    assert kwargs["parameters"] == [
        {"name": "@customer_id", "value": CUSTOMER_ID},
        {"name": "@movie_id", "value": MOVIE_ID},
    ]
    assert kwargs["enable_cross_partition_query"] is True


def test_find_open_rental_none(container):
    container.query_items.return_value = iter([])
    assert CosmosRentalStore(container).find_open_rental(CUSTOMER_ID, MOVIE_ID) is None


def test_find_open_rental_picks_first_when_ambiguous(container, make_rental_doc):
    first = with_etag(make_rental_doc(days_out=9))
    second = with_etag(make_rental_doc(days_out=1))
    container.query_items.return_value = iter([first, second])

    rental = CosmosRentalStore(container).find_open_rental(CUSTOMER_ID, MOVIE_ID)

    assert rental.id == first["id"]


def test_find_latest_rental_orders_by_date_out(container, make_rental_doc):
    container.query_items.return_value = iter([with_etag(make_rental_doc(days_out=1))])

    CosmosRentalStore(container).find_latest_rental(CUSTOMER_ID, MOVIE_ID)

    query = container.query_items.call_args[0][0]
    assert "TOP 1" in query
    assert "ORDER BY c.dateOut DESC" in query


def test_query_failure_is_store_unavailable(container):
    container.query_items.side_effect = ServiceRequestError("connection reset")

    with pytest.raises(StoreUnavailableError):
        CosmosRentalStore(container).find_open_rental(CUSTOMER_ID, MOVIE_ID)


def test_get_by_id_missing(container):
    container.read_item.side_effect = CosmosResourceNotFoundError(status_code=404, message="gone")
    assert CosmosRentalStore(container).get_by_id("abc") is None


def test_save_is_conditional_on_etag(container, make_rental_doc):
    rental = Rental.from_dict(with_etag(make_rental_doc(days_out=7)))
    closed = rental.close(NOW, Decimal("14"))
    container.replace_item.side_effect = lambda item, body, **kwargs: with_etag(body, "etag-2")

    saved = CosmosRentalStore(container).save(closed)

    kwargs = container.replace_item.call_args[1]
    assert kwargs["item"] == rental.id
    assert kwargs["etag"] == "etag-1"
    assert kwargs["match_condition"] == MatchConditions.IfNotModified
    assert kwargs["body"]["rentalFee"] == 14
    assert "_etag" not in kwargs["body"]
    assert saved.etag == "etag-2"
    assert saved.is_closed


def test_save_precondition_failure_is_already_processed(container, make_rental_doc):
    rental = Rental.from_dict(with_etag(make_rental_doc()))
    container.replace_item.side_effect = CosmosAccessConditionFailedError(status_code=412, message="etag")

    with pytest.raises(AlreadyProcessedError):
        CosmosRentalStore(container).save(rental.close(NOW, Decimal("0")))


def test_save_missing_record_is_not_found(container, make_rental_doc):
    rental = Rental.from_dict(with_etag(make_rental_doc()))
    container.replace_item.side_effect = CosmosResourceNotFoundError(status_code=404, message="gone")

    with pytest.raises(RentalNotFoundError):
        CosmosRentalStore(container).save(rental.close(NOW, Decimal("0")))


def test_save_other_failure_is_store_unavailable(container, make_rental_doc):
    rental = Rental.from_dict(with_etag(make_rental_doc()))
    container.replace_item.side_effect = CosmosHttpResponseError(status_code=503, message="busy")

    with pytest.raises(StoreUnavailableError):
        CosmosRentalStore(container).save(rental.close(NOW, Decimal("0")))


def test_increment_stock_uses_patch_incr(container):
    CosmosInventoryStore(container).increment_stock(MOVIE_ID, 1)

    container.patch_item.assert_called_once_with(
        item=MOVIE_ID,
        partition_key=MOVIE_ID,
        patch_operations=[{"op": "incr", "path": "/numberInStock", "value": 1}],
    )


def test_increment_stock_failures(container):
    store = CosmosInventoryStore(container)

    container.patch_item.side_effect = CosmosResourceNotFoundError(status_code=404, message="gone")
    with pytest.raises(StoreUnavailableError):
        store.increment_stock(MOVIE_ID, 1)

    container.patch_item.side_effect = ServiceRequestError("timeout")
    with pytest.raises(StoreUnavailableError):
        store.increment_stock(MOVIE_ID, 1)


def test_get_stock(container):
    container.read_item.return_value = {"id": MOVIE_ID, "numberInStock": 5}
    assert CosmosInventoryStore(container).get_stock(MOVIE_ID) == 5


def test_user_lookup(container):
    container.query_items.return_value = iter([{"id": "u1", "email": "desk@vidly.example"}])

    user = CosmosUserDirectory(container).get_user_by_email("desk@vidly.example")

    assert user["id"] == "u1"
    assert container.query_items.call_args[1]["parameters"] == [
        {"name": "@email", "value": "desk@vidly.example"}
    ]
