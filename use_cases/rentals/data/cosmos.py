"""
Cosmos DB Stores for the Rental Use Case.

Provides the rental, inventory and user stores backed by Cosmos DB containers.
Uses DefaultAzureCredential for flexible authentication.

Azure SDK errors are translated into the return workflow's error kinds here,
so nothing above this module sees an azure exception.
"""

import logging
from typing import Any, Dict, List, Optional

from azure.core import MatchConditions
from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosResourceNotFoundError,
)
from azure.identity import DefaultAzureCredential

# Import shared configuration
from shared.cosmos_config import (
    COSMOS_ENDPOINT,
    DATABASE_NAME,
    RENTAL_CONTAINER_NAMES,
)

from ..domain.errors import (
    AlreadyProcessedError,
    RentalNotFoundError,
    StoreUnavailableError,
)
from ..domain.models import Rental
from .base import InventoryStore, RentalStore, UserDirectory

logger = logging.getLogger(__name__)


OPEN_RENTAL_QUERY = """
    SELECT * FROM c
    WHERE c.customerId = @customer_id
      AND c.movieId = @movie_id
      AND (NOT IS_DEFINED(c.dateReturned) OR IS_NULL(c.dateReturned))
    ORDER BY c.dateOut ASC
"""

LATEST_RENTAL_QUERY = """
    SELECT TOP 1 * FROM c
    WHERE c.customerId = @customer_id
      AND c.movieId = @movie_id
    ORDER BY c.dateOut DESC
"""


def _pair_params(customer_id: str, movie_id: str) -> List[Dict[str, Any]]:
    return [
        {"name": "@customer_id", "value": customer_id},
        {"name": "@movie_id", "value": movie_id},
    ]


class CosmosRentalStore(RentalStore):
    """Rentals container, partitioned by /id."""

    def __init__(self, container):
        self._container = container

    def _query(self, query: str, customer_id: str, movie_id: str) -> List[Dict[str, Any]]:
        try:
            return list(self._container.query_items(
                query,
                parameters=_pair_params(customer_id, movie_id),
                enable_cross_partition_query=True,
            ))
        except AzureError as e:
            logger.error(f"Rental query failed for customer {customer_id}, movie {movie_id}: {e}")
            raise StoreUnavailableError("Rental store is unavailable.") from e

    def get_by_id(self, id: str) -> Optional[Rental]:
        try:
            doc = self._container.read_item(item=id, partition_key=id)
        except CosmosResourceNotFoundError:
            return None
        except AzureError as e:
            logger.error(f"Reading rental {id} failed: {e}")
            raise StoreUnavailableError("Rental store is unavailable.") from e
        return Rental.from_dict(doc)

    def find_open_rental(self, customer_id: str, movie_id: str) -> Optional[Rental]:
        docs = self._query(OPEN_RENTAL_QUERY, customer_id, movie_id)
        if len(docs) > 1:
            logger.warning(
                f"{len(docs)} open rentals for customer {customer_id} and movie {movie_id}; "
                f"using {docs[0]['id']}"
            )
        return Rental.from_dict(docs[0]) if docs else None

    def find_latest_rental(self, customer_id: str, movie_id: str) -> Optional[Rental]:
        docs = self._query(LATEST_RENTAL_QUERY, customer_id, movie_id)
        return Rental.from_dict(docs[0]) if docs else None

    def save(self, entity: Rental) -> Rental:
        body = entity.to_dict()
        options: Dict[str, Any] = {}
        if entity.etag:
            options = {"etag": entity.etag, "match_condition": MatchConditions.IfNotModified}
        try:
            saved = self._container.replace_item(item=entity.id, body=body, **options)
        except CosmosResourceNotFoundError as e:
            raise RentalNotFoundError(f"Rental {entity.id} no longer exists.") from e
        except CosmosAccessConditionFailedError as e:
            logger.warning(f"Rental {entity.id} changed since it was read; rejecting write")
            raise AlreadyProcessedError() from e
        except AzureError as e:
            logger.error(f"Saving rental {entity.id} failed: {e}")
            raise StoreUnavailableError("Rental store is unavailable.") from e
        return Rental.from_dict(saved)


class CosmosInventoryStore(InventoryStore):
    """Movies container, partitioned by /id, holding numberInStock."""

    def __init__(self, container):
        self._container = container

    def increment_stock(self, movie_id: str, delta: int) -> None:
        try:
            self._container.patch_item(
                item=movie_id,
                partition_key=movie_id,
                patch_operations=[{"op": "incr", "path": "/numberInStock", "value": delta}],
            )
        except CosmosResourceNotFoundError as e:
            raise StoreUnavailableError(f"Movie {movie_id} not found in inventory.") from e
        except AzureError as e:
            logger.error(f"Incrementing stock for movie {movie_id} failed: {e}")
            raise StoreUnavailableError("Inventory store is unavailable.") from e

    def get_stock(self, movie_id: str) -> Optional[int]:
        try:
            movie = self._container.read_item(item=movie_id, partition_key=movie_id)
        except CosmosResourceNotFoundError:
            return None
        except AzureError as e:
            raise StoreUnavailableError("Inventory store is unavailable.") from e
        return movie.get("numberInStock", 0)


class CosmosUserDirectory(UserDirectory):
    def __init__(self, container):
        self._container = container

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        query = "SELECT * FROM c WHERE LOWER(c.email) = LOWER(@email)"
        params = [{"name": "@email", "value": email}]
        try:
            items = list(self._container.query_items(query, parameters=params, enable_cross_partition_query=True))
        except AzureError as e:
            logger.error(f"User lookup failed: {e}")
            raise StoreUnavailableError("User directory is unavailable.") from e
        return items[0] if items else None


class RentalCosmosClient:
    """Owns the Cosmos DB connection and hands out the stores."""

    def __init__(self, endpoint: str = COSMOS_ENDPOINT, database_name: str = DATABASE_NAME):
        """Initialize the Cosmos DB client."""
        logger.info("Initializing Rental Cosmos DB client...")
        self._credential = DefaultAzureCredential(
            exclude_interactive_browser_credential=False,
            exclude_shared_token_cache_credential=False,
        )
        self._client = CosmosClient(endpoint, credential=self._credential)
        self._database = self._client.get_database_client(database_name)
        self._containers = {}
        logger.info(f"Connected to Cosmos DB: {database_name}")

    def _get_container(self, name: str):
        """Get a container client, caching for reuse."""
        if name not in self._containers:
            container_name = RENTAL_CONTAINER_NAMES.get(name, name)
            self._containers[name] = self._database.get_container_client(container_name)
        return self._containers[name]

    def rental_store(self) -> CosmosRentalStore:
        return CosmosRentalStore(self._get_container("rentals"))

    def inventory_store(self) -> CosmosInventoryStore:
        return CosmosInventoryStore(self._get_container("movies"))

    def user_directory(self) -> CosmosUserDirectory:
        return CosmosUserDirectory(self._get_container("users"))


# Singleton instance
_client: Optional[RentalCosmosClient] = None


def get_rental_client() -> RentalCosmosClient:
    """Get the singleton Cosmos DB client instance."""
    global _client
    if _client is None:
        _client = RentalCosmosClient()
    return _client
