"""
Rental Data Layer.

Repository interfaces plus the Cosmos DB and in-memory implementations.
"""

from .base import InventoryStore, RentalStore, UserDirectory
from .cosmos import (
    CosmosInventoryStore,
    CosmosRentalStore,
    CosmosUserDirectory,
    RentalCosmosClient,
    get_rental_client,
)
from .memory import InMemoryInventoryStore, InMemoryRentalStore, InMemoryUserDirectory

__all__ = [
    "InventoryStore",
    "RentalStore",
    "UserDirectory",
    "CosmosInventoryStore",
    "CosmosRentalStore",
    "CosmosUserDirectory",
    "RentalCosmosClient",
    "get_rental_client",
    "InMemoryInventoryStore",
    "InMemoryRentalStore",
    "InMemoryUserDirectory",
]
