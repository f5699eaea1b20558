"""
Shared modules for the Rental Returns application.

This package contains shared configuration used by the app and the scripts.
"""

from shared.cosmos_config import (
    COSMOS_ENDPOINT,
    DATABASE_NAME,
    RENTAL_CONTAINERS,
    RENTAL_CONTAINER_NAMES,
)

__all__ = [
    "COSMOS_ENDPOINT",
    "DATABASE_NAME",
    "RENTAL_CONTAINERS",
    "RENTAL_CONTAINER_NAMES",
]
