"""
Azure Cosmos DB Configuration.

Centralized configuration for all Cosmos DB settings used across the application.
This ensures consistency between the application, scripts, and data population tools.

Environment Variables (optional overrides):
    COSMOS_ENDPOINT - Override the default Cosmos DB endpoint
    COSMOS_DATABASE - Override the default database name
"""

import os

# =============================================================================
# COSMOS DB CONNECTION
# =============================================================================

COSMOS_ENDPOINT = os.getenv(
    "COSMOS_ENDPOINT",
    "https://localhost:8081/"
)

DATABASE_NAME = os.getenv(
    "COSMOS_DATABASE",
    "vidly"
)

# =============================================================================
# RENTAL DATA CONTAINERS
# =============================================================================

# Format: logical_name -> (container_name, partition_key_path)
RENTAL_CONTAINERS = {
    "rentals": ("Vidly_Rentals", "/id"),
    "movies": ("Vidly_Movies", "/id"),
    "customers": ("Vidly_Customers", "/id"),
    "users": ("Vidly_Users", "/id"),
}

# Simple container name lookup (without partition key)
RENTAL_CONTAINER_NAMES = {
    key: name for key, (name, _) in RENTAL_CONTAINERS.items()
}
