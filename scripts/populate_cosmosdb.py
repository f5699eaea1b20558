"""
Cosmos DB Data Population Script for the Rental Returns service.

Creates the rental containers if needed and upserts the sample movies,
customers, staff users and rentals using AzureCliCredential.

Usage:
    python scripts/populate_cosmosdb.py

Environment:
    COSMOS_ENDPOINT - Override the default Cosmos DB endpoint
    COSMOS_DATABASE - Override the default database name

Containers:
    - Vidly_Rentals    (partition: /id)
    - Vidly_Movies     (partition: /id)
    - Vidly_Customers  (partition: /id)
    - Vidly_Users      (partition: /id)
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from azure.cosmos import CosmosClient, PartitionKey
from azure.cosmos.exceptions import CosmosHttpResponseError
from azure.identity import AzureCliCredential

# Import configuration from shared module
from shared.cosmos_config import (
    COSMOS_ENDPOINT,
    DATABASE_NAME,
    RENTAL_CONTAINERS,
)

# Import sample data
from data.sample.rental_data import (
    CUSTOMERS,
    MOVIES,
    USERS,
    prepare_rentals,
)

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# =============================================================================
# COSMOS DB OPERATIONS
# =============================================================================

def upsert_items(container, items: List[Dict[str, Any]]) -> int:
    """Upsert items into a container, logging the ones that fail."""
    count = 0
    for item in items:
        try:
            container.upsert_item(item)
            count += 1
        except CosmosHttpResponseError as e:
            logger.error(f"Failed to upsert item {item.get('id')}: {e}")
    return count


def main() -> int:
    """Populate Cosmos DB with rental sample data."""
    logger.info("=" * 60)
    logger.info("Rental Returns - Cosmos DB Population Script")
    logger.info("=" * 60)
    logger.info(f"Endpoint: {COSMOS_ENDPOINT}")
    logger.info(f"Database: {DATABASE_NAME}")
    logger.info("Authentication: AzureCliCredential")

    credential = AzureCliCredential()
    client = CosmosClient(COSMOS_ENDPOINT, credential=credential)

    logger.info(f"Connecting to database '{DATABASE_NAME}'...")
    try:
        database = client.create_database_if_not_exists(DATABASE_NAME)
    except CosmosHttpResponseError as e:
        logger.error(f"Database '{DATABASE_NAME}' not available or access denied: {e}")
        logger.error("Please create the database first or check RBAC permissions")
        return 1

    data_sets = [
        ("movies", MOVIES),
        ("customers", CUSTOMERS),
        ("users", USERS),
        ("rentals", prepare_rentals()),
    ]

    logger.info("--- Populating Rental Data ---")
    total_items = 0
    for key, items in data_sets:
        container_name, partition_key = RENTAL_CONTAINERS[key]
        container = database.create_container_if_not_exists(
            id=container_name,
            partition_key=PartitionKey(path=partition_key),
        )
        count = upsert_items(container, items)
        logger.info(f"  {container_name}: {count}/{len(items)} items")
        total_items += count

    logger.info("=" * 60)
    logger.info(f"COMPLETE: {total_items} total items populated across {len(data_sets)} containers")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
