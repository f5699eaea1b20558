"""
Data Layer Base Classes.

The data layer provides the Repository pattern for data access.
This abstracts away the specific data store (Cosmos DB, in-memory, etc.)
and provides a clean interface for the domain layer.

Key principles:
- Repositories handle persistence only
- No business logic in repositories
- Return domain objects, not raw dicts
- Support for different backends via dependency injection
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

# Type variable for entity types
T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Abstract base class for repositories.

    A Repository provides data access methods for a specific entity type.
    It abstracts the underlying data store and provides a consistent interface.

    Type parameter T represents the entity type this repository manages.

    Example:
        class CosmosRentalStore(Repository[Rental]):
            def get_by_id(self, id: str) -> Optional[Rental]:
                doc = self._container.read_item(id, id)
                return Rental.from_dict(doc) if doc else None
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """
        Get an entity by its ID.

        Args:
            id: The entity's unique identifier

        Returns:
            The entity if found, None otherwise
        """
        pass

    @abstractmethod
    def save(self, entity: T) -> T:
        """
        Save an entity.

        Args:
            entity: The entity to save

        Returns:
            The saved entity (may carry an updated concurrency token)
        """
        pass
