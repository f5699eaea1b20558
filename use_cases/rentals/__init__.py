"""
Rental Returns Use Case.

Closes out movie rentals: validates the return command, finds the open
rental, computes the fee, persists the closed rental and credits one copy
back to the movie's stock.

Components:
- ReturnProcessor: the return workflow
- domain/: Rental entity, fee calculation, input validation, error kinds
- data/: Rental and inventory stores (Cosmos DB and in-memory)

Usage:
    from use_cases.rentals import ReturnProcessor
    from use_cases.rentals.data import InMemoryRentalStore, InMemoryInventoryStore

    processor = ReturnProcessor(InMemoryRentalStore(), InMemoryInventoryStore())
    rental = processor.process_return(principal, customer_id, movie_id)
"""

from use_cases.rentals.processor import ReturnProcessor

__all__ = [
    "ReturnProcessor",
]
