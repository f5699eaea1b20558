"""
Use Cases Package.

Each use case is a self-contained module with its own domain rules,
data access and orchestration.

Available use cases:
- rentals: Movie rental returns (fee computation and stock credit)

Architecture:
Each use case follows the layered architecture pattern defined in core/:
- domain/: Pure business logic (entities, policies, services, errors)
- data/: Repository pattern for data access
- processor.py: Orchestration that wires domain services to the stores
"""

from use_cases.rentals import ReturnProcessor

__all__ = [
    "ReturnProcessor",
]
