"""
Core Framework for the Rental Service.

This module provides the base classes and interfaces that use cases
build on. The layered architecture ensures:

1. Domain Layer - Pure business rules, no I/O
2. Data Layer - Repository pattern for data access

Orchestration (the workflows that touch stores) lives with each use case.
"""

from .domain import DomainService, Validator, ValidationError
from .data import Repository

__all__ = [
    # Domain
    "DomainService",
    "Validator",
    "ValidationError",
    # Data
    "Repository",
]
