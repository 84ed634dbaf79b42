"""
Repository layer for data access abstraction.

This package contains the specification model, the evaluator that turns
specifications into queries, the generic repository, and the unit of work
that groups repositories under one transactional session.
"""

from .specifications import Specification
from .specification_evaluator import get_query
from .base_repository import GenericRepository
from .product_repository import ProductRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "Specification",
    "get_query",
    "GenericRepository",
    "ProductRepository",
    "UnitOfWork",
]
