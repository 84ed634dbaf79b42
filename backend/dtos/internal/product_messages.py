"""
Internal Product DTOs

Commands and queries passed from the API layer to the product handlers.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class CreateProductCommand:
    """
    Internal DTO for creating a product.

    Carries the raw values; the create handler validates them.
    """

    name: str
    price: Decimal
    stock: int
    created_by: Optional[str] = None


@dataclass(frozen=True)
class ProductGetByIdQuery:
    """Internal DTO for looking up one product."""

    product_id: str
