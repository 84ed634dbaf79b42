"""
Product repository for product-specific data access operations.
"""

from typing import Optional
from sqlalchemy.orm import Session

from models import Product
from .base_repository import GenericRepository
from .product_specifications import ProductByIdSpec


class ProductRepository(GenericRepository[Product]):
    """Repository for Product model operations."""

    def __init__(self, db: Session):
        super().__init__(db, Product)

    def get_by_id(self, product_id: str, track: bool = False) -> Optional[Product]:
        """
        Get a non-deleted product by id.

        Args:
            product_id: Product UUID
            track: Keep the product attached to the session (for updates)

        Returns:
            Product instance or None if not found
        """
        return self.first_or_default(ProductByIdSpec(product_id, as_no_tracking=not track))
