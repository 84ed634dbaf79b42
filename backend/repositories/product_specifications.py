"""
Product-specific Specifications

Concrete specifications for querying products.
"""

from decimal import Decimal
from typing import Optional
from sqlalchemy import and_
from models import Product
from .specifications import Specification


class ProductByIdSpec(Specification[Product]):
    """
    Specification for a single product by id.

    Soft-deleted rows are excluded by the evaluator, as for every
    specification that does not opt in with include_deleted.

    Defaults to a read-only lookup: the product is not tracked by the session.
    """

    def __init__(self, product_id: str, as_no_tracking: bool = True, as_split_query: bool = True):
        super().__init__(Product.id == product_id)
        self.product_id = product_id
        if as_no_tracking:
            self._apply_as_no_tracking()
        if as_split_query:
            self._apply_as_split_query()


class ProductsByPriceRangeSpec(Specification[Product]):
    """Specification for products within a price range, cheapest first."""

    def __init__(self, min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None):
        """
        Initialize specification.

        Args:
            min_price: Minimum price, inclusive (None for no minimum)
            max_price: Maximum price, inclusive (None for no maximum)
        """
        filters = []
        if min_price is not None:
            filters.append(Product.price >= min_price)
        if max_price is not None:
            filters.append(Product.price <= max_price)
        super().__init__(and_(*filters) if filters else None)
        self._apply_order_by(Product.price)


class ProductsInStockSpec(Specification[Product]):
    """Specification for products with stock on hand."""

    def __init__(self, min_stock: int = 1):
        super().__init__(Product.stock >= min_stock)


class ProductPageSpec(Specification[Product]):
    """One page of the catalog ordered by name."""

    def __init__(self, page: int = 1, page_size: int = 20, include_deleted: bool = False):
        """
        Initialize specification.

        Args:
            page: 1-based page number
            page_size: Products per page

        Raises:
            ValueError: If page or page_size is below 1
        """
        super().__init__()
        if page < 1:
            raise ValueError("page must be at least 1")
        self._apply_order_by(Product.name)
        self._apply_paging((page - 1) * page_size, page_size)
        self._apply_as_no_tracking()
        if include_deleted:
            self._apply_include_deleted()


# Example usage:
"""
from repositories.product_specifications import ProductsByPriceRangeSpec, ProductsInStockSpec

# Composed specifications using AND
spec = ProductsByPriceRangeSpec(max_price=Decimal('50')) & ProductsInStockSpec()
affordable_in_stock = uow.products.list(spec)

# Narrowing without touching the shared instance
cheap_spec = ProductsByPriceRangeSpec(max_price=Decimal('10'))
cheap_widgets = uow.products.list(cheap_spec.where(Product.name.like('Widget%')))
"""
