"""
Product Use-Case Handlers

One handler per use case. Each composes unit-of-work and repository calls
into a result for the API layer; neither knows about HTTP.
"""

from decimal import Decimal
from typing import Dict, List, Optional
import logging

from constants import ProductLimits, ResponseMessages
from dtos.internal.product_messages import CreateProductCommand, ProductGetByIdQuery
from dtos.response.product_response import ProductResponse
from exceptions import RepositoryError, ValidationError
from models import Product, utc_now
from repositories.product_specifications import ProductByIdSpec
from repositories.unit_of_work import UnitOfWork
from utils.logging_utils import log_operation

logger = logging.getLogger(__name__)


def _price_errors(price) -> List[str]:
    """Price must fit Numeric(PRICE_PRECISION, PRICE_SCALE) without rounding."""
    if price is None:
        return ["Price is required"]

    price = Decimal(price)
    if not price.is_finite():
        return ["Price must be a finite number"]

    errors = []
    if price < ProductLimits.MIN_PRICE:
        errors.append("Price must not be negative")

    integer_digits = ProductLimits.PRICE_PRECISION - ProductLimits.PRICE_SCALE
    if price != 0 and price.adjusted() >= integer_digits:
        errors.append(f"Price must have at most {integer_digits} digits before the decimal point")
    elif price != price.quantize(Decimal(1).scaleb(-ProductLimits.PRICE_SCALE)):
        errors.append(f"Price must have at most {ProductLimits.PRICE_SCALE} decimal places")
    return errors


def validate_create_product(command: CreateProductCommand) -> Dict[str, List[str]]:
    """
    Check the values of a create command.

    Returns:
        Mapping of field name to messages; empty when the command is valid
    """
    errors: Dict[str, List[str]] = {}

    if not command.name or not command.name.strip():
        errors.setdefault("name", []).append("Name must not be empty")
    elif len(command.name) > ProductLimits.NAME_MAX_LENGTH:
        errors.setdefault("name", []).append(
            f"Name must be at most {ProductLimits.NAME_MAX_LENGTH} characters"
        )

    errors_for_price = _price_errors(command.price)
    if errors_for_price:
        errors["price"] = errors_for_price

    if command.stock is None or command.stock < ProductLimits.MIN_STOCK:
        errors.setdefault("stock", []).append("Stock must not be negative")

    return errors


class CreateProductHandler:
    """Creates a product and returns its generated id."""

    def __init__(self, uow: UnitOfWork):
        if uow is None:
            raise RepositoryError("init", "A unit of work is required")
        self.uow = uow

    @log_operation("create_product")
    def handle(self, command: CreateProductCommand) -> str:
        """
        Validate, stage and save a new product.

        Args:
            command: Product values

        Returns:
            Id of the new product

        Raises:
            ValidationError: If name is blank or price/stock is negative
        """
        errors = validate_create_product(command)
        if errors:
            raise ValidationError(ResponseMessages.VALIDATION_FAILED, invalid_fields=errors)

        product = Product(
            name=command.name,
            price=command.price,
            stock=command.stock,
            created_at=utc_now(),
            created_by=command.created_by
        )
        product_id = product.id

        self.uow.products.add(product)
        self.uow.save_changes()

        logger.info(f"Created product {product_id} ({command.name})")
        return product_id


class GetProductByIdHandler:
    """Looks up one non-deleted product."""

    def __init__(self, uow: UnitOfWork):
        if uow is None:
            raise RepositoryError("init", "A unit of work is required")
        self.uow = uow

    @log_operation("get_product_by_id")
    def handle(self, query: ProductGetByIdQuery) -> Optional[ProductResponse]:
        """
        Returns:
            Product view, or None when no live product has that id
        """
        spec = ProductByIdSpec(query.product_id)
        product = self.uow.products.first_or_default(spec)
        if product is None:
            return None
        return ProductResponse.model_validate(product)
