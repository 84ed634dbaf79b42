"""
Product Request DTOs

DTOs for product-related API requests.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from dtos.internal.product_messages import CreateProductCommand


class CreateProductRequest(BaseModel):
    """
    Request DTO for creating a product.

    Only type constraints are enforced here; value rules (non-blank name,
    non-negative price and stock) are checked by the create handler so the
    client receives them in the standard response envelope.
    """

    name: str = Field(description="Product name")
    price: Decimal = Field(description="Unit price")
    stock: int = Field(description="Units in stock")

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "name": "Test Product",
                "price": 100.50,
                "stock": 5
            }
        }

    def to_command(self) -> CreateProductCommand:
        return CreateProductCommand(name=self.name, price=self.price, stock=self.stock)
