"""
Product Response DTOs

DTOs for product-related API responses. Field names follow the public
camelCase contract (isDeleted, createDate, ...) when serialized.
"""

from pydantic import BaseModel, Field, field_serializer
from datetime import datetime
from decimal import Decimal
from typing import Optional


class ProductResponse(BaseModel):
    """
    Response DTO for product information.

    Built from a loaded Product with model_validate; soft-deleted products
    never reach it because lookups exclude them.
    """

    id: str = Field(description="Product ID")
    name: str = Field(description="Product name")
    price: Decimal = Field(description="Unit price")
    stock: int = Field(description="Units in stock")
    is_deleted: bool = Field(False, serialization_alias="isDeleted", description="Soft-delete flag")
    created_at: datetime = Field(serialization_alias="createDate", description="Creation timestamp")
    created_by: Optional[str] = Field(None, serialization_alias="createdBy", description="Creator")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updateDate", description="Last update timestamp")
    updated_by: Optional[str] = Field(None, serialization_alias="updateBy", description="Last updater")

    class Config:
        """Pydantic configuration."""
        from_attributes = True  # Allow creation from ORM models

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)
