"""
Product schemas for request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.models.enums import IvaType


class ProductBase(BaseSchema):
    """Base product schema with common fields."""

    name: str = Field(..., min_length=2, max_length=255)
    internal_code: str | None = Field(None, max_length=100)
    description: str | None = None
    unit: str = Field(default="unidad", max_length=30)
    cost_usd: Decimal | None = Field(None, ge=0, decimal_places=2)
    iva_type: IvaType = IvaType.IVA_21
    stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    location: str | None = Field(None, max_length=100)
    category_id: int | None = None


class ProductCreate(ProductBase):
    """
    Schema for creating a new product.

    When ``price`` is omitted it is derived from ``cost_usd``, the markup and
    the configured exchange rate.
    """

    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    markup_percentage: Decimal | None = Field(None, ge=0)


class ProductUpdate(BaseSchema):
    """Schema for updating a product."""

    name: str | None = Field(None, min_length=2, max_length=255)
    internal_code: str | None = Field(None, max_length=100)
    description: str | None = None
    unit: str | None = Field(None, max_length=30)
    cost_usd: Decimal | None = Field(None, ge=0, decimal_places=2)
    markup_percentage: Decimal | None = Field(None, ge=0)
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    iva_type: IvaType | None = None
    min_stock: int | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=100)
    category_id: int | None = None
    is_active: bool | None = None


class ProductResponse(ProductBase):
    """Product response schema."""

    id: int
    price: Decimal
    markup_percentage: Decimal
    price_with_iva: Decimal
    is_active: bool
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime


class ProductListResponse(PageSchema):
    """Paginated product list response."""

    items: list[ProductResponse]


class StockUpdateRequest(BaseSchema):
    """Schema for adjusting product stock."""

    quantity: int = Field(..., description="Cantidad a sumar (positiva) o restar (negativa)")
    reason: str | None = Field(None, max_length=255, description="Motivo del ajuste")
