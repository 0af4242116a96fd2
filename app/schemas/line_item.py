"""
Line item schemas shared by quotes, sales and credit notes.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema
from app.models.enums import IvaType


class LineItemCreate(BaseSchema):
    """
    Line sent by the client.

    Only the product, quantity and discount are required; price, description
    and IVA default to the product's values.
    """

    product_id: int | None = None
    description: str | None = Field(None, max_length=500)
    quantity: int = Field(default=1, gt=0)
    unit_price: Decimal | None = Field(None, ge=0, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0.00"), ge=0, le=100)
    iva_type: IvaType | None = None


class LineItemResponse(BaseSchema):
    id: int
    product_id: int | None
    description: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    iva_type: IvaType
    subtotal: Decimal
    iva_amount: Decimal
    total_amount: Decimal
    created_at: datetime
