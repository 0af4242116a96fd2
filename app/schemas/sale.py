"""
Sale schemas for request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.schemas.customer import CustomerSummary
from app.schemas.line_item import LineItemCreate, LineItemResponse
from app.models.enums import InvoiceType
from app.models.sale import SaleStatus


class SaleCreate(BaseSchema):
    """Schema for creating a sale."""

    customer_id: int
    quote_id: int | None = None
    status: SaleStatus = Field(
        default=SaleStatus.CONFIRMED,
        description="Solo draft o confirmed",
    )
    is_white_invoice: bool = True
    sale_date: date | None = None
    point_of_sale: str | None = Field(None, pattern=r"^\d{1,5}$")
    gross_income_perception: Decimal = Field(default=Decimal("0.00"), ge=0)
    notes: str | None = None
    internal_notes: str | None = None
    items: list[LineItemCreate] = Field(..., min_length=1)


class SaleUpdate(BaseSchema):
    """Schema for updating a draft sale."""

    customer_id: int | None = None
    is_white_invoice: bool | None = None
    sale_date: date | None = None
    point_of_sale: str | None = Field(None, pattern=r"^\d{1,5}$")
    gross_income_perception: Decimal | None = Field(None, ge=0)
    notes: str | None = None
    internal_notes: str | None = None
    items: list[LineItemCreate] | None = Field(None, min_length=1)


class SaleResponse(BaseSchema):
    """Sale response schema."""

    id: int
    sale_number: str
    customer_id: int
    customer: CustomerSummary
    quote_id: int | None
    status: SaleStatus
    is_white_invoice: bool
    sale_date: date
    delivery_date: date | None
    invoice_type: InvoiceType
    point_of_sale: str
    invoice_number: int | None
    full_number: str | None
    auth_code: str | None
    auth_code_expiry: date | None
    taxed_amount: Decimal
    non_taxed_amount: Decimal
    exempt_amount: Decimal
    tax_amount: Decimal
    gross_income_perception: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    notes: str | None
    internal_notes: str | None
    is_invoiced: bool
    items: list[LineItemResponse]
    created_at: datetime
    updated_at: datetime


class SaleListResponse(PageSchema):
    """Paginated sale list response."""

    items: list[SaleResponse]
