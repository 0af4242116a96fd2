"""
Quote schemas for request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.schemas.customer import CustomerSummary
from app.schemas.line_item import LineItemCreate, LineItemResponse
from app.models.quote import QuoteStatus


class QuoteCreate(BaseSchema):
    """Schema for creating a quote."""

    customer_id: int
    quote_date: date | None = None
    valid_until: date | None = Field(None, description="Por defecto, 30 días")
    status: QuoteStatus = QuoteStatus.SENT
    notes: str | None = None
    terms: str | None = None
    items: list[LineItemCreate] = Field(..., min_length=1)


class QuoteUpdate(BaseSchema):
    """Schema for updating a draft or sent quote."""

    customer_id: int | None = None
    quote_date: date | None = None
    valid_until: date | None = None
    notes: str | None = None
    terms: str | None = None
    items: list[LineItemCreate] | None = Field(None, min_length=1)


class QuoteStatusUpdate(BaseSchema):
    status: QuoteStatus


class QuoteResponse(BaseSchema):
    """Quote response schema."""

    id: int
    quote_number: str
    customer_id: int
    customer: CustomerSummary
    status: QuoteStatus
    quote_date: date
    valid_until: date
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    notes: str | None
    terms: str | None
    is_expired: bool
    can_convert: bool
    items: list[LineItemResponse]
    created_at: datetime
    updated_at: datetime


class QuoteListResponse(PageSchema):
    """Paginated quote list response."""

    items: list[QuoteResponse]
