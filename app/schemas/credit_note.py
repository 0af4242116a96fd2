"""
Credit note schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.schemas.customer import CustomerSummary
from app.schemas.line_item import LineItemCreate, LineItemResponse
from app.models.enums import InvoiceType
from app.models.credit_note import CreditNoteReason, CreditNoteStatus


class CreditNoteCreate(BaseSchema):
    customer_id: int
    original_sale_id: int | None = None
    reason: CreditNoteReason
    description: str = Field(..., min_length=1)
    notes: str | None = None
    issue_date: date | None = None
    items: list[LineItemCreate] = Field(..., min_length=1)


class CreditNoteResponse(BaseSchema):
    id: int
    credit_note_number: str
    type: InvoiceType
    status: CreditNoteStatus
    reason: CreditNoteReason
    description: str
    notes: str | None
    issue_date: date
    customer_id: int
    customer: CustomerSummary
    original_sale_id: int | None
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    items: list[LineItemResponse]
    created_at: datetime
    updated_at: datetime


class CreditNoteListResponse(PageSchema):
    items: list[CreditNoteResponse]
