"""
Cheque schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.models.cheque import ChequeStatus


class ChequeData(BaseSchema):
    """Cheque received with a payment."""

    cheque_number: str | None = Field(None, max_length=50)
    bank: str | None = Field(None, max_length=100)
    branch: str | None = Field(None, max_length=100)
    issue_date: date | None = None
    due_date: date | None = None
    issuer: str | None = Field(None, max_length=255)
    issuer_cuit: str | None = Field(None, max_length=20)


class ChequeStatusUpdate(BaseSchema):
    """Status change with the data each target status needs."""

    status: ChequeStatus
    deposit_date: date | None = None
    deposit_bank: str | None = Field(None, max_length=100)
    endorsed_date: date | None = None
    endorsed_to: str | None = Field(None, max_length=255)
    rejection_reason: str | None = None
    notes: str | None = None


class ChequeResponse(BaseSchema):
    id: int
    cheque_number: str
    bank: str
    branch: str | None
    amount: Decimal
    issue_date: date | None
    due_date: date
    issuer: str
    issuer_cuit: str | None
    status: ChequeStatus
    deposit_date: date | None
    deposit_bank: str | None
    endorsed_date: date | None
    endorsed_to: str | None
    rejection_reason: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


class ChequeListResponse(PageSchema):
    items: list[ChequeResponse]
