"""
Payment schemas for request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.schemas.cheque import ChequeData, ChequeResponse
from app.schemas.customer import CustomerSummary
from app.models.payment import PaymentMethod, PaymentStatus


class CardData(BaseSchema):
    card_brand: str | None = Field(None, max_length=30)
    last_four_digits: str | None = Field(None, pattern=r"^\d{4}$")
    installments: int | None = Field(None, ge=1)
    auth_code: str | None = Field(None, max_length=50)
    fee: Decimal | None = Field(None, ge=0)


class TransferData(BaseSchema):
    bank_from: str | None = Field(None, max_length=100)
    bank_to: str | None = Field(None, max_length=100)
    cvu: str | None = Field(None, max_length=30)
    alias: str | None = Field(None, max_length=50)


class PaymentCreate(BaseSchema):
    """Schema for registering a payment."""

    customer_id: int
    sale_id: int | None = None
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    method: PaymentMethod
    payment_date: date | None = None
    reference: str | None = Field(None, max_length=255)
    notes: str | None = None
    cheque: ChequeData | None = None
    card: CardData | None = None
    transfer: TransferData | None = None


class PaymentResponse(BaseSchema):
    """Payment response schema."""

    id: int
    payment_number: str
    customer_id: int
    customer: CustomerSummary
    sale_id: int | None
    amount: Decimal
    method: PaymentMethod
    status: PaymentStatus
    payment_date: date
    reference: str | None
    notes: str | None
    cheque_id: int | None
    cheque: ChequeResponse | None
    card_brand: str | None
    last_four_digits: str | None
    installments: int | None
    auth_code: str | None
    fee: Decimal | None
    net_amount: Decimal | None
    bank_from: str | None
    bank_to: str | None
    cvu: str | None
    alias: str | None
    created_at: datetime
    updated_at: datetime


class PaymentListResponse(PageSchema):
    items: list[PaymentResponse]


class PaymentMethodStats(BaseSchema):
    method: PaymentMethod
    count: int
    total: Decimal
