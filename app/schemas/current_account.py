"""
Current account schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import Field

from app.schemas.base import BaseSchema, PageSchema
from app.models.current_account import MovementType


class MovementCreate(BaseSchema):
    """Manual ledger movement."""

    customer_id: int
    type: MovementType
    concept: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    reference: str | None = Field(None, max_length=50)
    movement_date: date | None = None
    notes: str | None = None


class MovementResponse(BaseSchema):
    id: int
    customer_id: int
    type: MovementType
    concept: str
    amount: Decimal
    balance: Decimal
    reference: str | None
    movement_date: date
    notes: str | None
    sale_id: int | None
    payment_id: int | None
    credit_note_id: int | None
    created_at: datetime


class MovementListResponse(PageSchema):
    items: list[MovementResponse]
    current_balance: Decimal | None = None


class AccountStatement(BaseSchema):
    """Customer statement, newest movements first."""

    customer_id: int
    items: list[MovementResponse]
    current_balance: Decimal
    is_in_debt: bool
    is_in_credit: bool


class RecalculateResponse(BaseSchema):
    customer_id: int
    movements: int
    current_balance: Decimal
