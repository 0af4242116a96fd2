"""
Current account (cuenta corriente) ledger.
Each row stores the customer's running balance after the movement.
"""

from typing import Optional
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import String, Text, ForeignKey, Integer, Numeric, Date, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class MovementType(str, Enum):
    """Debit (debe) raises the debt, credit (haber) lowers it."""
    DEBIT = "debit"
    CREDIT = "credit"


class CurrentAccountItem(BaseModel):
    """
    Ledger row.

    Attributes:
        customer_id: Account owner
        type: Debit or credit
        concept: Human readable concept, e.g. "Venta V-00000012"
        amount: Positive amount of the movement
        balance: Running balance after this movement
        reference: Number of the originating document
    """

    __tablename__ = "current_account_items"

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type: Mapped[MovementType] = mapped_column(
        SQLEnum(MovementType),
        nullable=False,
    )
    concept: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    reference: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    movement_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    sale_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("sales.id", ondelete="SET NULL"),
        nullable=True,
    )
    payment_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
    )
    credit_note_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("credit_notes.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == MovementType.DEBIT else -self.amount

    def __repr__(self) -> str:
        return f"<CurrentAccountItem(id={self.id}, type='{self.type}', balance={self.balance})>"
