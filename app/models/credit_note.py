"""
Credit note (nota de crédito) model.
"""

from typing import Optional, List, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import String, Text, ForeignKey, Integer, Numeric, Date, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, LineItemMixin
from app.models.enums import InvoiceType

if TYPE_CHECKING:
    from app.models.customer import Customer


class CreditNoteStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    APPLIED = "applied"
    VOIDED = "voided"


class CreditNoteReason(str, Enum):
    RETURN = "return"
    DISCOUNT = "discount"
    PRICE_ADJUSTMENT = "price_adjustment"
    CANCELLATION = "cancellation"
    OTHER = "other"


# Reasons that put the goods back in stock
STOCK_RESTORING_REASONS = (CreditNoteReason.RETURN, CreditNoteReason.CANCELLATION)


class CreditNote(BaseModel):
    """
    Credit note issued to a customer, optionally against a sale.

    Attributes:
        credit_note_number: Unique number, NC-00000001
        type: NOTA_CREDITO_A or NOTA_CREDITO_B
        original_sale_id: Sale being credited
    """

    __tablename__ = "credit_notes"

    credit_note_number: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
    )
    type: Mapped[InvoiceType] = mapped_column(
        SQLEnum(InvoiceType),
        nullable=False,
    )
    status: Mapped[CreditNoteStatus] = mapped_column(
        SQLEnum(CreditNoteStatus),
        default=CreditNoteStatus.ISSUED,
        nullable=False,
    )
    reason: Mapped[CreditNoteReason] = mapped_column(
        SQLEnum(CreditNoteReason),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    original_sale_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("sales.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    total: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    customer: Mapped["Customer"] = relationship(
        "Customer",
        lazy="selectin",
    )
    items: Mapped[List["CreditNoteItem"]] = relationship(
        "CreditNoteItem",
        back_populates="credit_note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CreditNoteItem.id",
    )

    def __repr__(self) -> str:
        return f"<CreditNote(id={self.id}, number='{self.credit_note_number}', total={self.total})>"


class CreditNoteItem(BaseModel, LineItemMixin):
    """Credit note line item."""

    __tablename__ = "credit_note_items"

    credit_note_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("credit_notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    credit_note: Mapped["CreditNote"] = relationship(
        "CreditNote",
        back_populates="items",
    )
