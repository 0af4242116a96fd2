"""
Quote (presupuesto) model.
A quote can be converted into a confirmed sale.
"""

from typing import Optional, List, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import String, Text, ForeignKey, Integer, Numeric, Date, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, LineItemMixin

if TYPE_CHECKING:
    from app.models.customer import Customer


class QuoteStatus(str, Enum):
    """Quote status enumeration."""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CONVERTED = "converted"  # A sale was created from it


class Quote(BaseModel):
    """
    Quote model.

    Attributes:
        quote_number: Unique number, P-00000001
        customer_id: Customer the quote is addressed to
        quote_date: Issue date
        valid_until: Expiration date
        subtotal: Total before IVA
        tax_amount: Total IVA
        total: Grand total
    """

    __tablename__ = "quotes"

    quote_number: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
    )
    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[QuoteStatus] = mapped_column(
        SQLEnum(QuoteStatus),
        default=QuoteStatus.SENT,
        nullable=False,
    )
    quote_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    valid_until: Mapped[date] = mapped_column(
        Date,
        nullable=False,
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

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    terms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped["Customer"] = relationship(
        "Customer",
        lazy="selectin",
    )
    items: Mapped[List["QuoteItem"]] = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="QuoteItem.id",
    )

    @property
    def is_expired(self) -> bool:
        """Sent quotes past their validity date."""
        return self.status == QuoteStatus.SENT and date.today() > self.valid_until

    @property
    def can_convert(self) -> bool:
        return self.status in (QuoteStatus.DRAFT, QuoteStatus.SENT, QuoteStatus.ACCEPTED)

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, number='{self.quote_number}', total={self.total})>"


class QuoteItem(BaseModel, LineItemMixin):
    """Quote line item."""

    __tablename__ = "quote_items"

    quote_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    quote: Mapped["Quote"] = relationship(
        "Quote",
        back_populates="items",
    )
