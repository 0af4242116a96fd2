"""
Payment model for customer collections.
Card and transfer details are stored inline; cheques have their own table.
"""

from typing import Optional, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import String, Text, ForeignKey, Integer, Numeric, Date, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.customer import Customer
    from app.models.cheque import Cheque


class PaymentMethod(str, Enum):
    """Payment method enumeration."""
    CASH = "cash"
    CHEQUE = "cheque"
    TRANSFER = "transfer"
    QR = "qr"
    DEBIT = "debit"
    CREDIT = "credit"
    OTHER = "other"


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


CARD_METHODS = (PaymentMethod.DEBIT, PaymentMethod.CREDIT)
TRANSFER_METHODS = (PaymentMethod.TRANSFER, PaymentMethod.QR)


class Payment(BaseModel):
    """
    Payment model.

    Attributes:
        payment_number: Unique number, PAG-000001
        customer_id: Paying customer
        sale_id: Optional sale the payment settles
        amount: Amount received
        method: Payment method
        status: Payment status
        cheque_id: Cheque received, for cheque payments
        fee: Card processing fee
        net_amount: Amount minus card fee
    """

    __tablename__ = "payments"

    payment_number: Mapped[str] = mapped_column(
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
    sale_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("sales.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    method: Mapped[PaymentMethod] = mapped_column(
        SQLEnum(PaymentMethod),
        nullable=False,
    )
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus),
        default=PaymentStatus.COMPLETED,
        nullable=False,
    )
    payment_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    cheque_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("cheques.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Card details
    card_brand: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    last_four_digits: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    installments: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    auth_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    fee: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
    )
    net_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
    )

    # Transfer details
    bank_from: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bank_to: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    cvu: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    alias: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    customer: Mapped["Customer"] = relationship(
        "Customer",
        lazy="selectin",
    )
    cheque: Mapped[Optional["Cheque"]] = relationship(
        "Cheque",
        back_populates="payments",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, number='{self.payment_number}', amount={self.amount})>"
