"""
Cheque model.
"""

from typing import Optional, List, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import String, Text, Numeric, Date, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.payment import Payment


class ChequeStatus(str, Enum):
    """Cheque status enumeration."""
    PENDING = "pending"  # In portfolio
    DEPOSITED = "deposited"
    ENDORSED = "endorsed"
    REJECTED = "rejected"


# Allowed status changes
CHEQUE_TRANSITIONS: dict[ChequeStatus, tuple[ChequeStatus, ...]] = {
    ChequeStatus.PENDING: (
        ChequeStatus.DEPOSITED,
        ChequeStatus.ENDORSED,
        ChequeStatus.REJECTED,
    ),
    ChequeStatus.DEPOSITED: (ChequeStatus.REJECTED,),
    ChequeStatus.ENDORSED: (),
    ChequeStatus.REJECTED: (),
}


class Cheque(BaseModel):
    """
    Cheque received from a customer.

    Attributes:
        cheque_number: Number printed on the cheque
        bank: Issuing bank
        due_date: Fecha de cobro
        issuer: Librador
        issuer_cuit: CUIT of the issuer
        status: Portfolio status
    """

    __tablename__ = "cheques"

    cheque_number: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
    )
    bank: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    branch: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    due_date: Mapped[date] = mapped_column(
        Date,
        index=True,
        nullable=False,
    )
    issuer: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    issuer_cuit: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    status: Mapped[ChequeStatus] = mapped_column(
        SQLEnum(ChequeStatus),
        default=ChequeStatus.PENDING,
        nullable=False,
    )

    deposit_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    deposit_bank: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    endorsed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    endorsed_to: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    payments: Mapped[List["Payment"]] = relationship(
        "Payment",
        back_populates="cheque",
    )

    def can_transition_to(self, new_status: ChequeStatus) -> bool:
        return new_status in CHEQUE_TRANSITIONS[self.status]

    def __repr__(self) -> str:
        return f"<Cheque(id={self.id}, number='{self.cheque_number}', status='{self.status}')>"
