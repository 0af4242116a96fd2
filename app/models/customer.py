"""
Customer model.
"""

from typing import Optional
from decimal import Decimal
from sqlalchemy import String, Text, Boolean, Integer, Numeric, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel
from app.models.enums import CustomerType


class Customer(BaseModel):
    """
    Customer with its fiscal condition and credit terms.

    Attributes:
        business_name: Razón social or full name
        tax_id: CUIT/CUIL formatted as XX-XXXXXXXX-X
        customer_type: IVA condition, decides the invoice letter
        credit_limit: Maximum allowed debt in the current account
        payment_terms: Payment terms in days
        price_list: Price list name
        discount: Default discount percentage
    """

    __tablename__ = "customers"

    business_name: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
    )
    tax_id: Mapped[Optional[str]] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=True,
    )
    customer_type: Mapped[CustomerType] = mapped_column(
        SQLEnum(CustomerType),
        default=CustomerType.CONSUMIDOR_FINAL,
        nullable=False,
    )

    # Contact
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    whatsapp: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Address
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    province: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Credit terms
    credit_limit: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
    )
    payment_terms: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    price_list: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    discount: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, business_name='{self.business_name}')>"
