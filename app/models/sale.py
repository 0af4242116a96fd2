"""
Sale (venta) model.
Carries the fiscal header filled when the sale is invoiced through AFIP.
"""

from typing import Optional, List, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import (
    String,
    Text,
    ForeignKey,
    Integer,
    Numeric,
    Date,
    Boolean,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, LineItemMixin
from app.models.enums import InvoiceType

if TYPE_CHECKING:
    from app.models.customer import Customer


class SaleStatus(str, Enum):
    """Sale status enumeration."""
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Sale(BaseModel):
    """
    Sale model.

    Attributes:
        sale_number: Unique number, V-00000001
        customer_id: Buyer
        quote_id: Quote the sale was created from, if any
        is_white_invoice: Whether the sale is invoiced fiscally
        invoice_type: Voucher letter decided by the customer category
        point_of_sale: AFIP point of sale
        invoice_number: AFIP voucher number once invoiced
        full_number: Printable voucher number, e.g. B-0001-00000123
        auth_code: CAE returned by AFIP
        auth_code_expiry: CAE due date
        taxed_amount: Neto gravado
        non_taxed_amount: No gravado
        exempt_amount: Exento
        tax_amount: IVA
        gross_income_perception: Percepción de Ingresos Brutos
    """

    __tablename__ = "sales"

    sale_number: Mapped[str] = mapped_column(
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
    quote_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("quotes.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[SaleStatus] = mapped_column(
        SQLEnum(SaleStatus),
        default=SaleStatus.CONFIRMED,
        nullable=False,
    )
    is_white_invoice: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    sale_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    delivery_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    # Fiscal header
    invoice_type: Mapped[InvoiceType] = mapped_column(
        SQLEnum(InvoiceType),
        default=InvoiceType.FACTURA_B,
        nullable=False,
    )
    point_of_sale: Mapped[str] = mapped_column(
        String(5),
        default="0001",
        nullable=False,
    )
    invoice_number: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    full_number: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
    )
    auth_code: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )
    auth_code_expiry: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    # Amounts
    taxed_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    non_taxed_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    exempt_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    gross_income_perception: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    discount_amount: Mapped[Decimal] = mapped_column(
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
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pdf_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    customer: Mapped["Customer"] = relationship(
        "Customer",
        lazy="selectin",
    )
    items: Mapped[List["SaleItem"]] = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SaleItem.id",
    )

    @property
    def is_invoiced(self) -> bool:
        return self.auth_code is not None

    def __repr__(self) -> str:
        return f"<Sale(id={self.id}, number='{self.sale_number}', total={self.total})>"


class SaleItem(BaseModel, LineItemMixin):
    """Sale line item."""

    __tablename__ = "sale_items"

    sale_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sales.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sale: Mapped["Sale"] = relationship(
        "Sale",
        back_populates="items",
    )
