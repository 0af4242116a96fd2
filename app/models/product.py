"""
Product model for stock and pricing.
Prices are kept in ARS before IVA and may be derived from a USD cost.
"""

from typing import Optional
from decimal import Decimal
from sqlalchemy import String, Text, ForeignKey, Integer, Numeric, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel
from app.models.enums import IvaType


class Product(BaseModel):
    """
    Product model.

    Attributes:
        name: Product name
        internal_code: Internal SKU, unique when present
        cost_usd: Import cost in USD
        markup_percentage: Markup applied over the ARS cost
        price: Sale price in ARS before IVA
        iva_type: IVA aliquot used when the product is sold
        stock: Units available
        min_stock: Low-stock alert threshold
        category_id: Optional category
        is_active: Whether the product is available for sale
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
    )
    internal_code: Mapped[Optional[str]] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    unit: Mapped[str] = mapped_column(
        String(30),
        default="unidad",
        nullable=False,
    )

    # Pricing
    cost_usd: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
    )
    markup_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=6, scale=2),
        default=Decimal("30.00"),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    iva_type: Mapped[IvaType] = mapped_column(
        SQLEnum(IvaType),
        default=IvaType.IVA_21,
        nullable=False,
    )

    # Stock
    stock: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    min_stock: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    location: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def price_with_iva(self) -> Decimal:
        from app.core.fiscal import calculate_price_with_iva
        return calculate_price_with_iva(self.price, self.iva_type)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
