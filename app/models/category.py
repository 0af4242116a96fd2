"""
Product categories (brands, types, rubros, materials).
"""

from typing import Optional, List
from enum import Enum
from sqlalchemy import String, Text, Boolean, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class CategoryType(str, Enum):
    MARCA = "marca"
    TIPO = "tipo"
    RUBRO = "rubro"
    MATERIAL = "material"
    OTRO = "otro"


class Category(BaseModel):
    """Category, optionally nested under a parent."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(120),
        unique=True,
        index=True,
        nullable=False,
    )
    type: Mapped[CategoryType] = mapped_column(
        SQLEnum(CategoryType),
        default=CategoryType.OTRO,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    children: Mapped[List["Category"]] = relationship(
        "Category",
        back_populates="parent",
        lazy="selectin",
        join_depth=3,
        order_by="Category.name",
    )
    parent: Mapped[Optional["Category"]] = relationship(
        "Category",
        back_populates="children",
        remote_side="Category.id",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}', type='{self.type}')>"
