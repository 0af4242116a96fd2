"""
Category schemas.
"""

from datetime import datetime
from pydantic import Field

from app.schemas.base import BaseSchema
from app.models.category import CategoryType


class CategoryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    type: CategoryType = CategoryType.OTRO
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    icon: str | None = Field(None, max_length=50)
    parent_id: int | None = None


class CategoryUpdate(BaseSchema):
    name: str | None = Field(None, min_length=1, max_length=100)
    type: CategoryType | None = None
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    icon: str | None = Field(None, max_length=50)
    parent_id: int | None = None
    is_active: bool | None = None


class CategoryResponse(BaseSchema):
    id: int
    name: str
    slug: str
    type: CategoryType
    description: str | None
    color: str | None
    icon: str | None
    parent_id: int | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryTreeNode(CategoryResponse):
    """Category with its nested children."""

    children: list["CategoryTreeNode"] = Field(default_factory=list)
