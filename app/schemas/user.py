"""
User schemas for request/response validation.
"""

from datetime import datetime
from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, PageSchema
from app.models.user import UserRole


class UserUpdate(BaseSchema):
    """Schema for updating one's own profile."""

    full_name: str | None = Field(None, min_length=2, max_length=255)


class UserAdminUpdate(UserUpdate):
    """Schema for administrators updating any user."""

    role: UserRole | None = None
    is_active: bool | None = None


class PasswordChangeRequest(BaseSchema):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserResponse(BaseSchema):
    """User response schema (public data)."""

    id: int
    email: EmailStr
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(PageSchema):
    items: list[UserResponse]
