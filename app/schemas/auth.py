"""
Authentication schemas.
"""

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema


class LoginRequest(BaseSchema):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseSchema):
    """Registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=6, description="Mínimo 6 caracteres")
    full_name: str = Field(..., min_length=2, max_length=255)


class SetupAdminRequest(RegisterRequest):
    """First administrator bootstrap, guarded by the setup token."""

    setup_token: str = Field(..., min_length=1)


class TokenPair(BaseSchema):
    """Access and refresh token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseSchema):
    """Refresh token request schema."""

    refresh_token: str
