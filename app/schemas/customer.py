"""
Customer schemas for request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, PageSchema
from app.models.enums import CustomerType


class CustomerBase(BaseSchema):
    """Base customer schema with common fields."""

    business_name: str = Field(..., min_length=2, max_length=255)
    tax_id: str | None = Field(None, max_length=20, description="CUIT/CUIL")
    customer_type: CustomerType = CustomerType.CONSUMIDOR_FINAL
    contact_name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    whatsapp: str | None = Field(None, max_length=50)
    address: str | None = None
    city: str | None = Field(None, max_length=100)
    province: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    credit_limit: Decimal | None = Field(None, ge=0)
    payment_terms: int | None = Field(None, ge=0, description="Días")
    price_list: str | None = Field(None, max_length=50)
    discount: Decimal = Field(default=Decimal("0.00"), ge=0, le=100)
    notes: str | None = None


class CustomerCreate(CustomerBase):
    """Schema for creating a new customer."""
    pass


class CustomerUpdate(BaseSchema):
    """Schema for updating a customer."""

    business_name: str | None = Field(None, min_length=2, max_length=255)
    tax_id: str | None = Field(None, max_length=20)
    customer_type: CustomerType | None = None
    contact_name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    whatsapp: str | None = Field(None, max_length=50)
    address: str | None = None
    city: str | None = Field(None, max_length=100)
    province: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    credit_limit: Decimal | None = Field(None, ge=0)
    payment_terms: int | None = Field(None, ge=0)
    price_list: str | None = Field(None, max_length=50)
    discount: Decimal | None = Field(None, ge=0, le=100)
    notes: str | None = None
    is_active: bool | None = None


class CustomerSummary(BaseSchema):
    """Customer data embedded in documents."""

    id: int
    business_name: str
    tax_id: str | None
    customer_type: CustomerType


class CustomerResponse(CustomerBase):
    """Customer response schema."""

    id: int
    is_active: bool
    current_balance: Decimal = Decimal("0.00")
    created_at: datetime
    updated_at: datetime


class CustomerDetailResponse(CustomerResponse):
    sales_count: int = 0
    quotes_count: int = 0
    movements_count: int = 0


class CustomerListResponse(PageSchema):
    """Paginated customer list response."""

    items: list[CustomerResponse]
