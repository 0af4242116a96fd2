"""
Pydantic schemas for request/response validation.
"""

from app.schemas.base import MessageResponse
from app.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    SetupAdminRequest,
    TokenPair,
    RefreshTokenRequest,
)
from app.schemas.user import UserUpdate, UserAdminUpdate, UserResponse
from app.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from app.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from app.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from app.schemas.quote import QuoteCreate, QuoteUpdate, QuoteResponse
from app.schemas.sale import SaleCreate, SaleUpdate, SaleResponse
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.schemas.cheque import ChequeStatusUpdate, ChequeResponse
from app.schemas.credit_note import CreditNoteCreate, CreditNoteResponse
from app.schemas.current_account import MovementCreate, MovementResponse, AccountStatement

__all__ = [
    "MessageResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "SetupAdminRequest",
    "TokenPair",
    "RefreshTokenRequest",
    # User
    "UserUpdate",
    "UserAdminUpdate",
    "UserResponse",
    # Customer
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    # Category
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    # Product
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    # Quote
    "QuoteCreate",
    "QuoteUpdate",
    "QuoteResponse",
    # Sale
    "SaleCreate",
    "SaleUpdate",
    "SaleResponse",
    # Payment
    "PaymentCreate",
    "PaymentResponse",
    # Cheque
    "ChequeStatusUpdate",
    "ChequeResponse",
    # Credit note
    "CreditNoteCreate",
    "CreditNoteResponse",
    # Current account
    "MovementCreate",
    "MovementResponse",
    "AccountStatement",
]
