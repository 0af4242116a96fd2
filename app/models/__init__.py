"""
Database models module.
All SQLAlchemy models are exported from here for easy imports.
"""

from app.models.user import User, UserRole
from app.models.customer import Customer
from app.models.category import Category, CategoryType
from app.models.product import Product
from app.models.quote import Quote, QuoteItem, QuoteStatus
from app.models.sale import Sale, SaleItem, SaleStatus
from app.models.cheque import Cheque, ChequeStatus
from app.models.payment import Payment, PaymentMethod, PaymentStatus
from app.models.credit_note import CreditNote, CreditNoteItem, CreditNoteStatus, CreditNoteReason
from app.models.current_account import CurrentAccountItem, MovementType
from app.models.setting import AppSetting
from app.models.enums import CustomerType, InvoiceType, IvaType


__all__ = [
    "User",
    "UserRole",
    "Customer",
    "CustomerType",
    "Category",
    "CategoryType",
    "Product",
    "IvaType",
    "Quote",
    "QuoteItem",
    "QuoteStatus",
    "Sale",
    "SaleItem",
    "SaleStatus",
    "InvoiceType",
    "Cheque",
    "ChequeStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "CreditNote",
    "CreditNoteItem",
    "CreditNoteStatus",
    "CreditNoteReason",
    "CurrentAccountItem",
    "MovementType",
    "AppSetting",
]
