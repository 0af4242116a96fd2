"""
AFIP invoicing schemas.
"""

from datetime import date
from typing import Any

from app.schemas.base import BaseSchema


class InvoiceResult(BaseSchema):
    sale_id: int
    invoice_number: int
    full_number: str
    auth_code: str
    auth_code_expiry: date | None


class VoucherStatus(BaseSchema):
    sale_id: int
    invoiced: bool
    full_number: str | None = None
    auth_code: str | None = None
    voucher: dict[str, Any] | None = None
