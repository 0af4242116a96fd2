"""
Dashboard schemas.
"""

from datetime import date
from decimal import Decimal

from app.schemas.base import BaseSchema
from app.models.sale import SaleStatus


class SalesStats(BaseSchema):
    month_total: Decimal
    month_count: int
    growth_percentage: float
    today_total: Decimal
    today_count: int


class CustomerStats(BaseSchema):
    active: int
    new_this_month: int
    total_debt: Decimal


class QuoteStats(BaseSchema):
    pending_count: int
    pending_total: Decimal


class ChequeStats(BaseSchema):
    pending_count: int
    pending_total: Decimal


class DashboardStats(BaseSchema):
    sales: SalesStats
    customers: CustomerStats
    quotes: QuoteStats
    cheques: ChequeStats
    low_stock_products: int


class RecentSale(BaseSchema):
    id: int
    sale_number: str
    customer_name: str
    total: Decimal
    status: SaleStatus
    sale_date: date


class ExpiringQuote(BaseSchema):
    id: int
    quote_number: str
    customer_name: str
    total: Decimal
    valid_until: date
    expires_in: str


class DashboardRecent(BaseSchema):
    sales: list[RecentSale]
    expiring_quotes: list[ExpiringQuote]
