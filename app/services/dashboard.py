"""
Dashboard Service.
Provides the business summary shown on the home screen.
"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.cheque import Cheque, ChequeStatus
from app.models.customer import Customer
from app.models.product import Product
from app.models.quote import Quote, QuoteStatus
from app.models.sale import Sale, SaleStatus
from app.services.current_account import CurrentAccountService


ZERO = Decimal("0.00")

# Sales that count as revenue
BILLED_STATUSES = (SaleStatus.CONFIRMED, SaleStatus.DELIVERED)

EXPIRING_QUOTES_DAYS = 30
RECENT_LIMIT = 5


def expiry_label(days: int) -> str:
    """Human label for a quote expiring in ``days`` days."""
    if days <= 0:
        return "Hoy"
    if days == 1:
        return "1 día"
    if days < 7:
        return f"{days} días"
    weeks = days // 7
    return "1 semana" if weeks == 1 else f"{weeks} semanas"


def growth_percentage(current: Decimal, previous: Decimal) -> float:
    if previous > 0:
        return round(float((current - previous) / previous * 100), 1)
    return 100.0 if current > 0 else 0.0


class DashboardService:
    """Service for dashboard statistics."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _sales_between(self, start: date, end: date) -> tuple[Decimal, int]:
        result = await self.db.execute(
            select(func.sum(Sale.total), func.count(Sale.id)).where(
                Sale.status.in_(BILLED_STATUSES),
                Sale.sale_date >= start,
                Sale.sale_date <= end,
            )
        )
        total, count = result.one()
        return total or ZERO, count or 0

    async def get_stats(self) -> Dict[str, Any]:
        """
        Get business statistics.

        Returns:
            Sales, customers, pending quotes, pending cheques and low stock
        """
        today = date.today()
        month_start = today.replace(day=1)
        previous_month_end = month_start - timedelta(days=1)
        previous_month_start = previous_month_end.replace(day=1)

        month_total, month_count = await self._sales_between(month_start, today)
        previous_total, _ = await self._sales_between(previous_month_start, previous_month_end)
        today_total, today_count = await self._sales_between(today, today)

        active_customers = await self.db.execute(
            select(func.count(Customer.id)).where(Customer.is_active.is_(True))
        )
        new_customers = await self.db.execute(
            select(func.count(Customer.id)).where(
                Customer.created_at >= datetime.combine(month_start, time.min, tzinfo=timezone.utc)
            )
        )

        pending_quotes = await self.db.execute(
            select(func.sum(Quote.total), func.count(Quote.id)).where(
                Quote.status == QuoteStatus.SENT,
                Quote.valid_until >= today,
            )
        )
        quotes_total, quotes_count = pending_quotes.one()

        pending_cheques = await self.db.execute(
            select(func.sum(Cheque.amount), func.count(Cheque.id)).where(
                Cheque.status == ChequeStatus.PENDING,
            )
        )
        cheques_total, cheques_count = pending_cheques.one()

        low_stock = await self.db.execute(
            select(func.count(Product.id)).where(
                Product.is_active.is_(True),
                Product.stock <= Product.min_stock,
            )
        )

        return {
            "sales": {
                "month_total": month_total,
                "month_count": month_count,
                "growth_percentage": growth_percentage(month_total, previous_total),
                "today_total": today_total,
                "today_count": today_count,
            },
            "customers": {
                "active": active_customers.scalar() or 0,
                "new_this_month": new_customers.scalar() or 0,
                "total_debt": await CurrentAccountService(self.db).get_total_debt(),
            },
            "quotes": {
                "pending_count": quotes_count or 0,
                "pending_total": quotes_total or ZERO,
            },
            "cheques": {
                "pending_count": cheques_count or 0,
                "pending_total": cheques_total or ZERO,
            },
            "low_stock_products": low_stock.scalar() or 0,
        }

    async def get_recent(self) -> Dict[str, Any]:
        """Latest non-draft sales and quotes about to expire."""
        today = date.today()

        sales_result = await self.db.execute(
            select(Sale.id, Sale.sale_number, Customer.business_name, Sale.total, Sale.status, Sale.sale_date)
            .join(Customer, Sale.customer_id == Customer.id)
            .where(Sale.status != SaleStatus.DRAFT)
            .order_by(Sale.id.desc())
            .limit(RECENT_LIMIT)
        )
        sales = [
            {
                "id": sale_id,
                "sale_number": number,
                "customer_name": customer_name,
                "total": total,
                "status": sale_status,
                "sale_date": sale_date,
            }
            for sale_id, number, customer_name, total, sale_status, sale_date in sales_result.all()
        ]

        quotes_result = await self.db.execute(
            select(Quote.id, Quote.quote_number, Customer.business_name, Quote.total, Quote.valid_until)
            .join(Customer, Quote.customer_id == Customer.id)
            .where(
                Quote.status == QuoteStatus.SENT,
                Quote.valid_until >= today,
                Quote.valid_until <= today + timedelta(days=EXPIRING_QUOTES_DAYS),
            )
            .order_by(Quote.valid_until)
            .limit(RECENT_LIMIT)
        )
        expiring = [
            {
                "id": quote_id,
                "quote_number": number,
                "customer_name": customer_name,
                "total": total,
                "valid_until": valid_until,
                "expires_in": expiry_label((valid_until - today).days),
            }
            for quote_id, number, customer_name, total, valid_until in quotes_result.all()
        ]

        return {"sales": sales, "expiring_quotes": expiring}
