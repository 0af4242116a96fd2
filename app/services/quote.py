"""
Quote service.
Handles quote CRUD, status changes and conversion to sale.
"""

import logging
from datetime import date, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.core.fiscal import calculate_fiscal_amounts
from app.models.customer import Customer
from app.models.quote import Quote, QuoteItem, QuoteStatus
from app.models.sale import Sale, SaleStatus
from app.schemas.line_item import LineItemCreate
from app.schemas.quote import QuoteCreate, QuoteUpdate
from app.schemas.sale import SaleCreate
from app.services.numbering import QUOTE_PREFIX, next_number
from app.services.product import ProductService
from app.services.sale import SaleService


logger = logging.getLogger(__name__)


QUOTE_VALIDITY_DAYS = 30

STATUS_TRANSITIONS = {
    QuoteStatus.DRAFT: {QuoteStatus.SENT},
    QuoteStatus.SENT: {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED},
    QuoteStatus.ACCEPTED: {QuoteStatus.REJECTED},
}


def apply_totals(quote: Quote, lines) -> None:
    fiscal = calculate_fiscal_amounts(lines)
    quote.subtotal = fiscal.taxed_amount + fiscal.non_taxed_amount + fiscal.exempt_amount
    quote.tax_amount = fiscal.tax_amount
    quote.total = fiscal.total


class QuoteService:
    """Service for quote operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products = ProductService(db)

    async def _get_customer(self, customer_id: int) -> Customer:
        customer = await self.db.get(Customer, customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado",
            )
        return customer

    async def create(self, data: QuoteCreate) -> Quote:
        """
        Create a new quote with items.

        Items are priced from their products; ``valid_until`` defaults to
        30 days after the quote date.
        """
        customer = await self._get_customer(data.customer_id)
        if data.status not in (QuoteStatus.DRAFT, QuoteStatus.SENT):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Un presupuesto nuevo solo puede ser borrador o enviado",
            )

        lines, _ = await self.products.price_lines(data.items, QuoteItem)

        quote_date = data.quote_date or date.today()
        quote = Quote(
            quote_number=await next_number(self.db, Quote.quote_number, QUOTE_PREFIX),
            customer=customer,
            status=data.status,
            quote_date=quote_date,
            valid_until=data.valid_until or quote_date + timedelta(days=QUOTE_VALIDITY_DAYS),
            notes=data.notes,
            terms=data.terms,
            items=lines,
        )
        apply_totals(quote, lines)

        self.db.add(quote)
        await self.db.flush()

        logger.info("Presupuesto creado: %s total %s", quote.quote_number, quote.total)
        return await self.get_or_404(quote.id)

    async def get_by_id(self, quote_id: int) -> Quote | None:
        """Get quote by ID with all relationships loaded."""
        result = await self.db.execute(
            select(Quote)
            .options(selectinload(Quote.items), selectinload(Quote.customer))
            .where(Quote.id == quote_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, quote_id: int) -> Quote:
        quote = await self.get_by_id(quote_id)
        if not quote:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Presupuesto no encontrado",
            )
        return quote

    async def update(self, quote: Quote, data: QuoteUpdate) -> Quote:
        """
        Update a draft or sent quote.
        New items replace the old ones and totals are recalculated.
        """
        if quote.status not in (QuoteStatus.DRAFT, QuoteStatus.SENT):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden modificar presupuestos en borrador o enviados",
            )

        update_data = data.model_dump(exclude_unset=True, exclude={"items"})

        if update_data.get("customer_id") is not None:
            quote.customer = await self._get_customer(update_data["customer_id"])

        for field, value in update_data.items():
            if value is not None or field in ("notes", "terms"):
                setattr(quote, field, value)

        if data.items is not None:
            lines, _ = await self.products.price_lines(data.items, QuoteItem)
            quote.items = lines
            apply_totals(quote, lines)

        await self.db.flush()
        return await self.get_or_404(quote.id)

    async def change_status(self, quote: Quote, new_status: QuoteStatus) -> Quote:
        """
        Move a quote along its lifecycle.

        Conversion has its own operation and cannot be set directly.
        """
        if new_status not in STATUS_TRANSITIONS.get(quote.status, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No se puede pasar un presupuesto de "
                       f"{quote.status.value} a {new_status.value}",
            )

        quote.status = new_status
        await self.db.flush()

        logger.info("Presupuesto %s: %s", quote.quote_number, new_status.value)
        return await self.get_or_404(quote.id)

    async def convert_to_sale(self, quote: Quote, afip_client=None) -> Sale:
        """
        Create a confirmed sale with the quote's items and mark the quote
        converted.

        Raises:
            HTTPException: If the quote was converted, rejected or expired
        """
        if not quote.can_convert:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El presupuesto no se puede convertir en venta "
                       f"(estado: {quote.status.value})",
            )

        sale_data = SaleCreate(
            customer_id=quote.customer_id,
            quote_id=quote.id,
            status=SaleStatus.CONFIRMED,
            notes=quote.notes,
            items=[
                LineItemCreate(
                    product_id=item.product_id,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                    iva_type=item.iva_type,
                )
                for item in quote.items
            ],
        )
        sale = await SaleService(self.db, afip_client).create(sale_data)

        quote.status = QuoteStatus.CONVERTED
        await self.db.flush()

        logger.info("Presupuesto %s convertido en venta %s", quote.quote_number, sale.sale_number)
        return sale

    async def delete(self, quote: Quote) -> None:
        """Delete a quote that never became a sale."""
        if quote.status == QuoteStatus.CONVERTED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se puede eliminar un presupuesto convertido en venta",
            )

        used = await self.db.execute(
            select(func.count(Sale.id)).where(Sale.quote_id == quote.id)
        )
        if used.scalar():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El presupuesto está referenciado por una venta",
            )

        await self.db.delete(quote)
        await self.db.flush()

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        quote_status: QuoteStatus | None = None,
        customer_id: int | None = None,
    ):
        """List quotes with pagination and filters."""
        query = select(Quote)
        count_query = select(func.count(Quote.id))

        filters = []
        if quote_status:
            filters.append(Quote.status == quote_status)
        if customer_id:
            filters.append(Quote.customer_id == customer_id)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            query
            .options(selectinload(Quote.items), selectinload(Quote.customer))
            .order_by(Quote.quote_date.desc(), Quote.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total
