"""
Sale service.
Handles sale creation, the draft/confirmed/delivered/cancelled lifecycle,
stock movements and the matching ledger entries.
"""

import logging
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.core.config import settings
from app.core.fiscal import (
    calculate_fiscal_amounts,
    invoice_type_for_customer,
    round_amount,
    to_decimal,
)
from app.models.credit_note import CreditNote, CreditNoteStatus
from app.models.current_account import MovementType
from app.models.customer import Customer
from app.models.quote import Quote
from app.models.sale import Sale, SaleItem, SaleStatus
from app.schemas.sale import SaleCreate, SaleUpdate
from app.services.current_account import CurrentAccountService
from app.services.numbering import SALE_PREFIX, next_number
from app.services.product import ProductService


logger = logging.getLogger(__name__)


def apply_amounts(sale: Sale, lines, perception) -> None:
    """Fill the subtotal, discount and fiscal buckets of ``sale`` from its lines."""
    fiscal = calculate_fiscal_amounts(lines)
    perception = round_amount(perception or 0)

    gross = sum(
        (to_decimal(line.quantity) * to_decimal(line.unit_price) for line in lines),
        Decimal("0"),
    )
    subtotal = sum((line.subtotal for line in lines), Decimal("0"))

    sale.subtotal = round_amount(subtotal)
    sale.discount_amount = round_amount(gross - subtotal)
    sale.taxed_amount = fiscal.taxed_amount
    sale.non_taxed_amount = fiscal.non_taxed_amount
    sale.exempt_amount = fiscal.exempt_amount
    sale.tax_amount = fiscal.tax_amount
    sale.gross_income_perception = perception
    sale.total = fiscal.total + perception


class SaleService:
    """Service for sale operations."""

    def __init__(self, db: AsyncSession, afip_client=None):
        self.db = db
        self.afip_client = afip_client
        self.products = ProductService(db)
        self.ledger = CurrentAccountService(db)

    async def _get_customer(self, customer_id: int) -> Customer:
        customer = await self.db.get(Customer, customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado",
            )
        return customer

    async def create(self, data: SaleCreate) -> Sale:
        """
        Create a sale.

        Confirmed sales take their units from stock and debit the customer's
        current account. Drafts do neither until confirmed.

        Raises:
            HTTPException: If the customer, a product or the stock is missing
        """
        if data.status not in (SaleStatus.DRAFT, SaleStatus.CONFIRMED):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Una venta nueva solo puede ser borrador o confirmada",
            )

        customer = await self._get_customer(data.customer_id)
        if data.quote_id is not None and await self.db.get(Quote, data.quote_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Presupuesto no encontrado",
            )

        lines, products = await self.products.price_lines(data.items, SaleItem)

        sale = Sale(
            sale_number=await next_number(self.db, Sale.sale_number, SALE_PREFIX),
            customer=customer,
            quote_id=data.quote_id,
            status=data.status,
            is_white_invoice=data.is_white_invoice,
            sale_date=data.sale_date or date.today(),
            invoice_type=invoice_type_for_customer(customer.customer_type),
            point_of_sale=(data.point_of_sale or settings.AFIP_DEFAULT_POINT_OF_SALE).zfill(4),
            notes=data.notes,
            internal_notes=data.internal_notes,
            items=lines,
        )
        apply_amounts(sale, lines, data.gross_income_perception)

        if sale.status == SaleStatus.CONFIRMED:
            await self.products.take_stock(lines, products)

        self.db.add(sale)
        await self.db.flush()

        logger.info("Venta creada: %s (%s) total %s", sale.sale_number, sale.status.value, sale.total)

        if sale.status == SaleStatus.CONFIRMED:
            await self._after_confirmation(sale)

        return await self.get_or_404(sale.id)

    async def _after_confirmation(self, sale: Sale) -> None:
        """Ledger debit and, when enabled, automatic AFIP invoicing."""
        await self.ledger.post_movement(
            sale.customer_id,
            MovementType.DEBIT,
            f"Venta {sale.sale_number}",
            sale.total,
            reference=sale.sale_number,
            movement_date=sale.sale_date,
            sale_id=sale.id,
        )

        if settings.AFIP_AUTO_INVOICE and sale.is_white_invoice and self.afip_client is not None:
            from app.services.afip import AfipService

            try:
                await AfipService(self.db, self.afip_client).invoice_sale(sale.id)
            except HTTPException as exc:
                # The sale stays confirmed; it can be invoiced later.
                logger.warning(
                    "Facturación automática fallida para %s: %s",
                    sale.sale_number,
                    exc.detail,
                )

    async def get_by_id(self, sale_id: int) -> Sale | None:
        result = await self.db.execute(
            select(Sale)
            .options(selectinload(Sale.items), selectinload(Sale.customer))
            .where(Sale.id == sale_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, sale_id: int) -> Sale:
        sale = await self.get_by_id(sale_id)
        if not sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venta no encontrada",
            )
        return sale

    async def update(self, sale: Sale, data: SaleUpdate) -> Sale:
        """
        Update a draft sale.

        New items replace the old ones and every amount is recalculated.
        """
        if sale.status != SaleStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden modificar ventas en borrador",
            )

        update_data = data.model_dump(exclude_unset=True, exclude={"items"})

        if update_data.get("customer_id") is not None:
            customer = await self._get_customer(update_data["customer_id"])
            sale.customer = customer
            sale.invoice_type = invoice_type_for_customer(customer.customer_type)
        if update_data.get("point_of_sale"):
            update_data["point_of_sale"] = update_data["point_of_sale"].zfill(4)

        for field, value in update_data.items():
            if value is not None or field in ("notes", "internal_notes"):
                setattr(sale, field, value)

        lines = sale.items
        if data.items is not None:
            lines, _ = await self.products.price_lines(data.items, SaleItem)
            sale.items = lines

        apply_amounts(sale, lines, sale.gross_income_perception)

        await self.db.flush()
        return await self.get_or_404(sale.id)

    async def confirm(self, sale: Sale) -> Sale:
        """Draft -> confirmed, taking stock and debiting the customer."""
        if sale.status != SaleStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden confirmar ventas en borrador",
            )

        await self.products.take_stock(sale.items)
        sale.status = SaleStatus.CONFIRMED
        await self.db.flush()

        await self._after_confirmation(sale)
        logger.info("Venta confirmada: %s", sale.sale_number)
        return await self.get_or_404(sale.id)

    async def deliver(self, sale: Sale, delivery_date: date | None = None) -> Sale:
        if sale.status != SaleStatus.CONFIRMED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden entregar ventas confirmadas",
            )

        sale.status = SaleStatus.DELIVERED
        sale.delivery_date = delivery_date or date.today()
        await self.db.flush()

        return await self.get_or_404(sale.id)

    async def cancel(self, sale: Sale) -> Sale:
        """
        Cancel a confirmed or delivered sale.

        Stock is restored and the customer is credited with the sale total.
        Invoiced sales need a credit note instead.
        """
        if sale.status == SaleStatus.CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La venta ya está anulada",
            )
        if sale.status == SaleStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Las ventas en borrador se eliminan, no se anulan",
            )
        if sale.auth_code:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La venta tiene CAE; debe emitir una nota de crédito",
            )

        credit_notes = await self.db.execute(
            select(CreditNote.id).where(
                CreditNote.original_sale_id == sale.id,
                CreditNote.status != CreditNoteStatus.VOIDED,
            )
        )
        if credit_notes.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La venta tiene una nota de crédito",
            )

        await self.products.return_stock(sale.items)
        sale.status = SaleStatus.CANCELLED
        await self.db.flush()

        await self.ledger.post_movement(
            sale.customer_id,
            MovementType.CREDIT,
            f"Anulación venta {sale.sale_number}",
            sale.total,
            reference=sale.sale_number,
            sale_id=sale.id,
        )

        logger.info("Venta anulada: %s", sale.sale_number)
        return await self.get_or_404(sale.id)

    async def delete(self, sale: Sale) -> None:
        if sale.status != SaleStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden eliminar ventas en borrador",
            )

        await self.db.delete(sale)
        await self.db.flush()

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        sale_status: SaleStatus | None = None,
        customer_id: int | None = None,
        is_white_invoice: bool | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ):
        """List sales with pagination and filters, newest first."""
        query = select(Sale)
        count_query = select(func.count(Sale.id))

        filters = []
        if sale_status:
            filters.append(Sale.status == sale_status)
        if customer_id:
            filters.append(Sale.customer_id == customer_id)
        if is_white_invoice is not None:
            filters.append(Sale.is_white_invoice == is_white_invoice)
        if from_date:
            filters.append(Sale.sale_date >= from_date)
        if to_date:
            filters.append(Sale.sale_date <= to_date)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            query
            .options(selectinload(Sale.items), selectinload(Sale.customer))
            .order_by(Sale.sale_date.desc(), Sale.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total
