"""
Credit note service.
"""

import logging
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.core.fiscal import calculate_fiscal_amounts, credit_note_type_for_customer
from app.models.credit_note import (
    STOCK_RESTORING_REASONS,
    CreditNote,
    CreditNoteItem,
    CreditNoteReason,
    CreditNoteStatus,
)
from app.models.current_account import MovementType
from app.models.customer import Customer
from app.models.sale import Sale, SaleStatus
from app.schemas.credit_note import CreditNoteCreate
from app.services.current_account import CurrentAccountService
from app.services.numbering import CREDIT_NOTE_PREFIX, next_number
from app.services.product import ProductService


logger = logging.getLogger(__name__)


class CreditNoteService:
    """Service for credit note operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products = ProductService(db)
        self.ledger = CurrentAccountService(db)

    async def _check_original_sale(self, sale_id: int, customer_id: int) -> None:
        sale = await self.db.get(Sale, sale_id)
        if not sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venta original no encontrada",
            )
        if sale.customer_id != customer_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La venta original no pertenece al cliente",
            )
        if sale.status not in (SaleStatus.CONFIRMED, SaleStatus.DELIVERED):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se emiten notas de crédito sobre ventas confirmadas o entregadas",
            )

        existing = await self.db.execute(
            select(CreditNote.id).where(
                CreditNote.original_sale_id == sale_id,
                CreditNote.status != CreditNoteStatus.VOIDED,
            )
        )
        if existing.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe una nota de crédito para esta venta",
            )

    async def create(self, data: CreditNoteCreate) -> CreditNote:
        """
        Issue a credit note.

        Returns and cancellations put the items back in stock; every issued
        note credits the customer's current account.
        """
        customer = await self.db.get(Customer, data.customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado",
            )

        if data.original_sale_id is not None:
            await self._check_original_sale(data.original_sale_id, customer.id)

        lines, _ = await self.products.price_lines(
            data.items,
            CreditNoteItem,
            require_product=False,
        )
        fiscal = calculate_fiscal_amounts(lines)

        credit_note = CreditNote(
            credit_note_number=await next_number(
                self.db, CreditNote.credit_note_number, CREDIT_NOTE_PREFIX
            ),
            type=credit_note_type_for_customer(customer.customer_type),
            status=CreditNoteStatus.ISSUED,
            reason=data.reason,
            description=data.description,
            notes=data.notes,
            issue_date=data.issue_date or date.today(),
            customer=customer,
            original_sale_id=data.original_sale_id,
            subtotal=fiscal.taxed_amount + fiscal.non_taxed_amount + fiscal.exempt_amount,
            tax_amount=fiscal.tax_amount,
            total=fiscal.total,
            items=lines,
        )
        self.db.add(credit_note)
        await self.db.flush()

        if data.reason in STOCK_RESTORING_REASONS:
            await self.products.return_stock(lines)

        await self.ledger.post_movement(
            customer.id,
            MovementType.CREDIT,
            f"Nota de crédito {credit_note.credit_note_number}",
            credit_note.total,
            reference=credit_note.credit_note_number,
            movement_date=credit_note.issue_date,
            sale_id=credit_note.original_sale_id,
            credit_note_id=credit_note.id,
        )

        logger.info(
            "Nota de crédito emitida: %s (%s) total %s",
            credit_note.credit_note_number,
            credit_note.reason.value,
            credit_note.total,
        )
        return await self.get_or_404(credit_note.id)

    async def get_by_id(self, credit_note_id: int) -> CreditNote | None:
        result = await self.db.execute(
            select(CreditNote)
            .options(selectinload(CreditNote.items), selectinload(CreditNote.customer))
            .where(CreditNote.id == credit_note_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, credit_note_id: int) -> CreditNote:
        credit_note = await self.get_by_id(credit_note_id)
        if not credit_note:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Nota de crédito no encontrada",
            )
        return credit_note

    async def void(self, credit_note: CreditNote) -> CreditNote:
        """
        Void an issued note: the customer is debited again and any stock the
        note restored is taken back.
        """
        if credit_note.status == CreditNoteStatus.VOIDED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La nota de crédito ya está anulada",
            )

        if credit_note.reason in STOCK_RESTORING_REASONS:
            await self.products.take_stock(credit_note.items)

        credit_note.status = CreditNoteStatus.VOIDED
        await self.db.flush()

        await self.ledger.post_movement(
            credit_note.customer_id,
            MovementType.DEBIT,
            f"Anulación nota de crédito {credit_note.credit_note_number}",
            credit_note.total,
            reference=credit_note.credit_note_number,
            credit_note_id=credit_note.id,
        )

        logger.info("Nota de crédito anulada: %s", credit_note.credit_note_number)
        return await self.get_or_404(credit_note.id)

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        customer_id: int | None = None,
        note_status: CreditNoteStatus | None = None,
        reason: CreditNoteReason | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ):
        query = select(CreditNote)
        count_query = select(func.count(CreditNote.id))

        filters = []
        if customer_id:
            filters.append(CreditNote.customer_id == customer_id)
        if note_status:
            filters.append(CreditNote.status == note_status)
        if reason:
            filters.append(CreditNote.reason == reason)
        if from_date:
            filters.append(CreditNote.issue_date >= from_date)
        if to_date:
            filters.append(CreditNote.issue_date <= to_date)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        result = await self.db.execute(
            query
            .options(selectinload(CreditNote.items), selectinload(CreditNote.customer))
            .order_by(CreditNote.issue_date.desc(), CreditNote.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total
