"""
Cheque service.
Tracks the cheques received as payment through deposit, endorsement or
rejection.
"""

import logging
from datetime import date, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.models.cheque import Cheque, ChequeStatus
from app.models.current_account import MovementType
from app.models.payment import PaymentStatus
from app.schemas.cheque import ChequeStatusUpdate
from app.services.current_account import CurrentAccountService


logger = logging.getLogger(__name__)


class ChequeService:
    """Service for cheque operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, cheque_id: int) -> Cheque | None:
        result = await self.db.execute(
            select(Cheque)
            .options(selectinload(Cheque.payments))
            .where(Cheque.id == cheque_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, cheque_id: int) -> Cheque:
        cheque = await self.get_by_id(cheque_id)
        if not cheque:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cheque no encontrado",
            )
        return cheque

    async def update_status(self, cheque: Cheque, data: ChequeStatusUpdate) -> Cheque:
        """
        Apply a status change.

        A rejected cheque marks its payments as rejected and debits the
        customer again for the amount those payments had credited.

        Raises:
            HTTPException: If the transition is not allowed or data is missing
        """
        new_status = data.status
        if not cheque.can_transition_to(new_status):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No se puede pasar un cheque de {cheque.status.value} "
                       f"a {new_status.value}",
            )

        if new_status == ChequeStatus.DEPOSITED:
            cheque.deposit_date = data.deposit_date or date.today()
            cheque.deposit_bank = data.deposit_bank
        elif new_status == ChequeStatus.ENDORSED:
            if not data.endorsed_to:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Debe indicar a quién se endosa el cheque",
                )
            cheque.endorsed_date = data.endorsed_date or date.today()
            cheque.endorsed_to = data.endorsed_to
        elif new_status == ChequeStatus.REJECTED:
            cheque.rejection_reason = data.rejection_reason
            await self._reject_payments(cheque)

        if data.notes is not None:
            cheque.notes = data.notes

        cheque.status = new_status
        await self.db.flush()

        logger.info("Cheque %s (%s): %s", cheque.cheque_number, cheque.bank, new_status.value)
        return cheque

    async def _reject_payments(self, cheque: Cheque) -> None:
        ledger = CurrentAccountService(self.db)
        for payment in cheque.payments:
            if payment.status != PaymentStatus.COMPLETED:
                continue
            payment.status = PaymentStatus.REJECTED
            await ledger.post_movement(
                payment.customer_id,
                MovementType.DEBIT,
                f"Cheque rechazado N° {cheque.cheque_number} ({cheque.bank})",
                payment.amount,
                reference=payment.payment_number,
                payment_id=payment.id,
                notes=cheque.rejection_reason,
            )

    async def upcoming(self, days: int = 7) -> list[Cheque]:
        """Pending cheques due from today up to ``days`` ahead."""
        today = date.today()
        result = await self.db.execute(
            select(Cheque)
            .where(
                Cheque.status == ChequeStatus.PENDING,
                Cheque.due_date >= today,
                Cheque.due_date <= today + timedelta(days=days),
            )
            .order_by(Cheque.due_date)
        )
        return list(result.scalars().all())

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        cheque_status: ChequeStatus | None = None,
        bank: str | None = None,
        due_from: date | None = None,
        due_to: date | None = None,
    ):
        """List cheques ordered by due date."""
        query = select(Cheque)
        count_query = select(func.count(Cheque.id))

        filters = []
        if cheque_status:
            filters.append(Cheque.status == cheque_status)
        if bank:
            filters.append(Cheque.bank.ilike(f"%{bank}%"))
        if due_from:
            filters.append(Cheque.due_date >= due_from)
        if due_to:
            filters.append(Cheque.due_date <= due_to)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        result = await self.db.execute(
            query.order_by(Cheque.due_date, Cheque.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total
