"""
Payment service.
Handles payment registration, method-specific data and cancellation.
"""

import logging
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.core.fiscal import round_amount
from app.models.cheque import Cheque, ChequeStatus
from app.models.current_account import MovementType
from app.models.customer import Customer
from app.models.payment import (
    CARD_METHODS,
    TRANSFER_METHODS,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from app.models.sale import Sale
from app.schemas.payment import PaymentCreate
from app.services.current_account import CurrentAccountService
from app.services.numbering import PAYMENT_PREFIX, next_number


logger = logging.getLogger(__name__)


METHOD_LABELS = {
    PaymentMethod.CASH: "efectivo",
    PaymentMethod.CHEQUE: "cheque",
    PaymentMethod.TRANSFER: "transferencia",
    PaymentMethod.QR: "QR",
    PaymentMethod.DEBIT: "débito",
    PaymentMethod.CREDIT: "crédito",
    PaymentMethod.OTHER: "otro",
}


class PaymentService:
    """Service for payment operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.ledger = CurrentAccountService(db)

    async def create(self, data: PaymentCreate) -> Payment:
        """
        Register a payment and credit the customer's current account.

        Cheque payments also store a pending cheque; card payments store the
        fee and the net amount.

        Raises:
            HTTPException: If the customer or sale is invalid, or the method
                data is incomplete
        """
        customer = await self.db.get(Customer, data.customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado",
            )

        if data.sale_id is not None:
            sale = await self.db.get(Sale, data.sale_id)
            if not sale:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Venta no encontrada",
                )
            if sale.customer_id != customer.id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="La venta no pertenece al cliente",
                )

        amount = round_amount(data.amount)
        payment_date = data.payment_date or date.today()

        payment = Payment(
            payment_number=await next_number(self.db, Payment.payment_number, PAYMENT_PREFIX, width=6),
            customer=customer,
            sale_id=data.sale_id,
            amount=amount,
            method=data.method,
            status=PaymentStatus.COMPLETED,
            payment_date=payment_date,
            reference=data.reference,
            notes=data.notes,
        )

        if data.method == PaymentMethod.CHEQUE:
            cheque = data.cheque
            if not cheque or not (cheque.cheque_number and cheque.bank and cheque.due_date and cheque.issuer):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Para pagos con cheque se requiere número, banco, "
                           "fecha de cobro y librador",
                )
            payment.cheque = Cheque(
                **cheque.model_dump(),
                amount=amount,
                status=ChequeStatus.PENDING,
            )

        if data.method in CARD_METHODS and data.card:
            fee = round_amount(data.card.fee or 0)
            if fee > amount:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="La comisión no puede superar el monto del pago",
                )
            for field, value in data.card.model_dump(exclude={"fee"}).items():
                setattr(payment, field, value)
            payment.fee = fee
            payment.net_amount = amount - fee

        if data.method in TRANSFER_METHODS and data.transfer:
            for field, value in data.transfer.model_dump().items():
                setattr(payment, field, value)

        self.db.add(payment)
        await self.db.flush()

        await self.ledger.post_movement(
            customer.id,
            MovementType.CREDIT,
            f"Pago {payment.payment_number} ({METHOD_LABELS[payment.method]})",
            amount,
            reference=payment.payment_number,
            movement_date=payment_date,
            sale_id=payment.sale_id,
            payment_id=payment.id,
        )

        logger.info("Pago registrado: %s %s %s", payment.payment_number, payment.method.value, amount)
        return await self.get_or_404(payment.id)

    async def get_by_id(self, payment_id: int) -> Payment | None:
        result = await self.db.execute(
            select(Payment)
            .options(selectinload(Payment.customer), selectinload(Payment.cheque))
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, payment_id: int) -> Payment:
        payment = await self.get_by_id(payment_id)
        if not payment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pago no encontrado",
            )
        return payment

    async def cancel(self, payment: Payment) -> Payment:
        """Cancel a payment and debit the customer back."""
        if payment.status == PaymentStatus.CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El pago ya está anulado",
            )
        if payment.cheque is not None and payment.cheque.status == ChequeStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El cheque del pago sigue en cartera; rechácelo antes de anular el pago",
            )

        reverse = payment.status == PaymentStatus.COMPLETED
        payment.status = PaymentStatus.CANCELLED
        await self.db.flush()

        # Rejected payments were already debited back when the cheque bounced.
        if reverse:
            await self.ledger.post_movement(
                payment.customer_id,
                MovementType.DEBIT,
                f"Anulación pago {payment.payment_number}",
                payment.amount,
                reference=payment.payment_number,
                payment_id=payment.id,
            )

        logger.info("Pago anulado: %s", payment.payment_number)
        return await self.get_or_404(payment.id)

    async def get_stats(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[dict]:
        """Count and total of completed payments per method."""
        query = (
            select(Payment.method, func.count(Payment.id), func.sum(Payment.amount))
            .where(Payment.status == PaymentStatus.COMPLETED)
            .group_by(Payment.method)
        )
        if from_date:
            query = query.where(Payment.payment_date >= from_date)
        if to_date:
            query = query.where(Payment.payment_date <= to_date)

        result = await self.db.execute(query)
        return [
            {"method": method, "count": count, "total": total or Decimal("0.00")}
            for method, count, total in result.all()
        ]

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        customer_id: int | None = None,
        method: PaymentMethod | None = None,
        payment_status: PaymentStatus | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ):
        """List payments with pagination and filters, newest first."""
        query = select(Payment)
        count_query = select(func.count(Payment.id))

        filters = []
        if customer_id:
            filters.append(Payment.customer_id == customer_id)
        if method:
            filters.append(Payment.method == method)
        if payment_status:
            filters.append(Payment.status == payment_status)
        if from_date:
            filters.append(Payment.payment_date >= from_date)
        if to_date:
            filters.append(Payment.payment_date <= to_date)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        result = await self.db.execute(
            query
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total
