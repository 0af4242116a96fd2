"""
Current account (cuenta corriente) service.

Every movement stores the running balance of the customer after it: debits
add to the previous balance and credits subtract from it. A positive balance
means the customer owes money.
"""

import logging
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fastapi import HTTPException, status

from app.core.fiscal import round_amount
from app.models.customer import Customer
from app.models.current_account import CurrentAccountItem, MovementType
from app.schemas.current_account import MovementCreate


logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class CurrentAccountService:
    """Service for ledger movements and balances."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_balance(self, customer_id: int) -> Decimal:
        """Balance after the customer's most recent movement, 0 if none."""
        result = await self.db.execute(
            select(CurrentAccountItem.balance)
            .where(CurrentAccountItem.customer_id == customer_id)
            .order_by(CurrentAccountItem.id.desc())
            .limit(1)
        )
        balance = result.scalar_one_or_none()
        return balance if balance is not None else ZERO

    async def get_balances(self, customer_ids: list[int]) -> dict[int, Decimal]:
        """Current balance of several customers in one query."""
        if not customer_ids:
            return {}

        latest = (
            select(func.max(CurrentAccountItem.id))
            .where(CurrentAccountItem.customer_id.in_(customer_ids))
            .group_by(CurrentAccountItem.customer_id)
        )
        result = await self.db.execute(
            select(CurrentAccountItem.customer_id, CurrentAccountItem.balance)
            .where(CurrentAccountItem.id.in_(latest))
        )
        return {customer_id: balance for customer_id, balance in result.all()}

    async def get_total_debt(self) -> Decimal:
        """Sum of the positive balances of all customers."""
        latest = (
            select(func.max(CurrentAccountItem.id))
            .group_by(CurrentAccountItem.customer_id)
        )
        result = await self.db.execute(
            select(func.sum(CurrentAccountItem.balance)).where(
                CurrentAccountItem.id.in_(latest),
                CurrentAccountItem.balance > 0,
            )
        )
        return result.scalar() or ZERO

    async def post_movement(
        self,
        customer_id: int,
        movement_type: MovementType,
        concept: str,
        amount,
        *,
        reference: str | None = None,
        movement_date: date | None = None,
        notes: str | None = None,
        sale_id: int | None = None,
        payment_id: int | None = None,
        credit_note_id: int | None = None,
    ) -> CurrentAccountItem:
        """Append a movement and compute its running balance."""
        amount = round_amount(amount)
        previous = await self.get_balance(customer_id)

        if movement_type == MovementType.DEBIT:
            balance = previous + amount
        else:
            balance = previous - amount

        item = CurrentAccountItem(
            customer_id=customer_id,
            type=movement_type,
            concept=concept,
            amount=amount,
            balance=balance,
            reference=reference,
            movement_date=movement_date or date.today(),
            notes=notes,
            sale_id=sale_id,
            payment_id=payment_id,
            credit_note_id=credit_note_id,
        )
        self.db.add(item)
        await self.db.flush()

        logger.info(
            "Movimiento %s de %s para cliente %s: saldo %s",
            movement_type.value,
            amount,
            customer_id,
            balance,
        )
        return item

    async def create_manual(self, data: MovementCreate) -> CurrentAccountItem:
        """Manual adjustment entered by a user."""
        await self._ensure_customer(data.customer_id)
        return await self.post_movement(
            data.customer_id,
            data.type,
            data.concept,
            data.amount,
            reference=data.reference,
            movement_date=data.movement_date,
            notes=data.notes,
        )

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        customer_id: int | None = None,
        movement_type: MovementType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> tuple[list[CurrentAccountItem], int]:
        """List movements, newest first."""
        query = select(CurrentAccountItem)
        count_query = select(func.count(CurrentAccountItem.id))

        filters = []
        if customer_id:
            filters.append(CurrentAccountItem.customer_id == customer_id)
        if movement_type:
            filters.append(CurrentAccountItem.type == movement_type)
        if date_from:
            filters.append(CurrentAccountItem.movement_date >= date_from)
        if date_to:
            filters.append(CurrentAccountItem.movement_date <= date_to)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        result = await self.db.execute(
            query.order_by(CurrentAccountItem.id.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total

    async def get_statement(self, customer_id: int, limit: int = 100) -> dict:
        """Recent movements with the current balance and debt flags."""
        await self._ensure_customer(customer_id)

        result = await self.db.execute(
            select(CurrentAccountItem)
            .where(CurrentAccountItem.customer_id == customer_id)
            .order_by(CurrentAccountItem.id.desc())
            .limit(limit)
        )
        items = list(result.scalars().all())
        current_balance = items[0].balance if items else ZERO

        return {
            "customer_id": customer_id,
            "items": items,
            "current_balance": current_balance,
            "is_in_debt": current_balance > 0,
            "is_in_credit": current_balance < 0,
        }

    async def recalculate_balances(self, customer_id: int) -> tuple[int, Decimal]:
        """
        Replay the customer's movements oldest first and rewrite each
        running balance.

        Returns:
            Tuple of (number of movements, final balance)
        """
        await self._ensure_customer(customer_id)

        result = await self.db.execute(
            select(CurrentAccountItem)
            .where(CurrentAccountItem.customer_id == customer_id)
            .order_by(CurrentAccountItem.id.asc())
        )
        items = list(result.scalars().all())

        balance = ZERO
        for item in items:
            balance += item.signed_amount
            item.balance = balance

        await self.db.flush()
        logger.info("Saldos recalculados para cliente %s: %s", customer_id, balance)
        return len(items), balance

    async def _ensure_customer(self, customer_id: int) -> None:
        customer = await self.db.get(Customer, customer_id)
        if customer is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado",
            )
