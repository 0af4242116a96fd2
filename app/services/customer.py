"""
Customer service.
Handles customer CRUD, CUIT validation and balance lookup.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from fastapi import HTTPException, status

from app.core.fiscal import format_cuit, validate_cuit
from app.models.customer import Customer
from app.models.current_account import CurrentAccountItem
from app.models.quote import Quote
from app.models.sale import Sale
from app.schemas.customer import CustomerCreate, CustomerUpdate


logger = logging.getLogger(__name__)


class CustomerService:
    """Service for customer operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _normalize_tax_id(self, tax_id: str | None, exclude_id: int | None = None) -> str | None:
        """
        Validate the CUIT/CUIL checksum, format it and check uniqueness.

        Raises:
            HTTPException: If the number is invalid or already used
        """
        if not tax_id:
            return None

        if not validate_cuit(tax_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="CUIT/CUIL inválido",
            )

        formatted = format_cuit(tax_id)
        query = select(Customer.id).where(Customer.tax_id == formatted)
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)

        if (await self.db.execute(query)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe un cliente con este CUIT/CUIL",
            )
        return formatted

    async def create(self, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            data: Customer data

        Returns:
            Created customer
        """
        values = data.model_dump()
        values["tax_id"] = await self._normalize_tax_id(data.tax_id)

        customer = Customer(**values)
        self.db.add(customer)
        await self.db.flush()
        await self.db.refresh(customer)

        logger.info("Cliente creado: %s (%s)", customer.business_name, customer.id)
        return customer

    async def get_by_id(self, customer_id: int) -> Customer | None:
        result = await self.db.execute(
            select(Customer).where(Customer.id == customer_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, customer_id: int) -> Customer:
        """
        Get customer by ID or raise 404.

        Raises:
            HTTPException: If customer not found
        """
        customer = await self.get_by_id(customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado",
            )
        return customer

    async def get_usage_counts(self, customer_id: int) -> dict[str, int]:
        """Number of sales, quotes and ledger movements of a customer."""
        counts = {}
        for key, column, fk in (
            ("sales_count", Sale.id, Sale.customer_id),
            ("quotes_count", Quote.id, Quote.customer_id),
            ("movements_count", CurrentAccountItem.id, CurrentAccountItem.customer_id),
        ):
            result = await self.db.execute(
                select(func.count(column)).where(fk == customer_id)
            )
            counts[key] = result.scalar() or 0
        return counts

    async def update(self, customer: Customer, data: CustomerUpdate) -> Customer:
        """
        Update customer.

        A changed tax id goes through the same validation as on creation.
        """
        update_data = data.model_dump(exclude_unset=True)

        if "tax_id" in update_data:
            update_data["tax_id"] = await self._normalize_tax_id(
                update_data["tax_id"],
                exclude_id=customer.id,
            )

        for field, value in update_data.items():
            setattr(customer, field, value)

        await self.db.flush()
        await self.db.refresh(customer)

        return customer

    async def delete(self, customer: Customer) -> None:
        """
        Deactivate a customer without history.

        Raises:
            HTTPException: If the customer has sales, quotes or movements
        """
        counts = await self.get_usage_counts(customer.id)
        if any(counts.values()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se puede eliminar el cliente porque tiene ventas, "
                       "presupuestos o movimientos en cuenta corriente",
            )

        customer.is_active = False
        await self.db.flush()
        logger.info("Cliente desactivado: %s", customer.id)

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        search: str | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[Customer], int]:
        """
        List customers with pagination and search.

        Args:
            skip: Number of records to skip
            limit: Maximum records to return
            search: Term matched against name, contact, email and tax id
            is_active: Filter by active flag

        Returns:
            Tuple of (customers list, total count)
        """
        query = select(Customer)
        count_query = select(func.count(Customer.id))

        filters = []
        if search:
            search_filter = f"%{search}%"
            filters.append(or_(
                Customer.business_name.ilike(search_filter),
                Customer.contact_name.ilike(search_filter),
                Customer.email.ilike(search_filter),
                Customer.tax_id.ilike(search_filter),
            ))
        if is_active is not None:
            filters.append(Customer.is_active == is_active)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        query = query.order_by(Customer.business_name).offset(skip).limit(limit)
        result = await self.db.execute(query)

        return list(result.scalars().all()), total
