"""
Product service.
Handles product CRUD, stock movements and line pricing.
"""

import logging
from collections import defaultdict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from fastapi import HTTPException, status

from app.core.config import settings
from app.core.fiscal import calculate_line, price_from_cost, to_decimal
from app.models.category import Category
from app.models.product import Product
from app.schemas.line_item import LineItemCreate
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.currency import CurrencyService


logger = logging.getLogger(__name__)


class ProductService:
    """Service for product operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _check_unique_code(self, code: str | None, exclude_id: int | None = None) -> None:
        if not code:
            return
        query = select(Product.id).where(Product.internal_code == code)
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)
        if (await self.db.execute(query)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe un producto con este código interno",
            )

    async def _check_category(self, category_id: int | None) -> None:
        if category_id is not None and await self.db.get(Category, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada",
            )

    async def create(self, data: ProductCreate) -> Product:
        """
        Create a new product.

        Without an explicit price, the price is derived from the USD cost,
        the markup and the configured exchange rate.
        """
        await self._check_unique_code(data.internal_code)
        await self._check_category(data.category_id)

        values = data.model_dump()
        if values["markup_percentage"] is None:
            values["markup_percentage"] = to_decimal(settings.DEFAULT_MARKUP_PERCENTAGE)

        if values["price"] is None:
            if data.cost_usd is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Debe indicar el precio o el costo en USD",
                )
            rate = await CurrencyService(self.db).get_exchange_rate()
            values["price"] = price_from_cost(data.cost_usd, values["markup_percentage"], rate)

        product = Product(**values)
        self.db.add(product)
        await self.db.flush()
        await self.db.refresh(product)

        return product

    async def get_by_id(self, product_id: int) -> Product | None:
        result = await self.db.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, product_id: int) -> Product:
        product = await self.get_by_id(product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto no encontrado",
            )
        return product

    async def get_many(self, product_ids) -> dict[int, Product]:
        """Products keyed by id; missing ids raise 404."""
        ids = set(product_ids)
        if not ids:
            return {}

        result = await self.db.execute(select(Product).where(Product.id.in_(ids)))
        products = {p.id: p for p in result.scalars().all()}

        missing = ids - products.keys()
        if missing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Producto {min(missing)} no encontrado",
            )
        return products

    async def update(self, product: Product, data: ProductUpdate) -> Product:
        """
        Update product.

        A new cost or markup without an explicit price recomputes the price.
        """
        update_data = data.model_dump(exclude_unset=True)

        if "internal_code" in update_data:
            await self._check_unique_code(update_data["internal_code"], product.id)
        if "category_id" in update_data:
            await self._check_category(update_data["category_id"])

        for field, value in update_data.items():
            setattr(product, field, value)

        reprice = {"cost_usd", "markup_percentage"} & update_data.keys()
        if reprice and "price" not in update_data and product.cost_usd is not None:
            rate = await CurrencyService(self.db).get_exchange_rate()
            product.price = price_from_cost(product.cost_usd, product.markup_percentage, rate)

        await self.db.flush()
        await self.db.refresh(product)

        return product

    async def update_stock(self, product: Product, quantity: int, reason: str | None = None) -> Product:
        """
        Add (positive) or remove (negative) units.

        Raises:
            HTTPException: If stock would go negative
        """
        new_stock = product.stock + quantity
        if new_stock < 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Stock insuficiente (actual: {product.stock})",
            )

        product.stock = new_stock
        await self.db.flush()
        await self.db.refresh(product)

        logger.info(
            "Stock de producto %s ajustado en %s (%s)",
            product.id,
            quantity,
            reason or "sin motivo",
        )
        return product

    async def delete(self, product: Product) -> None:
        """Products are never purged, only deactivated."""
        product.is_active = False
        await self.db.flush()

    async def price_lines(
        self,
        items: list[LineItemCreate],
        item_class,
        require_product: bool = True,
    ) -> tuple[list, dict[int, Product]]:
        """
        Build priced line items of ``item_class`` from request lines.

        Price, description and IVA default to the product's values.

        Returns:
            Tuple of (line items, products used keyed by id)
        """
        products = await self.get_many(i.product_id for i in items if i.product_id)

        lines = []
        for data in items:
            product = products.get(data.product_id) if data.product_id else None

            if product is None:
                if require_product:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Todos los items deben tener un producto",
                    )
                if not data.description or data.unit_price is None:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Los items sin producto requieren descripción y precio",
                    )

            unit_price = data.unit_price if data.unit_price is not None else product.price
            iva_type = data.iva_type or (product.iva_type if product else None)
            if iva_type is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Los items sin producto requieren tipo de IVA",
                )

            line = calculate_line(data.quantity, unit_price, iva_type, data.discount)
            lines.append(item_class(
                product_id=product.id if product else None,
                description=data.description or product.name,
                quantity=data.quantity,
                unit_price=to_decimal(unit_price),
                discount=data.discount,
                iva_type=line.iva_type,
                subtotal=line.subtotal,
                iva_amount=line.iva_amount,
                total_amount=line.total_amount,
            ))

        return lines, products

    async def take_stock(self, lines, products: dict[int, Product] | None = None) -> None:
        """
        Remove the quantities of ``lines`` from stock.

        Raises:
            HTTPException: If any product lacks stock; nothing is changed then
        """
        required = defaultdict(int)
        for line in lines:
            if line.product_id:
                required[line.product_id] += line.quantity

        if products is None or not required.keys() <= products.keys():
            products = await self.get_many(required)

        for product_id, quantity in required.items():
            product = products[product_id]
            if product.stock < quantity:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Stock insuficiente para {product.name}. Disponible: {product.stock}",
                )

        for product_id, quantity in required.items():
            products[product_id].stock -= quantity

        await self.db.flush()

    async def return_stock(self, lines) -> None:
        """Put the quantities of ``lines`` back in stock."""
        required = defaultdict(int)
        for line in lines:
            if line.product_id:
                required[line.product_id] += line.quantity

        if not required:
            return

        result = await self.db.execute(select(Product).where(Product.id.in_(required)))
        for product in result.scalars().all():
            product.stock += required[product.id]

        await self.db.flush()

    async def list(
        self,
        skip: int = 0,
        limit: int = 20,
        search: str | None = None,
        category_id: int | None = None,
        low_stock: bool = False,
        include_inactive: bool = False,
    ):
        """List products with pagination and filters."""
        query = select(Product)
        count_query = select(func.count(Product.id))

        filters = []
        if not include_inactive:
            filters.append(Product.is_active.is_(True))
        if search:
            search_filter = f"%{search}%"
            filters.append(or_(
                Product.name.ilike(search_filter),
                Product.internal_code.ilike(search_filter),
            ))
        if category_id:
            filters.append(Product.category_id == category_id)
        if low_stock:
            filters.append(Product.stock <= Product.min_stock)

        if filters:
            query = query.where(*filters)
            count_query = count_query.where(*filters)

        total = (await self.db.execute(count_query)).scalar() or 0

        result = await self.db.execute(
            query.order_by(Product.name).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total
