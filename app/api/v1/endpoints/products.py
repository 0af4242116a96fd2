"""
Product management endpoints.
CRUD operations for products and stock management.
"""

from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    StockUpdateRequest,
)
from app.schemas.base import MessageResponse, page_count
from app.services.product import ProductService


router = APIRouter()


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear producto",
    description="Crear un producto; sin precio se calcula desde el costo en USD",
)
async def create_product(
    data: ProductCreate,
    current_user: WriterUser,
    db: DbSession,
) -> ProductResponse:
    service = ProductService(db)
    product = await service.create(data)
    return ProductResponse.model_validate(product)


@router.get(
    "",
    response_model=ProductListResponse,
    summary="Listar productos",
    description="Listado paginado de productos",
)
async def list_products(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    search: str | None = Query(None, description="Buscar por nombre o código interno"),
    category_id: int | None = Query(None, description="Filtrar por categoría"),
    low_stock: bool = Query(False, description="Solo productos con stock bajo"),
    include_inactive: bool = Query(False, description="Incluir productos inactivos"),
) -> ProductListResponse:
    """List products with pagination and filters."""
    service = ProductService(db)
    skip = (page - 1) * per_page

    products, total = await service.list(
        skip=skip,
        limit=per_page,
        search=search,
        category_id=category_id,
        low_stock=low_stock,
        include_inactive=include_inactive,
    )

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Detalle de producto",
)
async def get_product(
    product_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> ProductResponse:
    service = ProductService(db)
    product = await service.get_or_404(product_id)
    return ProductResponse.model_validate(product)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Actualizar producto",
    description="Actualizar un producto; cambiar costo o margen recalcula el precio",
)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> ProductResponse:
    service = ProductService(db)
    product = await service.get_or_404(product_id)
    product = await service.update(product, data)
    return ProductResponse.model_validate(product)


@router.post(
    "/{product_id}/stock",
    response_model=ProductResponse,
    summary="Ajustar stock",
    description="Sumar (positivo) o restar (negativo) unidades; el stock nunca queda negativo",
)
async def update_stock(
    product_id: int,
    data: StockUpdateRequest,
    current_user: WriterUser,
    db: DbSession,
) -> ProductResponse:
    service = ProductService(db)
    product = await service.get_or_404(product_id)
    product = await service.update_stock(product, data.quantity, data.reason)
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Eliminar producto",
    description="Desactivar un producto",
)
async def delete_product(
    product_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> MessageResponse:
    service = ProductService(db)
    product = await service.get_or_404(product_id)
    await service.delete(product)
    return MessageResponse(message="Producto eliminado correctamente")
