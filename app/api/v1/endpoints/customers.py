"""
Customer management endpoints.
CRUD operations for customers.
"""

from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser
from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerDetailResponse,
    CustomerListResponse,
)
from app.schemas.base import MessageResponse, page_count
from app.services.current_account import CurrentAccountService
from app.services.customer import CustomerService


router = APIRouter()


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear cliente",
    description="Crear un nuevo cliente; el CUIT/CUIL se valida y normaliza",
)
async def create_customer(
    data: CustomerCreate,
    current_user: WriterUser,
    db: DbSession,
) -> CustomerResponse:
    service = CustomerService(db)
    customer = await service.create(data)
    return CustomerResponse.model_validate(customer)


@router.get(
    "",
    response_model=CustomerListResponse,
    summary="Listar clientes",
    description="Listado paginado de clientes con su saldo de cuenta corriente",
)
async def list_customers(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    search: str | None = Query(None, description="Buscar por razón social, contacto, email o CUIT"),
    is_active: bool | None = Query(None, description="Filtrar por estado"),
) -> CustomerListResponse:
    """List customers with their current balance."""
    service = CustomerService(db)
    skip = (page - 1) * per_page

    customers, total = await service.list(
        skip=skip,
        limit=per_page,
        search=search,
        is_active=is_active,
    )
    balances = await CurrentAccountService(db).get_balances([c.id for c in customers])

    items = []
    for customer in customers:
        item = CustomerResponse.model_validate(customer)
        item.current_balance = balances.get(customer.id, item.current_balance)
        items.append(item)

    return CustomerListResponse(
        items=items,
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/{customer_id}",
    response_model=CustomerDetailResponse,
    summary="Detalle de cliente",
    description="Datos del cliente, saldo y cantidad de operaciones",
)
async def get_customer(
    customer_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> CustomerDetailResponse:
    service = CustomerService(db)
    customer = await service.get_or_404(customer_id)

    detail = CustomerDetailResponse.model_validate(customer)
    detail.current_balance = await CurrentAccountService(db).get_balance(customer.id)
    for field, count in (await service.get_usage_counts(customer.id)).items():
        setattr(detail, field, count)
    return detail


@router.patch(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Actualizar cliente",
    description="Actualizar los datos de un cliente",
)
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> CustomerResponse:
    service = CustomerService(db)
    customer = await service.get_or_404(customer_id)
    customer = await service.update(customer, data)
    return CustomerResponse.model_validate(customer)


@router.delete(
    "/{customer_id}",
    response_model=MessageResponse,
    summary="Eliminar cliente",
    description="Desactivar un cliente (imposible si tiene ventas, presupuestos o movimientos)",
)
async def delete_customer(
    customer_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> MessageResponse:
    service = CustomerService(db)
    customer = await service.get_or_404(customer_id)
    await service.delete(customer)
    return MessageResponse(message="Cliente eliminado correctamente")
