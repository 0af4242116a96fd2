"""
Payment management endpoints.
Register, list and cancel customer payments.
"""

from datetime import date
from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser
from app.schemas.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentListResponse,
    PaymentMethodStats,
)
from app.schemas.base import page_count
from app.models.payment import PaymentMethod, PaymentStatus
from app.services.payment import PaymentService


router = APIRouter()


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar pago",
    description="Registrar un cobro; acredita la cuenta corriente del cliente",
)
async def create_payment(
    data: PaymentCreate,
    current_user: WriterUser,
    db: DbSession,
) -> PaymentResponse:
    service = PaymentService(db)
    payment = await service.create(data)
    return PaymentResponse.model_validate(payment)


@router.get(
    "",
    response_model=PaymentListResponse,
    summary="Listar pagos",
    description="Listado paginado de pagos",
)
async def list_payments(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    customer_id: int | None = Query(None, description="Filtrar por cliente"),
    method: PaymentMethod | None = Query(None, description="Filtrar por medio de pago"),
    payment_status: PaymentStatus | None = Query(None, alias="status", description="Filtrar por estado"),
    from_date: date | None = Query(None, description="Desde fecha"),
    to_date: date | None = Query(None, description="Hasta fecha"),
) -> PaymentListResponse:
    service = PaymentService(db)
    skip = (page - 1) * per_page

    payments, total = await service.list(
        skip=skip,
        limit=per_page,
        customer_id=customer_id,
        method=method,
        payment_status=payment_status,
        from_date=from_date,
        to_date=to_date,
    )

    return PaymentListResponse(
        items=[PaymentResponse.model_validate(p) for p in payments],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/stats",
    response_model=list[PaymentMethodStats],
    summary="Estadísticas por medio de pago",
    description="Cantidad y total de pagos completados por medio de pago",
)
async def get_payment_stats(
    current_user: CurrentUser,
    db: DbSession,
    from_date: date | None = Query(None, description="Desde fecha"),
    to_date: date | None = Query(None, description="Hasta fecha"),
) -> list[PaymentMethodStats]:
    service = PaymentService(db)
    stats = await service.get_stats(from_date, to_date)
    return [PaymentMethodStats(**row) for row in stats]


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Detalle de pago",
)
async def get_payment(
    payment_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> PaymentResponse:
    service = PaymentService(db)
    payment = await service.get_or_404(payment_id)
    return PaymentResponse.model_validate(payment)


@router.post(
    "/{payment_id}/cancel",
    response_model=PaymentResponse,
    summary="Anular pago",
    description="Anula el pago y vuelve a debitar la cuenta corriente",
)
async def cancel_payment(
    payment_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> PaymentResponse:
    service = PaymentService(db)
    payment = await service.get_or_404(payment_id)
    payment = await service.cancel(payment)
    return PaymentResponse.model_validate(payment)
